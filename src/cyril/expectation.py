from __future__ import annotations

import asyncio
import re
from typing import TYPE_CHECKING, Any, Generic, Optional, TypeVar

from ._await import await_subject, call_deferred, is_pending, resolve_subject
from .compare import describe_mismatch, equals, matches
from .lens import LensChain
from .path import parse_path
from .types import (
    AssertionFailure,
    Comparison,
    ComparisonKind,
    Lens,
    LensKey,
    UsageError,
    VerificationEvent,
    VerificationTimeout,
)

if TYPE_CHECKING:
    from .environment import Environment

S = TypeVar("S")

_UNSETTLED = object()

class Box(Generic[S]):
    """Marks a value as under test; `expect` turns it into a registered expectation."""

    def __init__(self, subject: S, env: Optional['Environment'] = None):
        self.subject = subject
        self.env = env

    def expect(self, key: Optional[LensKey] = None) -> Expectation[Any]:
        expectation: Expectation[Any] = Expectation(self.subject, env=self.env)

        if key is not None:
            expectation.its(key)

        if self.env is not None:
            self.env.register(expectation)

        return expectation

    def __repr__(self) -> str:
        return f"Box({self.subject!r})"

class Expectation(Generic[S]):
    def __init__(self, subject: Any, env: Optional['Environment'] = None):
        self.subject = subject
        self.env = env
        self.lenses = LensChain()
        self.comparison: Optional[Comparison] = None
        self._pending: Optional[asyncio.Future[Any]] = None
        self._settled: Any = _UNSETTLED
        self._failure: Optional[VerificationTimeout] = None

    # ---- comparisons ----

    def _set_comparison(self, comparison: Comparison) -> Expectation[S]:
        if self.comparison is not None:
            raise UsageError(
                f"Expectation already has a {self.comparison.kind.value} comparison; "
                f"cannot add {comparison.kind.value}"
            )

        self.comparison = comparison
        return self

    def to_be(self, value: Any) -> Expectation[S]:
        return self._set_comparison(Comparison(ComparisonKind.EXACT, value))

    def to_match(self, pattern: str | re.Pattern[str]) -> Expectation[S]:
        return self._set_comparison(Comparison(ComparisonKind.PATTERN, pattern))

    # ---- lenses ----

    def its(self, key: LensKey) -> Expectation[Any]:
        self.lenses = self.lenses.extend(Lens.read(key))
        return self

    def invokes(self, key: LensKey, *args: Any) -> Expectation[Any]:
        self.lenses = self.lenses.extend(Lens.invoke(key, *args))
        return self

    def glom(self, *path: LensKey) -> Expectation[Any]:
        for key in path:
            self.its(key)
        return self

    def at(self, path: str) -> Expectation[Any]:
        self.lenses = self.lenses.extend(*parse_path(path))
        return self

    # ---- verification ----

    @property
    def expected(self) -> Any:
        return None if self.comparison is None else self.comparison.value

    async def _settle_pending(self, timeout: Optional[float]) -> Any:
        # coroutines are single-shot; repeated and overlapping passes share one future
        pending = self._pending

        if pending is None:
            pending = self._pending = asyncio.ensure_future(self.subject)
        elif pending.cancelled():
            raise self._failure or UsageError(f"Awaitable subject {self.subject!r} was cancelled before it resolved")
        elif pending.done():
            return pending.result()
        elif pending.get_loop() is not asyncio.get_running_loop():
            raise UsageError(f"Awaitable subject {self.subject!r} is still pending on another event loop")

        try:
            return await await_subject(pending, timeout)
        except VerificationTimeout as exc:
            self._failure = exc
            raise

    async def _resolve(self) -> Any:
        timeout = self.env.settings.timeout if self.env is not None else None

        if not is_pending(self.subject):
            return await resolve_subject(self.subject, timeout)

        if self._settled is _UNSETTLED:
            self._settled = await self._settle_pending(timeout)

        return call_deferred(self._settled)

    async def actual(self) -> Any:
        value = await self._resolve()
        return self.lenses.apply(value)

    async def verify(self) -> None:
        comparison = self.comparison

        if comparison is None:
            raise UsageError(f"Expectation on {self.subject!r}{self.lenses!r} has no comparison")

        actual = await self.actual()

        match comparison.kind:
            case ComparisonKind.EXACT:
                passed = equals(comparison.value, actual)
            case ComparisonKind.PATTERN:
                passed = matches(comparison.value, actual)
            case _:
                raise UsageError(f"Unknown comparison {comparison.kind!r}")

        message = "" if passed else describe_mismatch(comparison.kind.value, comparison.value, actual)
        event = VerificationEvent(comparison.kind, comparison.value, actual, message, passed)

        if self.env is not None:
            self.env.reporter.comparison(event)

        if not passed:
            raise AssertionFailure(comparison.kind, comparison.value, actual, message)

    def __repr__(self) -> str:
        kind = self.comparison.kind.value if self.comparison else "?"
        return f"<expect {self.subject!r}{self.lenses!r} {kind} {self.expected!r}>"
