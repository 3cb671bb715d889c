"""Registry of deferred links and the three-phase verification pass.

Links (expectations, commands and groups) accumulate in declaration order
between resets. `verify` replays them:

1. ``process_ambient`` runs every group body so `it` can register cases
   (a body that raises becomes a failed ``<describe>`` case);
2. ``verify_specs`` runs each case body and then evaluates the whole shared
   link set, one case at a time but concurrently across cases;
3. ``verify_ambient`` evaluates every expectation and command once more.

Expectations registered by one case stay visible to every other case's
evaluation; cases share one unscoped link pool.
"""

from __future__ import annotations

import logging
from typing import Any, List, Optional, TypeVar, Union
from typing_extensions import TypeAlias

from ._await import gather_settled, is_pending, run_sync
from .expectation import Box, Expectation
from .reporting import LoggingReporter, Reporter
from .settings import Settings
from .types import (
    Body,
    CaseFailure,
    CaseResult,
    Command,
    CommandKind,
    Deferred,
    Group,
    TestCase,
    UsageError,
    VerificationReport,
)

logger = logging.getLogger(__name__)

Link: TypeAlias = Union[Expectation[Any], Command, Group]

_L = TypeVar("_L", Expectation[Any], Command, Group)

# case name reported for a describe body that raised during expansion
DESCRIBE_CASE = "<describe>"

class Environment:
    def __init__(self, settings: Optional[Settings] = None, reporter: Optional[Reporter] = None):
        self.settings = settings if settings is not None else Settings()
        self.reporter: Reporter = (
            reporter if reporter is not None else LoggingReporter(report_passes=self.settings.report_passes)
        )
        self.links: List[Link] = []
        self.log_history: List[str] = []
        self.groups: List[Group] = []
        self.expansion_failures: List[CaseResult] = []
        self._active_group: Optional[Group] = None

    def reset(self) -> None:
        self.links = []
        self.log_history = []
        self.groups = []
        self.expansion_failures = []
        self._active_group = None

    def register(self, link: _L) -> _L:
        self.links.append(link)
        return link

    # ---- declarations ----

    def wrap(self, value: Any) -> Union[Box[Any], Expectation[Any]]:
        if isinstance(value, (Box, Expectation)):
            return value

        return Box(value, env=self)

    def expect(self, value: Any) -> Expectation[Any]:
        wrapped = self.wrap(value)

        if isinstance(wrapped, Expectation):
            return wrapped

        return wrapped.expect()

    def log(self, message: str) -> Command:
        return self.register(Command(CommandKind.LOG, str(message)))

    def describe(self, name: str, body: Body) -> Group:
        return self.register(Group(name, body, parent=self._active_group))

    def it(self, name: str, body: Body) -> TestCase:
        group = self._active_group

        if group is None:
            raise UsageError(f"it({name!r}) must be called within describe()")

        case = TestCase(name, body)
        group.cases.append(case)
        return case

    @property
    def output(self) -> Deferred:
        return Deferred(lambda: self.settings.log_separator.join(self.log_history), label="output")

    # ---- verification ----

    async def process_ambient(self) -> List[Group]:
        """Run pending group bodies; groups declared by a body are expanded in the same pass.

        A body that raises is recorded as a failed ``<describe>`` case in
        `expansion_failures`; expansion carries on with the remaining groups.
        """
        expanded: List[Group] = []
        idx = 0

        while idx < len(self.links):
            link = self.links[idx]
            idx += 1

            if not isinstance(link, Group):
                logger.debug("expansion skips %r", link)
                continue

            if link in self.groups:
                continue

            logger.debug("expanding %r", link)
            self._active_group = link

            try:
                outcome = link.body()
                if is_pending(outcome):
                    await outcome
            except Exception as exc:
                logger.error("describe %s raised: %r", link.full_name, exc)
                result = CaseResult(link.full_name, DESCRIBE_CASE, False, exc)
                self.expansion_failures.append(result)
                self.reporter.case_finished(result)
            finally:
                self._active_group = None

            self.groups.append(link)
            expanded.append(link)

        return expanded

    async def _run_case(self, group: Group, case: TestCase) -> CaseResult:
        error: Optional[BaseException] = None

        try:
            outcome = case.body()
            if is_pending(outcome):
                await outcome
        except Exception as exc:
            logger.error("case %s > %s raised: %r", group.full_name, case.name, exc)
            error = exc

        try:
            await self.verify_ambient()
        except Exception as exc:
            if error is None:
                error = exc

        result = CaseResult(group.full_name, case.name, error is None, error)
        case.result = result
        self.reporter.case_finished(result)
        return result

    async def verify_specs(self) -> List[CaseResult]:
        pending = [
            (group, case)
            for group in self.groups
            for case in group.cases
            if case.result is None
        ]
        results: List[CaseResult] = []

        async def _collect(group: Group, case: TestCase) -> None:
            results.append(await self._run_case(group, case))

        await gather_settled(_collect(group, case) for group, case in pending)
        return results

    async def _execute(self, link: Link) -> None:
        match link:
            case Expectation():
                await link.verify()
            case Command(kind=CommandKind.LOG, value=value):
                self.log_history.append(value)
                self.reporter.message(value)
            case Group():
                pass
            case _:
                raise UsageError(f"Cannot execute link {link!r}")

    async def verify_ambient(self) -> None:
        links = list(self.links)
        logger.debug("verifying %d links", len(links))

        failures = await gather_settled(self._execute(link) for link in links)

        if failures:
            raise failures[0]

    async def verify(self) -> VerificationReport:
        seen = len(self.expansion_failures)
        await self.process_ambient()
        cases = self.expansion_failures[seen:] + await self.verify_specs()
        await self.verify_ambient()

        for case in cases:
            if not case.passed:
                raise CaseFailure(case) from case.error

        return VerificationReport(cases=cases, log=list(self.log_history))

    def run(self) -> VerificationReport:
        """Synchronous `verify` for callers outside an event loop."""
        return run_sync(self.verify())
