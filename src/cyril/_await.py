from __future__ import annotations

import asyncio
import inspect
import logging
from typing import Any, Awaitable, Iterable, List, Optional, TypeVar
from typing_extensions import TypeGuard

from .types import Deferred, UsageError, VerificationTimeout

logger = logging.getLogger(__name__)

_T = TypeVar("_T")

def is_pending(value: Any) -> TypeGuard[Awaitable[Any]]:
    return inspect.isawaitable(value)

def _wrap_awaitable(value: Awaitable[_T] | _T) -> Awaitable[_T]:
    if inspect.isawaitable(value):
        async def _forward() -> _T:
            return await value
        return _forward()

    async def _immediate() -> _T:
        return value

    return _immediate()

def run_sync(coro: Awaitable[_T]) -> _T:
    """Drive `coro` to completion from synchronous code."""
    try:
        asyncio.get_running_loop()
    except RuntimeError: # no active event loop, ok to run
        pass
    else:
        if inspect.iscoroutine(coro):
            coro.close()
        raise UsageError("run_sync cannot be used inside an active event loop; await the verification instead")

    return asyncio.run(_wrap_awaitable(coro))

async def await_subject(subject: Awaitable[_T], timeout: Optional[float] = None) -> _T:
    if timeout is None:
        return await subject

    try:
        # shielded so a timed-out waiter leaves the shared future intact
        return await asyncio.wait_for(asyncio.shield(subject), timeout)
    except asyncio.TimeoutError:
        raise VerificationTimeout(subject, timeout) from None

def call_deferred(value: Any) -> Any:
    if isinstance(value, Deferred):
        return value()
    return value

async def resolve_subject(subject: Any, timeout: Optional[float] = None) -> Any:
    """Await a pending subject, then call the value if it is deferred; anything else passes through."""
    if is_pending(subject):
        subject = await await_subject(subject, timeout)

    return call_deferred(subject)

async def gather_settled(coros: Iterable[Awaitable[Any]]) -> List[BaseException]:
    """Run every awaitable to completion; return failures in settle order."""
    failures: List[BaseException] = []

    async def _capture(aw: Awaitable[Any]) -> None:
        try:
            await aw
        except Exception as exc:
            failures.append(exc)

    await asyncio.gather(*(_capture(c) for c in coros))

    if len(failures) > 1:
        for extra in failures[1:]:
            logger.debug("suppressed sibling failure: %r", extra)

    return failures
