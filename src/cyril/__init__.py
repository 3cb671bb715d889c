"""Deferred assertions: declare expectations now, verify them in one pass later."""

from .environment import Environment
from .expectation import Box, Expectation
from .lens import LensChain
from .reporting import LoggingReporter, RecordingReporter, Reporter
from .settings import Settings
from .types import (
    AssertionFailure,
    CaseFailure,
    CaseResult,
    CyrilError,
    Deferred,
    Lens,
    LensError,
    LensPathError,
    UnresolvedLensError,
    UsageError,
    VerificationReport,
    VerificationTimeout,
)
from ._await import run_sync

ambient = Environment()

reset = ambient.reset
wrap = ambient.wrap
expect = ambient.expect
log = ambient.log
describe = ambient.describe
it = ambient.it
verify = ambient.verify

__all__ = [
    "AssertionFailure",
    "Box",
    "CaseFailure",
    "CaseResult",
    "CyrilError",
    "Deferred",
    "Environment",
    "Expectation",
    "Lens",
    "LensChain",
    "LensError",
    "LensPathError",
    "LoggingReporter",
    "RecordingReporter",
    "Reporter",
    "Settings",
    "UnresolvedLensError",
    "UsageError",
    "VerificationReport",
    "VerificationTimeout",
    "ambient",
    "describe",
    "expect",
    "it",
    "log",
    "reset",
    "run_sync",
    "verify",
    "wrap",
]
