"""Reporting side channel for verification results."""

from __future__ import annotations

import logging
from typing import List
from typing_extensions import Protocol

from .types import CaseResult, VerificationEvent

logger = logging.getLogger("cyril")

class Reporter(Protocol):
    def comparison(self, event: VerificationEvent) -> None: ...

    def message(self, text: str) -> None: ...

    def case_finished(self, result: CaseResult) -> None: ...

class LoggingReporter:
    """Default reporter; routes everything through the ``cyril`` logger."""

    def __init__(self, report_passes: bool = True, log: logging.Logger = logger):
        self.report_passes = report_passes
        self.log = log

    def comparison(self, event: VerificationEvent) -> None:
        if event.passed:
            if self.report_passes:
                self.log.info("%s passed: %r == %r", event.kind.value, event.actual, event.expected)
            return

        self.log.error("%s failed: %s", event.kind.value, event.message)

    def message(self, text: str) -> None:
        self.log.info("%s", text)

    def case_finished(self, result: CaseResult) -> None:
        if result.passed:
            self.log.info("[pass] %s", result.title)
        else:
            self.log.error("[fail] %s: %s", result.title, result.error)

class RecordingReporter:
    """Keeps every event in memory, in the order it was reported."""

    def __init__(self) -> None:
        self.events: List[VerificationEvent] = []
        self.messages: List[str] = []
        self.cases: List[CaseResult] = []

    def comparison(self, event: VerificationEvent) -> None:
        self.events.append(event)

    def message(self, text: str) -> None:
        self.messages.append(text)

    def case_finished(self, result: CaseResult) -> None:
        self.cases.append(result)

    @property
    def passes(self) -> List[VerificationEvent]:
        return [e for e in self.events if e.passed]

    @property
    def failures(self) -> List[VerificationEvent]:
        return [e for e in self.events if not e.passed]
