from __future__ import annotations

import logging

import pytest

from tests.support.harness import make_env, run_declarations, verify_env
from cyril import Environment, LoggingReporter, Settings
from cyril.types import ComparisonKind


def test_events_carry_the_comparison_fields() -> None:
    def declare(c) -> None:
        c.expect(4).to_be(4)
        c.expect("abc").to_match("z")

    harness, _ = run_declarations(declare, AssertionError)
    passed, failed = harness.reporter.events

    assert (passed.kind, passed.expected, passed.actual, passed.passed) == (ComparisonKind.EXACT, 4, 4, True)
    assert passed.message == ""
    assert (failed.kind, failed.expected, failed.actual, failed.passed) == (ComparisonKind.PATTERN, "z", "abc", False)
    assert failed.message == "Expected 'abc' to match 'z'"


def test_logging_reporter_writes_through_cyril_logger(caplog: pytest.LogCaptureFixture) -> None:
    env = Environment(settings=Settings(timeout=None, log_separator="\n", report_passes=True))
    env.log("hello from a command")
    env.expect(1).to_be(1)
    env.expect(1).to_be(2)

    with caplog.at_level(logging.INFO, logger="cyril"):
        with pytest.raises(AssertionError):
            verify_env(env)

    messages = [r.getMessage() for r in caplog.records if r.name == "cyril"]
    assert "hello from a command" in messages
    assert "to_be passed: 1 == 1" in messages
    assert "to_be failed: Expected value to be 2 but got 1" in messages
    assert any(r.levelno == logging.ERROR for r in caplog.records if r.name == "cyril")


def test_logging_reporter_can_silence_passes(caplog: pytest.LogCaptureFixture) -> None:
    reporter = LoggingReporter(report_passes=False)
    env = Environment(reporter=reporter)
    env.expect(1).to_be(1)

    with caplog.at_level(logging.INFO, logger="cyril"):
        verify_env(env)

    assert [r for r in caplog.records if r.name == "cyril"] == []


def test_case_results_reach_the_reporter() -> None:
    harness = make_env()
    env = harness.env
    env.describe("feature", lambda: env.it("case", lambda: None))

    report = verify_env(env)

    assert harness.reporter.cases == report.cases
    assert report.failures() == []
