from __future__ import annotations

import pytest

from tests.support.harness import (
    AssertionFailure,
    Deferred,
    make_env,
    run_declarations,
    verify_env,
)
from cyril import Box, Expectation
from cyril.types import Command, CommandKind


def test_wrap_does_not_register() -> None:
    env = make_env().env
    box = env.wrap(5)

    assert isinstance(box, Box)
    assert env.links == []


def test_wrap_is_idempotent() -> None:
    env = make_env().env
    box = env.wrap(5)

    assert env.wrap(box) is box

    env.wrap(env.wrap(5)).expect().to_be(5)
    assert len(env.links) == 1


def test_wrapping_an_expectation_returns_it_unregistered_again() -> None:
    env = make_env().env
    expectation = env.expect(1)

    assert env.wrap(expectation) is expectation
    assert env.expect(expectation) is expectation
    assert env.links == [expectation]


def test_each_box_expect_registers_one_link() -> None:
    env = make_env().env
    box = env.wrap({"count": 0})

    first = box.expect("count")
    second = box.expect()

    assert env.links == [first, second]
    assert isinstance(first, Expectation)


def test_log_is_deferred_until_verification() -> None:
    harness = make_env()
    env = harness.env
    command = env.log("hi there, world")

    assert command == Command(CommandKind.LOG, "hi there, world")
    assert env.log_history == []
    assert harness.reporter.messages == []

    verify_env(env)

    assert env.log_history == ["hi there, world"]
    assert harness.reporter.messages == ["hi there, world"]


def test_output_matches_logged_lines() -> None:
    def declare(c) -> None:
        c.log("hi there, world")
        c.log("second line")
        c.expect(c.output).to_match("hi there")
        c.expect(c.output).to_be("hi there, world\nsecond line")

    harness, _ = run_declarations(declare)

    assert isinstance(harness.env.output, Deferred)
    assert all(e.passed for e in harness.reporter.events)


def test_output_sees_only_earlier_commands() -> None:
    def declare(c) -> None:
        c.expect(c.output).to_be("")
        c.log("later")

    run_declarations(declare)


def test_output_uses_configured_separator() -> None:
    harness = make_env(separator=" | ")
    harness.env.log("a")
    harness.env.log("b")
    harness.env.expect(harness.env.output).to_be("a | b")

    verify_env(harness.env)


def test_reset_clears_links_and_history() -> None:
    harness = make_env()
    env = harness.env
    env.log("before")
    env.describe("group", lambda: env.it("case", lambda: None))
    verify_env(env)

    env.reset()

    assert env.links == []
    assert env.log_history == []
    assert env.groups == []

    report = verify_env(env)
    assert report.cases == []


def test_failing_and_passing_expectations_both_run() -> None:
    def declare(c) -> None:
        c.expect(1).to_be(1)
        c.expect(2).to_be(3)
        c.expect("x").to_be("x")
        c.log("still runs")

    harness, err = run_declarations(declare, AssertionFailure)

    assert err.actual == 2
    assert [e.passed for e in harness.reporter.events] == [True, False, True]
    assert harness.env.log_history == ["still runs"]


def test_first_settled_failure_is_raised() -> None:
    def declare(c) -> None:
        c.expect(1).to_be("one")
        c.expect(2).to_be("two")

    harness, err = run_declarations(declare, AssertionFailure)

    assert err.actual == 1
    assert len(harness.reporter.failures) == 2


def test_links_survive_verification_until_reset() -> None:
    harness = make_env()
    env = harness.env
    env.expect(1).to_be(1)

    verify_env(env)
    verify_env(env)

    assert len(env.links) == 1
    assert len(harness.reporter.events) == 2


def test_report_collects_log() -> None:
    harness = make_env()
    harness.env.log("one")

    report = verify_env(harness.env)

    assert report.log == ["one"]
    assert report.passed


@pytest.mark.parametrize(
    "value",
    [
        pytest.param(0, id="zero"),
        pytest.param("", id="empty-string"),
        pytest.param([], id="empty-list"),
        pytest.param({"k": [1, {"n": None}]}, id="nested"),
        pytest.param((1, "two"), id="tuple"),
    ],
)
def test_value_equals_itself(value) -> None:
    run_declarations(lambda c: c.expect(value).to_be(value))
