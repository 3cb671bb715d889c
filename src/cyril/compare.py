"""Default comparison collaborators used by expectations."""

from __future__ import annotations

import re
from collections.abc import Mapping, Set
from typing import Any

def equals(expected: Any, actual: Any) -> bool:
    """Deep structural equality.

    Mappings compare by key set and recursively equal values, lists and
    tuples positionally, sets by membership. Anything else falls back to
    ``==``. A list never equals a tuple with the same items.
    """
    match expected:
        case Mapping():
            if not isinstance(actual, Mapping):
                return False

            if set(expected.keys()) != set(actual.keys()):
                return False

            return all(equals(expected[k], actual[k]) for k in expected)
        case list() | tuple():
            if not isinstance(actual, (list, tuple)):
                return False

            if isinstance(actual, list) != isinstance(expected, list):
                return False

            if len(expected) != len(actual):
                return False

            return all(equals(e, a) for e, a in zip(expected, actual))
        case Set():
            return isinstance(actual, Set) and expected == actual
        case bool():
            # True == 1 should not pass as deep equality
            return isinstance(actual, bool) and expected is actual
        case _:
            if isinstance(actual, bool) and not isinstance(expected, bool):
                return False
            return bool(expected == actual)

def matches(pattern: str | re.Pattern[str], text: Any) -> bool:
    if not isinstance(text, str):
        return False

    if isinstance(pattern, re.Pattern):
        return pattern.search(text) is not None

    return pattern in text

def describe_mismatch(kind_label: str, expected: Any, actual: Any) -> str:
    if kind_label == "to_match":
        return f"Expected {actual!r} to match {expected!r}"

    return f"Expected value to be {expected!r} but got {actual!r}"
