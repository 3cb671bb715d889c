from __future__ import annotations

from typing import Iterator

import pytest

import cyril
from cyril.pytest_plugin import cyril_env  # noqa: F401


@pytest.fixture(autouse=True)
def fresh_ambient() -> Iterator[None]:
    """Keep the module-level environment empty between tests."""
    cyril.reset()
    yield
    cyril.reset()
