"""pytest hooks: a fresh environment per test, verified at teardown.

Enable with ``pytest_plugins = ["cyril.pytest_plugin"]`` in a root conftest,
or import ``cyril_env`` into any conftest.
"""

from __future__ import annotations

from typing import Iterator

import pytest

from .environment import Environment
from .settings import Settings

@pytest.fixture
def cyril_env() -> Iterator[Environment]:
    env = Environment(settings=Settings.from_env())
    yield env
    env.run()
