from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Optional

def _getenv(name: str, default: str = "") -> str:
    v = os.environ.get(name)
    return v if v is not None else default

def _getenv_bool(name: str, default: bool = False) -> bool:
    v = os.environ.get(name)
    if v is None:
        return default
    return v.lower() in ("1", "true", "yes", "on")

def _getenv_float(name: str) -> Optional[float]:
    v = os.environ.get(name)
    if v is None or not v.strip():
        return None

    try:
        value = float(v)
    except ValueError:
        return None

    # zero or negative disables the timeout
    return value if value > 0 else None

@dataclass
class Settings:
    # seconds to wait for an awaitable subject; None waits forever
    timeout: Optional[float] = field(default_factory=lambda: _getenv_float("CYRIL_TIMEOUT"))
    # joins log history for `Environment.output`
    log_separator: str = field(default_factory=lambda: _getenv("CYRIL_LOG_SEPARATOR", "\n"))
    # emit passing comparisons through the default reporter
    report_passes: bool = field(default_factory=lambda: _getenv_bool("CYRIL_REPORT_PASSES", True))

    @classmethod
    def from_env(cls) -> Settings:
        return cls()
