"""
Default values and environment-driven settings.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .errors import ConfigError

# Round-Robin time slice used when the caller gives none.
DEFAULT_QUANTUM = 4

# Constant overhead term in the CPU utilization approximation.
UTILIZATION_OVERHEAD = 5

# Defaults of the "create process" form.
DEFAULT_BURST_TIME = 5
DEFAULT_PRIORITY = 5
ARRIVAL_SPACING = 2

DEFAULT_LOG_LEVEL = "WARNING"
LOG_LEVELS = ["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"]

_TRUE = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    quantum: int = DEFAULT_QUANTUM
    log_level: str = DEFAULT_LOG_LEVEL
    respect_arrivals: bool = False

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """
        Build settings from ``SCHEDSIM_*`` environment variables, falling back
        to the module defaults for anything unset or empty.
        """
        env = os.environ if environ is None else environ

        quantum = DEFAULT_QUANTUM
        raw_quantum = env.get("SCHEDSIM_QUANTUM", "").strip()
        if raw_quantum:
            try:
                quantum = int(raw_quantum)
            except ValueError:
                quantum = 0
            if quantum <= 0:
                raise ConfigError(f"SCHEDSIM_QUANTUM must be a positive integer, got {raw_quantum!r}")

        log_level = env.get("SCHEDSIM_LOG_LEVEL", "").strip().upper() or DEFAULT_LOG_LEVEL
        if log_level not in LOG_LEVELS:
            raise ConfigError(f"SCHEDSIM_LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}, got {log_level!r}")
        respect = env.get("SCHEDSIM_RESPECT_ARRIVALS", "").strip().lower() in _TRUE

        return cls(quantum=quantum, log_level=log_level, respect_arrivals=respect)
