"""
Runtime configuration for the sweep-line intersection service.

The sweep has three tunable numbers: the relative tolerance used to
decide whether two slopes are parallel, the absolute tolerance used to
reject crossings that lie behind the sweep line, and an optional hard
cap on the number of processed events.  Defaults live in module-level
constants; each may be overridden through an environment variable so
that deployments can adjust them without code changes:

- ``SWEEP_PARALLEL_TOLERANCE`` – relative slope tolerance (float).
- ``SWEEP_TOLERANCE`` – absolute x tolerance behind the sweep line (float).
- ``SWEEP_MAX_EVENTS`` – processed-event cap (int).  When unset the cap
  is derived from the input size.

Verbose per-event tracing is enabled separately via ``SWEEP_DEBUG``.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Optional

logger = logging.getLogger(__name__)

# Two slopes are treated as parallel when they differ by no more than this
# fraction of the larger magnitude (or absolutely, for slopes below 1).
DEFAULT_PARALLEL_TOLERANCE: float = 1e-12

# Crossings further than this to the left of the current sweep x are
# never scheduled.
DEFAULT_SWEEP_TOLERANCE: float = 1e-9


@dataclass(frozen=True)
class SweepConfig:
    """Tolerances and limits applied to a single sweep.

    Attributes:
        parallel_tolerance: Relative tolerance for the parallel-slope test.
        sweep_tolerance: Absolute tolerance for crossings behind the
            sweep line.
        max_events: Hard cap on processed events.  ``None`` derives the
            cap from the number of segments (``2n + n(n-1)/2 + 1``).
    """

    parallel_tolerance: float = DEFAULT_PARALLEL_TOLERANCE
    sweep_tolerance: float = DEFAULT_SWEEP_TOLERANCE
    max_events: Optional[int] = None

    def event_limit(self, segment_count: int) -> int:
        """Return the processed-event cap for a sweep over *segment_count* segments."""
        if self.max_events is not None:
            return self.max_events
        n = segment_count
        return 2 * n + n * (n - 1) // 2 + 1


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning("Ignoring invalid %s=%r; using %s", name, raw, default)
        return default
    if value < 0.0:
        logger.warning("Ignoring negative %s=%r; using %s", name, raw, default)
        return default
    return value


def _env_int(name: str) -> Optional[int]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return None
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Ignoring invalid %s=%r", name, raw)
        return None
    if value <= 0:
        logger.warning("Ignoring non-positive %s=%r", name, raw)
        return None
    return value


def load_config() -> SweepConfig:
    """Build a :class:`SweepConfig` from the environment.

    Missing or malformed variables fall back to the module defaults.
    """
    return SweepConfig(
        parallel_tolerance=_env_float("SWEEP_PARALLEL_TOLERANCE", DEFAULT_PARALLEL_TOLERANCE),
        sweep_tolerance=_env_float("SWEEP_TOLERANCE", DEFAULT_SWEEP_TOLERANCE),
        max_events=_env_int("SWEEP_MAX_EVENTS"),
    )


def debug_enabled() -> bool:
    """Return True when per-event tracing was requested via ``SWEEP_DEBUG``."""
    return bool(os.getenv("SWEEP_DEBUG"))
