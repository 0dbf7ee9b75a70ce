"""Tests for environment-driven sweep configuration."""

import sys
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from sweepline.config import (
    DEFAULT_PARALLEL_TOLERANCE,
    DEFAULT_SWEEP_TOLERANCE,
    SweepConfig,
    debug_enabled,
    load_config,
)


def test_defaults_without_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("SWEEP_PARALLEL_TOLERANCE", "SWEEP_TOLERANCE", "SWEEP_MAX_EVENTS", "SWEEP_DEBUG"):
        monkeypatch.delenv(name, raising=False)
    cfg = load_config()
    assert cfg == SweepConfig()
    assert cfg.parallel_tolerance == DEFAULT_PARALLEL_TOLERANCE
    assert cfg.sweep_tolerance == DEFAULT_SWEEP_TOLERANCE
    assert cfg.max_events is None
    assert debug_enabled() is False


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SWEEP_PARALLEL_TOLERANCE", "1e-6")
    monkeypatch.setenv("SWEEP_TOLERANCE", "0.001")
    monkeypatch.setenv("SWEEP_MAX_EVENTS", "500")
    monkeypatch.setenv("SWEEP_DEBUG", "1")
    cfg = load_config()
    assert cfg.parallel_tolerance == pytest.approx(1e-6)
    assert cfg.sweep_tolerance == pytest.approx(0.001)
    assert cfg.max_events == 500
    assert cfg.event_limit(1000) == 500
    assert debug_enabled() is True


@pytest.mark.parametrize("value", ["abc", "-1", "0", ""])
def test_malformed_values_fall_back(monkeypatch: pytest.MonkeyPatch, value: str) -> None:
    """Invalid values are ignored rather than raising."""
    monkeypatch.setenv("SWEEP_MAX_EVENTS", value)
    monkeypatch.setenv("SWEEP_TOLERANCE", value)
    cfg = load_config()
    assert cfg.max_events is None
    # "0" is a valid (if strict) tolerance; the others fall back
    expected = 0.0 if value == "0" else DEFAULT_SWEEP_TOLERANCE
    assert cfg.sweep_tolerance == expected


def test_derived_event_limit() -> None:
    """Without an override the cap covers 2n endpoint events plus every pair."""
    cfg = SweepConfig()
    assert cfg.event_limit(0) == 1
    assert cfg.event_limit(1) == 3
    assert cfg.event_limit(10) == 20 + 45 + 1
