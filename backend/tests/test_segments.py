"""
Tests for segment normalisation and ingestion.

Ingestion must reorder endpoints so that ``start.x < end.x``, carry the
caller's identifier through untouched, and drop vertical or non-finite
records without aborting the rest of the batch.
"""

from __future__ import annotations

import math
import sys
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from sweepline.services.segments import ingest_segments, make_segment


def test_reversed_endpoints_are_swapped() -> None:
    """A segment given right-to-left should be stored left-to-right."""
    seg = make_segment((4.0, 0.0), (0.0, 4.0), ident="s")
    assert seg.start == (0.0, 4.0)
    assert seg.end == (4.0, 0.0)
    assert seg.ident == "s"


def test_derived_line_quantities() -> None:
    """Slope, intercept and evaluation follow y = m·x + c."""
    seg = make_segment((1.0, 3.0), (3.0, 7.0))
    assert seg.slope == pytest.approx(2.0)
    assert seg.y_intercept == pytest.approx(1.0)
    assert seg.value_at(2.0) == pytest.approx(5.0)
    assert seg.spans(1.0) and seg.spans(3.0)
    assert not seg.spans(3.5)


def test_make_segment_rejects_vertical() -> None:
    with pytest.raises(ValueError):
        make_segment((1.0, 0.0), (1.0, 5.0))


def test_ingest_skips_vertical_and_non_finite() -> None:
    """Unsupported records are counted and skipped; the rest are kept in order."""
    records = [
        ((0.0, 0.0), (0.0, 4.0), "vertical"),
        ((-2.0, 2.0), (2.0, 2.0), "horizontal"),
        ((1.0, 1.0), (1.0, 1.0), "point"),
        ((0.0, math.nan), (1.0, 1.0), "nan"),
        ((0.0, 0.0), (math.inf, 1.0), "inf"),
        ((5.0, 1.0), (3.0, 2.0), "reversed"),
    ]
    segments, report = ingest_segments(records)

    assert [s.ident for s in segments] == ["horizontal", "reversed"]
    assert [s.key for s in segments] == [0, 1]
    assert report.received == 6
    assert report.skipped_vertical == 2
    assert report.skipped_non_finite == 2
    assert report.accepted == 2
    assert report.skipped_indices == [0, 2, 3, 4]
    assert segments[1].start == (3.0, 2.0)


def test_identifiers_are_opaque() -> None:
    """Unhashable identifiers are carried through as the same object."""
    ident = {"layer": "walls", "tags": ["a", "b"]}
    segments, _ = ingest_segments([((0, 0), (1, 1), ident)])
    assert segments[0].ident is ident
