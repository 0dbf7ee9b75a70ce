"""
Cross-checks between the sweep and the pairwise brute-force reference.

Randomly generated segments are in general position with probability
one (no shared x-coordinates, no three lines through one point), so the
two methods must report the same set of crossings.  Points are compared
after sorting by x with a small absolute tolerance.
"""

from __future__ import annotations

import random
import sys
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from sweepline.services.brute_force import brute_force_intersections
from sweepline.services.segments import ingest_segments
from sweepline.services.sweep import find_segment_intersections


def _random_records(seed: int, count: int, span: float = 100.0) -> list:
    rng = random.Random(seed)
    return [
        (
            (rng.uniform(0, span), rng.uniform(0, span)),
            (rng.uniform(0, span), rng.uniform(0, span)),
            k,
        )
        for k in range(count)
    ]


def test_brute_force_known_cases() -> None:
    """The reference agrees with hand-computed crossings."""
    segments, _ = ingest_segments([
        ((0, 0), (10, 10), "up"),
        ((0, 10), (10, 0), "down"),
        ((0, 3), (10, 3), "flat"),
        ((0, 1), (10, 11), "parallel-to-up"),
        ((20, 0), (30, 5), "far"),
    ])
    found = brute_force_intersections(segments)
    pairs = {frozenset((i.first_id, i.second_id)) for i in found}
    assert frozenset(("up", "down")) in pairs
    assert frozenset(("up", "flat")) in pairs
    assert frozenset(("down", "flat")) in pairs
    assert frozenset(("up", "parallel-to-up")) not in pairs
    assert all("far" not in pair for pair in pairs)
    assert brute_force_intersections(segments[:1]) == []


@pytest.mark.parametrize("seed, count", [(1, 10), (2, 25), (3, 60), (4, 120)])
def test_sweep_matches_brute_force(seed: int, count: int) -> None:
    """Sweep and brute force find the same crossings for random input."""
    records = _random_records(seed, count)
    result = find_segment_intersections(records)
    assert result is not None

    segments, _ = ingest_segments(records)
    expected = brute_force_intersections(segments)

    assert len(result.intersections) == len(expected)
    got_pairs = {frozenset((i.first_id, i.second_id)) for i in result.intersections}
    want_pairs = {frozenset((i.first_id, i.second_id)) for i in expected}
    assert got_pairs == want_pairs

    got = sorted(result.points)
    want = sorted(i.point for i in expected)
    for (gx, gy), (wx, wy) in zip(got, want):
        assert gx == pytest.approx(wx, abs=1e-6)
        assert gy == pytest.approx(wy, abs=1e-6)


def test_no_reported_point_lies_outside_its_segments() -> None:
    """Every reported point lies on both participating segments."""
    records = _random_records(11, 50)
    result = find_segment_intersections(records)
    assert result is not None
    by_ident = {ident: (a, b) for a, b, ident in records}
    for item in result.intersections:
        for ident in (item.first_id, item.second_id):
            (ax, ay), (bx, by) = by_ident[ident]
            assert min(ax, bx) - 1e-9 <= item.x <= max(ax, bx) + 1e-9
            t = (item.x - ax) / (bx - ax)
            assert item.y == pytest.approx(ay + t * (by - ay), abs=1e-6)
