"""
Segment model and ingestion for the sweep-line engine.

A :class:`Segment` is a normalised, non-vertical 2D line segment whose
``start`` point always lies strictly to the left of its ``end`` point.
Slope, y-intercept and evaluation at an arbitrary x are derived on
demand rather than stored, so a segment is fully described by its two
endpoints.

Callers hand in raw ``(point_a, point_b, ident)`` triples.  The
identifier is opaque: it is carried through to the results unchanged
and never inspected, hashed or compared.  Segments are instead keyed by
the ordinal assigned during ingestion.

Ingestion drops records the sweep cannot represent:

* vertical or zero-length segments (``point_a.x == point_b.x``), which
  have no defined slope;
* records with a non-finite coordinate.

Dropped records are reported through logging and counted in the
returned :class:`IngestReport`; they never abort ingestion.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Iterable, List, Sequence, Tuple

logger = logging.getLogger(__name__)

Point = Tuple[float, float]
SegmentRecord = Tuple[Sequence[float], Sequence[float], Any]


@dataclass(frozen=True, eq=False)
class Segment:
    """A non-vertical segment with ``start.x < end.x``.

    Attributes:
        start: Left endpoint ``(x, y)``.
        end: Right endpoint ``(x, y)``.
        ident: Caller-owned identifier, carried through untouched.
        key: Ingestion ordinal, unique within one sweep.
    """

    start: Point
    end: Point
    ident: Any = None
    key: int = 0

    @property
    def slope(self) -> float:
        return (self.end[1] - self.start[1]) / (self.end[0] - self.start[0])

    @property
    def y_intercept(self) -> float:
        return self.start[1] - self.slope * self.start[0]

    def value_at(self, x: float) -> float:
        """Return the y-coordinate of the segment's supporting line at *x*."""
        return self.slope * x + self.y_intercept

    def spans(self, x: float) -> bool:
        """Return True if *x* lies within the closed x-range of the segment."""
        return self.start[0] <= x <= self.end[0]

    def __repr__(self) -> str:
        return f"Segment(#{self.key} {self.start}->{self.end} ident={self.ident!r})"


@dataclass
class IngestReport:
    """Counts of records dropped during ingestion."""

    received: int = 0
    skipped_vertical: int = 0
    skipped_non_finite: int = 0
    skipped_indices: List[int] = field(default_factory=list)

    @property
    def accepted(self) -> int:
        return self.received - self.skipped_vertical - self.skipped_non_finite


def _as_point(raw: Sequence[float]) -> Point:
    return (float(raw[0]), float(raw[1]))


def make_segment(point_a: Sequence[float], point_b: Sequence[float], ident: Any = None, key: int = 0) -> Segment:
    """Build a normalised segment from two endpoints in either order.

    Raises:
        ValueError: if the endpoints share an x-coordinate.
    """
    a = _as_point(point_a)
    b = _as_point(point_b)
    if a[0] == b[0]:
        raise ValueError(f"vertical or zero-length segment at x={a[0]}")
    if a[0] > b[0]:
        a, b = b, a
    return Segment(start=a, end=b, ident=ident, key=key)


def ingest_segments(records: Iterable[SegmentRecord]) -> Tuple[List[Segment], IngestReport]:
    """Normalise raw ``(point_a, point_b, ident)`` records into segments.

    Records are processed in order; each kept record receives the next
    ingestion ordinal as its ``key``.  Unsupported records are skipped
    with a warning and the remaining records are still ingested.

    Returns:
        A tuple ``(segments, report)``.
    """
    segments: List[Segment] = []
    report = IngestReport()
    for idx, (point_a, point_b, ident) in enumerate(records):
        report.received += 1
        a = _as_point(point_a)
        b = _as_point(point_b)
        if not all(math.isfinite(v) for v in (*a, *b)):
            logger.warning("Skipping segment %d (ident=%r): non-finite coordinate", idx, ident)
            report.skipped_non_finite += 1
            report.skipped_indices.append(idx)
            continue
        if a[0] == b[0]:
            logger.warning("Skipping vertical segment %d (ident=%r) at x=%s", idx, ident, a[0])
            report.skipped_vertical += 1
            report.skipped_indices.append(idx)
            continue
        segments.append(make_segment(a, b, ident=ident, key=len(segments)))
    return segments, report
