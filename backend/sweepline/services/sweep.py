"""
Bentley–Ottmann sweep over a set of 2D line segments.

The driver moves a vertical sweep line left to right, stopping at the
events held in an :class:`~.events.EventQueue`.  The segments crossed
by the line are kept bottom-to-top in a
:class:`~.status.StatusStructure`.  Only segments that are adjacent in
that order can be the next pair to cross, so every time adjacency
changes the newly adjacent pairs are tested and any crossing to the
right of the line is queued as an intersection event:

================  =====================================================
Event             Actions
================  =====================================================
START(s)          insert *s*; test *s* against its new neighbours.
END(s)            test the neighbours of *s* (about to become adjacent);
                  remove *s*.
INTERSECTION(a,b) record the point; if the pair is inverted right of
                  x, swap *a* and *b* and test each against its new
                  outer neighbour.
================  =====================================================

All working state lives in a :class:`SweepState` that the
``process_*`` functions mutate, so a sweep can also be driven one event
at a time with :func:`step`.

A pair of segments is scheduled at most once per sweep: two distinct
non-parallel lines cross at most once, so a second test of the same
pair can only rediscover a crossing that is already queued or already
recorded.  With that rule in place a sweep over ``n`` segments
processes at most ``2n + n(n-1)/2`` events.  The processed-event cap in
:class:`~sweepline.config.SweepConfig` is kept as a fault signal; when
it trips the sweep raises :class:`RunawaySweepError` and the public
entry points report failure as ``None`` rather than a partial list.

Verbose per-event tracing is emitted when ``SWEEP_DEBUG`` is set.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Iterable, List, Optional, Set, Tuple

from ..config import SweepConfig, debug_enabled, load_config
from .events import Event, EventKind, EventQueue, seed_events
from .segments import IngestReport, Point, Segment, SegmentRecord, ingest_segments
from .status import StatusStructure

logger = logging.getLogger(__name__)


class RunawaySweepError(RuntimeError):
    """Raised when a sweep processes more events than its configured cap."""


@dataclass(frozen=True)
class Intersection:
    """A crossing found by the sweep, with the two participants' identifiers."""

    x: float
    y: float
    first_id: Any = None
    second_id: Any = None

    @property
    def point(self) -> Point:
        return (self.x, self.y)


@dataclass
class SweepStats:
    """Diagnostic counters for one sweep."""

    events_processed: int = 0
    parallel_pairs: int = 0
    stale_events: int = 0
    touching_events: int = 0
    scheduled: int = 0
    max_active: int = 0


@dataclass
class SweepState:
    """Everything a sweep mutates while it runs."""

    queue: EventQueue
    status: StatusStructure
    config: SweepConfig
    event_limit: int
    results: List[Intersection] = field(default_factory=list)
    scheduled_pairs: Set[Tuple[int, int]] = field(default_factory=set)
    sweep_x: float = float("-inf")
    stats: SweepStats = field(default_factory=SweepStats)
    trace: bool = False


@dataclass
class SweepResult:
    """Outcome of a completed sweep."""

    intersections: List[Intersection]
    ingest: IngestReport
    stats: SweepStats

    @property
    def points(self) -> List[Point]:
        return [item.point for item in self.intersections]


def new_state(
    segments: List[Segment],
    config: Optional[SweepConfig] = None,
    seed: Optional[int] = None,
) -> SweepState:
    """Seed a sweep over *segments* without processing any event."""
    cfg = config or load_config()
    return SweepState(
        queue=seed_events(segments),
        status=StatusStructure(seed=seed),
        config=cfg,
        event_limit=cfg.event_limit(len(segments)),
        trace=debug_enabled(),
    )


def _pair_key(a: Segment, b: Segment) -> Tuple[int, int]:
    return (a.key, b.key) if a.key < b.key else (b.key, a.key)


def is_parallel(a: Segment, b: Segment, tolerance: float) -> bool:
    """Return True if the slopes of *a* and *b* agree within *tolerance*.

    The tolerance is relative for slopes larger than one in magnitude
    and absolute below that.
    """
    ma = a.slope
    mb = b.slope
    return abs(ma - mb) <= tolerance * max(1.0, abs(ma), abs(mb))


def crossing_x(a: Segment, b: Segment) -> float:
    """Return the x where the supporting lines of *a* and *b* meet."""
    return (a.y_intercept - b.y_intercept) / (b.slope - a.slope)


def check_intersection(state: SweepState, a: Optional[Segment], b: Optional[Segment]) -> bool:
    """Queue an intersection event if *a* and *b* cross ahead of the sweep.

    Either segment may be ``None`` (no neighbour), in which case nothing
    happens.  Returns True when a new event was queued.
    """
    if a is None or b is None or a is b:
        return False
    pair = _pair_key(a, b)
    if pair in state.scheduled_pairs:
        return False
    if is_parallel(a, b, state.config.parallel_tolerance):
        state.stats.parallel_pairs += 1
        if state.trace:
            logger.debug("[Sweep] parallel lines: %r, %r", a, b)
        return False

    x = crossing_x(a, b)
    if x < a.start[0] or x > a.end[0] or x < b.start[0] or x > b.end[0]:
        return False
    if x < state.sweep_x - state.config.sweep_tolerance:
        # Already passed.
        if state.trace:
            logger.debug("[Sweep] crossing at x=%s behind sweep x=%s: %r, %r", x, state.sweep_x, a, b)
        return False

    state.queue.push(Event.intersection(a, b, x))
    state.scheduled_pairs.add(pair)
    state.stats.scheduled += 1
    if state.trace:
        logger.debug("[Sweep] scheduled crossing at x=%s: %r, %r", x, a, b)
    return True


def process_start(state: SweepState, event: Event) -> None:
    segment = event.first
    state.status.insert(segment, segment.start[0])
    state.stats.max_active = max(state.stats.max_active, len(state.status))
    check_intersection(state, segment, state.status.neighbor_after(segment))
    check_intersection(state, segment, state.status.neighbor_before(segment))


def process_end(state: SweepState, event: Event) -> None:
    segment = event.first
    status = state.status
    check_intersection(state, status.neighbor_before(segment), status.neighbor_after(segment))
    status.remove(segment)


def process_intersection(state: SweepState, event: Event) -> None:
    """Record a crossing and swap the two segments' slots.

    If either participant has already left the status structure the
    point is still recorded but the swap is skipped.  The swap is also
    skipped when the pair is already in its right-of-x order, which is
    the case when one segment starts on the other: insertion orders
    equal-y segments by slope.
    """
    a = event.first
    b = event.second
    x = event.x
    state.results.append(Intersection(x=x, y=a.value_at(x), first_id=a.ident, second_id=b.ident))

    status = state.status
    pos_a = status.position(a)
    pos_b = status.position(b)
    if pos_a is None or pos_b is None:
        state.stats.stale_events += 1
        logger.warning("[Sweep] segment not active at crossing x=%s (%r, %r); skipping swap", x, a, b)
        return

    below, above = (a, b) if pos_a < pos_b else (b, a)
    if below.slope < above.slope:
        # Already diverging right of x; nothing to reorder.
        state.stats.touching_events += 1
        if state.trace:
            logger.debug("[Sweep] pair already ordered at x=%s: %r, %r", x, below, above)
        return
    status.swap_positions(below, above)

    lower, upper = above, below
    check_intersection(state, lower, status.neighbor_before(lower))
    check_intersection(state, upper, status.neighbor_after(upper))


_HANDLERS = {
    EventKind.START: process_start,
    EventKind.END: process_end,
    EventKind.INTERSECTION: process_intersection,
}


def step(state: SweepState) -> Event:
    """Pop and process the next event.

    Raises:
        IndexError: if the queue is empty.
        RunawaySweepError: if the processed-event cap is exceeded.
    """
    if state.stats.events_processed >= state.event_limit:
        raise RunawaySweepError(
            f"sweep exceeded {state.event_limit} events with {len(state.queue)} still queued"
        )
    event = state.queue.pop()
    state.stats.events_processed += 1
    state.sweep_x = event.x
    if state.trace:
        logger.debug(
            "[Sweep] #%d %s x=%s active=%d queued=%d",
            state.stats.events_processed,
            event.kind.name,
            event.x,
            len(state.status),
            len(state.queue),
        )
    _HANDLERS[event.kind](state, event)
    return event


def run_sweep(
    segments: List[Segment],
    config: Optional[SweepConfig] = None,
    seed: Optional[int] = None,
) -> SweepState:
    """Run a sweep over already-ingested segments to completion.

    Raises:
        RunawaySweepError: if the processed-event cap is exceeded.
    """
    state = new_state(segments, config=config, seed=seed)
    while state.queue:
        step(state)
    return state


def find_segment_intersections(
    records: Iterable[SegmentRecord],
    config: Optional[SweepConfig] = None,
    seed: Optional[int] = None,
) -> Optional[SweepResult]:
    """Find all crossings among raw ``(point_a, point_b, ident)`` records.

    Vertical and non-finite records are skipped.  Results are in
    discovery order, which is ascending x.

    Returns:
        A :class:`SweepResult`, or ``None`` if the sweep was aborted by
        the processed-event cap.
    """
    t_start = time.perf_counter()
    segments, report = ingest_segments(records)
    try:
        state = run_sweep(segments, config=config, seed=seed)
    except RunawaySweepError as exc:
        logger.error("[Sweep] aborted over %d segments: %s", len(segments), exc)
        return None
    elapsed_ms = (time.perf_counter() - t_start) * 1000.0
    logger.debug(
        "[Sweep] %d segments (%d skipped) -> %d intersections, %d events in %.2f ms",
        len(segments),
        report.received - report.accepted,
        len(state.results),
        state.stats.events_processed,
        elapsed_ms,
    )
    return SweepResult(intersections=state.results, ingest=report, stats=state.stats)


def find_intersection_points(
    records: Iterable[SegmentRecord],
    config: Optional[SweepConfig] = None,
    seed: Optional[int] = None,
) -> Optional[List[Point]]:
    """Return just the crossing points, or ``None`` if the sweep was aborted."""
    result = find_segment_intersections(records, config=config, seed=seed)
    if result is None:
        return None
    return result.points
