"""
Sweep events and the event queue.

Three kinds of event pause the sweep line: a segment starting, a
segment ending and two segments crossing.  Events are immutable and are
consumed exactly once.

The queue yields events by ascending x.  Events sharing an x-coordinate
are released in a fixed order::

    END  <  START  <  INTERSECTION

and, within one kind, in the order they were pushed.  Ending segments
first keeps two segments that merely touch end-to-start from ever being
adjacent; starting segments before crossings lets a segment that begins
at a crossing's x take part in the post-swap neighbour tests.
"""

from __future__ import annotations

import heapq
import itertools
from dataclasses import dataclass
from enum import IntEnum
from typing import Iterable, Iterator, List, Optional, Tuple

from .segments import Segment


class EventKind(IntEnum):
    """Event kinds; the integer value is the tie-break rank at equal x."""

    END = 0
    START = 1
    INTERSECTION = 2


@dataclass(frozen=True)
class Event:
    """A point on the x-axis at which the sweep updates its state.

    ``second`` is only set for intersection events.
    """

    kind: EventKind
    x: float
    first: Segment
    second: Optional[Segment] = None

    @classmethod
    def start(cls, segment: Segment) -> "Event":
        return cls(EventKind.START, segment.start[0], segment)

    @classmethod
    def end(cls, segment: Segment) -> "Event":
        return cls(EventKind.END, segment.end[0], segment)

    @classmethod
    def intersection(cls, a: Segment, b: Segment, x: float) -> "Event":
        return cls(EventKind.INTERSECTION, x, a, b)


class EventQueue:
    """Binary-heap priority queue of :class:`Event` objects."""

    def __init__(self, events: Iterable[Event] = ()) -> None:
        self._counter = itertools.count()
        self._heap: List[Tuple[float, int, int, Event]] = [
            (ev.x, int(ev.kind), next(self._counter), ev) for ev in events
        ]
        heapq.heapify(self._heap)

    def push(self, event: Event) -> None:
        heapq.heappush(self._heap, (event.x, int(event.kind), next(self._counter), event))

    def pop(self) -> Event:
        """Remove and return the next event.

        Raises:
            IndexError: if the queue is empty.
        """
        return heapq.heappop(self._heap)[3]

    def peek(self) -> Optional[Event]:
        return self._heap[0][3] if self._heap else None

    def __len__(self) -> int:
        return len(self._heap)

    def __bool__(self) -> bool:
        return bool(self._heap)

    def drain(self) -> Iterator[Event]:
        """Pop events until the queue is empty."""
        while self._heap:
            yield self.pop()


def seed_events(segments: Iterable[Segment]) -> EventQueue:
    """Return a queue holding one START and one END event per segment."""
    events: List[Event] = []
    for segment in segments:
        events.append(Event.start(segment))
        events.append(Event.end(segment))
    return EventQueue(events)
