"""
API routes for segment intersection queries.

A single endpoint accepts a list of 2D segments and returns every
crossing between them.  The plane sweep is the default; the pairwise
brute-force reference can be requested with ``method="brute"`` for
cross-checking.  Vertical segments are skipped and counted in the
response metadata.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Dict, List

from fastapi import APIRouter, HTTPException

from .models import (
    IntersectionOut,
    IntersectionRequest,
    IntersectionResponse,
    Point2D,
)
from ..config import load_config
from ..services.brute_force import brute_force_intersections
from ..services.segments import ingest_segments
from ..services.sweep import Intersection, find_segment_intersections

logger = logging.getLogger(__name__)

router = APIRouter()


def _to_response(
    intersections: List[Intersection],
    include_ids: bool,
    metadata: Dict[str, Any],
) -> IntersectionResponse:
    return IntersectionResponse(
        points=[Point2D(x=item.x, y=item.y) for item in intersections],
        intersections=[
            IntersectionOut(
                x=item.x,
                y=item.y,
                segments=[item.first_id, item.second_id] if include_ids else None,
            )
            for item in intersections
        ],
        metadata=metadata,
    )


@router.post("/intersections", response_model=IntersectionResponse)
async def find_intersections(body: IntersectionRequest) -> IntersectionResponse:
    """Detect all pairwise crossings among the submitted segments.

    Returns:
        IntersectionResponse: crossing points plus metadata with the
        number of segments received, skipped and, for the sweep, the
        number of events processed.

    Raises:
        HTTPException: 500 if the sweep aborted on its event cap.
    """
    records = [
        ((seg.start.x, seg.start.y), (seg.end.x, seg.end.y), seg.id) for seg in body.segments
    ]
    config = load_config()
    t_start = time.perf_counter()

    if body.method == "brute":
        segments, report = ingest_segments(records)
        intersections = brute_force_intersections(segments, config.parallel_tolerance)
        metadata: Dict[str, Any] = {"method": "brute"}
    else:
        result = find_segment_intersections(records, config=config)
        if result is None:
            logger.error("intersection sweep aborted for %d segments", len(records))
            raise HTTPException(status_code=500, detail="Intersection sweep aborted: event limit exceeded")
        intersections = result.intersections
        report = result.ingest
        metadata = {
            "method": "sweep",
            "eventsProcessed": result.stats.events_processed,
            "staleEvents": result.stats.stale_events,
        }

    metadata.update(
        {
            "segmentsReceived": report.received,
            "segmentsUsed": report.accepted,
            "skippedVertical": report.skipped_vertical,
            "skippedNonFinite": report.skipped_non_finite,
            "totalIntersections": len(intersections),
            "elapsedMs": (time.perf_counter() - t_start) * 1000.0,
        }
    )
    return _to_response(intersections, body.includeIds, metadata)
