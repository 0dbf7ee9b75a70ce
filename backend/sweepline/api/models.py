"""
Pydantic data models for the intersection API.

These models define the request and response shapes of the
``/api/intersections`` endpoint.  Segment identifiers are passed
through untouched, so any JSON value is accepted for ``id``.
"""

from __future__ import annotations

from typing import Any, Dict, List, Literal

from pydantic import BaseModel, Field


class Point2D(BaseModel):
    """Single 2D point."""

    x: float
    y: float


class SegmentInput(BaseModel):
    """A segment as supplied by the client, endpoints in either order."""

    start: Point2D = Field(..., description="First endpoint")
    end: Point2D = Field(..., description="Second endpoint")
    id: Any = Field(default=None, description="Opaque identifier echoed back in results")


class IntersectionRequest(BaseModel):
    """Request body for an intersection query."""

    segments: List[SegmentInput] = Field(..., description="Segments to test against each other")
    includeIds: bool = Field(
        default=True,
        description="Whether to annotate each intersection with the two segment identifiers",
    )
    method: Literal["sweep", "brute"] = Field(
        default="sweep",
        description="'sweep' for the plane sweep, 'brute' for the pairwise reference",
    )


class IntersectionOut(BaseModel):
    """A single detected crossing."""

    x: float
    y: float
    segments: List[Any] | None = Field(
        default=None, description="Identifiers of the two crossing segments"
    )


class IntersectionResponse(BaseModel):
    """Response returned for an intersection query."""

    points: List[Point2D] = Field(..., description="Crossing points in discovery order")
    intersections: List[IntersectionOut] = Field(
        ..., description="Crossing points with optional segment identifiers"
    )
    metadata: Dict[str, Any] = Field(
        default_factory=dict,
        description="Counts of received, skipped and processed items",
    )
