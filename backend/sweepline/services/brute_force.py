"""Pairwise O(n²) intersection reference, vectorised with numpy."""

from __future__ import annotations

from typing import List, Sequence

try:
    import numpy as np  # type: ignore  # noqa: N816
except Exception as exc:  # pragma: no cover - dependency guard
    raise RuntimeError("numpy is required for the brute-force reference") from exc

from ..config import DEFAULT_PARALLEL_TOLERANCE
from .segments import Segment
from .sweep import Intersection


def brute_force_intersections(
    segments: Sequence[Segment],
    parallel_tolerance: float = DEFAULT_PARALLEL_TOLERANCE,
) -> List[Intersection]:
    """Test every pair of segments and return all crossings.

    Uses the same slope/intercept model and parallel rule as the sweep,
    with closed x-ranges.  Results are sorted by x, then y.
    """
    n = len(segments)
    if n < 2:
        return []
    start = np.array([s.start for s in segments], dtype=float)
    end = np.array([s.end for s in segments], dtype=float)
    slope = (end[:, 1] - start[:, 1]) / (end[:, 0] - start[:, 0])
    intercept = start[:, 1] - slope * start[:, 0]

    ii, jj = np.triu_indices(n, k=1)
    dm = slope[jj] - slope[ii]
    scale = np.maximum(1.0, np.maximum(np.abs(slope[ii]), np.abs(slope[jj])))
    crossing = np.abs(dm) > parallel_tolerance * scale
    ii, jj, dm = ii[crossing], jj[crossing], dm[crossing]

    x = (intercept[ii] - intercept[jj]) / dm
    inside = (
        (x >= start[ii, 0]) & (x <= end[ii, 0])
        & (x >= start[jj, 0]) & (x <= end[jj, 0])
    )
    ii, jj, x = ii[inside], jj[inside], x[inside]
    y = slope[ii] * x + intercept[ii]

    order = np.lexsort((y, x))
    return [
        Intersection(
            x=float(x[k]),
            y=float(y[k]),
            first_id=segments[int(ii[k])].ident,
            second_id=segments[int(jj[k])].ident,
        )
        for k in order
    ]
