"""
modules/planning/insertion.py
------------------------------
Cheapest-insertion position search.

For a route of n waypoints and one candidate, every splice index
i ∈ [0, n] is tried; the hypothetical route's full path length is
recomputed and the shortest wins.  Cost: O(n) per trial, O(n²) per
candidate.  Ties keep the earliest index (strict ``<`` in a left-to-right
scan), so the result is deterministic for identical inputs.

Coordinates are validated before any distance is computed.  A NaN would
make every ``<`` comparison false and pin the answer to index 0.
"""

from __future__ import annotations

from typing import Sequence

from schemas.route import Waypoint
from modules.tool_usage.distance_tool import DistanceTool
from modules.validation.ingestion_validator import require_valid

_DEFAULT_TOOL = DistanceTool()


def find_optimal_position(
    route: Sequence[Waypoint],
    candidate: Waypoint,
    distance_tool: DistanceTool | None = None,
) -> int:
    """
    Return the index in ``[0, len(route)]`` at which inserting *candidate*
    yields the shortest total path.

    Raises:
        InvalidWaypointError: if *candidate* or any route waypoint has
            missing, non-finite or out-of-range coordinates.
    """
    require_valid(candidate)
    for waypoint in route:
        require_valid(waypoint)
    return search_position(route, candidate, distance_tool or _DEFAULT_TOOL)


def search_position(
    route: Sequence[Waypoint],
    candidate: Waypoint,
    distance_tool: DistanceTool,
) -> int:
    """Position search over pre-validated waypoints."""
    if not route:
        return 0

    route = list(route)
    best_index = 0
    best_length = float("inf")
    for i in range(len(route) + 1):
        trial = route[:i] + [candidate] + route[i:]
        length = distance_tool.path_length(trial)
        if length < best_length:
            best_length = length
            best_index = i
    return best_index


def insertion_cost_km(
    route: Sequence[Waypoint],
    candidate: Waypoint,
    index: int,
    distance_tool: DistanceTool | None = None,
) -> float:
    """Extra km added to *route* by splicing *candidate* in at *index*."""
    tool = distance_tool or _DEFAULT_TOOL
    route = list(route)
    before = route[index - 1] if index > 0 else None
    after = route[index] if index < len(route) else None

    added = 0.0
    if before is not None:
        added += tool.distance(before, candidate)
    if after is not None:
        added += tool.distance(candidate, after)
    if before is not None and after is not None:
        added -= tool.distance(before, after)
    return added
