"""
modules/planning/combined_view.py
----------------------------------
Read accessors over a stored RouteState.

get_all_combined_waypoints() rebuilds the merged route from the base-city
snapshot and landmark history, so callers never resupply the full list.
It has no algorithm of its own; it replays the same greedy insertion the
assembler runs.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

import config
from schemas.route import RouteState, Waypoint
from modules.tool_usage.distance_tool import DistanceTool
from modules.planning.route_assembler import merge_landmarks


@dataclass
class RouteSummary:
    """Distance stats shown alongside a merged route."""
    total_km: float = 0.0
    display_km: float = 0.0       # total_km rounded to ROUTE_DISPLAY_ROUND_KM
    city_count: int = 0
    landmark_count: int = 0

    def to_dict(self) -> dict:
        return {
            "total_km": self.total_km,
            "display_km": self.display_km,
            "city_count": self.city_count,
            "landmark_count": self.landmark_count,
        }


def get_all_combined_waypoints(
    state: RouteState,
    distance_tool: DistanceTool | None = None,
) -> list[Waypoint]:
    """
    Merged route (cities + landmarks) for the stored *state*.

    Identical to what optimize_full_route returns for the same base and
    landmark order.  Without base cities the landmark history is returned
    as-is.  Stored landmarks with bad coordinates are left out.
    """
    if not state.base_cities:
        return list(state.landmarks)
    merged, _ = merge_landmarks(state.base_cities, state.landmarks, distance_tool)
    return merged


def extract_waypoints(state: RouteState) -> list[Waypoint]:
    """Base cities only, in their canonical order."""
    return list(state.base_cities)


def summarize_route(
    waypoints: Sequence[Waypoint],
    distance_tool: DistanceTool | None = None,
) -> RouteSummary:
    tool = distance_tool or DistanceTool()
    total = tool.path_length(list(waypoints))
    step = config.ROUTE_DISPLAY_ROUND_KM
    display = round(total / step) * step if step > 0 else total
    landmarks = sum(1 for w in waypoints if w.is_landmark)
    return RouteSummary(
        total_km=total,
        display_km=float(display),
        city_count=len(waypoints) - landmarks,
        landmark_count=landmarks,
    )
