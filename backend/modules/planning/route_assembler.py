"""
modules/planning/route_assembler.py
-------------------------------------
Greedy landmark insertion into a fixed city route.

Architecture:
  - Functional core: optimize_full_route(waypoints, state) -> OptimizationResult.
    The RouteState (base-city snapshot + landmark history) goes in and a new
    one comes out; nothing is hidden on an instance.
  - RouteAssembler: thin stateful wrapper around one RouteState for callers
    that want the plain ``optimize_full_route(waypoints) -> waypoints`` API.

Per call:
  1. Partition input into cities / landmarks (relative order kept).
  2. Base route = stored snapshot if any, else the input cities.  The
     snapshot is what keeps repeated calls idempotent after earlier
     insertions have shuffled the working list.
  3. Each landmark, in given order, goes to find-optimal-position against
     the *current* working route, which grows after every splice.

Invariants:
  - Base cities keep their relative order in every output.
  - Output is a deterministic function of (base order, landmark order, metric).
  - Greedy: each landmark is optimal for the route as it stands then, not
    for the final arrangement.  Cost O(L·n²).
"""

from __future__ import annotations

import logging
import time as _time_mod
from dataclasses import dataclass, field, replace
from typing import Optional, Sequence

import config
from schemas.route import RouteState, Waypoint
from modules.tool_usage.distance_tool import DistanceTool
from modules.planning.insertion import find_optimal_position, search_position
from modules.validation.ingestion_validator import (
    ValidationResult,
    filter_valid,
    require_valid,
    validate_waypoint_coordinates,
)
from modules.observability.logger import StructuredLogger

logger = logging.getLogger(__name__)
_perf_logger = StructuredLogger()


class RouteTooLargeError(ValueError):
    """Input exceeds config.ROUTE_MAX_WAYPOINTS."""


@dataclass
class OptimizationResult:
    """
    Output of one optimize_full_route call.

    waypoints -- merged route (cities + inserted landmarks).
    state     -- RouteState to hand back on the next call.
    rejected  -- landmarks excluded for malformed data, with reasons.
    """
    waypoints: list[Waypoint] = field(default_factory=list)
    state: RouteState = field(default_factory=RouteState)
    rejected: list[ValidationResult] = field(default_factory=list)


# ── Pure helpers ──────────────────────────────────────────────────────────────

def partition_waypoints(
    waypoints: Sequence[Waypoint],
) -> tuple[list[Waypoint], list[Waypoint]]:
    """Split into (cities, landmarks), each in original relative order."""
    cities = [w for w in waypoints if not w.is_landmark]
    landmarks = [w for w in waypoints if w.is_landmark]
    return cities, landmarks


def merge_landmarks(
    base: Sequence[Waypoint],
    landmarks: Sequence[Waypoint],
    distance_tool: DistanceTool | None = None,
    strict: bool = False,
) -> tuple[list[Waypoint], list[ValidationResult]]:
    """
    Insert *landmarks* one at a time into a copy of *base*.

    Returns (merged_route, rejected).  A malformed base city raises
    InvalidWaypointError since a mandatory stop cannot be dropped; a
    malformed landmark is skipped (or raises when *strict*).
    """
    tool = distance_tool or DistanceTool()

    for city in base:
        require_valid(city)

    if strict:
        usable = [require_valid(landmark) for landmark in landmarks]
        rejected: list[ValidationResult] = []
    else:
        usable, rejected = filter_valid(list(landmarks), validate_waypoint_coordinates)

    route = list(base)
    for landmark in usable:
        index = search_position(route, landmark, tool)
        route.insert(index, landmark)
    return route, rejected


def add_landmark(state: RouteState, landmark: Waypoint) -> RouteState:
    """Append *landmark* to the history unless its id is already stored."""
    if any(existing.id == landmark.id for existing in state.landmarks):
        return state
    return replace(state, landmarks=[*state.landmarks, landmark])


def remove_landmark(state: RouteState, landmark_id: str) -> RouteState:
    return replace(
        state,
        landmarks=[w for w in state.landmarks if w.id != landmark_id],
    )


def with_base_cities(state: RouteState, cities: Sequence[Waypoint]) -> RouteState:
    """Replace the base-city snapshot (e.g. after the user edits the trip)."""
    return replace(state, base_cities=[w for w in cities if not w.is_landmark])


def _unique_by_id(landmarks: Sequence[Waypoint]) -> list[Waypoint]:
    """First occurrence of each landmark id, order kept."""
    seen: set[str] = set()
    unique: list[Waypoint] = []
    for landmark in landmarks:
        if landmark.id not in seen:
            seen.add(landmark.id)
            unique.append(landmark)
    return unique


def _extend_history(state: RouteState, landmarks: Sequence[Waypoint]) -> RouteState:
    for landmark in landmarks:
        state = add_landmark(state, landmark)
    return state


# ── Public entry point ────────────────────────────────────────────────────────

def optimize_full_route(
    waypoints: Sequence[Waypoint],
    state: Optional[RouteState] = None,
    *,
    strict: Optional[bool] = None,
    distance_tool: DistanceTool | None = None,
    session_id: str = "default",
) -> OptimizationResult:
    """
    Merge the landmarks in *waypoints* into the base city route.

    Args:
        waypoints:     Cities and/or landmarks, in caller order.
        state:         Previously returned RouteState, if any.
        strict:        Raise on malformed landmarks instead of skipping them.
                       Defaults to config.ROUTE_STRICT_VALIDATION.
        distance_tool: Metric override (haversine by default).
        session_id:    Key for the PERFORMANCE record in the JSONL log.

    Returns:
        OptimizationResult with the merged route, the updated state and any
        rejected landmarks.

    Raises:
        RouteTooLargeError:   more than config.ROUTE_MAX_WAYPOINTS inputs.
        InvalidWaypointError: a base city is malformed, or *strict* and a
                              landmark is malformed.
    """
    state = state or RouteState()
    strict = config.ROUTE_STRICT_VALIDATION if strict is None else strict
    waypoints = list(waypoints)

    if len(waypoints) > config.ROUTE_MAX_WAYPOINTS:
        raise RouteTooLargeError(
            f"ERROR_ROUTE_TOO_LARGE: {len(waypoints)} waypoints exceeds "
            f"limit of {config.ROUTE_MAX_WAYPOINTS}."
        )

    # Two points or fewer cannot form a route worth reordering.
    if len(waypoints) <= 2:
        return OptimizationResult(waypoints=waypoints, state=state)

    _t0 = _time_mod.perf_counter()
    cities, landmarks = partition_waypoints(waypoints)
    landmarks = _unique_by_id(landmarks)

    if state.has_snapshot:
        base = list(state.base_cities)
    elif cities:
        base = cities
    else:
        # No base to splice into.
        return OptimizationResult(waypoints=waypoints, state=state)

    merged, rejected = merge_landmarks(
        base, landmarks, distance_tool=distance_tool, strict=strict,
    )
    inserted = {id(w) for w in merged}
    new_state = _extend_history(
        replace(state, base_cities=base),
        [w for w in landmarks if id(w) in inserted],
    )

    if rejected:
        logger.warning(
            "optimize_full_route: %d landmark(s) skipped for invalid data",
            len(rejected),
        )

    if config.PERF_LOG_ENABLED:
        _perf_logger.log(session_id, "PERFORMANCE", {
            "operation": "optimize_full_route",
            "cities": len(base),
            "landmarks": len(landmarks),
            "rejected": len(rejected),
            "elapsed_ms": round((_time_mod.perf_counter() - _t0) * 1000, 3),
        })

    return OptimizationResult(waypoints=merged, state=new_state, rejected=rejected)


# ── Stateful wrapper ──────────────────────────────────────────────────────────

class RouteAssembler:
    """
    Holds one RouteState and exposes the four route operations.

    Not thread-safe: callers sharing an instance must serialise access
    (the API layer guards each session with a lock).
    """

    def __init__(
        self,
        state: RouteState | None = None,
        distance_tool: DistanceTool | None = None,
        strict: Optional[bool] = None,
        session_id: str = "default",
    ) -> None:
        self.state         = state or RouteState()
        self.distance_tool = distance_tool or DistanceTool()
        self.strict        = strict
        self.session_id    = session_id
        self.last_rejected: list[ValidationResult] = []

    def optimize_full_route(self, waypoints: Sequence[Waypoint]) -> list[Waypoint]:
        result = optimize_full_route(
            waypoints,
            self.state,
            strict=self.strict,
            distance_tool=self.distance_tool,
            session_id=self.session_id,
        )
        self.state = result.state
        self.last_rejected = result.rejected
        return result.waypoints

    def find_optimal_position(self, route: Sequence[Waypoint], candidate: Waypoint) -> int:
        return find_optimal_position(route, candidate, self.distance_tool)

    def get_all_combined_waypoints(self) -> list[Waypoint]:
        from modules.planning.combined_view import get_all_combined_waypoints
        return get_all_combined_waypoints(self.state, self.distance_tool)

    def extract_waypoints(self) -> list[Waypoint]:
        from modules.planning.combined_view import extract_waypoints
        return extract_waypoints(self.state)

    def set_base_cities(self, cities: Sequence[Waypoint]) -> None:
        self.state = with_base_cities(self.state, cities)

    def add_landmark(self, landmark: Waypoint) -> None:
        self.state = add_landmark(self.state, landmark)

    def remove_landmark(self, landmark_id: str) -> None:
        self.state = remove_landmark(self.state, landmark_id)
