"""
api/routes/route.py
--------------------
Route optimization endpoints.

Stateless:
  POST /v1/route/optimize   → merge landmarks into cities; caller passes the
                              RouteState back on the next call
  POST /v1/route/position   → cheapest insertion index for one candidate
  POST /v1/route/parse      → waypoints out of agent recommendation text

Session (state kept server-side, in memory):
  1. POST   /v1/route/sessions                              → session_id
  2. POST   /v1/route/sessions/{id}/landmarks               → add + merged route
  3. DELETE /v1/route/sessions/{id}/landmarks/{landmark_id} → remove + merged route
  4. GET    /v1/route/sessions/{id}/combined                → merged route
  5. GET    /v1/route/sessions/{id}/base                    → base cities only
  6. DELETE /v1/route/sessions/{id}                         → drop session, close its log

Session mutations are appended to logs/<session_id>.jsonl so a session
can be rebuilt with modules.observability.replay.replay_session().
"""

from __future__ import annotations

import threading
import uuid
from typing import Any, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from schemas.route import RouteState, Waypoint
from modules.input.agent_waypoints import parse_agent_waypoints
from modules.observability.logger import StructuredLogger
from modules.planning.combined_view import summarize_route
from modules.planning.insertion import find_optimal_position, insertion_cost_km
from modules.planning.route_assembler import (
    RouteAssembler,
    RouteTooLargeError,
    optimize_full_route,
)
from modules.validation.ingestion_validator import (
    InvalidWaypointError,
    ValidationResult,
    validate_waypoint,
)

router = APIRouter()
_event_log = StructuredLogger()

# ── In-memory session store ────────────────────────────────────────────────────
# key: session_id (str uuid4), value: RouteAssembler owning that trip's state.
# RouteAssembler is not thread-safe, so every access goes through _lock.
_store: dict[str, RouteAssembler] = {}
_lock = threading.Lock()


# ── Request schemas ────────────────────────────────────────────────────────────

class CoordinatesIn(BaseModel):
    lat: Optional[float] = None
    lng: Optional[float] = None


class WaypointIn(BaseModel):
    id: Optional[str] = None
    name: str
    kind: Optional[str] = Field(None, description="city | landmark | cultural | other")
    coordinates: Optional[CoordinatesIn] = None
    isLandmark: bool = False
    description: str = ""
    city: str = ""

    def to_waypoint(self) -> Waypoint:
        data = self.model_dump(exclude_none=True)
        # keep an explicit coordinates object even if both values are missing
        data.setdefault("coordinates", {})
        return Waypoint.from_dict(data)


class OptimizeRequest(BaseModel):
    waypoints: list[WaypointIn]
    state: Optional[dict[str, Any]] = None
    strict: Optional[bool] = None


class PositionRequest(BaseModel):
    route: list[WaypointIn]
    candidate: WaypointIn


class ParseRequest(BaseModel):
    text: str


class SessionRequest(BaseModel):
    cities: list[WaypointIn]


class LandmarkRequest(BaseModel):
    landmark: WaypointIn


# ── Serialisers ────────────────────────────────────────────────────────────────

def _ser_waypoints(waypoints: list[Waypoint]) -> list[dict]:
    return [w.to_dict() for w in waypoints]


def _ser_rejected(rejected: list[ValidationResult]) -> list[dict]:
    return [{"record": r.record, "errors": r.errors} for r in rejected]


def _ser_session(session_id: str, assembler: RouteAssembler) -> dict:
    merged = assembler.get_all_combined_waypoints()
    return {
        "session_id": session_id,
        "waypoints": _ser_waypoints(merged),
        "state": assembler.state.to_dict(),
        "summary": summarize_route(merged).to_dict(),
    }


def _unprocessable(exc: ValueError) -> HTTPException:
    return HTTPException(status_code=422, detail=str(exc))


# ── Stateless endpoints ────────────────────────────────────────────────────────

@router.post("/optimize", summary="Insert landmarks into the city route")
def optimize(req: OptimizeRequest) -> dict:
    waypoints = [w.to_waypoint() for w in req.waypoints]
    try:
        result = optimize_full_route(
            waypoints,
            RouteState.from_dict(req.state) if req.state else None,
            strict=req.strict,
        )
    except (InvalidWaypointError, RouteTooLargeError) as exc:
        raise _unprocessable(exc) from exc

    return {
        "waypoints": _ser_waypoints(result.waypoints),
        "state": result.state.to_dict(),
        "rejected": _ser_rejected(result.rejected),
        "summary": summarize_route(result.waypoints).to_dict(),
    }


@router.post("/position", summary="Cheapest insertion index for one waypoint")
def position(req: PositionRequest) -> dict:
    route = [w.to_waypoint() for w in req.route]
    candidate = req.candidate.to_waypoint()
    try:
        index = find_optimal_position(route, candidate)
    except InvalidWaypointError as exc:
        raise _unprocessable(exc) from exc
    return {"index": index, "added_km": insertion_cost_km(route, candidate, index)}


@router.post("/parse", summary="Extract waypoints from agent output")
def parse(req: ParseRequest) -> dict:
    return {"waypoints": _ser_waypoints(parse_agent_waypoints(req.text))}


# ── Session endpoints ──────────────────────────────────────────────────────────

def get_session(session_id: str) -> RouteAssembler:
    """Retrieve a stored session or raise 404."""
    assembler = _store.get(session_id)
    if assembler is None:
        raise HTTPException(
            status_code=404,
            detail=f"Session '{session_id}' not found. Call /v1/route/sessions first.",
        )
    return assembler


@router.post("/sessions", summary="Start a route session from base cities")
def create_session(req: SessionRequest) -> dict:
    cities = [w.to_waypoint() for w in req.cities]
    session_id = str(uuid.uuid4())
    assembler = RouteAssembler(session_id=session_id)
    assembler.set_base_cities(cities)
    try:
        body = _ser_session(session_id, assembler)
    except InvalidWaypointError as exc:
        raise _unprocessable(exc) from exc

    with _lock:
        _store[session_id] = assembler
        _event_log.log_state(
            session_id, "BASE_SET", assembler.state,
            base_cities=_ser_waypoints(assembler.state.base_cities),
        )
    return body


@router.post("/sessions/{session_id}/landmarks", summary="Add a discovered landmark")
def add_landmark(session_id: str, req: LandmarkRequest) -> dict:
    landmark = req.landmark.to_waypoint()
    if not landmark.is_landmark:
        raise HTTPException(status_code=422, detail="Only non-city waypoints can be added as landmarks.")
    check = validate_waypoint(landmark)
    if not check.valid:
        raise _unprocessable(InvalidWaypointError(check))

    with _lock:
        assembler = get_session(session_id)
        assembler.add_landmark(landmark)
        body = _ser_session(session_id, assembler)
        # written under the lock so log order matches state order
        _event_log.log_state(
            session_id, "LANDMARK_ADDED", assembler.state, landmark=landmark.to_dict(),
        )
    return body


@router.delete("/sessions/{session_id}/landmarks/{landmark_id}", summary="Remove a landmark")
def delete_landmark(session_id: str, landmark_id: str) -> dict:
    with _lock:
        assembler = get_session(session_id)
        if not any(w.id == landmark_id for w in assembler.state.landmarks):
            raise HTTPException(
                status_code=404,
                detail=f"Landmark '{landmark_id}' not in session '{session_id}'.",
            )
        assembler.remove_landmark(landmark_id)
        body = _ser_session(session_id, assembler)
        _event_log.log_state(
            session_id, "LANDMARK_REMOVED", assembler.state, landmark_id=landmark_id,
        )
    return body


@router.get("/sessions/{session_id}/combined", summary="Merged route for a session")
def combined(session_id: str) -> dict:
    with _lock:
        return _ser_session(session_id, get_session(session_id))


@router.get("/sessions/{session_id}/base", summary="Base cities for a session")
def base(session_id: str) -> dict:
    with _lock:
        assembler = get_session(session_id)
        return {
            "session_id": session_id,
            "waypoints": _ser_waypoints(assembler.extract_waypoints()),
        }


@router.delete("/sessions/{session_id}", summary="End a session and close its log")
def delete_session(session_id: str) -> dict:
    with _lock:
        get_session(session_id)
        del _store[session_id]
        _event_log.close(session_id)
    return {"session_id": session_id, "deleted": True}
