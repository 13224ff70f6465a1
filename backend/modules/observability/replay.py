"""
modules/observability/replay.py
---------------------------------
Deterministic rebuild of a route session from its JSONL log.

Usage:
    python main.py --replay <session_id>

Reads <LOGS_DIR>/<session_id>.jsonl and re-applies BASE_SET,
LANDMARK_ADDED and LANDMARK_REMOVED events in order.  Each event carries
the state hash recorded at write time; the rebuilt state's final hash must
match the last recorded one or RuntimeError("REPLAY_DIVERGENCE") is raised.

No optimization runs here; only the RouteState is reconstructed.  The
merged route follows from it via get_all_combined_waypoints().
"""

from __future__ import annotations

import logging
from pathlib import Path

from schemas.route import RouteState, Waypoint
from modules.observability.logger import STATE_EVENTS, StructuredLogger
from modules.planning.route_assembler import add_landmark, remove_landmark, with_base_cities

logger = logging.getLogger(__name__)


def replay_session(session_id: str, *, logs_dir: Path | str | None = None) -> RouteState:
    """Rebuild the RouteState of a recorded session and verify its hash."""
    state = RouteState()
    last_logged_hash: str | None = None
    step = 0

    for rec in StructuredLogger(logs_dir).read(session_id):
        event_type = rec.get("event_type", "")
        if event_type not in STATE_EVENTS:
            continue

        step += 1
        payload = rec.get("payload", {})

        if event_type == "BASE_SET":
            cities = [Waypoint.from_dict(r) for r in payload.get("base_cities", [])]
            state = with_base_cities(state, cities)
        elif event_type == "LANDMARK_ADDED":
            state = add_landmark(state, Waypoint.from_dict(payload.get("landmark", {})))
        elif event_type == "LANDMARK_REMOVED":
            state = remove_landmark(state, payload.get("landmark_id", ""))

        last_logged_hash = payload.get("state_hash") or last_logged_hash
        logger.debug("[replay] %4d %s %s", step, rec.get("timestamp", ""), event_type)

    logger.info("[replay] session %s: replayed %d event(s)", session_id, step)

    if last_logged_hash is not None:
        rebuilt = state.state_hash()
        if rebuilt != last_logged_hash:
            raise RuntimeError(
                f"REPLAY_DIVERGENCE: final replayed hash {rebuilt[:16]} "
                f"!= last logged hash {last_logged_hash[:16]}"
            )
    return state
