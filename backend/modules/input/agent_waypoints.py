"""
modules/input/agent_waypoints.py
---------------------------------
Extract route waypoints from a planning agent's free-text recommendation.

Agents answer with prose plus a JSON object, usually inside a ```json
fence:

    {"waypoints": [
        {"name": "Genoa", "coordinates": [8.9463, 44.4056], "description": "..."},
        ...
    ]}

Coordinate pairs arrive in either order.  A pair is read as [lat, lng] when
the first value fits latitude, the second fits longitude and |first| >
|second|; otherwise GeoJSON [lng, lat] is assumed.  Entries whose
coordinates stay out of range are dropped with a warning.  Text without
usable JSON yields an empty list.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any

from schemas.route import Coordinates, Waypoint, WaypointKind, parse_kind, slugify
from modules.validation.ingestion_validator import validate_coordinates

logger = logging.getLogger(__name__)

_FENCED_JSON = re.compile(r"```json\s*([\s\S]*?)\s*```")


def _parse_json(raw: str) -> dict:
    match = _FENCED_JSON.search(raw)
    if match:
        try:
            return json.loads(match.group(1))
        except json.JSONDecodeError:
            pass
    raw = re.sub(r"```(?:json)?", "", raw).strip().rstrip("`").strip()
    try:
        data = json.loads(raw)
        return data if isinstance(data, dict) else {}
    except json.JSONDecodeError:
        match = re.search(r"\{.*\}", raw, re.DOTALL)
        if match:
            try:
                return json.loads(match.group())
            except json.JSONDecodeError:
                pass
    return {}


def normalize_pair(first: float, second: float) -> tuple[float, float]:
    """Return (lat, lng) for an ambiguous coordinate pair."""
    if (
        -90 <= first <= 90
        and -180 <= second <= 180
        and abs(first) > abs(second)
    ):
        return first, second
    return second, first


def _coordinates_of(entry: dict[str, Any]) -> tuple[Any, Any] | None:
    coords = entry.get("coordinates")
    if isinstance(coords, (list, tuple)):
        if len(coords) != 2:
            return None
        try:
            return normalize_pair(float(coords[0]), float(coords[1]))
        except (TypeError, ValueError):
            return None
    if isinstance(coords, dict):
        return coords.get("lat"), coords.get("lng", coords.get("lon"))
    if "lat" in entry:
        return entry.get("lat"), entry.get("lng", entry.get("lon"))
    return None


def parse_agent_waypoints(
    text: str,
    kind: WaypointKind = WaypointKind.city,
) -> list[Waypoint]:
    """
    Parse the ``waypoints`` array out of agent output.

    Args:
        text: Raw agent recommendation (prose + JSON).
        kind: Kind given to entries that carry no ``type``/``kind`` of their own.

    Returns:
        Waypoints in the order the agent listed them.
    """
    data = _parse_json(text or "")
    entries = data.get("waypoints")
    if not isinstance(entries, list):
        logger.warning("parse_agent_waypoints: no waypoints array in agent output")
        return []

    waypoints: list[Waypoint] = []
    for entry in entries:
        if not isinstance(entry, dict) or not entry.get("name"):
            continue
        pair = _coordinates_of(entry)
        if pair is None:
            logger.warning("Skipping %r: no usable coordinates", entry.get("name"))
            continue
        lat, lng = pair
        errors = validate_coordinates(lat, lng)
        if errors:
            logger.warning("Invalid coordinates for %r: %s", entry["name"], "; ".join(errors))
            continue

        raw_kind = entry.get("kind") or entry.get("type")
        flagged = bool(entry.get("isLandmark"))
        entry_kind = parse_kind(raw_kind, flagged) if raw_kind or flagged else kind
        name = str(entry["name"])
        waypoints.append(Waypoint(
            id=str(entry.get("id") or slugify(name)),
            name=name,
            coordinates=Coordinates(lat=float(lat), lng=float(lng)),
            kind=entry_kind,
            description=str(entry.get("description") or ""),
            city=str(entry.get("city") or ""),
        ))
    return waypoints
