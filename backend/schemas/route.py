"""
schemas/route.py
----------------
Dataclass definitions for waypoints and the route state owned by the
route optimizer.

Wire shape of a waypoint (what the host application stores and sends):

    {
      "id": "rome",
      "name": "Rome",
      "kind": "city" | "landmark" | "cultural" | "other",
      "coordinates": {"lat": 41.9028, "lng": 12.4964}
    }
"""

from __future__ import annotations

import hashlib
import json
import math
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class WaypointKind(str, Enum):
    city = "city"
    landmark = "landmark"
    cultural = "cultural"
    other = "other"


# Type labels the planner UI and agents use for fixed stops.
_CITY_ALIASES = frozenset({"city", "waypoint", "destination", "start", "origin"})


def _to_float(value: Any) -> float:
    """Coerce to float; missing or non-numeric values become NaN."""
    if value is None or isinstance(value, bool):
        return math.nan
    try:
        return float(value)
    except (TypeError, ValueError):
        return math.nan


def slugify(name: str) -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", str(name).lower()).strip("-")
    return slug or "waypoint"


def parse_kind(value: Any, is_landmark: bool = False) -> WaypointKind:
    """
    Map a raw ``kind``/``type`` label onto WaypointKind.

    ``isLandmark=True`` is synonymous with a non-city kind: a record flagged as
    a landmark but labelled (or defaulting to) ``city`` becomes ``landmark``.
    """
    raw = str(value).strip().lower() if value else ""
    if raw in _CITY_ALIASES or not raw:
        kind = WaypointKind.city
    else:
        try:
            kind = WaypointKind(raw)
        except ValueError:
            kind = WaypointKind.other
    if is_landmark and kind is WaypointKind.city:
        return WaypointKind.landmark
    return kind


@dataclass
class Coordinates:
    """Latitude/longitude pair in degrees."""
    lat: float
    lng: float

    def __post_init__(self) -> None:
        # 1 and 1.0 must serialise (and hash) identically
        self.lat = _to_float(self.lat)
        self.lng = _to_float(self.lng)

    def to_dict(self) -> dict:
        # NaN is not valid JSON; missing values go back out as null
        return {
            "lat": self.lat if math.isfinite(self.lat) else None,
            "lng": self.lng if math.isfinite(self.lng) else None,
        }


@dataclass
class Waypoint:
    """A single point (city or landmark) the route passes through."""
    id: str
    name: str
    coordinates: Coordinates
    kind: WaypointKind = WaypointKind.city
    description: str = ""
    city: str = ""  # parent city of a landmark, display only

    @property
    def is_landmark(self) -> bool:
        return self.kind is not WaypointKind.city

    @property
    def lat(self) -> float:
        return self.coordinates.lat

    @property
    def lng(self) -> float:
        return self.coordinates.lng

    def to_dict(self) -> dict:
        out = {
            "id": self.id,
            "name": self.name,
            "kind": self.kind.value,
            "coordinates": self.coordinates.to_dict(),
        }
        if self.description:
            out["description"] = self.description
        if self.city:
            out["city"] = self.city
        return out

    @classmethod
    def from_dict(cls, record: dict[str, Any]) -> "Waypoint":
        """
        Build a Waypoint from a host record.

        Accepted coordinate shapes:
          - ``coordinates: {"lat": .., "lng": ..}``  (``lon`` also accepted)
          - ``coordinates: [lng, lat]``               (GeoJSON order)
          - flat ``lat`` / ``lng`` keys on the record
        Missing or non-numeric values become NaN and are caught by validation.
        """
        coords = record.get("coordinates")
        if isinstance(coords, dict):
            lat = coords.get("lat")
            lng = coords.get("lng", coords.get("lon"))
        elif isinstance(coords, (list, tuple)) and len(coords) == 2:
            lng, lat = coords[0], coords[1]
        else:
            lat = record.get("lat")
            lng = record.get("lng", record.get("lon"))

        name = str(record.get("name") or "")
        kind = parse_kind(
            record.get("kind") or record.get("type"),
            is_landmark=bool(record.get("isLandmark") or record.get("is_landmark")),
        )
        return cls(
            id=str(record.get("id") or slugify(name)),
            name=name,
            coordinates=Coordinates(lat=_to_float(lat), lng=_to_float(lng)),
            kind=kind,
            description=str(record.get("description") or ""),
            city=str(record.get("city") or ""),
        )


@dataclass
class RouteState:
    """
    Canonical inputs for idempotent route reconstruction.

    base_cities -- the caller-fixed city order (never reordered here).
    landmarks   -- landmark history in discovery/add order.

    Operations take a RouteState and return a new one; the caller owns where
    it lives (session store, database row, browser storage).
    """
    base_cities: list[Waypoint] = field(default_factory=list)
    landmarks: list[Waypoint] = field(default_factory=list)

    @property
    def has_snapshot(self) -> bool:
        return bool(self.base_cities)

    def to_dict(self) -> dict:
        return {
            "base_cities": [w.to_dict() for w in self.base_cities],
            "landmarks": [w.to_dict() for w in self.landmarks],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "RouteState":
        data = data or {}
        return cls(
            base_cities=[Waypoint.from_dict(r) for r in data.get("base_cities", [])],
            landmarks=[Waypoint.from_dict(r) for r in data.get("landmarks", [])],
        )

    def state_hash(self) -> str:
        """Stable SHA-256 of the serialised state (used by the replay log)."""
        blob = json.dumps(self.to_dict(), sort_keys=True, default=str)
        return hashlib.sha256(blob.encode("utf-8")).hexdigest()
