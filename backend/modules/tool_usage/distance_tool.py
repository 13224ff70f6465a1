"""
modules/tool_usage/distance_tool.py
-------------------------------------
Great-circle distance between waypoints using the Haversine formula.
Used as the travel-distance proxy for route optimization; no road network
and no external HTTP calls.

Config knob (config.py):
  EARTH_RADIUS_KM -- sphere radius (default: 6371.0)

Near-antipodal point pairs lose precision (h -> 1); this is not corrected.
"""

from __future__ import annotations
import math
from typing import Sequence

import config
from schemas.route import Coordinates, Waypoint

# ---------------------------------------------------------------------------
# Pure maths
# ---------------------------------------------------------------------------


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance between two points (Haversine formula) in km."""
    r = config.EARTH_RADIUS_KM
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lam = math.radians(lon2 - lon1)
    h = (
        math.sin(d_phi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(d_lam / 2) ** 2
    )
    # rounding can push h a hair outside [0, 1] for antipodal pairs
    h = min(max(h, 0.0), 1.0)
    return 2 * r * math.atan2(math.sqrt(h), math.sqrt(1 - h))


def distance(a: Coordinates, b: Coordinates) -> float:
    """Haversine distance in km between two Coordinates."""
    return haversine_km(a.lat, a.lng, b.lat, b.lng)


def path_length_km(route: Sequence[Waypoint]) -> float:
    """Sum of consecutive pairwise distances along *route* (km)."""
    total = 0.0
    for prev, nxt in zip(route, route[1:]):
        total += distance(prev.coordinates, nxt.coordinates)
    return total


# ---------------------------------------------------------------------------
# DistanceTool
# ---------------------------------------------------------------------------


class DistanceTool:
    """
    Injectable distance metric for the planners.

    The default metric is the haversine great-circle distance; tests and
    callers may pass any ``metric(a: Coordinates, b: Coordinates) -> km``.
    """

    def __init__(self, metric=None) -> None:
        self._metric = metric or distance

    def distance(self, a: Waypoint, b: Waypoint) -> float:
        """Distance in km between two waypoints."""
        return self._metric(a.coordinates, b.coordinates)

    def path_length(self, route: Sequence[Waypoint]) -> float:
        """Total length in km of the path visiting *route* in order."""
        total = 0.0
        for prev, nxt in zip(route, route[1:]):
            total += self._metric(prev.coordinates, nxt.coordinates)
        return total

    def distance_matrix(self, route: Sequence[Waypoint]) -> list[list[float]]:
        """Return a full n x n distance matrix [km]."""
        n = len(route)
        return [
            [
                0.0 if i == j else self._metric(route[i].coordinates, route[j].coordinates)
                for j in range(n)
            ]
            for i in range(n)
        ]
