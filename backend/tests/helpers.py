"""Waypoint factories for tests."""

from __future__ import annotations

from schemas.route import Coordinates, Waypoint, WaypointKind, slugify


def city(name: str, lat: float, lng: float) -> Waypoint:
    return Waypoint(id=slugify(name), name=name, coordinates=Coordinates(lat, lng))


def landmark(name: str, lat: float, lng: float, kind: WaypointKind = WaypointKind.landmark) -> Waypoint:
    return Waypoint(id=slugify(name), name=name, coordinates=Coordinates(lat, lng), kind=kind)


def names(waypoints) -> list[str]:
    return [w.name for w in waypoints]


# Original planner fixture: Aix-en-Provence → Genoa → Rome
AIX = city("Aix-en-Provence", 43.5297, 5.4474)
GENOA = city("Genoa", 44.4056, 8.9463)
ROME = city("Rome", 41.9028, 12.4964)
FLORENCE = city("Florence", 43.7696, 11.2558)
