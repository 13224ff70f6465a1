"""Unit tests for modules.planning.combined_view."""

import math

import pytest

import config
from schemas.route import Coordinates, RouteState, Waypoint, WaypointKind
from modules.planning.combined_view import extract_waypoints, get_all_combined_waypoints, summarize_route
from modules.planning.route_assembler import optimize_full_route
from helpers import AIX, FLORENCE, GENOA, ROME, city, landmark, names


FLORENCE_LM = landmark("Florence (lm)", FLORENCE.lat, FLORENCE.lng)


def test_combined_matches_optimize_for_same_state():
    colosseum = landmark("Colosseum", 41.8902, 12.4922)
    pisa = landmark("Leaning Tower", 43.7230, 10.3966)
    result = optimize_full_route([AIX, GENOA, ROME, colosseum, pisa])

    combined = get_all_combined_waypoints(result.state)
    assert combined == result.waypoints
    assert len(combined) == 5


def test_combined_keeps_destination_last_city():
    vatican = landmark("Vatican", 41.9029, 12.4534)
    state = RouteState(base_cities=[AIX, GENOA, ROME], landmarks=[vatican])
    cities_only = [w for w in get_all_combined_waypoints(state) if not w.is_landmark]
    assert cities_only == [AIX, GENOA, ROME]


def test_combined_without_cities_is_landmark_history():
    marks = [landmark("X", 0, 1), landmark("Y", 0, 2)]
    assert get_all_combined_waypoints(RouteState(landmarks=marks)) == marks


def test_combined_drops_stored_landmark_with_bad_coordinates():
    bad = Waypoint(id="bad", name="Bad", kind=WaypointKind.landmark, coordinates=Coordinates(math.nan, 0))
    state = RouteState(base_cities=[AIX, ROME], landmarks=[bad, FLORENCE_LM])
    assert names(get_all_combined_waypoints(state)) == ["Aix-en-Provence", "Florence (lm)", "Rome"]


def test_extract_returns_copy_of_base():
    state = RouteState(base_cities=[AIX, GENOA], landmarks=[FLORENCE_LM])
    base = extract_waypoints(state)
    assert base == [AIX, GENOA]
    base.append(ROME)
    assert state.base_cities == [AIX, GENOA]


def test_summary_rounds_to_display_step(monkeypatch):
    monkeypatch.setattr(config, "ROUTE_DISPLAY_ROUND_KM", 10.0)
    route = [city("A", 0, 0), landmark("M", 0, 0.5), city("B", 0, 1)]
    summary = summarize_route(route)
    assert summary.total_km == pytest.approx(111.19, abs=0.01)
    assert summary.display_km == 110.0
    assert (summary.city_count, summary.landmark_count) == (2, 1)


def test_summary_of_empty_route():
    summary = summarize_route([])
    assert summary.total_km == 0.0
    assert summary.to_dict()["city_count"] == 0
