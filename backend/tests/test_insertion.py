"""Unit tests for modules.planning.insertion."""

import math
import random

import pytest

from schemas.route import Coordinates, Waypoint
from modules.planning.insertion import find_optimal_position, insertion_cost_km
from modules.tool_usage.distance_tool import DistanceTool, haversine_km
from modules.validation import InvalidWaypointError
from helpers import AIX, FLORENCE, GENOA, ROME, city, landmark


def test_empty_route_returns_zero():
    assert find_optimal_position([], landmark("M", 0, 5)) == 0


def test_midpoint_goes_between_endpoints():
    a, b = city("A", 0, 0), city("B", 0, 10)
    assert find_optimal_position([a, b], landmark("M", 0, 5)) == 1


def test_point_beyond_the_end_is_appended():
    route = [city("A", 0, 0), city("B", 0, 10)]
    assert find_optimal_position(route, landmark("Z", 0, 15)) == 2


def test_point_before_the_start_is_prepended():
    route = [city("A", 0, 0), city("B", 0, 10)]
    assert find_optimal_position(route, landmark("Z", 0, -5)) == 0


def test_florence_between_genoa_and_rome():
    assert find_optimal_position([AIX, GENOA, ROME], FLORENCE) == 2


def test_tie_keeps_earliest_index():
    # Candidate on top of A: splicing before or after A costs the same.
    route = [city("A", 0, 0), city("B", 0, 10)]
    assert find_optimal_position(route, landmark("A2", 0, 0)) == 0


def test_index_always_in_bounds():
    rng = random.Random(7)
    for n in range(0, 12):
        route = [city(f"C{i}", rng.uniform(-60, 60), rng.uniform(-170, 170)) for i in range(n)]
        candidate = landmark("X", rng.uniform(-60, 60), rng.uniform(-170, 170))
        assert 0 <= find_optimal_position(route, candidate) <= n


def test_same_inputs_same_answer():
    rng = random.Random(11)
    route = [city(f"C{i}", rng.uniform(40, 50), rng.uniform(0, 15)) for i in range(8)]
    candidate = landmark("X", 45.0, 7.5)
    results = {find_optimal_position(route, candidate) for _ in range(5)}
    assert len(results) == 1


def test_uses_injected_metric():
    # A latitude-only metric sees every splice of an equatorial route as free,
    # so the tie rule picks index 0 where haversine would pick 1.
    tool = DistanceTool(metric=lambda a, b: abs(a.lat - b.lat))
    route = [city("A", 0, 0), city("B", 0, 10)]
    assert find_optimal_position(route, landmark("M", 0, 5), tool) == 0


@pytest.mark.parametrize("lat,lng", [(math.nan, 5.0), (5.0, math.nan), (91.0, 0.0), (0.0, 181.0)])
def test_malformed_candidate_is_rejected(lat, lng):
    route = [city("A", 0, 0), city("B", 0, 10)]
    bad = Waypoint(id="bad", name="Bad", coordinates=Coordinates(lat, lng))
    with pytest.raises(InvalidWaypointError, match="ERROR_INVALID_WAYPOINT"):
        find_optimal_position(route, bad)


def test_malformed_route_waypoint_is_rejected():
    route = [city("A", 0, 0), Waypoint(id="b", name="B", coordinates=Coordinates(math.nan, 10))]
    with pytest.raises(InvalidWaypointError):
        find_optimal_position(route, landmark("M", 0, 5))


def test_insertion_cost_of_midpoint_is_zero_on_a_line():
    route = [city("A", 0, 0), city("B", 0, 10)]
    assert insertion_cost_km(route, landmark("M", 0, 5), 1) == pytest.approx(0.0, abs=1e-6)


def test_insertion_cost_at_end_is_last_leg():
    route = [city("A", 0, 0), city("B", 0, 10)]
    cost = insertion_cost_km(route, landmark("Z", 0, 12), 2)
    assert cost == pytest.approx(haversine_km(0, 10, 0, 12), rel=1e-9)


def test_nameless_candidate_is_still_placed():
    route = [city("A", 0, 0), city("B", 0, 10)]
    nameless = Waypoint(id="m", name="", coordinates=Coordinates(0, 5))
    assert find_optimal_position(route, nameless) == 1
