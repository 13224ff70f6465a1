"""Unit tests for modules.validation and schemas.route parsing."""

import math

import pytest

from schemas.route import Coordinates, RouteState, Waypoint, WaypointKind, parse_kind
from modules.validation import (
    InvalidWaypointError,
    filter_valid,
    require_valid,
    validate_coordinates,
    validate_waypoint,
    validate_waypoint_coordinates,
)
from helpers import city, landmark


@pytest.mark.parametrize(
    "lat,lng,ok",
    [
        (45.5, 10.5, True),
        (0.0, 0.0, True),
        (-90.0, 180.0, True),
        (math.nan, 10.5, False),
        (45.5, math.nan, False),
        (95, 10.5, False),
        (45.5, 185, False),
        (None, 10.5, False),
        (45.5, None, False),
        ("north", 10.5, False),
        (math.inf, 0, False),
    ],
)
def test_validate_coordinates(lat, lng, ok):
    assert (validate_coordinates(lat, lng) == []) is ok


def test_blank_name_is_invalid():
    result = validate_waypoint(city("  ", 1, 1))
    assert not result
    assert "name" in result.errors[0]


def test_require_valid_raises_with_result():
    bad = Waypoint(id="b", name="B", coordinates=Coordinates(math.nan, 1))
    with pytest.raises(InvalidWaypointError) as exc_info:
        require_valid(bad)
    assert exc_info.value.result.record["id"] == "b"
    assert require_valid(city("Ok", 1, 1)).name == "Ok"


def test_filter_valid_splits_in_order():
    good1, good2 = city("G1", 1, 1), city("G2", 2, 2)
    bad = landmark("Bad", 100, 0)
    valid, failed = filter_valid([good1, bad, good2], validate_waypoint, log=False)
    assert valid == [good1, good2]
    assert [r.record["name"] for r in failed] == ["Bad"]


def test_parse_kind_aliases_and_landmark_flag():
    assert parse_kind("city") is WaypointKind.city
    assert parse_kind("waypoint") is WaypointKind.city
    assert parse_kind(None) is WaypointKind.city
    assert parse_kind("Cultural") is WaypointKind.cultural
    assert parse_kind("monument") is WaypointKind.other
    assert parse_kind("city", is_landmark=True) is WaypointKind.landmark
    assert parse_kind("cultural", is_landmark=True) is WaypointKind.cultural


def test_from_dict_accepts_wire_record():
    wp = Waypoint.from_dict({
        "id": "rome", "name": "Rome", "kind": "city",
        "coordinates": {"lat": 41.9028, "lng": 12.4964},
    })
    assert (wp.id, wp.lat, wp.lng, wp.is_landmark) == ("rome", 41.9028, 12.4964, False)


def test_from_dict_accepts_flat_and_geojson_shapes():
    flat = Waypoint.from_dict({"name": "Colosseum", "lat": 41.89, "lng": 12.49, "isLandmark": True})
    assert flat.id == "colosseum"
    assert flat.kind is WaypointKind.landmark

    geo = Waypoint.from_dict({"name": "Genoa", "coordinates": [8.9463, 44.4056]})
    assert (geo.lat, geo.lng) == (44.4056, 8.9463)


def test_from_dict_missing_coordinates_become_nan():
    wp = Waypoint.from_dict({"name": "Nowhere", "kind": "landmark"})
    assert math.isnan(wp.lat) and math.isnan(wp.lng)
    assert not validate_waypoint(wp)


def test_route_state_round_trip_preserves_hash():
    state = RouteState(
        base_cities=[city("A", 1, 2), city("B", 3, 4)],
        landmarks=[landmark("M", 2, 3, kind=WaypointKind.cultural)],
    )
    restored = RouteState.from_dict(state.to_dict())
    assert restored == state
    assert restored.state_hash() == state.state_hash()


def test_coordinate_check_ignores_missing_name():
    nameless = Waypoint(id="n", name="", coordinates=Coordinates(10, 10))
    assert validate_waypoint_coordinates(nameless)
    assert not validate_waypoint(nameless)
    assert require_valid(nameless) is nameless
    with pytest.raises(InvalidWaypointError, match="name"):
        require_valid(nameless, validate_waypoint)


def test_integer_coordinates_hash_like_floats():
    ints = RouteState(base_cities=[city("A", 1, 2)])
    floats = RouteState(base_cities=[city("A", 1.0, 2.0)])
    assert ints.state_hash() == floats.state_hash()
    assert isinstance(ints.base_cities[0].lat, float)
