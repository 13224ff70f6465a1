"""Tests for the main.py command-line entry point."""

import json

from main import main


def _write(path, records):
    path.write_text(json.dumps(records), encoding="utf-8")
    return str(path)


def _wp(name, lat, lng, kind="city"):
    return {"name": name, "kind": kind, "coordinates": {"lat": lat, "lng": lng}}


def test_cli_prints_merged_route_as_json(tmp_path, capsys):
    cities = _write(tmp_path / "cities.json", [_wp("A", 0, 0), _wp("B", 0, 10), _wp("C", 0, 20)])
    marks = _write(tmp_path / "landmarks.json", {"waypoints": [_wp("M", 0, 5, "landmark")]})

    assert main([cities, "--landmarks", marks, "--json"]) == 0
    out = json.loads(capsys.readouterr().out)
    assert [w["name"] for w in out] == ["A", "M", "B", "C"]


def test_cli_strict_failure_exit_code(tmp_path, capsys):
    path = _write(tmp_path / "route.json", [
        _wp("A", 0, 0), _wp("B", 0, 10), _wp("Bad", 0, 999, "landmark"),
    ])
    assert main([path, "--strict"]) == 2
    assert "ERROR_INVALID_WAYPOINT" in capsys.readouterr().err


def test_cli_agent_text(tmp_path, capsys):
    reply = tmp_path / "reply.txt"
    reply.write_text(
        'Route:\n```json\n{"waypoints": ['
        '{"name": "Aix", "coordinates": [5.4474, 43.5297]},'
        '{"name": "Genoa", "coordinates": [8.9463, 44.4056]},'
        '{"name": "Rome", "coordinates": [12.4964, 41.9028]}]}\n```',
        encoding="utf-8",
    )
    assert main([str(reply), "--agent-text"]) == 0
    out = capsys.readouterr().out
    assert "Genoa" in out and "3 cities, 0 landmarks" in out


def test_cli_without_input(capsys):
    assert main([]) == 1


def test_cli_replay_of_unknown_session(capsys):
    assert main(["--replay", "no-such-session"]) == 1
    assert "not found" in capsys.readouterr().err


def test_cli_malformed_json(tmp_path, capsys):
    path = tmp_path / "broken.json"
    path.write_text("[{not json", encoding="utf-8")
    assert main([str(path)]) == 2
    assert "malformed JSON" in capsys.readouterr().err
