"""
main.py
--------
Command-line entry point for the route optimizer.

Run:
  python main.py route.json                       # cities + landmarks in one file
  python main.py cities.json --landmarks lm.json  # landmarks kept separately
  python main.py agent_reply.txt --agent-text     # waypoints from agent output
  python main.py --replay <session_id>            # rebuild a logged API session

Input JSON is a list of waypoint records (or {"waypoints": [...]}):
  {"id": "rome", "name": "Rome", "kind": "city",
   "coordinates": {"lat": 41.9028, "lng": 12.4964}}
"""

from __future__ import annotations
import argparse
import json
import logging
import sys
from pathlib import Path

import config
from schemas.route import Waypoint
from modules.input.agent_waypoints import parse_agent_waypoints
from modules.observability.replay import replay_session
from modules.planning.combined_view import get_all_combined_waypoints, summarize_route
from modules.planning.route_assembler import RouteTooLargeError, optimize_full_route
from modules.validation.ingestion_validator import InvalidWaypointError


def _load_waypoints(path: str) -> list[Waypoint]:
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    if isinstance(data, dict):
        data = data.get("waypoints", [])
    return [Waypoint.from_dict(rec) for rec in data]


def _print_route(waypoints: list[Waypoint]) -> None:
    for i, wp in enumerate(waypoints, 1):
        marker = "★" if wp.is_landmark else "●"
        print(f"  {i:>3}. {marker} {wp.name:<30} ({wp.lat:.4f}, {wp.lng:.4f})")
    summary = summarize_route(waypoints)
    print(
        f"\n  {summary.city_count} cities, {summary.landmark_count} landmarks, "
        f"~{summary.display_km:.0f} km"
    )


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        description="Insert landmarks into a fixed city route (greedy cheapest insertion)",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    p.add_argument("input", nargs="?", help="Waypoints JSON file (or agent text with --agent-text)")
    p.add_argument("--landmarks", default=None, help="Extra landmarks JSON file")
    p.add_argument("--agent-text", action="store_true", help="Treat input as agent recommendation text")
    p.add_argument("--strict", action="store_true", help="Fail on malformed landmarks instead of skipping")
    p.add_argument("--replay", metavar="SESSION_ID", default=None, help="Rebuild a logged session")
    p.add_argument("--json", action="store_true", help="Print the merged route as JSON")
    return p.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, config.LOG_LEVEL.upper(), logging.INFO),
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.replay:
        try:
            state = replay_session(args.replay)
        except FileNotFoundError as exc:
            print(f"  ✗  {exc}", file=sys.stderr)
            return 1
        except RuntimeError as exc:
            print(f"  ✗  {exc}", file=sys.stderr)
            return 2
        merged = get_all_combined_waypoints(state)
    elif args.input:
        try:
            if args.agent_text:
                waypoints = parse_agent_waypoints(Path(args.input).read_text(encoding="utf-8"))
            else:
                waypoints = _load_waypoints(args.input)
            if args.landmarks:
                waypoints += _load_waypoints(args.landmarks)
        except OSError as exc:
            print(f"  ✗  cannot read input: {exc}", file=sys.stderr)
            return 1
        except json.JSONDecodeError as exc:
            print(f"  ✗  malformed JSON: {exc}", file=sys.stderr)
            return 2
        try:
            result = optimize_full_route(waypoints, strict=args.strict or None)
        except (InvalidWaypointError, RouteTooLargeError) as exc:
            print(f"  ✗  {exc}", file=sys.stderr)
            return 2
        merged = result.waypoints
        for rejected in result.rejected:
            print(
                f"  ⚠  skipped {rejected.record.get('name')!r}: {'; '.join(rejected.errors)}",
                file=sys.stderr,
            )
    else:
        print("  ✗  nothing to do: pass an input file or --replay", file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps([w.to_dict() for w in merged], indent=2, ensure_ascii=False))
    else:
        _print_route(merged)
    return 0


if __name__ == "__main__":
    sys.exit(main())
