"""
modules/validation/ingestion_validator.py
------------------------------------------
Data-quality guards applied to waypoints before they reach the distance
metric.  A NaN coordinate makes every haversine comparison false, so an
unchecked insertion search would silently settle on position 0; these
checks surface the bad record instead.

  Waypoint:
    ✓ Non-null coordinates
    ✓ Numeric and finite (no NaN / inf)
    ✓ Latitude in [-90, 90]
    ✓ Longitude in [-180, 180]
    ✓ Non-empty name (validate_waypoint only; the planner needs coordinates)

(0.0, 0.0) is accepted: unlike POI ingestion, route inputs are already
geocoded by the host and may legitimately sit on the equator/meridian.

Usage:
    from modules.validation import validate_waypoint, filter_valid

    result = validate_waypoint(waypoint)
    if not result.valid:
        print(result.errors)

    clean, rejected = filter_valid(waypoints, validate_waypoint)

    # planning paths: coordinates only
    require_valid(candidate)
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Callable, TypeVar

from schemas.route import Waypoint

logger = logging.getLogger(__name__)

T = TypeVar("T")


# ── Result dataclass ───────────────────────────────────────────────────────────

@dataclass
class ValidationResult:
    """
    Outcome of a single validation run.

    Attributes:
        valid:  True iff there are zero errors.
        errors: Human-readable list of failure reasons.
        record: The input record dict (for logging purposes).
    """
    valid: bool
    errors: list[str] = field(default_factory=list)
    record: dict = field(default_factory=dict, repr=False)

    def __bool__(self) -> bool:
        return self.valid


class InvalidWaypointError(ValueError):
    """Raised when a waypoint cannot take part in distance computations."""

    def __init__(self, result: ValidationResult) -> None:
        self.result = result
        name = result.record.get("name") or result.record.get("id") or "?"
        super().__init__(
            f"ERROR_INVALID_WAYPOINT: {name!r}: " + "; ".join(result.errors)
        )


# ── Coordinate validation ──────────────────────────────────────────────────────

def validate_coordinates(lat: Any, lng: Any) -> list[str]:
    """Return a list of coordinate errors (empty when the pair is usable)."""
    if lat is None or lng is None:
        return [f"lat/lng must not be NULL (got lat={lat!r}, lng={lng!r})"]
    try:
        lat = float(lat)
        lng = float(lng)
    except (TypeError, ValueError):
        return [f"lat/lng must be numeric (got lat={lat!r}, lng={lng!r})"]

    errors: list[str] = []
    if not (math.isfinite(lat) and math.isfinite(lng)):
        errors.append(f"lat/lng must be finite (got lat={lat}, lng={lng})")
        return errors
    if not (-90.0 <= lat <= 90.0):
        errors.append(f"lat={lat} is outside valid range [-90, 90]")
    if not (-180.0 <= lng <= 180.0):
        errors.append(f"lng={lng} is outside valid range [-180, 180]")
    return errors


# ── Waypoint validation ────────────────────────────────────────────────────────

def validate_waypoint_coordinates(waypoint: Waypoint) -> ValidationResult:
    """Check only what the distance metric needs: usable coordinates."""
    errors = validate_coordinates(waypoint.coordinates.lat, waypoint.coordinates.lng)
    return ValidationResult(valid=not errors, errors=errors, record=waypoint.to_dict())


def validate_waypoint(waypoint: Waypoint) -> ValidationResult:
    """Ingestion check: coordinates plus a non-empty display name."""
    result = validate_waypoint_coordinates(waypoint)
    if not waypoint.name or not waypoint.name.strip():
        result.errors.append("name must not be empty or NULL")
        result.valid = False
    return result


def require_valid(
    waypoint: Waypoint,
    validator: Callable[[Waypoint], ValidationResult] = validate_waypoint_coordinates,
) -> Waypoint:
    """Return *waypoint* unchanged or raise InvalidWaypointError."""
    result = validator(waypoint)
    if not result.valid:
        raise InvalidWaypointError(result)
    return waypoint


# ── Batch helper ───────────────────────────────────────────────────────────────

def filter_valid(
    records: list[T],
    validator: Callable[[T], ValidationResult],
    log: bool = True,
) -> tuple[list[T], list[ValidationResult]]:
    """
    Split *records* into (valid_records, failed_results), preserving order.

    Args:
        records:   Items to check (usually Waypoints).
        validator: e.g. validate_waypoint.
        log:       If True, emit a warning for every rejected record.
    """
    valid: list[T] = []
    failed: list[ValidationResult] = []
    for rec in records:
        result = validator(rec)
        if result.valid:
            valid.append(rec)
            continue
        failed.append(result)
        if log:
            logger.warning(
                "[Validator] REJECTED %r: %s",
                result.record.get("name", "?"), "; ".join(result.errors),
            )

    if log and failed:
        logger.warning(
            "[Validator] %d/%d records rejected; %d passed.",
            len(failed), len(records), len(valid),
        )
    return valid, failed
