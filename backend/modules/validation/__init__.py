"""
modules/validation package — data quality guards before any distance computation.
"""
from modules.validation.ingestion_validator import (
    InvalidWaypointError,
    ValidationResult,
    validate_coordinates,
    validate_waypoint,
    validate_waypoint_coordinates,
    require_valid,
    filter_valid,
)

__all__ = [
    "InvalidWaypointError",
    "ValidationResult",
    "validate_coordinates",
    "validate_waypoint",
    "validate_waypoint_coordinates",
    "require_valid",
    "filter_valid",
]
