"""modules/planning — landmark insertion into a fixed city route."""

from modules.planning.insertion import find_optimal_position, insertion_cost_km
from modules.planning.route_assembler import (
    OptimizationResult,
    RouteAssembler,
    RouteTooLargeError,
    add_landmark,
    optimize_full_route,
    partition_waypoints,
    remove_landmark,
    with_base_cities,
)
from modules.planning.combined_view import (
    RouteSummary,
    extract_waypoints,
    get_all_combined_waypoints,
    summarize_route,
)

__all__ = [
    "find_optimal_position",
    "insertion_cost_km",
    "OptimizationResult",
    "RouteAssembler",
    "RouteTooLargeError",
    "add_landmark",
    "optimize_full_route",
    "partition_waypoints",
    "remove_landmark",
    "with_base_cities",
    "RouteSummary",
    "extract_waypoints",
    "get_all_combined_waypoints",
    "summarize_route",
]
