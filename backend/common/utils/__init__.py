"""Common utility functions."""

from .geo import (
    calculate_distance,
    calculate_fare,
    has_coordinates,
    parse_coordinate,
    round_half_up,
)

__all__ = [
    "calculate_distance",
    "calculate_fare",
    "has_coordinates",
    "parse_coordinate",
    "round_half_up",
]
