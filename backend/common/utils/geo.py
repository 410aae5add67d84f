"""
Geographic and fare utility functions.

This module provides the pure distance and pricing calculations used by the
matching, lifecycle and shared-ride services.
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from math import radians, cos, sin, atan2, sqrt, isfinite
from typing import Optional

EARTH_RADIUS_METERS = 6371000

# Fares are integer minor-currency units (cents)
BASE_FARE = 500
PER_KM_RATE = 150


def calculate_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Calculate distance between two points in meters using Haversine formula.
    
    Args:
        lat1: Latitude of first point
        lon1: Longitude of first point
        lat2: Latitude of second point
        lon2: Longitude of second point
    
    Returns:
        Distance in meters
    """
    lat1, lon1, lat2, lon2 = map(radians, [float(lat1), float(lon1), float(lat2), float(lon2)])
    dlat = lat2 - lat1
    dlon = lon2 - lon1
    a = sin(dlat / 2) ** 2 + cos(lat1) * cos(lat2) * sin(dlon / 2) ** 2
    c = 2 * atan2(sqrt(a), sqrt(1 - a))
    return EARTH_RADIUS_METERS * c


def round_half_up(value) -> int:
    """Round to the nearest integer, halves going up (2.5 -> 3)."""
    return int(Decimal(value).quantize(Decimal(1), rounding=ROUND_HALF_UP))


def calculate_fare(
    distance_meters: float,
    passenger_count: int = 1,
    base_fare: int = BASE_FARE,
    per_km_rate: int = PER_KM_RATE,
) -> int:
    """
    Calculate the per-passenger fare for a trip.

    The trip price is ``base_fare + round(km * per_km_rate)`` and is split
    evenly across ``passenger_count``, rounded half-up.

    Raises:
        ValueError: If passenger_count is less than 1
    """
    if passenger_count < 1:
        raise ValueError("passenger_count must be at least 1")

    distance_km = float(distance_meters) / 1000
    total = base_fare + round_half_up(distance_km * per_km_rate)
    return round_half_up(Decimal(total) / Decimal(passenger_count))


def parse_coordinate(value) -> Optional[float]:
    """Parse a stored coordinate (decimal string) into a float, or None."""
    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None
    try:
        parsed = float(Decimal(text))
    except (InvalidOperation, ValueError):
        return None
    return parsed if isfinite(parsed) else None


def has_coordinates(latitude, longitude) -> bool:
    """True when both values of an optional coordinate pair are present."""
    return latitude not in (None, "") and longitude not in (None, "")
