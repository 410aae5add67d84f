"""
Nearest available driver lookup.

Ranks available drivers with a stored live location by distance from a
pickup point (closest first).
"""

import logging
from typing import List, Optional, Tuple

from django.conf import settings

from drivers.models import Driver
from common.utils import calculate_distance
from services.gateway import RideGateway

logger = logging.getLogger(__name__)


def find_nearest_drivers(
    gateway: RideGateway,
    pickup_latitude,
    pickup_longitude,
    limit: Optional[int] = None,
) -> List[Tuple[Driver, float]]:
    """
    Return up to ``limit`` (driver, distance in meters) pairs, closest first.

    Drivers without a usable location are skipped. Ties keep the order the
    gateway returned the drivers in.
    """
    if limit is None:
        limit = settings.NEAREST_DRIVERS_DEFAULT_LIMIT
    if limit < 0:
        raise ValueError("limit must not be negative")

    pickup_lat = float(pickup_latitude)
    pickup_lon = float(pickup_longitude)

    candidates: List[Tuple[Driver, float]] = []
    for driver in gateway.get_available_drivers():
        location = driver.location
        if location is None:
            continue
        candidates.append((driver, calculate_distance(pickup_lat, pickup_lon, *location)))

    # list.sort is stable
    candidates.sort(key=lambda item: item[1])

    logger.debug(
        "Ranked %d available drivers around (%s, %s), returning %d",
        len(candidates), pickup_lat, pickup_lon, min(limit, len(candidates))
    )

    return candidates[:limit]
