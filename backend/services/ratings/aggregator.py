"""Rating insertion and driver average aggregation."""

import logging
from decimal import Decimal
from typing import Optional

from common.utils import round_half_up
from rides.models import Rating, RideStatus
from services.exceptions import (
    DriverNotFoundError,
    ForbiddenError,
    InvalidStateError,
    PreconditionFailedError,
    RideNotFoundError,
)
from services.gateway import RideGateway

logger = logging.getLogger(__name__)

MIN_SCORE = 1
MAX_SCORE = 5


def recompute_driver_rating(gateway: RideGateway, driver_id: int) -> Optional[int]:
    """
    Fold all stored ratings for a driver into their rounded average.

    Returns the new rating, or None when the driver has no ratings yet (the
    stored value is then left untouched).
    """
    total, count = gateway.get_driver_rating_totals(driver_id)
    if not count:
        return None

    average = round_half_up(Decimal(total) / Decimal(count))
    gateway.set_driver_rating(driver_id, average)
    return average


def rate_driver(
    gateway: RideGateway,
    customer,
    ride_id: int,
    score: int,
    comment: Optional[str] = None,
) -> Rating:
    """
    Rate the driver of a completed ride.

    Raises:
        PreconditionFailedError: Score outside 1..5 or ride already rated
        RideNotFoundError: Ride does not exist
        ForbiddenError: Ride belongs to another customer
        InvalidStateError: Ride not completed or has no driver
    """
    if isinstance(score, bool) or not isinstance(score, int) or not MIN_SCORE <= score <= MAX_SCORE:
        raise PreconditionFailedError(f"Rating must be an integer between {MIN_SCORE} and {MAX_SCORE}")

    with gateway.atomic():
        ride = gateway.get_ride_by_id(ride_id)
        if ride is None:
            raise RideNotFoundError()
        if ride.customer_id != customer.id:
            raise ForbiddenError("You can only rate your own rides")
        if ride.status != RideStatus.COMPLETED or ride.driver_id is None:
            raise InvalidStateError("Only completed rides can be rated")

        # Lock the driver so concurrent ratings fold into the average in turn
        driver = gateway.get_driver(ride.driver_id, for_update=True)
        if driver is None:
            raise DriverNotFoundError()

        if gateway.ride_has_rating(ride.id):
            raise PreconditionFailedError("This ride has already been rated")

        rating = gateway.create_rating(
            ride=ride,
            driver=driver,
            customer=customer,
            rating=score,
            comment=comment or None,
        )
        average = recompute_driver_rating(gateway, driver.id)

    logger.info("Driver %s rated %s for ride %s (average now %s)", driver.id, score, ride.id, average)

    return rating
