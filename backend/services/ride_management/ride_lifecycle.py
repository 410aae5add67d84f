"""
Core ride lifecycle operations.

This module contains the business logic for moving rides through
pending -> accepted -> in_progress -> completed (or cancelled). Every
transition runs inside a gateway transaction: the ride row is read with a
row lock, guards are checked, and the new status is written with a
compare-and-set so concurrent commands on the same ride cannot both win.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from django.conf import settings

from common.utils import (
    calculate_distance,
    calculate_fare,
    has_coordinates,
    parse_coordinate,
    round_half_up,
)
from drivers.models import Driver
from rides.models import Ride, RidePassenger, RideStatus
from services.exceptions import (
    DriverBusyError,
    ForbiddenError,
    InvalidStateError,
    PreconditionFailedError,
    RideNotAvailableError,
    RideNotFoundError,
)
from services.gateway import RideGateway

logger = logging.getLogger(__name__)

TERMINAL_STATUSES = frozenset({RideStatus.COMPLETED, RideStatus.CANCELLED})

ALLOWED_TRANSITIONS = {
    RideStatus.PENDING: frozenset({RideStatus.ACCEPTED, RideStatus.CANCELLED}),
    RideStatus.ACCEPTED: frozenset({RideStatus.IN_PROGRESS, RideStatus.CANCELLED}),
    RideStatus.IN_PROGRESS: frozenset({RideStatus.COMPLETED, RideStatus.CANCELLED}),
    RideStatus.COMPLETED: frozenset(),
    RideStatus.CANCELLED: frozenset(),
}


@dataclass
class RideResult:
    """Result object for ride operations."""
    success: bool
    ride: Optional[Ride] = None
    message: str = ""
    passenger: Optional[RidePassenger] = None
    extra: Optional[Dict[str, Any]] = None


def can_transition(current: str, target: str) -> bool:
    """Return True if a ride in ``current`` may move to ``target``."""
    return target in ALLOWED_TRANSITIONS.get(current, frozenset())


def _statuses_leading_to(target: str):
    return tuple(
        status for status, targets in ALLOWED_TRANSITIONS.items() if target in targets
    )


# ===================== Customer Operations =====================

def request_ride(
    gateway: RideGateway,
    customer,
    pickup_latitude,
    pickup_longitude,
    pickup_address: str = "",
    dropoff_latitude=None,
    dropoff_longitude=None,
    dropoff_address: str = "",
    is_shared: bool = False,
    max_passengers: int = 1,
) -> RideResult:
    """
    Create a new ride request in ``pending``.

    When both dropoff coordinates are given the trip distance is estimated
    and priced; shared rides are priced per seat (``max_passengers``).
    Otherwise the flat base fare applies.

    Raises:
        PreconditionFailedError: If max_passengers is out of range
    """
    max_allowed = settings.RIDE_MAX_SHARED_PASSENGERS
    if not 1 <= int(max_passengers) <= max_allowed:
        raise PreconditionFailedError(f"max_passengers must be between 1 and {max_allowed}")

    base_fare = settings.RIDE_BASE_FARE_CENTS
    estimated_distance = 0

    has_dropoff = has_coordinates(dropoff_latitude, dropoff_longitude)
    if has_dropoff:
        estimated_distance = round_half_up(calculate_distance(
            pickup_latitude, pickup_longitude, dropoff_latitude, dropoff_longitude
        ))
        base_fare = calculate_fare(
            estimated_distance,
            max_passengers if is_shared else 1,
            base_fare=settings.RIDE_BASE_FARE_CENTS,
            per_km_rate=settings.RIDE_PER_KM_RATE_CENTS,
        )

    ride = gateway.create_ride(
        customer=customer,
        pickup_latitude=str(pickup_latitude),
        pickup_longitude=str(pickup_longitude),
        pickup_address=pickup_address or None,
        dropoff_latitude=str(dropoff_latitude) if has_dropoff else None,
        dropoff_longitude=str(dropoff_longitude) if has_dropoff else None,
        dropoff_address=dropoff_address or None,
        status=RideStatus.PENDING,
        is_shared=bool(is_shared),
        max_passengers=int(max_passengers),
        current_passengers=1,
        base_fare=base_fare,
        total_fare=base_fare,
        fare_per_passenger=base_fare,
        estimated_distance=estimated_distance,
    )

    logger.info(
        "Ride %s requested by customer %s (shared=%s, distance=%sm, fare=%s)",
        ride.id, customer.id, ride.is_shared, estimated_distance, base_fare
    )

    return RideResult(success=True, ride=ride, message="Ride requested. Looking for a driver.")


def cancel_ride(gateway: RideGateway, customer, ride_id: int) -> RideResult:
    """
    Cancel a ride by its customer.

    Any bound driver is made available again.

    Raises:
        RideNotFoundError: Ride does not exist
        ForbiddenError: Ride belongs to another customer
        InvalidStateError: Ride is already completed or cancelled
    """
    with gateway.atomic():
        ride = gateway.get_ride_by_id(ride_id, for_update=True)
        if ride is None:
            raise RideNotFoundError()
        if ride.customer_id != customer.id:
            raise ForbiddenError("You can only cancel your own rides")
        if ride.status in TERMINAL_STATUSES:
            raise InvalidStateError(f"Cannot cancel - ride is already {ride.status}")

        had_driver = ride.driver_id is not None
        ride = gateway.update_ride_status(
            ride.id,
            RideStatus.CANCELLED,
            expected_statuses=_statuses_leading_to(RideStatus.CANCELLED),
        )

        if had_driver:
            gateway.update_driver_availability(ride.driver_id, True)

    logger.info("Ride %s cancelled by customer %s (had_driver=%s)", ride.id, customer.id, had_driver)

    return RideResult(
        success=True,
        ride=ride,
        message="Ride cancelled successfully",
        extra={"was_assigned": had_driver},
    )


def get_customer_ride_history(gateway: RideGateway, customer) -> List[Ride]:
    """Rides requested by the customer, newest first."""
    return gateway.get_customer_rides(customer.id)


# ===================== Driver Operations =====================

def accept_ride(gateway: RideGateway, driver: Driver, ride_id: int) -> RideResult:
    """
    Accept a pending ride.

    Raises:
        RideNotAvailableError: Ride is missing or no longer pending
        DriverBusyError: Driver is already bound to an active ride
    """
    with gateway.atomic():
        ride = gateway.get_ride_by_id(ride_id, for_update=True)
        if ride is None or ride.status != RideStatus.PENDING:
            logger.warning("Driver %s tried to accept unavailable ride %s", driver.id, ride_id)
            raise RideNotAvailableError("This ride was already handled or cancelled")

        # Serialize concurrent accepts by the same driver on different rides
        gateway.get_driver(driver.id, for_update=True)
        if gateway.driver_has_active_ride(driver.id):
            raise DriverBusyError()

        ride = gateway.update_ride_status(
            ride.id,
            RideStatus.ACCEPTED,
            driver_id=driver.id,
            expected_statuses=(RideStatus.PENDING,),
        )
        gateway.update_driver_availability(driver.id, False)

    logger.info("Ride %s accepted by driver %s", ride.id, driver.id)

    return RideResult(
        success=True,
        ride=ride,
        message="Ride Accepted Successfully! Navigate to pickup location."
    )


def _load_driver_ride(gateway: RideGateway, driver: Driver, ride_id: int, required_status: str) -> Ride:
    ride = gateway.get_ride_by_id(ride_id, for_update=True)
    if ride is None:
        raise RideNotFoundError()
    if ride.driver_id != driver.id:
        raise ForbiddenError("This ride is not assigned to you")
    if ride.status != required_status:
        raise InvalidStateError(f"Ride is {ride.status}, expected {required_status}")
    return ride


def start_ride(gateway: RideGateway, driver: Driver, ride_id: int) -> RideResult:
    """
    Start an accepted ride (passenger picked up).

    Raises:
        RideNotFoundError: Ride does not exist
        ForbiddenError: Ride is assigned to another driver
        InvalidStateError: Ride is not accepted
    """
    with gateway.atomic():
        ride = _load_driver_ride(gateway, driver, ride_id, RideStatus.ACCEPTED)
        ride = gateway.update_ride_status(
            ride.id,
            RideStatus.IN_PROGRESS,
            expected_statuses=(RideStatus.ACCEPTED,),
            expected_driver_id=driver.id,
        )

    logger.info("Ride %s started by driver %s", ride.id, driver.id)

    return RideResult(success=True, ride=ride, message="Ride started")


def complete_ride(gateway: RideGateway, driver: Driver, ride_id: int) -> RideResult:
    """
    Complete an in-progress ride; the driver becomes available again.

    Raises:
        RideNotFoundError: Ride does not exist
        ForbiddenError: Ride is assigned to another driver
        InvalidStateError: Ride is not in progress
    """
    with gateway.atomic():
        ride = _load_driver_ride(gateway, driver, ride_id, RideStatus.IN_PROGRESS)
        ride = gateway.update_ride_status(
            ride.id,
            RideStatus.COMPLETED,
            expected_statuses=(RideStatus.IN_PROGRESS,),
            expected_driver_id=driver.id,
        )
        gateway.update_driver_availability(driver.id, True)
        gateway.increment_driver_total_rides(driver.id)

    logger.info("Ride %s completed by driver %s", ride.id, driver.id)

    return RideResult(success=True, ride=ride, message="Ride completed successfully")


def get_pending_rides(gateway: RideGateway, driver: Driver) -> List[Ride]:
    """
    Pending rides for a driver to pick from.

    Closest pickups come first when the driver has a known location,
    otherwise the oldest requests do.
    """
    rides = gateway.get_pending_rides()

    if not driver.has_location:
        return rides
    driver_lat, driver_lon = driver.location

    rides_with_distance = []
    for ride in rides:
        ride_lat = parse_coordinate(ride.pickup_latitude)
        ride_lon = parse_coordinate(ride.pickup_longitude)
        if ride_lat is None or ride_lon is None:
            dist = float("inf")
        else:
            dist = calculate_distance(driver_lat, driver_lon, ride_lat, ride_lon)
        rides_with_distance.append((dist, ride))

    rides_with_distance.sort(key=lambda x: x[0])
    return [r for (_, r) in rides_with_distance]


def get_driver_ride_history(gateway: RideGateway, driver: Driver) -> List[Ride]:
    """Rides the driver has been assigned, newest first."""
    return gateway.get_driver_rides(driver.id)
