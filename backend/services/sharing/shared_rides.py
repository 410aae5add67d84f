"""
Shared ride admission and fare splitting.

A shared ride starts with its requester as the only passenger. Each join
takes one seat and prices the newcomer at ``base_fare / seats_taken``.
Fares already stored for earlier passengers are left as they were.
"""

import logging
from decimal import Decimal
from typing import List, Optional

from django.conf import settings

from common.utils import calculate_distance, has_coordinates, parse_coordinate, round_half_up
from rides.models import Ride, RidePassenger
from services.exceptions import (
    CapacityError,
    ForbiddenError,
    InvalidStateError,
    NotFoundError,
    PreconditionFailedError,
)
from services.gateway import JOINABLE_RIDE_STATUSES, RideGateway
from services.ride_management import RideResult

logger = logging.getLogger(__name__)


def join_shared_ride(
    gateway: RideGateway,
    customer,
    ride_id: int,
    pickup_latitude,
    pickup_longitude,
    pickup_address: str = "",
    dropoff_latitude=None,
    dropoff_longitude=None,
    dropoff_address: str = "",
) -> RideResult:
    """
    Take a seat in a shared ride.

    Returns:
        RideResult with the updated ride and the new RidePassenger

    Raises:
        NotFoundError: Ride does not exist or is not shared
        CapacityError: All seats are taken
        InvalidStateError: Ride is no longer pending or accepted
        PreconditionFailedError: Customer already rides in it
    """
    with gateway.atomic():
        ride = gateway.get_ride_by_id(ride_id, for_update=True)
        if ride is None or not ride.is_shared:
            raise NotFoundError("Shared ride not found")

        if ride.current_passengers >= ride.max_passengers:
            raise CapacityError()

        if ride.status not in JOINABLE_RIDE_STATUSES:
            raise InvalidStateError("Ride is not available for joining")

        if ride.customer_id == customer.id or gateway.has_joined_ride(ride.id, customer.id):
            raise PreconditionFailedError("You are already a passenger on this ride")

        new_passenger_count = ride.current_passengers + 1
        fare_share = round_half_up(Decimal(ride.base_fare) / new_passenger_count)

        ride = gateway.increment_ride_passengers(ride.id)

        has_dropoff = has_coordinates(dropoff_latitude, dropoff_longitude)
        passenger = gateway.add_ride_passenger(
            ride=ride,
            customer=customer,
            pickup_latitude=str(pickup_latitude),
            pickup_longitude=str(pickup_longitude),
            pickup_address=pickup_address or None,
            dropoff_latitude=str(dropoff_latitude) if has_dropoff else None,
            dropoff_longitude=str(dropoff_longitude) if has_dropoff else None,
            dropoff_address=dropoff_address or None,
            fare_share=fare_share,
        )
        # Reload so the passenger list includes the new seat
        ride = gateway.get_ride_by_id(ride.id)

    logger.info(
        "Customer %s joined shared ride %s (%d/%d seats, share=%s)",
        customer.id, ride.id, ride.current_passengers, ride.max_passengers, fare_share
    )

    return RideResult(
        success=True,
        ride=ride,
        passenger=passenger,
        message="Joined shared ride",
        extra={"fare_share": fare_share},
    )


def get_available_shared_rides(
    gateway: RideGateway,
    pickup_latitude,
    pickup_longitude,
    order_by_proximity: Optional[bool] = None,
) -> List[Ride]:
    """
    Shared rides that still take passengers.

    Rides are not filtered by distance. With ``order_by_proximity`` (the
    ``SHARED_RIDES_ORDER_BY_PROXIMITY`` setting by default) they are sorted
    by how far their pickup is from the given point.
    """
    rides = gateway.get_available_shared_rides(pickup_latitude, pickup_longitude)

    if order_by_proximity is None:
        order_by_proximity = settings.SHARED_RIDES_ORDER_BY_PROXIMITY
    if not order_by_proximity:
        return rides

    origin_lat = float(pickup_latitude)
    origin_lon = float(pickup_longitude)

    def pickup_distance(ride):
        lat = parse_coordinate(ride.pickup_latitude)
        lon = parse_coordinate(ride.pickup_longitude)
        if lat is None or lon is None:
            return float("inf")
        return calculate_distance(origin_lat, origin_lon, lat, lon)

    return sorted(rides, key=pickup_distance)


def get_shared_ride_passengers(gateway: RideGateway, customer, ride_id: int) -> List[RidePassenger]:
    """
    Passengers who joined a ride, in join order.

    Visible to the requester and to anyone riding along.

    Raises:
        NotFoundError: Ride does not exist
        ForbiddenError: Customer is neither the requester nor a passenger
    """
    ride = gateway.get_ride_by_id(ride_id)
    if ride is None:
        raise NotFoundError("Ride not found")

    passengers = gateway.get_ride_passengers(ride.id)
    if ride.customer_id != customer.id and all(p.customer_id != customer.id for p in passengers):
        raise ForbiddenError("You are not riding in this ride")
    return passengers
