"""
Persistence gateway for drivers, rides, ride passengers and ratings.

Services never touch the ORM directly; they receive a ``RideGateway``
instance and go through it. Every read returns concrete objects (lists, not
lazy querysets) so that storage outages surface inside the gateway, where
they are translated into ``ServiceUnavailableError`` instead of leaking as
driver-specific errors or degrading into empty results.
"""

import logging
from functools import wraps
from typing import List, Optional, Tuple

from django.db import (
    DEFAULT_DB_ALIAS,
    IntegrityError,
    InterfaceError,
    OperationalError,
    connections,
    transaction,
)
from django.db.models import Count, F, Q, Sum
from django.utils import timezone

from drivers.models import Driver
from rides.models import Rating, Ride, RidePassenger, RideStatus
from .exceptions import (
    CapacityError,
    PreconditionFailedError,
    RideNotAvailableError,
    ServiceUnavailableError,
)

logger = logging.getLogger(__name__)

ACTIVE_RIDE_STATUSES = (RideStatus.ACCEPTED, RideStatus.IN_PROGRESS)
JOINABLE_RIDE_STATUSES = (RideStatus.PENDING, RideStatus.ACCEPTED)

# Lifecycle timestamp written by each status transition
STATUS_TIMESTAMP_FIELDS = {
    RideStatus.ACCEPTED: "accepted_at",
    RideStatus.IN_PROGRESS: "started_at",
    RideStatus.COMPLETED: "completed_at",
    RideStatus.CANCELLED: "cancelled_at",
}


def _guarded(method):
    """Translate connectivity failures into ServiceUnavailableError."""
    @wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            return method(self, *args, **kwargs)
        except (OperationalError, InterfaceError) as exc:
            logger.exception("Persistence call %s failed", method.__name__)
            raise ServiceUnavailableError() from exc
    return wrapper


class RideGateway:
    """
    ORM-backed persistence gateway.

    Construct one per request (or per command run) and pass it to the
    service functions. ``open()`` verifies the database is reachable and
    ``close()`` releases the connection unless it is owned by an enclosing
    transaction. Also usable as a context manager.
    """

    def __init__(self, using: str = DEFAULT_DB_ALIAS):
        self.using = using

    # ---------------------- Lifecycle ----------------------

    def open(self) -> "RideGateway":
        try:
            connections[self.using].ensure_connection()
        except (OperationalError, InterfaceError) as exc:
            logger.exception("Could not open database connection %r", self.using)
            raise ServiceUnavailableError() from exc
        return self

    def close(self) -> None:
        connection = connections[self.using]
        if connection.in_atomic_block:
            return
        connection.close()

    def __enter__(self) -> "RideGateway":
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def atomic(self):
        """Transaction block for multi-entity commands."""
        return transaction.atomic(using=self.using)

    def _drivers(self):
        return Driver.objects.using(self.using).select_related("user")

    def _rides(self):
        return (
            Ride.objects.using(self.using)
            .select_related("customer", "driver__user")
            .prefetch_related("passengers__customer")
        )

    # ---------------------- Drivers ----------------------

    @_guarded
    def get_driver_by_user_id(self, user_id: int) -> Optional[Driver]:
        return self._drivers().filter(user_id=user_id).first()

    @_guarded
    def get_driver(self, driver_id: int, for_update: bool = False) -> Optional[Driver]:
        qs = self._drivers()
        if for_update:
            qs = qs.select_for_update(of=("self",))
        return qs.filter(pk=driver_id).first()

    @_guarded
    def create_driver(self, user_id: int, **fields) -> Driver:
        try:
            with transaction.atomic(using=self.using):
                driver = Driver.objects.using(self.using).create(user_id=user_id, **fields)
        except IntegrityError as exc:
            raise PreconditionFailedError("Already registered as driver") from exc
        return driver

    @_guarded
    def update_driver_location(self, driver_id: int, latitude: str, longitude: str) -> None:
        Driver.objects.using(self.using).filter(pk=driver_id).update(
            current_latitude=latitude,
            current_longitude=longitude,
            updated_at=timezone.now(),
        )

    @_guarded
    def update_driver_availability(self, driver_id: int, is_available: bool) -> None:
        Driver.objects.using(self.using).filter(pk=driver_id).update(
            is_available=is_available,
            updated_at=timezone.now(),
        )

    @_guarded
    def increment_driver_total_rides(self, driver_id: int) -> None:
        Driver.objects.using(self.using).filter(pk=driver_id).update(
            total_rides=F("total_rides") + 1,
            updated_at=timezone.now(),
        )

    @_guarded
    def set_driver_rating(self, driver_id: int, rating: int) -> None:
        Driver.objects.using(self.using).filter(pk=driver_id).update(
            rating=rating,
            updated_at=timezone.now(),
        )

    @_guarded
    def get_available_drivers(self) -> List[Driver]:
        return list(self._drivers().filter(is_available=True).order_by("id"))

    @_guarded
    def get_all_driver_ids(self) -> List[int]:
        return list(Driver.objects.using(self.using).order_by("id").values_list("id", flat=True))

    @_guarded
    def driver_has_active_ride(self, driver_id: int) -> bool:
        return Ride.objects.using(self.using).filter(
            driver_id=driver_id,
            status__in=ACTIVE_RIDE_STATUSES,
        ).exists()

    # ---------------------- Rides ----------------------

    @_guarded
    def create_ride(self, **fields) -> Ride:
        return Ride.objects.using(self.using).create(**fields)

    @_guarded
    def get_ride_by_id(self, ride_id: int, for_update: bool = False) -> Optional[Ride]:
        qs = self._rides()
        if for_update:
            qs = qs.select_for_update(of=("self",))
        return qs.filter(pk=ride_id).first()

    @_guarded
    def get_pending_rides(self) -> List[Ride]:
        return list(
            self._rides()
            .filter(status=RideStatus.PENDING)
            .order_by("requested_at", "id")
        )

    @_guarded
    def get_customer_rides(self, customer_id: int) -> List[Ride]:
        """Rides the customer requested or joined as a shared-ride passenger."""
        return list(
            self._rides()
            .filter(Q(customer_id=customer_id) | Q(passengers__customer_id=customer_id))
            .distinct()
            .order_by("-created_at", "-id")
        )

    @_guarded
    def get_driver_rides(self, driver_id: int) -> List[Ride]:
        return list(self._rides().filter(driver_id=driver_id).order_by("-created_at", "-id"))

    @_guarded
    def update_ride_status(
        self,
        ride_id: int,
        status: str,
        driver_id: Optional[int] = None,
        expected_statuses: Optional[Tuple[str, ...]] = None,
        expected_driver_id: Optional[int] = None,
    ) -> Ride:
        """
        Compare-and-set a ride's status.

        The UPDATE only matches while the ride is still in one of
        ``expected_statuses`` (and bound to ``expected_driver_id`` when
        given) and the transition's timestamp is unset, so a concurrent
        writer that got there first makes this call fail with
        ``RideNotAvailableError`` instead of overwriting its result.
        """
        now = timezone.now()
        filters = {"pk": ride_id}
        changes = {"status": status, "updated_at": now}

        if expected_statuses is not None:
            filters["status__in"] = list(expected_statuses)
        if expected_driver_id is not None:
            filters["driver_id"] = expected_driver_id

        timestamp_field = STATUS_TIMESTAMP_FIELDS.get(status)
        if timestamp_field:
            filters[f"{timestamp_field}__isnull"] = True
            changes[timestamp_field] = now

        if status == RideStatus.ACCEPTED:
            if driver_id is None:
                raise ValueError("driver_id is required to accept a ride")
            filters["driver__isnull"] = True
            changes["driver_id"] = driver_id

        updated = Ride.objects.using(self.using).filter(**filters).update(**changes)
        if not updated:
            raise RideNotAvailableError(f"Ride {ride_id} can no longer move to {status}")

        return self._rides().get(pk=ride_id)

    @_guarded
    def get_available_shared_rides(self, pickup_latitude=None, pickup_longitude=None) -> List[Ride]:
        # Pickup coordinates are accepted but not used for filtering;
        # see services.sharing for optional proximity ordering.
        return list(
            self._rides()
            .filter(
                is_shared=True,
                status__in=JOINABLE_RIDE_STATUSES,
                current_passengers__lt=F("max_passengers"),
            )
            .order_by("requested_at", "id")
        )

    # ---------------------- Ride passengers ----------------------

    @_guarded
    def increment_ride_passengers(self, ride_id: int) -> Ride:
        updated = Ride.objects.using(self.using).filter(
            pk=ride_id,
            is_shared=True,
            status__in=JOINABLE_RIDE_STATUSES,
            current_passengers__lt=F("max_passengers"),
        ).update(
            current_passengers=F("current_passengers") + 1,
            updated_at=timezone.now(),
        )
        if not updated:
            raise CapacityError()
        return self._rides().get(pk=ride_id)

    @_guarded
    def add_ride_passenger(self, **fields) -> RidePassenger:
        try:
            with transaction.atomic(using=self.using):
                passenger = RidePassenger.objects.using(self.using).create(**fields)
        except IntegrityError as exc:
            raise PreconditionFailedError("You have already joined this ride") from exc
        return passenger

    @_guarded
    def get_ride_passengers(self, ride_id: int) -> List[RidePassenger]:
        return list(
            RidePassenger.objects.using(self.using)
            .select_related("customer")
            .filter(ride_id=ride_id)
            .order_by("joined_at", "id")
        )

    @_guarded
    def has_joined_ride(self, ride_id: int, customer_id: int) -> bool:
        return RidePassenger.objects.using(self.using).filter(
            ride_id=ride_id,
            customer_id=customer_id,
        ).exists()

    # ---------------------- Ratings ----------------------

    @_guarded
    def create_rating(self, **fields) -> Rating:
        try:
            with transaction.atomic(using=self.using):
                rating = Rating.objects.using(self.using).create(**fields)
        except IntegrityError as exc:
            raise PreconditionFailedError("This ride has already been rated") from exc
        return rating

    @_guarded
    def ride_has_rating(self, ride_id: int) -> bool:
        return Rating.objects.using(self.using).filter(ride_id=ride_id).exists()

    @_guarded
    def get_driver_ratings(self, driver_id: int) -> List[Rating]:
        return list(
            Rating.objects.using(self.using).filter(driver_id=driver_id).order_by("created_at", "id")
        )

    @_guarded
    def get_driver_rating_totals(self, driver_id: int) -> Tuple[int, int]:
        """Return (sum of scores, number of ratings) for a driver."""
        totals = Rating.objects.using(self.using).filter(driver_id=driver_id).aggregate(
            total=Sum("rating"),
            count=Count("id"),
        )
        return totals["total"] or 0, totals["count"]
