"""
Services package - Business logic layer.

This package contains all business logic services that operate on Django models
through an injected persistence gateway, decoupled from the HTTP layer.

Modules:
    - gateway: Persistence gateway (RideGateway)
    - ride_management: Core ride lifecycle operations
    - matching: Nearest available driver lookup
    - sharing: Shared-ride capacity and fare splitting
    - ratings: Driver rating aggregation
"""

# Expose commonly used functions at package level
from .gateway import RideGateway
from .matching import find_nearest_drivers
from .ride_management import (
    RideResult,
    request_ride,
    accept_ride,
    start_ride,
    complete_ride,
    cancel_ride,
    get_pending_rides,
    get_customer_ride_history,
    get_driver_ride_history,
)
from .sharing import join_shared_ride, get_available_shared_rides, get_shared_ride_passengers
from .ratings import rate_driver, recompute_driver_rating
from .exceptions import (
    RideServiceError,
    NotFoundError,
    RideNotFoundError,
    DriverNotFoundError,
    ForbiddenError,
    InvalidStateError,
    RideNotAvailableError,
    DriverBusyError,
    CapacityError,
    PreconditionFailedError,
    ServiceUnavailableError,
)

__all__ = [
    "RideGateway",
    # Matching
    "find_nearest_drivers",
    # Ride management
    "RideResult",
    "request_ride",
    "accept_ride",
    "start_ride",
    "complete_ride",
    "cancel_ride",
    "get_pending_rides",
    "get_customer_ride_history",
    "get_driver_ride_history",
    # Sharing
    "join_shared_ride",
    "get_available_shared_rides",
    "get_shared_ride_passengers",
    # Ratings
    "rate_driver",
    "recompute_driver_rating",
    # Exceptions
    "RideServiceError",
    "NotFoundError",
    "RideNotFoundError",
    "DriverNotFoundError",
    "ForbiddenError",
    "InvalidStateError",
    "RideNotAvailableError",
    "DriverBusyError",
    "CapacityError",
    "PreconditionFailedError",
    "ServiceUnavailableError",
]
