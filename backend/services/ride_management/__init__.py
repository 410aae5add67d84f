"""
Ride management service - Core ride lifecycle operations.

This module handles:
    - Requesting rides
    - Accepting, starting and completing rides
    - Cancelling rides
    - Ride history and pending ride queries
"""

from .ride_lifecycle import (
    ALLOWED_TRANSITIONS,
    RideResult,
    can_transition,
    request_ride,
    accept_ride,
    start_ride,
    complete_ride,
    cancel_ride,
    get_pending_rides,
    get_customer_ride_history,
    get_driver_ride_history,
)

__all__ = [
    "ALLOWED_TRANSITIONS",
    "RideResult",
    "can_transition",
    # Lifecycle operations
    "request_ride",
    "accept_ride",
    "start_ride",
    "complete_ride",
    "cancel_ride",
    # Queries
    "get_pending_rides",
    "get_customer_ride_history",
    "get_driver_ride_history",
]
