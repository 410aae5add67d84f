"""
Shared-ride capacity and fare-split service.

This module handles:
    - Admitting passengers into shared rides
    - Listing shared rides with free seats
    - Showing who rides along
"""

from .shared_rides import join_shared_ride, get_available_shared_rides, get_shared_ride_passengers

__all__ = [
    "join_shared_ride",
    "get_available_shared_rides",
    "get_shared_ride_passengers",
]
