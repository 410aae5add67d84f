"""
Driver rating service.

This module handles:
    - Recording a customer's rating for a completed ride
    - Keeping each driver's rounded average rating up to date
"""

from .aggregator import rate_driver, recompute_driver_rating

__all__ = [
    "rate_driver",
    "recompute_driver_rating",
]
