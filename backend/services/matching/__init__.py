"""
Driver matching service.

This module handles:
    - Ranking available drivers by distance from a pickup point
"""

from .nearest import find_nearest_drivers

__all__ = [
    "find_nearest_drivers",
]
