"""Reusable serializer fields."""

from rest_framework import serializers


def latitude_field(**kwargs):
    """Latitude between -90 and 90 degrees, 6 decimal places."""
    kwargs.setdefault("help_text", "Latitude between -90 and 90 degrees.")
    return serializers.DecimalField(
        max_digits=9,
        decimal_places=6,
        min_value=-90,
        max_value=90,
        **kwargs
    )


def longitude_field(**kwargs):
    """Longitude between -180 and 180 degrees, 6 decimal places."""
    kwargs.setdefault("help_text", "Longitude between -180 and 180 degrees.")
    return serializers.DecimalField(
        max_digits=9,
        decimal_places=6,
        min_value=-180,
        max_value=180,
        **kwargs
    )
