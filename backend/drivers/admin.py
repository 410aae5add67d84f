from django.contrib import admin
from drivers.models import Driver


@admin.register(Driver)
class DriverAdmin(admin.ModelAdmin):
    """Admin panel for managing Drivers"""

    list_display = [
        "user",
        "vehicle_plate",
        "vehicle_type",
        "is_available",
        "rating",
        "total_rides",
        "current_latitude",
        "current_longitude",
    ]

    list_filter = [
        "is_available",
        "vehicle_type",
    ]

    search_fields = [
        "user__username",
        "vehicle_plate",
    ]

    readonly_fields = [
        "rating",
        "total_rides",
        "created_at",
        "updated_at",
    ]

    ordering = ("user__username",)
