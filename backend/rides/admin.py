"""Tells what to show in the Django admin interface for rides app"""

from django.contrib import admin
from .models import Ride, RidePassenger, Rating


class RidePassengerInline(admin.TabularInline):
    model = RidePassenger
    extra = 0
    readonly_fields = ("customer", "fare_share", "status", "joined_at")


@admin.register(Ride)
class RideAdmin(admin.ModelAdmin):
    """Ride admin"""
    list_display = ['id', 'customer', 'driver', 'status', 'is_shared', 'current_passengers',
                    'max_passengers', 'base_fare', 'requested_at']
    list_filter = ['status', 'is_shared', 'requested_at']
    search_fields = ['customer__username', 'driver__user__username', 'pickup_address']
    readonly_fields = ['requested_at', 'accepted_at', 'started_at', 'completed_at', 'cancelled_at']
    date_hierarchy = 'requested_at'
    inlines = [RidePassengerInline]


@admin.register(Rating)
class RatingAdmin(admin.ModelAdmin):
    list_display = ("ride", "driver", "customer", "rating", "created_at")
    list_filter = ("rating",)
    search_fields = ("ride__id", "driver__user__username", "customer__username")

    # Ratings are immutable; driver averages are folded from them
    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
