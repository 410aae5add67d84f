from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from accounts.models import User
from drivers.models import Driver


class DriverProfileInline(admin.StackedInline):
    model = Driver
    extra = 0
    can_delete = False
    fields = ("vehicle_type", "vehicle_plate", "is_available", "rating", "total_rides")
    readonly_fields = ("rating", "total_rides")


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """Users with their role and, for drivers, the vehicle profile"""

    list_display = ["username", "email", "role", "phone_number", "is_driver", "is_active"]
    list_filter = ["role", "is_active", "is_staff"]
    search_fields = ["username", "email", "phone_number"]
    ordering = ("username",)
    inlines = [DriverProfileInline]

    fieldsets = BaseUserAdmin.fieldsets + (
        ("Ride Hailing", {"fields": ("role", "phone_number")}),
    )
    add_fieldsets = BaseUserAdmin.add_fieldsets + (
        ("Ride Hailing", {"fields": ("role", "phone_number")}),
    )

    @admin.display(boolean=True, description="Driver profile")
    def is_driver(self, obj):
        return hasattr(obj, "driver_profile")
