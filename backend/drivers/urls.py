from django.urls import path
from .views import (
    DriverRegisterView,
    DriverProfileView,
    DriverLocationUpdateView,
    DriverAvailabilityView,
    DriverPendingRidesView,
    DriverRideHistoryView,
    accept_ride_view,
    start_ride_view,
    complete_ride_view,
)

urlpatterns = [
    path("register/", DriverRegisterView.as_view(), name="driver-register"),
    path("profile/", DriverProfileView.as_view(), name="driver-profile"),
    path("location/", DriverLocationUpdateView.as_view(), name="driver-location"),
    path("availability/", DriverAvailabilityView.as_view(), name="driver-availability"),
    path("pending-rides/", DriverPendingRidesView.as_view(), name="driver-pending-rides"),
    path("rides/<int:ride_id>/accept/", accept_ride_view, name="driver-accept-ride"),
    path("rides/<int:ride_id>/start/", start_ride_view, name="driver-start-ride"),
    path("rides/<int:ride_id>/complete/", complete_ride_view, name="driver-complete-ride"),
    path("history/", DriverRideHistoryView.as_view(), name="driver-history"),
]
