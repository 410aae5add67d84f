# customers/urls.py

from django.urls import path

from .views.info import CustomerRideHistoryView
from .views.rides import (
    CustomerRequestRideView,
    CustomerJoinSharedRideView,
    CustomerSharedRidesView,
    CustomerRidePassengersView,
    CustomerCancelRideView,
    CustomerRateDriverView,
)

app_name = "customers"

urlpatterns = [
    # INFO
    path("history/", CustomerRideHistoryView.as_view(), name="ride-history"),

    # RIDE
    path("rides/", CustomerRequestRideView.as_view(), name="request-ride"),
    path("rides/<int:ride_id>/join/", CustomerJoinSharedRideView.as_view(), name="join-ride"),
    path("rides/<int:ride_id>/passengers/", CustomerRidePassengersView.as_view(), name="ride-passengers"),
    path("rides/<int:ride_id>/cancel/", CustomerCancelRideView.as_view(), name="cancel-ride"),
    path("rides/<int:ride_id>/rate/", CustomerRateDriverView.as_view(), name="rate-driver"),
    path("shared-rides/", CustomerSharedRidesView.as_view(), name="shared-rides"),
]
