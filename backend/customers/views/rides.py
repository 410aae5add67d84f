# customers/views/rides.py

from rest_framework import status
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated

from common.views import GatewayMixin
from rides.serializers import (
    JoinSharedRideSerializer,
    RateDriverSerializer,
    RatingSerializer,
    RidePassengerSerializer,
    RideRequestCreateSerializer,
    RideSerializer,
    SharedRideSearchSerializer,
)
from services.ride_management import request_ride, cancel_ride
from services.sharing import join_shared_ride, get_available_shared_rides, get_shared_ride_passengers
from services.ratings import rate_driver
from ..permissions import IsCustomer


class CustomerView(GatewayMixin, APIView):
    permission_classes = [IsAuthenticated, IsCustomer]


class CustomerRequestRideView(CustomerView):
    """
    POST: Customer requests a ride.
    """

    def post(self, request):
        serializer = RideRequestCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = request_ride(self.get_gateway(), request.user, **serializer.validated_data)

        return Response({
            "success": result.success,
            "message": result.message,
            "ride": RideSerializer(result.ride).data,
        }, status=status.HTTP_201_CREATED)


class CustomerJoinSharedRideView(CustomerView):
    """
    POST: Customer takes a seat in someone else's shared ride.
    """

    def post(self, request, ride_id: int):
        serializer = JoinSharedRideSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = join_shared_ride(
            self.get_gateway(),
            request.user,
            ride_id,
            **serializer.validated_data
        )

        return Response({
            "success": result.success,
            "message": result.message,
            "ride": RideSerializer(result.ride).data,
            "passenger": RidePassengerSerializer(result.passenger).data,
        }, status=status.HTTP_201_CREATED)


class CustomerSharedRidesView(CustomerView):
    """
    GET: Shared rides with free seats.
    Query params: pickup_latitude, pickup_longitude
    """

    def get(self, request):
        serializer = SharedRideSearchSerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)

        rides = get_available_shared_rides(
            self.get_gateway(),
            serializer.validated_data["pickup_latitude"],
            serializer.validated_data["pickup_longitude"],
        )

        return Response({"count": len(rides), "rides": RideSerializer(rides, many=True).data})


class CustomerRidePassengersView(CustomerView):
    """
    GET: Passengers who joined a ride, with their fare shares.
    """

    def get(self, request, ride_id: int):
        passengers = get_shared_ride_passengers(self.get_gateway(), request.user, ride_id)
        return Response({
            "count": len(passengers),
            "passengers": RidePassengerSerializer(passengers, many=True).data,
        })


class CustomerCancelRideView(CustomerView):
    """
    POST: Customer cancels a ride.
    """

    def post(self, request, ride_id: int):
        result = cancel_ride(self.get_gateway(), request.user, ride_id)

        return Response({
            "success": result.success,
            "message": result.message,
            "ride": RideSerializer(result.ride).data,
            "was_assigned": result.extra["was_assigned"],
        })


class CustomerRateDriverView(CustomerView):
    """
    POST: Customer rates the driver of a completed ride.
    """

    def post(self, request, ride_id: int):
        serializer = RateDriverSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        rating = rate_driver(
            self.get_gateway(),
            request.user,
            ride_id,
            serializer.validated_data["rating"],
            serializer.validated_data.get("comment"),
        )

        return Response(
            {"success": True, "rating": RatingSerializer(rating).data},
            status=status.HTTP_201_CREATED,
        )
