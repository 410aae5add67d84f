from rest_framework import status
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated

from common.views import GatewayMixin
from drivers.serializers import (
    DriverSerializer,
    DriverRegisterSerializer,
    DriverAvailabilitySerializer,
    LocationUpdateSerializer,
)
from rides.serializers import RideSerializer
from services.ride_management import (
    accept_ride,
    start_ride,
    complete_ride,
    get_pending_rides,
    get_driver_ride_history,
)

from drivers import services


class DriverView(GatewayMixin, APIView):
    permission_classes = [IsAuthenticated]

    def get_driver(self, gateway):
        return services.get_driver_for_user(gateway, self.request.user)


class DriverRegisterView(DriverView):
    def post(self, request):
        serializer = DriverRegisterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        driver = services.register_driver(
            self.get_gateway(),
            request.user,
            **serializer.validated_data
        )
        return Response(
            {"success": True, "driver": DriverSerializer(driver).data},
            status=status.HTTP_201_CREATED,
        )


class DriverProfileView(DriverView):
    def get(self, request):
        driver = self.get_driver(self.get_gateway())
        return Response(DriverSerializer(driver).data)


class DriverLocationUpdateView(DriverView):
    def get(self, request):
        driver = self.get_driver(self.get_gateway())
        return Response({
            "latitude": driver.current_latitude,
            "longitude": driver.current_longitude,
            "last_updated": driver.updated_at,
            "is_available": driver.is_available,
        })

    def post(self, request):
        serializer = LocationUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        gateway = self.get_gateway()
        driver = self.get_driver(gateway)
        driver = services.update_driver_location(
            gateway,
            driver,
            serializer.validated_data["latitude"],
            serializer.validated_data["longitude"],
        )

        return Response({
            "success": True,
            "latitude": driver.current_latitude,
            "longitude": driver.current_longitude,
        })


class DriverAvailabilityView(DriverView):
    def post(self, request):
        serializer = DriverAvailabilitySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        gateway = self.get_gateway()
        driver = self.get_driver(gateway)
        driver = services.set_driver_availability(
            gateway, driver, serializer.validated_data["is_available"]
        )

        return Response({"success": True, "is_available": driver.is_available})


class DriverPendingRidesView(DriverView):
    def get(self, request):
        gateway = self.get_gateway()
        driver = self.get_driver(gateway)
        rides = get_pending_rides(gateway, driver)
        return Response({"count": len(rides), "rides": RideSerializer(rides, many=True).data})


class DriverRideActionView(DriverView):
    """
    POST: accept / start / complete a ride.
    The lifecycle function is bound per URL via ``as_view(ride_action=...)``.
    """
    ride_action = None

    def post(self, request, ride_id: int):
        gateway = self.get_gateway()
        driver = self.get_driver(gateway)
        result = self.ride_action(gateway, driver, ride_id)

        return Response({
            "success": result.success,
            "message": result.message,
            "ride": RideSerializer(result.ride).data,
        })


class DriverRideHistoryView(DriverView):
    def get(self, request):
        gateway = self.get_gateway()
        driver = self.get_driver(gateway)
        rides = get_driver_ride_history(gateway, driver)
        return Response({"count": len(rides), "rides": RideSerializer(rides, many=True).data})


accept_ride_view = DriverRideActionView.as_view(ride_action=accept_ride)
start_ride_view = DriverRideActionView.as_view(ride_action=start_ride)
complete_ride_view = DriverRideActionView.as_view(ride_action=complete_ride)
