from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated

from common.views import GatewayMixin
from rides.serializers import RideSerializer
from services.ride_management import get_customer_ride_history
from ..permissions import IsCustomer


class CustomerRideHistoryView(GatewayMixin, APIView):
    """
    GET: Rides requested by the customer, newest first.
    """
    permission_classes = [IsAuthenticated, IsCustomer]

    def get(self, request):
        rides = get_customer_ride_history(self.get_gateway(), request.user)
        return Response({"count": len(rides), "rides": RideSerializer(rides, many=True).data})
