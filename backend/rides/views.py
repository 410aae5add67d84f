from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated

from drivers.serializers import DriverBasicSerializer
from services.gateway import RideGateway
from services.matching import find_nearest_drivers
from .serializers import NearestDriversQuerySerializer


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def nearest_drivers(request):
    """
    Nearest available drivers to a point, closest first.

    Query params: latitude, longitude, limit (default 5)
    """
    serializer = NearestDriversQuerySerializer(data=request.query_params)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data

    ranked = find_nearest_drivers(
        RideGateway().open(),
        data['latitude'],
        data['longitude'],
        data.get('limit'),
    )

    drivers = [
        {**DriverBasicSerializer(driver).data, 'distance_meters': round(distance, 2)}
        for driver, distance in ranked
    ]
    return Response({'count': len(drivers), 'drivers': drivers})
