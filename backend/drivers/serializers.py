from rest_framework import serializers
from drivers.models import Driver
from accounts.serializers import UserSerializer
from common.fields import latitude_field, longitude_field


class DriverSerializer(serializers.ModelSerializer):
    """
    Full driver profile serializer
    """
    user = UserSerializer(read_only=True)

    class Meta:
        model = Driver
        fields = [
            "id",
            "user",
            "vehicle_type",
            "vehicle_model",
            "vehicle_plate",
            "vehicle_color",
            "vehicle_capacity",
            "is_available",
            "current_latitude",
            "current_longitude",
            "rating",
            "total_rides",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class DriverBasicSerializer(serializers.ModelSerializer):
    """
    Lite version of driver info for ride details and nearby driver lists.
    """
    username = serializers.CharField(source="user.username", read_only=True)
    phone_number = serializers.CharField(source="user.phone_number", read_only=True)

    class Meta:
        model = Driver
        fields = [
            "id",
            "username",
            "phone_number",
            "vehicle_type",
            "vehicle_model",
            "vehicle_plate",
            "vehicle_color",
            "rating",
            "current_latitude",
            "current_longitude",
        ]


class DriverRegisterSerializer(serializers.Serializer):
    """
    Vehicle details required to register as a driver.
    """
    vehicle_type = serializers.CharField(max_length=50)
    vehicle_model = serializers.CharField(max_length=100)
    vehicle_plate = serializers.CharField(max_length=20)
    vehicle_color = serializers.CharField(max_length=30)
    vehicle_capacity = serializers.IntegerField(min_value=1, max_value=8)


class DriverAvailabilitySerializer(serializers.Serializer):
    """
    Serializer for toggling driver availability.
    """
    is_available = serializers.BooleanField(required=True)


class LocationUpdateSerializer(serializers.Serializer):
    """
    Serializer for updating driver GPS location.
    """
    latitude = latitude_field()
    longitude = longitude_field()
