from rest_framework import serializers
from django.conf import settings
from django.contrib.auth import get_user_model

from common.fields import latitude_field, longitude_field
from drivers.serializers import DriverBasicSerializer
from .models import Ride, RidePassenger, Rating

User = get_user_model()


class CustomerBasicSerializer(serializers.ModelSerializer):
    """
    Basic customer representation used inside ride responses.
    """
    class Meta:
        model = User
        fields = ['id', 'username', 'phone_number']


class RidePassengerSerializer(serializers.ModelSerializer):
    customer = CustomerBasicSerializer(read_only=True)

    class Meta:
        model = RidePassenger
        fields = ['id', 'ride', 'customer', 'pickup_latitude', 'pickup_longitude',
                  'pickup_address', 'dropoff_latitude', 'dropoff_longitude',
                  'dropoff_address', 'fare_share', 'status', 'joined_at']
        read_only_fields = fields


class RideSerializer(serializers.ModelSerializer):
    """Serializer for Rides, with the passengers who joined a shared ride"""
    customer = CustomerBasicSerializer(read_only=True)
    driver = DriverBasicSerializer(read_only=True)
    passengers = RidePassengerSerializer(many=True, read_only=True)
    
    class Meta:
        model = Ride
        fields = ['id', 'customer', 'driver', 'pickup_latitude', 'pickup_longitude',
                  'pickup_address', 'dropoff_latitude', 'dropoff_longitude',
                  'dropoff_address', 'status', 'is_shared', 'max_passengers',
                  'current_passengers', 'base_fare', 'total_fare', 'fare_per_passenger',
                  'estimated_distance', 'requested_at', 'accepted_at', 'started_at',
                  'completed_at', 'cancelled_at', 'passengers']
        read_only_fields = fields


class RatingSerializer(serializers.ModelSerializer):
    class Meta:
        model = Rating
        fields = ['id', 'ride', 'driver', 'customer', 'rating', 'comment', 'created_at']
        read_only_fields = fields


class RideRequestCreateSerializer(serializers.Serializer):
    """Serializer for requesting a ride"""
    pickup_latitude = latitude_field()
    pickup_longitude = longitude_field()
    pickup_address = serializers.CharField(required=False, allow_blank=True, default="")
    dropoff_latitude = latitude_field(required=False, allow_null=True, default=None)
    dropoff_longitude = longitude_field(required=False, allow_null=True, default=None)
    dropoff_address = serializers.CharField(required=False, allow_blank=True, default="")
    is_shared = serializers.BooleanField(required=False, default=False)

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        # Upper bound follows RIDE_MAX_SHARED_PASSENGERS
        self.fields["max_passengers"] = serializers.IntegerField(
            min_value=1,
            max_value=settings.RIDE_MAX_SHARED_PASSENGERS,
            required=False,
            default=1,
        )

    def validate(self, data):
        has_lat = data.get('dropoff_latitude') is not None
        has_lon = data.get('dropoff_longitude') is not None
        if has_lat != has_lon:
            raise serializers.ValidationError(
                'dropoff_latitude and dropoff_longitude must be given together'
            )
        return data


class JoinSharedRideSerializer(serializers.Serializer):
    """Serializer for joining a shared ride"""
    pickup_latitude = latitude_field()
    pickup_longitude = longitude_field()
    pickup_address = serializers.CharField(required=False, allow_blank=True, default="")
    dropoff_latitude = latitude_field(required=False, allow_null=True, default=None)
    dropoff_longitude = longitude_field(required=False, allow_null=True, default=None)
    dropoff_address = serializers.CharField(required=False, allow_blank=True, default="")


class SharedRideSearchSerializer(serializers.Serializer):
    pickup_latitude = latitude_field()
    pickup_longitude = longitude_field()


class RateDriverSerializer(serializers.Serializer):
    rating = serializers.IntegerField(min_value=1, max_value=5)
    comment = serializers.CharField(required=False, allow_blank=True, allow_null=True, default=None)


class NearestDriversQuerySerializer(serializers.Serializer):
    latitude = latitude_field()
    longitude = longitude_field()
    limit = serializers.IntegerField(min_value=1, max_value=50, required=False)
