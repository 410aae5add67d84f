from django.db import models
from django.conf import settings
from django.core.validators import MinValueValidator, MaxValueValidator

from common.utils import parse_coordinate

User = settings.AUTH_USER_MODEL

class Driver(models.Model):
    """Driver profile: vehicle details, availability, location and rating"""
    
    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name='driver_profile')
    
    # Vehicle details
    vehicle_type = models.CharField(max_length=50)
    vehicle_model = models.CharField(max_length=100, blank=True, default='')
    vehicle_plate = models.CharField(max_length=20)
    vehicle_color = models.CharField(max_length=30, blank=True, default='')
    vehicle_capacity = models.PositiveSmallIntegerField(
        default=4,
        validators=[MinValueValidator(1), MaxValueValidator(8)],
    )
    
    # Availability & location (coordinates kept as decimal strings)
    is_available = models.BooleanField(default=False)
    current_latitude = models.CharField(max_length=20, null=True, blank=True)
    current_longitude = models.CharField(max_length=20, null=True, blank=True)
    
    # 1-5 scale, rounded average of all ratings
    rating = models.PositiveSmallIntegerField(default=5)
    total_rides = models.PositiveIntegerField(default=0)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    
    class Meta:
        db_table = 'drivers'
        ordering = ['id']
        
    def __str__(self):
        return f"{self.user.username} - {self.vehicle_plate}"

    @property
    def location(self):
        """(lat, lon) floats parsed from the stored strings, or None."""
        lat = parse_coordinate(self.current_latitude)
        lon = parse_coordinate(self.current_longitude)
        if lat is None or lon is None:
            return None
        return lat, lon

    @property
    def has_location(self):
        return self.location is not None
