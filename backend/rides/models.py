from django.db import models
from django.conf import settings
from django.core.validators import MinValueValidator, MaxValueValidator


class RideStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'
    ACCEPTED = 'accepted', 'Accepted'
    IN_PROGRESS = 'in_progress', 'In Progress'
    COMPLETED = 'completed', 'Completed'
    CANCELLED = 'cancelled', 'Cancelled'


class PassengerStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'
    CONFIRMED = 'confirmed', 'Confirmed'
    PICKED_UP = 'picked_up', 'Picked Up'
    DROPPED_OFF = 'dropped_off', 'Dropped Off'
    CANCELLED = 'cancelled', 'Cancelled'


class Ride(models.Model):
    """A trip request from pickup to optional dropoff, possibly shared."""

    # Foreign keys
    customer = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='rides'
    )

    driver = models.ForeignKey(
        'drivers.Driver',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='rides'
    )

    # Pickup location
    pickup_latitude = models.CharField(max_length=20)
    pickup_longitude = models.CharField(max_length=20)
    pickup_address = models.TextField(null=True, blank=True)

    # Dropoff location
    dropoff_latitude = models.CharField(max_length=20, null=True, blank=True)
    dropoff_longitude = models.CharField(max_length=20, null=True, blank=True)
    dropoff_address = models.TextField(null=True, blank=True)

    status = models.CharField(max_length=20, choices=RideStatus.choices, default=RideStatus.PENDING)

    # Sharing
    is_shared = models.BooleanField(default=False)
    max_passengers = models.PositiveSmallIntegerField(default=1)
    current_passengers = models.PositiveSmallIntegerField(default=1)

    # Fares in cents
    base_fare = models.PositiveIntegerField(default=0)
    total_fare = models.PositiveIntegerField(default=0)
    fare_per_passenger = models.PositiveIntegerField(default=0)
    estimated_distance = models.PositiveIntegerField(null=True, blank=True)  # meters

    # Timestamps
    requested_at = models.DateTimeField(auto_now_add=True)
    accepted_at = models.DateTimeField(null=True, blank=True)
    started_at = models.DateTimeField(null=True, blank=True)
    completed_at = models.DateTimeField(null=True, blank=True)
    cancelled_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'rides'
        ordering = ['-created_at', '-id']
        constraints = [
            models.CheckConstraint(
                condition=models.Q(current_passengers__lte=models.F('max_passengers')),
                name='ride_passengers_within_capacity',
            ),
        ]

    def __str__(self):
        return f"Ride #{self.id} - {self.customer} - {self.status}"


class RidePassenger(models.Model):
    """An additional passenger who joined a shared ride."""

    ride = models.ForeignKey(
        Ride,
        on_delete=models.CASCADE,
        related_name='passengers'
    )

    customer = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='shared_ride_seats'
    )

    pickup_latitude = models.CharField(max_length=20)
    pickup_longitude = models.CharField(max_length=20)
    pickup_address = models.TextField(null=True, blank=True)

    dropoff_latitude = models.CharField(max_length=20, null=True, blank=True)
    dropoff_longitude = models.CharField(max_length=20, null=True, blank=True)
    dropoff_address = models.TextField(null=True, blank=True)

    fare_share = models.PositiveIntegerField(default=0)  # cents
    status = models.CharField(
        max_length=20,
        choices=PassengerStatus.choices,
        default=PassengerStatus.PENDING,
    )

    joined_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'ride_passengers'
        ordering = ['joined_at', 'id']
        constraints = [
            models.UniqueConstraint(
                fields=['ride', 'customer'],
                name='unique_ride_passenger'
            )
        ]

    def __str__(self):
        return f"Passenger {self.customer} on Ride {self.ride_id}"


class Rating(models.Model):
    """Immutable driver rating left by the customer of a completed ride."""

    ride = models.OneToOneField(
        Ride,
        on_delete=models.CASCADE,
        related_name='rating'
    )

    driver = models.ForeignKey(
        'drivers.Driver',
        on_delete=models.CASCADE,
        related_name='ratings'
    )

    customer = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='ratings_given'
    )

    rating = models.PositiveSmallIntegerField(
        validators=[MinValueValidator(1), MaxValueValidator(5)]
    )
    comment = models.TextField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'ratings'
        ordering = ['-created_at', '-id']

    def __str__(self):
        return f"Rating {self.rating}/5 for {self.driver} (ride {self.ride_id})"
