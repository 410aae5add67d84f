"""Fixtures shared by the ride test modules."""

from accounts.models import User
from drivers.models import Driver
from rides.models import Ride, RideStatus

_counter = {"users": 0}


def make_user(role=User.ROLE_CUSTOMER, username=None):
    _counter["users"] += 1
    username = username or f"{role}_{_counter['users']}"
    return User.objects.create_user(
        username=username,
        password='pass1234',
        role=role,
        phone_number='9000000000',
    )


def make_driver(user=None, latitude=None, longitude=None, is_available=True, **extra):
    user = user or make_user(User.ROLE_DRIVER)
    fields = {
        'vehicle_type': 'sedan',
        'vehicle_model': 'Corolla',
        'vehicle_plate': f'PL-{user.id:04d}',
        'vehicle_color': 'white',
        'vehicle_capacity': 4,
    }
    fields.update(extra)
    return Driver.objects.create(
        user=user,
        is_available=is_available,
        current_latitude=None if latitude is None else str(latitude),
        current_longitude=None if longitude is None else str(longitude),
        **fields
    )


def make_ride(customer=None, status=RideStatus.PENDING, driver=None, **extra):
    fields = {
        'pickup_latitude': '33.500000',
        'pickup_longitude': '36.200000',
        'base_fare': 700,
        'total_fare': 700,
        'fare_per_passenger': 700,
    }
    fields.update(extra)
    return Ride.objects.create(
        customer=customer or make_user(),
        status=status,
        driver=driver,
        **fields
    )
