from rest_framework import status
from rest_framework.test import APITestCase
from django.test import TestCase

from accounts.models import User
from drivers import services
from drivers.models import Driver
from rides.models import RideStatus
from rides.tests.helpers import make_driver, make_ride, make_user
from services.exceptions import DriverBusyError, DriverNotFoundError, PreconditionFailedError
from services.gateway import RideGateway


class DriverServiceTests(TestCase):
    def setUp(self):
        self.gateway = RideGateway()

    def test_register_driver(self):
        user = make_user(User.ROLE_DRIVER)

        driver = services.register_driver(self.gateway, user, vehicle_type='suv', vehicle_plate='ABC-123')

        self.assertEqual(driver.user_id, user.id)
        self.assertFalse(driver.is_available)
        self.assertEqual(driver.rating, 5)
        self.assertEqual(driver.vehicle_capacity, 4)

    def test_register_twice(self):
        driver = make_driver()

        with self.assertRaises(PreconditionFailedError):
            services.register_driver(self.gateway, driver.user, vehicle_type='suv', vehicle_plate='X')

        self.assertEqual(Driver.objects.filter(user=driver.user).count(), 1)

    def test_missing_profile(self):
        with self.assertRaises(DriverNotFoundError):
            services.get_driver_for_user(self.gateway, make_user())

    def test_availability_toggle(self):
        driver = make_driver(is_available=False)

        services.set_driver_availability(self.gateway, driver, True)
        self.assertTrue(Driver.objects.get(pk=driver.id).is_available)

        services.set_driver_availability(self.gateway, driver, False)
        self.assertFalse(Driver.objects.get(pk=driver.id).is_available)

    def test_busy_driver_cannot_go_available(self):
        driver = make_driver(is_available=False)
        make_ride(status=RideStatus.IN_PROGRESS, driver=driver)

        with self.assertRaises(DriverBusyError):
            services.set_driver_availability(self.gateway, driver, True)

        self.assertFalse(Driver.objects.get(pk=driver.id).is_available)

    def test_location_stored_as_text(self):
        driver = make_driver()

        services.update_driver_location(self.gateway, driver, 33.512345, 36.278901)

        driver.refresh_from_db()
        self.assertEqual(driver.current_latitude, '33.512345')
        self.assertEqual(driver.current_longitude, '36.278901')


class DriverApiTests(APITestCase):
    def setUp(self):
        self.user = make_user(User.ROLE_DRIVER)
        self.client.force_authenticate(user=self.user)

    def register(self):
        return self.client.post('/api/driver/register/', {
            'vehicle_type': 'sedan',
            'vehicle_model': 'Civic',
            'vehicle_plate': 'DR-100',
            'vehicle_color': 'blue',
            'vehicle_capacity': 4,
        }, format='json')

    def test_register_and_profile(self):
        response = self.register()
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['driver']['vehicle_plate'], 'DR-100')

        profile = self.client.get('/api/driver/profile/')
        self.assertEqual(profile.status_code, status.HTTP_200_OK)
        self.assertEqual(profile.data['user']['id'], self.user.id)

    def test_register_twice_is_precondition_failed(self):
        self.register()

        response = self.register()

        self.assertEqual(response.status_code, status.HTTP_412_PRECONDITION_FAILED)
        self.assertEqual(response.data['error'], 'precondition_failed')

    def test_location_and_availability(self):
        self.register()

        response = self.client.post('/api/driver/location/', {
            'latitude': '33.5', 'longitude': '36.2',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)

        response = self.client.post('/api/driver/availability/', {'is_available': True}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['is_available'])

        location = self.client.get('/api/driver/location/')
        self.assertTrue(location.data['is_available'])
        self.assertIsNotNone(location.data['latitude'])

    def test_location_out_of_range(self):
        self.register()

        response = self.client.post('/api/driver/location/', {
            'latitude': '33.5', 'longitude': '200',
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_busy_driver_availability_conflict(self):
        self.register()
        driver = Driver.objects.get(user=self.user)
        make_ride(status=RideStatus.ACCEPTED, driver=driver)

        response = self.client.post('/api/driver/availability/', {'is_available': True}, format='json')

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data['error'], 'driver_busy')

    def test_history(self):
        self.register()
        driver = Driver.objects.get(user=self.user)
        make_ride(status=RideStatus.COMPLETED, driver=driver)
        make_ride()

        response = self.client.get('/api/driver/history/')

        self.assertEqual(response.data['count'], 1)
