from unittest.mock import patch

from django.db import OperationalError
from django.test import override_settings
from rest_framework import status
from rest_framework.test import APITestCase

from accounts.models import User
from rides.models import Ride, RideStatus
from services.gateway import RideGateway

from .helpers import make_driver, make_ride, make_user


class CustomerRideApiTests(APITestCase):
    def setUp(self):
        self.customer = make_user()
        self.client.force_authenticate(user=self.customer)

    def test_request_ride(self):
        response = self.client.post('/api/customer/rides/', {
            'pickup_latitude': '33.5',
            'pickup_longitude': '36.2',
            'dropoff_latitude': '33.51',
            'dropoff_longitude': '36.21',
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertTrue(response.data['success'])
        ride = response.data['ride']
        self.assertEqual(ride['status'], RideStatus.PENDING)
        self.assertEqual(ride['current_passengers'], 1)
        self.assertGreater(ride['base_fare'], 500)
        self.assertIsNone(ride['driver'])

    def test_request_ride_rejects_half_dropoff(self):
        response = self.client.post('/api/customer/rides/', {
            'pickup_latitude': '33.5',
            'pickup_longitude': '36.2',
            'dropoff_latitude': '33.51',
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(Ride.objects.exists())

    def test_request_ride_rejects_bad_coordinates(self):
        response = self.client.post('/api/customer/rides/', {
            'pickup_latitude': '95',
            'pickup_longitude': '36.2',
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_drivers_cannot_request_rides(self):
        self.client.force_authenticate(user=make_user(User.ROLE_DRIVER))

        response = self.client.post('/api/customer/rides/', {
            'pickup_latitude': '33.5', 'pickup_longitude': '36.2',
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_cancel_other_customers_ride(self):
        ride = make_ride()

        response = self.client.post(f'/api/customer/rides/{ride.id}/cancel/')

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data, {
            'success': False,
            'error': 'forbidden',
            'message': 'You can only cancel your own rides',
        })

    def test_cancel_missing_ride(self):
        response = self.client.post('/api/customer/rides/999999/cancel/')

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['error'], 'ride_not_found')

    def test_cancel_own_ride(self):
        ride = make_ride(customer=self.customer)

        response = self.client.post(f'/api/customer/rides/{ride.id}/cancel/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['ride']['status'], RideStatus.CANCELLED)
        self.assertFalse(response.data['was_assigned'])

    def test_join_full_ride(self):
        ride = make_ride(is_shared=True, max_passengers=2, current_passengers=2)

        response = self.client.post(f'/api/customer/rides/{ride.id}/join/', {
            'pickup_latitude': '33.5', 'pickup_longitude': '36.2',
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data['error'], 'ride_full')

    def test_join_shared_ride(self):
        ride = make_ride(is_shared=True, max_passengers=3)

        response = self.client.post(f'/api/customer/rides/{ride.id}/join/', {
            'pickup_latitude': '33.5', 'pickup_longitude': '36.2',
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['ride']['current_passengers'], 2)
        self.assertEqual(response.data['passenger']['fare_share'], 350)

    def test_shared_rides_listing(self):
        ride = make_ride(is_shared=True, max_passengers=3)

        response = self.client.get('/api/customer/shared-rides/', {
            'pickup_latitude': '33.5', 'pickup_longitude': '36.2',
        })

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['count'], 1)
        self.assertEqual(response.data['rides'][0]['id'], ride.id)

    def test_rate_driver(self):
        driver = make_driver()
        ride = make_ride(customer=self.customer, status=RideStatus.COMPLETED, driver=driver)

        response = self.client.post(f'/api/customer/rides/{ride.id}/rate/', {
            'rating': 3, 'comment': 'Late pickup',
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        driver.refresh_from_db()
        self.assertEqual(driver.rating, 3)

        again = self.client.post(f'/api/customer/rides/{ride.id}/rate/', {'rating': 5}, format='json')
        self.assertEqual(again.status_code, status.HTTP_412_PRECONDITION_FAILED)

    def test_rate_unfinished_ride(self):
        ride = make_ride(customer=self.customer)

        response = self.client.post(f'/api/customer/rides/{ride.id}/rate/', {'rating': 5}, format='json')

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data['error'], 'invalid_state')

    def test_history(self):
        make_ride(customer=self.customer)
        make_ride()

        response = self.client.get('/api/customer/history/')

        self.assertEqual(response.data['count'], 1)

    def test_storage_outage_returns_503(self):
        with patch.object(RideGateway, '_rides', side_effect=OperationalError('server closed the connection')):
            response = self.client.get('/api/customer/history/')

        self.assertEqual(response.status_code, status.HTTP_503_SERVICE_UNAVAILABLE)
        self.assertEqual(response.data['error'], 'storage_unavailable')

    def test_requires_authentication(self):
        self.client.force_authenticate(user=None)

        response = self.client.get('/api/customer/history/')

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)


class DriverRideApiTests(APITestCase):
    def setUp(self):
        self.driver = make_driver(latitude=33.5, longitude=36.2)
        self.client.force_authenticate(user=self.driver.user)

    def test_accept_start_complete(self):
        ride = make_ride()

        for action, expected in (
            ('accept', RideStatus.ACCEPTED),
            ('start', RideStatus.IN_PROGRESS),
            ('complete', RideStatus.COMPLETED),
        ):
            response = self.client.post(f'/api/driver/rides/{ride.id}/{action}/')
            self.assertEqual(response.status_code, status.HTTP_200_OK)
            self.assertEqual(response.data['ride']['status'], expected)

        self.driver.refresh_from_db()
        self.assertTrue(self.driver.is_available)
        self.assertEqual(self.driver.total_rides, 1)

    def test_accept_taken_ride(self):
        ride = make_ride(status=RideStatus.ACCEPTED, driver=make_driver())

        response = self.client.post(f'/api/driver/rides/{ride.id}/accept/')

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data['error'], 'ride_not_available')

    def test_start_someone_elses_ride(self):
        ride = make_ride(status=RideStatus.ACCEPTED, driver=make_driver())

        response = self.client.post(f'/api/driver/rides/{ride.id}/start/')

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_pending_rides(self):
        make_ride()
        make_ride(status=RideStatus.CANCELLED)

        response = self.client.get('/api/driver/pending-rides/')

        self.assertEqual(response.data['count'], 1)

    def test_user_without_profile(self):
        self.client.force_authenticate(user=make_user(User.ROLE_DRIVER))

        response = self.client.get('/api/driver/pending-rides/')

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['error'], 'driver_not_found')


class NearestDriversApiTests(APITestCase):
    def setUp(self):
        self.client.force_authenticate(user=make_user())

    def test_nearest_drivers(self):
        far = make_driver(latitude=33.6, longitude=36.2)
        near = make_driver(latitude=33.51, longitude=36.2)
        make_driver(latitude=33.5, longitude=36.2, is_available=False)

        response = self.client.get('/api/rides/nearest-drivers/', {
            'latitude': '33.5', 'longitude': '36.2', 'limit': 5,
        })

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([d['id'] for d in response.data['drivers']], [near.id, far.id])
        self.assertLess(response.data['drivers'][0]['distance_meters'],
                        response.data['drivers'][1]['distance_meters'])

    def test_requires_coordinates(self):
        response = self.client.get('/api/rides/nearest-drivers/')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)


class HealthCheckTests(APITestCase):
    def test_healthy(self):
        response = self.client.get('/health/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['services']['database'], 'healthy')


class SharedRidePassengersApiTests(APITestCase):
    def setUp(self):
        self.owner = make_user()
        self.joiner = make_user()
        self.ride = make_ride(customer=self.owner, is_shared=True, max_passengers=3)

    def join(self):
        self.client.force_authenticate(user=self.joiner)
        return self.client.post(f'/api/customer/rides/{self.ride.id}/join/', {
            'pickup_latitude': '33.5', 'pickup_longitude': '36.2',
        }, format='json')

    def test_join_response_lists_passengers(self):
        response = self.join()

        passengers = response.data['ride']['passengers']
        self.assertEqual(len(passengers), 1)
        self.assertEqual(passengers[0]['customer']['id'], self.joiner.id)
        self.assertEqual(passengers[0]['fare_share'], 350)

    def test_joined_ride_in_joiner_history(self):
        self.join()

        response = self.client.get('/api/customer/history/')

        self.assertEqual(response.data['count'], 1)
        self.assertEqual(response.data['rides'][0]['id'], self.ride.id)

    def test_owner_sees_who_joined(self):
        self.join()
        self.client.force_authenticate(user=self.owner)

        response = self.client.get('/api/customer/history/')

        ride = response.data['rides'][0]
        self.assertEqual(ride['current_passengers'], 2)
        self.assertEqual([p['customer']['id'] for p in ride['passengers']], [self.joiner.id])


class SeatLimitApiTests(APITestCase):
    def setUp(self):
        self.client.force_authenticate(user=make_user())

    def request(self, seats):
        return self.client.post('/api/customer/rides/', {
            'pickup_latitude': '33.5', 'pickup_longitude': '36.2',
            'is_shared': True, 'max_passengers': seats,
        }, format='json')

    @override_settings(RIDE_MAX_SHARED_PASSENGERS=6)
    def test_raised_limit_accepted(self):
        response = self.request(6)

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['ride']['max_passengers'], 6)

    @override_settings(RIDE_MAX_SHARED_PASSENGERS=2)
    def test_lowered_limit_rejected_as_bad_request(self):
        response = self.request(3)

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('max_passengers', response.data)


class StorageOutageApiTests(APITestCase):
    def test_accept_during_outage(self):
        driver = make_driver()
        ride = make_ride()
        self.client.force_authenticate(user=driver.user)

        with patch.object(RideGateway, '_rides', side_effect=OperationalError('server closed the connection')):
            response = self.client.post(f'/api/driver/rides/{ride.id}/accept/')

        self.assertEqual(response.status_code, status.HTTP_503_SERVICE_UNAVAILABLE)
        self.assertEqual(response.data['error'], 'storage_unavailable')
        self.assertEqual(Ride.objects.get(pk=ride.id).status, RideStatus.PENDING)

    def test_unreachable_database_rejected_before_view_runs(self):
        self.client.force_authenticate(user=make_user())

        with patch('services.gateway.connections') as connections:
            connections.__getitem__.return_value.ensure_connection.side_effect = OperationalError('down')
            with patch('customers.views.rides.request_ride') as request_ride:
                response = self.client.post('/api/customer/rides/', {
                    'pickup_latitude': '33.5', 'pickup_longitude': '36.2',
                }, format='json')

        self.assertEqual(response.status_code, status.HTTP_503_SERVICE_UNAVAILABLE)
        self.assertEqual(response.data['error'], 'storage_unavailable')
        request_ride.assert_not_called()


class RidePassengersApiTests(APITestCase):
    def test_requester_lists_passengers(self):
        owner = make_user()
        ride = make_ride(customer=owner, is_shared=True, max_passengers=3)
        self.client.force_authenticate(user=make_user())
        self.client.post(f'/api/customer/rides/{ride.id}/join/', {
            'pickup_latitude': '33.5', 'pickup_longitude': '36.2',
        }, format='json')

        self.client.force_authenticate(user=owner)
        response = self.client.get(f'/api/customer/rides/{ride.id}/passengers/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['count'], 1)
        self.assertEqual(response.data['passengers'][0]['fare_share'], 350)

    def test_outsider_forbidden(self):
        ride = make_ride(is_shared=True, max_passengers=3)
        self.client.force_authenticate(user=make_user())

        response = self.client.get(f'/api/customer/rides/{ride.id}/passengers/')

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
