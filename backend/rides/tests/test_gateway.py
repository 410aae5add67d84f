from unittest.mock import patch

from django.db import OperationalError
from django.test import TestCase

from rides.models import Rating, Ride, RideStatus
from services.exceptions import (
    CapacityError,
    PreconditionFailedError,
    RideNotAvailableError,
    ServiceUnavailableError,
)
from services.gateway import RideGateway

from .helpers import make_driver, make_ride, make_user


class UpdateRideStatusTests(TestCase):
    def setUp(self):
        self.gateway = RideGateway()
        self.driver = make_driver()
        self.ride = make_ride()

    def test_accept_binds_driver_and_stamps_time(self):
        ride = self.gateway.update_ride_status(
            self.ride.id, RideStatus.ACCEPTED,
            driver_id=self.driver.id, expected_statuses=(RideStatus.PENDING,),
        )

        self.assertEqual(ride.status, RideStatus.ACCEPTED)
        self.assertEqual(ride.driver_id, self.driver.id)
        self.assertIsNotNone(ride.accepted_at)

    def test_accept_requires_driver(self):
        with self.assertRaises(ValueError):
            self.gateway.update_ride_status(self.ride.id, RideStatus.ACCEPTED)

    def test_second_writer_loses(self):
        other = make_driver()
        self.gateway.update_ride_status(
            self.ride.id, RideStatus.ACCEPTED,
            driver_id=self.driver.id, expected_statuses=(RideStatus.PENDING,),
        )

        with self.assertRaises(RideNotAvailableError):
            self.gateway.update_ride_status(
                self.ride.id, RideStatus.ACCEPTED,
                driver_id=other.id, expected_statuses=(RideStatus.PENDING,),
            )

        self.assertEqual(Ride.objects.get(pk=self.ride.id).driver_id, self.driver.id)

    def test_expected_driver_guard(self):
        ride = make_ride(status=RideStatus.ACCEPTED, driver=self.driver)

        with self.assertRaises(RideNotAvailableError):
            self.gateway.update_ride_status(
                ride.id, RideStatus.IN_PROGRESS,
                expected_statuses=(RideStatus.ACCEPTED,), expected_driver_id=make_driver().id,
            )

    def test_missing_ride(self):
        with self.assertRaises(RideNotAvailableError):
            self.gateway.update_ride_status(999999, RideStatus.CANCELLED)


class PassengerAndRatingWritesTests(TestCase):
    def setUp(self):
        self.gateway = RideGateway()

    def test_increment_stops_at_capacity(self):
        ride = make_ride(is_shared=True, max_passengers=2)

        self.assertEqual(self.gateway.increment_ride_passengers(ride.id).current_passengers, 2)
        with self.assertRaises(CapacityError):
            self.gateway.increment_ride_passengers(ride.id)

    def test_duplicate_passenger(self):
        ride = make_ride(is_shared=True, max_passengers=3)
        customer = make_user()
        fields = {'ride': ride, 'customer': customer,
                  'pickup_latitude': '33.5', 'pickup_longitude': '36.2', 'fare_share': 350}
        self.gateway.add_ride_passenger(**fields)

        with self.assertRaises(PreconditionFailedError):
            self.gateway.add_ride_passenger(**fields)

        self.assertTrue(self.gateway.has_joined_ride(ride.id, customer.id))

    def test_duplicate_driver_profile(self):
        driver = make_driver()

        with self.assertRaises(PreconditionFailedError):
            self.gateway.create_driver(driver.user_id, vehicle_type='sedan', vehicle_plate='X-1')

    def test_rating_totals(self):
        driver = make_driver()
        self.assertEqual(self.gateway.get_driver_rating_totals(driver.id), (0, 0))

        for score in (5, 3):
            ride = make_ride(status=RideStatus.COMPLETED, driver=driver)
            self.gateway.create_rating(ride=ride, driver=driver, customer=ride.customer, rating=score)

        self.assertEqual(self.gateway.get_driver_rating_totals(driver.id), (8, 2))


class DriverQueriesTests(TestCase):
    def test_active_ride_detection(self):
        gateway = RideGateway()
        driver = make_driver()
        self.assertFalse(gateway.driver_has_active_ride(driver.id))

        make_ride(status=RideStatus.COMPLETED, driver=driver)
        self.assertFalse(gateway.driver_has_active_ride(driver.id))

        make_ride(status=RideStatus.IN_PROGRESS, driver=driver)
        self.assertTrue(gateway.driver_has_active_ride(driver.id))

    def test_available_drivers_in_id_order(self):
        first = make_driver()
        make_driver(is_available=False)
        third = make_driver()

        self.assertEqual([d.id for d in RideGateway().get_available_drivers()], [first.id, third.id])


class StorageFailureTests(TestCase):
    def test_reads_raise_unavailable(self):
        gateway = RideGateway()

        with patch.object(RideGateway, '_rides', side_effect=OperationalError('connection refused')):
            with self.assertRaises(ServiceUnavailableError):
                gateway.get_pending_rides()
            with self.assertRaises(ServiceUnavailableError):
                gateway.get_available_shared_rides('33.5', '36.2')

        with patch.object(RideGateway, '_drivers', side_effect=OperationalError('connection refused')):
            with self.assertRaises(ServiceUnavailableError):
                gateway.get_available_drivers()

    def test_open_raises_unavailable(self):
        gateway = RideGateway()

        with patch('services.gateway.connections') as connections:
            connections.__getitem__.return_value.ensure_connection.side_effect = OperationalError('down')
            with self.assertRaises(ServiceUnavailableError):
                gateway.open()

    def test_close_keeps_transaction_connection(self):
        # TestCase wraps each test in a transaction
        with RideGateway() as gateway:
            self.assertEqual(gateway.get_pending_rides(), [])
        self.assertEqual(Ride.objects.count(), 0)


class StorageWriteFailureTests(TestCase):
    def setUp(self):
        self.gateway = RideGateway()
        self.driver = make_driver()
        self.ride = make_ride(is_shared=True, max_passengers=3)

    def outage(self, model):
        return patch.object(model.objects, 'using', side_effect=OperationalError('connection reset'))

    def test_create_ride(self):
        with self.outage(Ride):
            with self.assertRaises(ServiceUnavailableError):
                self.gateway.create_ride(
                    customer=make_user(), pickup_latitude='33.5', pickup_longitude='36.2',
                )

    def test_update_ride_status(self):
        with self.outage(Ride):
            with self.assertRaises(ServiceUnavailableError):
                self.gateway.update_ride_status(
                    self.ride.id, RideStatus.ACCEPTED,
                    driver_id=self.driver.id, expected_statuses=(RideStatus.PENDING,),
                )

        self.assertEqual(Ride.objects.get(pk=self.ride.id).status, RideStatus.PENDING)

    def test_increment_ride_passengers(self):
        with self.outage(Ride):
            with self.assertRaises(ServiceUnavailableError):
                self.gateway.increment_ride_passengers(self.ride.id)

        self.assertEqual(Ride.objects.get(pk=self.ride.id).current_passengers, 1)

    def test_create_rating(self):
        ride = make_ride(status=RideStatus.COMPLETED, driver=self.driver)

        with self.outage(Rating):
            with self.assertRaises(ServiceUnavailableError):
                self.gateway.create_rating(ride=ride, driver=self.driver, customer=ride.customer, rating=4)

        self.assertFalse(Rating.objects.exists())


class CustomerRidesQueryTests(TestCase):
    def test_includes_joined_shared_rides(self):
        gateway = RideGateway()
        joiner = make_user()
        own = make_ride(customer=joiner)
        joined = make_ride(is_shared=True, max_passengers=3)
        make_ride(is_shared=True, max_passengers=3)
        gateway.add_ride_passenger(
            ride=joined, customer=joiner,
            pickup_latitude='33.5', pickup_longitude='36.2', fare_share=350,
        )

        rides = gateway.get_customer_rides(joiner.id)

        self.assertEqual({r.id for r in rides}, {own.id, joined.id})
        self.assertEqual(len(rides), 2)

    def test_driver_ratings_oldest_first(self):
        gateway = RideGateway()
        driver = make_driver()
        for score in (4, 2):
            ride = make_ride(status=RideStatus.COMPLETED, driver=driver)
            gateway.create_rating(ride=ride, driver=driver, customer=ride.customer, rating=score)

        self.assertEqual([r.rating for r in gateway.get_driver_ratings(driver.id)], [4, 2])
