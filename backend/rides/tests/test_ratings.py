from django.contrib import admin
from django.test import RequestFactory, TestCase

from accounts.models import User
from drivers.models import Driver
from rides.models import Rating, RideStatus
from services.exceptions import (
    ForbiddenError,
    InvalidStateError,
    PreconditionFailedError,
    RideNotFoundError,
)
from services.gateway import RideGateway
from services.ratings import rate_driver, recompute_driver_rating

from .helpers import make_driver, make_ride, make_user


class RateDriverTests(TestCase):
    def setUp(self):
        self.gateway = RideGateway()
        self.driver = make_driver()

    def completed_ride(self, customer=None):
        return make_ride(customer=customer, status=RideStatus.COMPLETED, driver=self.driver)

    def rate(self, score, ride=None):
        ride = ride or self.completed_ride()
        return rate_driver(self.gateway, ride.customer, ride.id, score)

    def test_average_rounds_half_up(self):
        for score in (5, 3, 4):
            self.rate(score)

        self.driver.refresh_from_db()
        self.assertEqual(self.driver.rating, 4)

        # 9 / 2 = 4.5
        Rating.objects.all().delete()
        self.rate(5)
        self.rate(4)
        self.driver.refresh_from_db()
        self.assertEqual(self.driver.rating, 5)

    def test_single_rating_replaces_default(self):
        self.rate(2)

        self.driver.refresh_from_db()
        self.assertEqual(self.driver.rating, 2)

    def test_rating_is_stored(self):
        ride = self.completed_ride()

        rating = rate_driver(self.gateway, ride.customer, ride.id, 4, comment='Smooth ride')

        self.assertEqual(rating.driver_id, self.driver.id)
        self.assertEqual(rating.customer_id, ride.customer_id)
        self.assertEqual(rating.comment, 'Smooth ride')

    def test_ride_can_be_rated_once(self):
        ride = self.completed_ride()
        self.rate(5, ride)

        with self.assertRaises(PreconditionFailedError):
            self.rate(1, ride)

        self.driver.refresh_from_db()
        self.assertEqual(self.driver.rating, 5)

    def test_only_completed_rides(self):
        ride = make_ride(status=RideStatus.IN_PROGRESS, driver=self.driver)

        with self.assertRaises(InvalidStateError):
            self.rate(5, ride)

    def test_only_own_rides(self):
        ride = self.completed_ride()

        with self.assertRaises(ForbiddenError):
            rate_driver(self.gateway, make_user(), ride.id, 5)

    def test_missing_ride(self):
        with self.assertRaises(RideNotFoundError):
            rate_driver(self.gateway, make_user(), 999999, 5)

    def test_score_out_of_range(self):
        ride = self.completed_ride()

        for score in (0, 6, 4.5, True):
            with self.assertRaises(PreconditionFailedError):
                self.rate(score, ride)

        self.assertFalse(Rating.objects.exists())


class RecomputeDriverRatingTests(TestCase):
    def test_no_ratings_leaves_value(self):
        driver = make_driver(rating=3)

        self.assertIsNone(recompute_driver_rating(RideGateway(), driver.id))
        self.assertEqual(Driver.objects.get(pk=driver.id).rating, 3)


class RatingAdminTests(TestCase):
    def test_ratings_cannot_be_changed_or_deleted(self):
        model_admin = admin.site._registry[Rating]
        request = RequestFactory().get('/admin/rides/rating/')
        request.user = make_user(User.ROLE_ADMIN)

        self.assertFalse(model_admin.has_change_permission(request))
        self.assertFalse(model_admin.has_delete_permission(request))
