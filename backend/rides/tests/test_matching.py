from django.test import TestCase, override_settings

from services.gateway import RideGateway
from services.matching import find_nearest_drivers

from .helpers import make_driver


class FindNearestDriversTests(TestCase):
    def setUp(self):
        self.gateway = RideGateway()

    def test_closest_first(self):
        far = make_driver(latitude=33.6, longitude=36.2)
        near = make_driver(latitude=33.501, longitude=36.2)
        middle = make_driver(latitude=33.55, longitude=36.2)

        results = find_nearest_drivers(self.gateway, 33.5, 36.2)

        self.assertEqual([d.id for d, _ in results], [near.id, middle.id, far.id])
        distances = [dist for _, dist in results]
        self.assertEqual(distances, sorted(distances))

    def test_skips_unavailable_and_unlocated_drivers(self):
        make_driver(latitude=33.5, longitude=36.2, is_available=False)
        make_driver()
        make_driver(latitude='not-a-number', longitude=36.2)
        located = make_driver(latitude=33.7, longitude=36.2)

        results = find_nearest_drivers(self.gateway, 33.5, 36.2)

        self.assertEqual([d.id for d, _ in results], [located.id])

    def test_limit(self):
        drivers = [make_driver(latitude=33.5 + i / 100, longitude=36.2) for i in range(4)]

        results = find_nearest_drivers(self.gateway, 33.5, 36.2, limit=2)

        self.assertEqual([d.id for d, _ in results], [drivers[0].id, drivers[1].id])
        self.assertEqual(find_nearest_drivers(self.gateway, 33.5, 36.2, limit=0), [])

    @override_settings(NEAREST_DRIVERS_DEFAULT_LIMIT=1)
    def test_default_limit_from_settings(self):
        make_driver(latitude=33.5, longitude=36.2)
        make_driver(latitude=33.6, longitude=36.2)

        self.assertEqual(len(find_nearest_drivers(self.gateway, 33.5, 36.2)), 1)

    def test_negative_limit(self):
        with self.assertRaises(ValueError):
            find_nearest_drivers(self.gateway, 33.5, 36.2, limit=-1)

    def test_ties_keep_registration_order(self):
        first = make_driver(latitude=33.6, longitude=36.2)
        second = make_driver(latitude=33.6, longitude=36.2)

        results = find_nearest_drivers(self.gateway, 33.5, 36.2)

        self.assertEqual([d.id for d, _ in results], [first.id, second.id])
        self.assertEqual(results[0][1], results[1][1])

    def test_no_drivers(self):
        self.assertEqual(find_nearest_drivers(self.gateway, 33.5, 36.2), [])


class DriverLocationTests(TestCase):
    def test_parsed_location(self):
        driver = make_driver(latitude='33.512345', longitude='36.2')

        self.assertTrue(driver.has_location)
        self.assertEqual(driver.location, (33.512345, 36.2))

    def test_missing_or_garbled_location(self):
        self.assertFalse(make_driver().has_location)
        self.assertIsNone(make_driver(latitude='north', longitude='36.2').location)
        self.assertIsNone(make_driver(latitude='33.5', longitude='').location)
