from django.test import SimpleTestCase

from common.utils import calculate_distance, calculate_fare, parse_coordinate, round_half_up


class CalculateDistanceTests(SimpleTestCase):
    def test_same_point_is_zero(self):
        self.assertEqual(calculate_distance(33.5, 36.2, 33.5, 36.2), 0)

    def test_symmetric(self):
        points = [
            (33.5, 36.2, 33.51, 36.21),
            (-33.86, 151.2, 51.5, -0.12),
            (0, 179.9, 0, -179.9),
        ]
        for lat1, lon1, lat2, lon2 in points:
            self.assertEqual(
                calculate_distance(lat1, lon1, lat2, lon2),
                calculate_distance(lat2, lon2, lat1, lon1),
            )

    def test_one_degree_of_latitude(self):
        # R * pi / 180 with R = 6,371 km
        self.assertAlmostEqual(calculate_distance(0, 0, 1, 0), 111194.93, places=1)

    def test_accepts_decimal_strings(self):
        self.assertEqual(
            calculate_distance('33.500000', '36.200000', '33.510000', '36.210000'),
            calculate_distance(33.5, 36.2, 33.51, 36.21),
        )

    def test_antipodal_points(self):
        self.assertAlmostEqual(calculate_distance(0, 0, 0, 180), 6371000 * 3.141592653589793, places=3)


class CalculateFareTests(SimpleTestCase):
    def test_flat_fare_for_zero_distance(self):
        self.assertEqual(calculate_fare(0, 1), 500)

    def test_one_kilometer(self):
        self.assertEqual(calculate_fare(1000, 1), 650)

    def test_split_between_passengers(self):
        self.assertEqual(calculate_fare(2000, 2), 400)

    def test_split_rounds_half_up(self):
        # 500 / 8 = 62.5
        self.assertEqual(calculate_fare(0, 8), 63)

    def test_distance_component_rounded_before_split(self):
        # 1003 m -> 150.45 -> 150, so 650 / 1
        self.assertEqual(calculate_fare(1003, 1), 650)

    def test_zero_passengers_rejected(self):
        with self.assertRaises(ValueError):
            calculate_fare(1000, 0)

    def test_custom_rates(self):
        self.assertEqual(calculate_fare(2000, 1, base_fare=300, per_km_rate=100), 500)


class HelperTests(SimpleTestCase):
    def test_round_half_up(self):
        self.assertEqual(round_half_up(2.5), 3)
        self.assertEqual(round_half_up(3.5), 4)
        self.assertEqual(round_half_up(4.49), 4)
        self.assertEqual(round_half_up(0), 0)

    def test_parse_coordinate(self):
        self.assertEqual(parse_coordinate('33.500000'), 33.5)
        self.assertIsNone(parse_coordinate(None))
        self.assertIsNone(parse_coordinate(''))
        self.assertIsNone(parse_coordinate('north'))
        self.assertIsNone(parse_coordinate('NaN'))
