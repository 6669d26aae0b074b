"""
Tests for the assumed-decimal-point decoder.

Run with:
    python -m pytest tests/test_assumed_decimal.py -v
"""

import math
import unittest

from tle_catalog.assumed_decimal import parse_decimal_point_assumed


class TestAssumedDecimal(unittest.TestCase):
    """Decoding of NORAD sign+mantissa+exponent fields."""

    def test_reference_values(self):
        """Test the values quoted in the NORAD examples."""
        self.assertEqual(parse_decimal_point_assumed("14141-3"), 0.00014141)
        self.assertEqual(parse_decimal_point_assumed("00000-0"), 0.0)
        self.assertEqual(parse_decimal_point_assumed("-36258-4"), -0.36258e-4)

    def test_drag_terms(self):
        self.assertEqual(parse_decimal_point_assumed("25302-4"), 0.25302e-4)
        self.assertEqual(parse_decimal_point_assumed("15393-3"), 0.15393e-3)
        self.assertEqual(parse_decimal_point_assumed(" 95636-4"), 0.95636e-4)

    def test_positive_exponent_marker(self):
        """'+0' is a normal exponent, as in CelesTrak's ' 00000+0'."""
        self.assertEqual(parse_decimal_point_assumed("00000+0"), 0.0)
        self.assertEqual(parse_decimal_point_assumed("12345+1"), 1.2345)

    def test_explicit_positive_mantissa_sign(self):
        self.assertEqual(parse_decimal_point_assumed("+12345-1"), 0.012345)

    def test_no_exponent(self):
        """Eccentricity carries neither sign nor exponent."""
        self.assertEqual(parse_decimal_point_assumed("0004885"), 0.0004885)
        self.assertEqual(parse_decimal_point_assumed("6941537"), 0.6941537)
        self.assertEqual(parse_decimal_point_assumed("-12345"), -0.12345)

    def test_zero_is_never_negative(self):
        value = parse_decimal_point_assumed("-00000-0")
        self.assertEqual(value, 0.0)
        self.assertEqual(math.copysign(1.0, value), 1.0)

    def test_matches_mantissa_times_power_of_ten(self):
        """Test decode == 0.<digits> * 10**exponent to the rounding precision."""
        cases = [
            ("10000", -1),
            ("99999", -9),
            ("50000", -5),
            ("31722", -4),
            ("28767", -3),
            ("5", 0),
        ]
        for digits, exponent in cases:
            sign = "+" if exponent >= 0 else "-"
            field = f"{digits}{sign}{abs(exponent)}"
            expected = int(digits) / 10 ** len(digits) * 10.0 ** exponent
            self.assertAlmostEqual(
                parse_decimal_point_assumed(field), expected, places=15, msg=field
            )

    def test_rejects_garbage(self):
        for field in ["", "   ", "-", "abcde-1", "12345-", "12a45-3", "123-4-5", "12345-x"]:
            with self.assertRaises(ValueError, msg=repr(field)):
                parse_decimal_point_assumed(field)


if __name__ == "__main__":
    unittest.main()
