"""
Unit tests for the rounding and formatting utilities.

Covers half-away-from-zero rounding, customer ceiling, compact currency
strings, currency-table formatting and JSON sanitizing of sentinels.
"""

import unittest
import math
import sys
import os

# Add src to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from basedpricer.engines.formatting import (
    round_currency,
    round_customers,
    round_percentage,
    format_currency_compact,
    format_currency,
    format_percentage,
    convert_currency,
    calculate_percentage,
    clamp,
    apply_discount,
    calculate_annual_price,
    json_safe
)


class TestRoundCurrency(unittest.TestCase):
    """Test monetary rounding."""

    def test_rounds_to_two_decimals(self):
        """Test default precision."""
        self.assertEqual(round_currency(10.456), 10.46)
        self.assertEqual(round_currency(10.454), 10.45)

    def test_half_rounds_away_from_zero(self):
        """Test that exact halves round up in magnitude."""
        self.assertEqual(round_currency(10.455), 10.46)
        self.assertEqual(round_currency(-10.456), -10.46)

    def test_custom_decimals(self):
        """Test explicit decimal places."""
        self.assertEqual(round_currency(10.4567, 3), 10.457)
        self.assertEqual(round_currency(10.4, 0), 10)

    def test_infinity_passes_through(self):
        """Test that unbounded values are not coerced."""
        self.assertTrue(math.isinf(round_currency(math.inf)))


class TestRoundCustomers(unittest.TestCase):
    """Test customer count rounding."""

    def test_always_rounds_up(self):
        """Test ceiling behaviour."""
        self.assertEqual(round_customers(10.1), 11)
        self.assertEqual(round_customers(10.0), 10)

    def test_negative_moves_toward_zero(self):
        """Test ceiling of a negative count."""
        self.assertEqual(round_customers(-10.1), -10)

    def test_infinity_passes_through(self):
        """Test that an unreachable break-even stays infinite."""
        self.assertEqual(round_customers(math.inf), math.inf)


class TestRoundPercentage(unittest.TestCase):
    """Test percentage rounding."""

    def test_default_one_decimal(self):
        self.assertEqual(round_percentage(72.456), 72.5)
        self.assertEqual(round_percentage(72.444), 72.4)

    def test_custom_decimals(self):
        self.assertEqual(round_percentage(72.456, 2), 72.46)
        self.assertEqual(round_percentage(72.456, 0), 72)


class TestCompactCurrency(unittest.TestCase):
    """Test compact currency strings."""

    def test_millions(self):
        """Test M suffix with one decimal."""
        self.assertEqual(format_currency_compact(5_000_000), "MYR 5.0M")
        self.assertEqual(format_currency_compact(1_250_000), "MYR 1.3M")

    def test_thousands(self):
        """Test K suffix with no decimals."""
        self.assertEqual(format_currency_compact(500_000), "MYR 500K")
        self.assertEqual(format_currency_compact(1_000), "MYR 1K")

    def test_small_values(self):
        """Test plain rounding below one thousand."""
        self.assertEqual(format_currency_compact(500), "MYR 500")
        self.assertEqual(format_currency_compact(999.4), "MYR 999")

    def test_custom_currency_code(self):
        self.assertEqual(format_currency_compact(2_000_000, "USD"), "USD 2.0M")


class TestFormatCurrency(unittest.TestCase):
    """Test formatting with the currency table."""

    def test_myr_with_symbol(self):
        """Test symbol prefix and thousands grouping."""
        self.assertEqual(format_currency(1234.5), "RM1,234.50")

    def test_without_symbol(self):
        self.assertEqual(format_currency(1234.5, show_symbol=False), "1,234.50")

    def test_euro_separators(self):
        """Test European separators."""
        self.assertEqual(format_currency(1234.5, "EUR"), "€1.234,50")

    def test_compact(self):
        """Test compact notation uses one decimal."""
        self.assertEqual(format_currency(1500, "USD", compact=True), "$1.5K")
        self.assertEqual(format_currency(2_500_000, "MYR", compact=True), "RM2.5M")

    def test_custom_decimals(self):
        self.assertEqual(format_currency(99.999, "USD", decimals=0), "$100")

    def test_format_percentage(self):
        self.assertEqual(format_percentage(72.456), "72.5%")
        self.assertEqual(format_percentage(50, 0), "50%")


class TestNumericHelpers(unittest.TestCase):
    """Test small numeric helpers."""

    def test_convert_same_currency(self):
        """Test that identical codes return the amount unchanged."""
        self.assertEqual(convert_currency(100, "USD", "USD"), 100)

    def test_convert_from_myr(self):
        """Test conversion through the MYR base rate."""
        self.assertAlmostEqual(convert_currency(100, "MYR", "USD"), 22.0)

    def test_convert_to_myr(self):
        self.assertAlmostEqual(convert_currency(22, "USD", "MYR"), 100.0)

    def test_calculate_percentage(self):
        self.assertEqual(calculate_percentage(25, 200), 12.5)
        self.assertEqual(calculate_percentage(25, 0), 0)

    def test_clamp(self):
        self.assertEqual(clamp(150, 0, 100), 100)
        self.assertEqual(clamp(-5, 0, 100), 0)
        self.assertEqual(clamp(42, 0, 100), 42)

    def test_discounts(self):
        """Test discount and annual pricing."""
        self.assertAlmostEqual(apply_discount(100, 20), 80)
        self.assertAlmostEqual(calculate_annual_price(50, 20), 480)


class TestJsonSafe(unittest.TestCase):
    """Test JSON sanitizing of sentinel values."""

    def test_infinity_becomes_string(self):
        self.assertEqual(json_safe(math.inf), "Infinity")
        self.assertEqual(json_safe(-math.inf), "-Infinity")

    def test_nan_becomes_none(self):
        self.assertIsNone(json_safe(float("nan")))

    def test_nested_structures(self):
        """Test recursion through dicts and lists."""
        result = json_safe({"a": [1, math.inf], "b": {"c": None, "d": 2.5}})
        self.assertEqual(result, {"a": [1, "Infinity"], "b": {"c": None, "d": 2.5}})


if __name__ == '__main__':
    unittest.main()
