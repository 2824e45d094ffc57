"""
Unit tests for the Margin Engine.

Tests gross/operating margins, health classification on both scales,
minimum-price inversion and price point comparison.
"""

import unittest
import math
import sys
import os

# Add src to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from basedpricer.engines.margin_engine import (
    MarginStatus,
    MarginHealth,
    MarginThresholds,
    calculate_gross_margin,
    calculate_profit,
    calculate_operating_margin,
    calculate_tier_margin,
    get_margin_status,
    get_margin_health,
    get_gross_margin_health,
    get_tier_margin_health,
    get_operating_margin_health,
    is_margin_healthy,
    is_margin_acceptable,
    get_margin_info,
    calculate_margin_breakdown,
    calculate_tier_margins,
    compare_price_points,
    find_minimum_price_for_margin,
    build_price_sensitivity_table
)
from basedpricer.engines.cogs_engine import Tier


class TestGrossMargin(unittest.TestCase):
    """Test gross margin calculation."""

    def test_positive_margin(self):
        self.assertAlmostEqual(calculate_gross_margin(100, 30), 70)

    def test_negative_margin(self):
        """Test COGS above price gives a negative margin."""
        self.assertEqual(calculate_gross_margin(100, 150), -50)

    def test_non_positive_price(self):
        """Test that zero or negative prices return 0."""
        self.assertEqual(calculate_gross_margin(0, 50), 0)
        self.assertEqual(calculate_gross_margin(-100, 50), 0)

    def test_tier_margin_matches_gross(self):
        self.assertEqual(calculate_tier_margin(50, 10), calculate_gross_margin(50, 10))

    def test_profit(self):
        self.assertEqual(calculate_profit(100, 30), 70)
        self.assertEqual(calculate_profit(20, 30), -10)

    def test_margin_bounds(self):
        """Test zero COGS gives 100% and COGS equal to price gives 0%."""
        for price in [0.01, 1, 9.99, 49, 100, 1_000_000]:
            with self.subTest(price=price):
                self.assertEqual(calculate_gross_margin(price, 0), 100)
                self.assertEqual(calculate_gross_margin(price, price), 0)

    def test_repeated_calls_agree(self):
        self.assertEqual(calculate_gross_margin(79, 23.5), calculate_gross_margin(79, 23.5))
        self.assertEqual(get_margin_info(79, 23.5), get_margin_info(79, 23.5))


class TestOperatingMargin(unittest.TestCase):
    """Test operating margin calculation."""

    def test_positive(self):
        self.assertEqual(calculate_operating_margin(1000, 300, 200), 50)

    def test_negative(self):
        self.assertAlmostEqual(calculate_operating_margin(1000, 700, 500), -20)

    def test_no_revenue(self):
        self.assertEqual(calculate_operating_margin(0, 100, 100), 0)


class TestMarginClassification(unittest.TestCase):
    """Test status and health classification."""

    def test_status_bands(self):
        """Test the great/ok/low boundaries."""
        self.assertEqual(get_margin_status(70), MarginStatus.GREAT)
        self.assertEqual(get_margin_status(69.9), MarginStatus.OK)
        self.assertEqual(get_margin_status(50), MarginStatus.OK)
        self.assertEqual(get_margin_status(49.9), MarginStatus.LOW)

    def test_health_bands(self):
        self.assertEqual(get_margin_health(85), MarginHealth.HEALTHY)
        self.assertEqual(get_margin_health(55), MarginHealth.ACCEPTABLE)
        self.assertEqual(get_margin_health(-10), MarginHealth.LOW)

    def test_health_aliases(self):
        """Test gross and tier health share the gross scale."""
        self.assertEqual(get_gross_margin_health(60), MarginHealth.ACCEPTABLE)
        self.assertEqual(get_tier_margin_health(75), MarginHealth.HEALTHY)

    def test_operating_scale(self):
        """Test the operating margin scale is independent of the gross scale."""
        self.assertEqual(get_operating_margin_health(20), MarginHealth.HEALTHY)
        self.assertEqual(get_operating_margin_health(0), MarginHealth.ACCEPTABLE)
        self.assertEqual(get_operating_margin_health(-0.1), MarginHealth.LOW)

    def test_predicates(self):
        self.assertTrue(is_margin_healthy(70))
        self.assertFalse(is_margin_healthy(69))
        self.assertTrue(is_margin_acceptable(50))
        self.assertFalse(is_margin_acceptable(49))

    def test_injected_thresholds(self):
        """Test that a custom scale overrides the defaults."""
        strict = MarginThresholds(healthy=80, acceptable=60)
        self.assertEqual(get_margin_status(75, strict), MarginStatus.OK)
        self.assertEqual(get_margin_health(55, strict), MarginHealth.LOW)

    def test_inverted_thresholds_rejected(self):
        with self.assertRaises(ValueError):
            MarginThresholds(healthy=40, acceptable=60)


class TestMarginInfo(unittest.TestCase):
    """Test combined margin records."""

    def test_margin_info(self):
        info = get_margin_info(100, 30)
        self.assertAlmostEqual(info.margin, 70)
        self.assertEqual(info.profit, 70)
        self.assertEqual(info.status, MarginStatus.GREAT)
        self.assertEqual(info.to_dict()["status"], "great")

    def test_breakdown(self):
        """Test COGS is variable plus fixed allocation."""
        breakdown = calculate_margin_breakdown(100, 20, 10)

        self.assertEqual(breakdown.cogs, 30)
        self.assertAlmostEqual(breakdown.gross_margin, 70)
        self.assertEqual(breakdown.profit, 70)
        self.assertEqual(breakdown.gross_margin_health, MarginHealth.HEALTHY)

    def test_tier_margins(self):
        tiers = [Tier("starter", "Starter", 20), Tier("pro", "Pro", 100)]
        margins = calculate_tier_margins(tiers, 10)

        self.assertEqual([m.tier_id for m in margins], ["starter", "pro"])
        self.assertAlmostEqual(margins[0].margin, 50)
        self.assertEqual(margins[0].status, MarginStatus.OK)
        self.assertAlmostEqual(margins[1].margin, 90)


class TestPricePoints(unittest.TestCase):
    """Test price point analysis."""

    def test_compare_price_points(self):
        results = compare_price_points([50, 75, 100], 30)

        self.assertEqual(len(results), 3)
        self.assertEqual(results[0].price, 50)
        self.assertAlmostEqual(results[0].margin, 40)
        self.assertEqual(results[0].profit, 20)
        self.assertEqual(results[0].status, MarginStatus.LOW)
        self.assertAlmostEqual(results[1].margin, 60)
        self.assertEqual(results[1].status, MarginStatus.OK)
        self.assertEqual(results[2].status, MarginStatus.GREAT)

    def test_minimum_price(self):
        """Test inversion of the gross margin formula."""
        self.assertAlmostEqual(find_minimum_price_for_margin(30, 70), 100)
        self.assertEqual(find_minimum_price_for_margin(30, 0), 30)

    def test_minimum_price_round_trip(self):
        """Test that the minimum price achieves the target margin."""
        price = find_minimum_price_for_margin(42, 65)
        self.assertAlmostEqual(calculate_gross_margin(price, 42), 65)

    def test_unattainable_margin(self):
        self.assertEqual(find_minimum_price_for_margin(30, 100), math.inf)
        self.assertEqual(find_minimum_price_for_margin(30, 120), math.inf)

    def test_sensitivity_table(self):
        """Test the DataFrame rendering of price points."""
        table = build_price_sensitivity_table([50, 75, 100], 30)

        self.assertEqual(list(table.columns), ["price", "margin", "profit", "status"])
        self.assertEqual(len(table), 3)
        self.assertEqual(table["status"].tolist(), ["low", "ok", "great"])
        self.assertEqual(table.iloc[1]["profit"], 45)

    def test_empty_sensitivity_table(self):
        table = build_price_sensitivity_table([], 30)
        self.assertTrue(table.empty)
        self.assertEqual(list(table.columns), ["price", "margin", "profit", "status"])


if __name__ == '__main__':
    unittest.main()
