"""
Unit tests for the AI Cost Engine.

Tests token cost arithmetic, analysis estimates, provider comparison,
catalog injection and the display helpers.
"""

import unittest
import sys
import os

# Add src to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from basedpricer.engines.ai_cost_engine import (
    Confidence,
    CostCategory,
    TokenUsage,
    calculate_token_cost,
    calculate_cost_for_tokens,
    estimate_tokens_from_chars,
    estimate_tokens_from_text,
    estimate_analysis_cost,
    compare_provider_costs,
    calculate_monthly_ai_cost_per_customer,
    get_cost_category,
    format_cost,
    format_tokens
)
from basedpricer.data.ai_pricing import (
    AIModelPricing,
    ProviderPricing,
    PricingCatalog,
    DEFAULT_PRICING_CATALOG
)


def make_local_catalog():
    return PricingCatalog([
        ProviderPricing(
            provider="local",
            provider_name="Local",
            default_model="m1",
            models={"m1": AIModelPricing("m1", "Model One", 1.0, 2.0, 8000)}
        )
    ])


class TestPricingCatalog(unittest.TestCase):
    """Test pricing lookups."""

    def test_default_model(self):
        """Test that omitting the model resolves the provider default."""
        pricing = DEFAULT_PRICING_CATALOG.get_pricing_for_model("openai")
        self.assertEqual(pricing.name, "gpt-4o")

    def test_unknown_lookups(self):
        self.assertIsNone(DEFAULT_PRICING_CATALOG.get_pricing_for_model("acme"))
        self.assertIsNone(DEFAULT_PRICING_CATALOG.get_pricing_for_model("openai", "gpt-99"))

    def test_all_models(self):
        models = DEFAULT_PRICING_CATALOG.all_models()
        self.assertEqual(len(models), 14)
        self.assertTrue(all("provider" in m for m in models))

    def test_catalog_is_read_only(self):
        provider = DEFAULT_PRICING_CATALOG.get_provider("openai")
        with self.assertRaises(TypeError):
            provider.models["free"] = None


class TestTokenCost(unittest.TestCase):
    """Test per-request token cost."""

    def test_one_million_input_tokens(self):
        cost = calculate_token_cost(TokenUsage(1_000_000, 0), "openai", "gpt-4o")

        self.assertAlmostEqual(cost.input_cost, 2.5)
        self.assertEqual(cost.output_cost, 0)
        self.assertAlmostEqual(cost.total_cost_usd, 2.5)
        self.assertEqual(cost.model_name, "GPT-4o")

    def test_mixed_usage(self):
        cost = calculate_token_cost(TokenUsage(1000, 500), "openai", "gpt-4o")
        self.assertAlmostEqual(cost.total_cost_usd, 0.0075)

    def test_exchange_rate(self):
        """Test MYR total follows the given rate."""
        cost = calculate_token_cost(TokenUsage(1_000_000, 0), "openai", "gpt-4o", exchange_rate=4.0)
        self.assertAlmostEqual(cost.total_cost_myr, 10.0)

    def test_negative_tokens_clamped(self):
        """Test negative token counts are treated as zero."""
        cost = calculate_token_cost(TokenUsage(-500, 1_000_000), "openai", "gpt-4o")

        self.assertEqual(cost.input_tokens, 0)
        self.assertEqual(cost.input_cost, 0)
        self.assertAlmostEqual(cost.output_cost, 10.0)

    def test_unknown_provider(self):
        """Test missing pricing yields zero cost instead of an error."""
        cost = calculate_token_cost(TokenUsage(1000, 1000), "acme")

        self.assertEqual(cost.total_cost_usd, 0)
        self.assertEqual(cost.total_cost_myr, 0)
        self.assertEqual(cost.model_name, "unknown")

    def test_unknown_model_keeps_id(self):
        cost = calculate_token_cost(TokenUsage(1000, 1000), "openai", "gpt-99")
        self.assertEqual(cost.total_cost_usd, 0)
        self.assertEqual(cost.model_name, "gpt-99")

    def test_injected_catalog(self):
        """Test a substitute catalog is used for lookups."""
        totals = calculate_cost_for_tokens(
            1_000_000, 1_000_000, "local", exchange_rate=1.0, catalog=make_local_catalog()
        )
        self.assertAlmostEqual(totals.cost_usd, 3.0)
        self.assertAlmostEqual(totals.cost_myr, 3.0)

    def test_monthly_cost_per_customer(self):
        totals = calculate_monthly_ai_cost_per_customer(1000, 500, 100, "openai", "gpt-4o-mini")
        self.assertAlmostEqual(totals.cost_usd, 0.045)

    def test_to_dict(self):
        data = calculate_token_cost(TokenUsage(10, 10), "groq").to_dict()
        self.assertEqual(data["provider"], "groq")
        self.assertIn("totalCostUSD", data)
        self.assertEqual(data["modelName"], "Llama 3.3 70B")


class TestAnalysisEstimate(unittest.TestCase):
    """Test up-front analysis cost estimates."""

    def test_token_estimate(self):
        """Test input and output token heuristics."""
        estimate = estimate_analysis_cost(10, 20_000, "openai")

        # 5000 + 500 input, 2500 + 10 * 50 output
        self.assertEqual(estimate.estimated_tokens, 8500)
        self.assertAlmostEqual(estimate.estimated_cost_usd, 0.04375)
        self.assertEqual(estimate.confidence, Confidence.HIGH)

    def test_output_cap(self):
        """Test output tokens are capped at 4000."""
        estimate = estimate_analysis_cost(100, 400, "openai")
        self.assertEqual(estimate.estimated_tokens, 100 + 500 + 4000)

    def test_confidence_levels(self):
        self.assertEqual(estimate_analysis_cost(50, 1_000, "openai").confidence, Confidence.LOW)
        self.assertEqual(estimate_analysis_cost(3, 200_000, "openai").confidence, Confidence.LOW)
        self.assertEqual(estimate_analysis_cost(2, 500, "openai").confidence, Confidence.MEDIUM)
        self.assertEqual(estimate_analysis_cost(10, 5_000, "openai").confidence, Confidence.MEDIUM)

    def test_unknown_provider(self):
        estimate = estimate_analysis_cost(10, 20_000, "acme", "x-1")

        self.assertEqual(estimate.estimated_cost_usd, 0)
        self.assertEqual(estimate.estimated_tokens, 0)
        self.assertEqual(estimate.confidence, Confidence.LOW)
        self.assertEqual(estimate.model_name, "x-1")

    def test_token_helpers(self):
        self.assertEqual(estimate_tokens_from_chars(9), 3)
        self.assertEqual(estimate_tokens_from_chars(0), 0)
        self.assertEqual(estimate_tokens_from_text("abcdefgh"), 2)


class TestProviderComparison(unittest.TestCase):
    """Test cross-provider comparisons."""

    def test_default_providers(self):
        comparisons = compare_provider_costs(10_000, 2_000, "anthropic")

        self.assertEqual(
            [c.provider for c in comparisons],
            ["openai", "anthropic", "groq", "minimax"]
        )
        self.assertEqual([c.is_selected for c in comparisons], [False, True, False, False])
        self.assertEqual(comparisons[0].model_name, "gpt-4o")

    def test_unknown_provider_kept(self):
        """Test providers without pricing report zero instead of disappearing."""
        comparisons = compare_provider_costs(1000, 1000, "openai", ["openai", "acme"])

        self.assertEqual(len(comparisons), 2)
        self.assertEqual(comparisons[1].model_name, "unknown")
        self.assertEqual(comparisons[1].display_name, "Unknown")
        self.assertEqual(comparisons[1].estimated_cost_usd, 0)
        self.assertGreater(comparisons[0].estimated_cost_usd, 0)


class TestPresentation(unittest.TestCase):
    """Test cost categories and display formatting."""

    def test_cost_category(self):
        self.assertEqual(get_cost_category(0.01), CostCategory.CHEAP)
        self.assertEqual(get_cost_category(0.05), CostCategory.MODERATE)
        self.assertEqual(get_cost_category(0.20), CostCategory.EXPENSIVE)

    def test_format_cost(self):
        """Test precision switches for small amounts."""
        self.assertEqual(format_cost(0.005), "$0.0050")
        self.assertEqual(format_cost(1.5, show_both=False), "$1.50")
        self.assertEqual(format_cost(1.5, 6.7), "$1.50 (MYR 6.70)")
        self.assertEqual(format_cost(0.005, 0.0224), "$0.0050 (MYR 0.0224)")

    def test_format_tokens(self):
        self.assertEqual(format_tokens(1500), "1.5k")
        self.assertEqual(format_tokens(2_000_000), "2.0M")
        self.assertEqual(format_tokens(999), "999")


if __name__ == '__main__':
    unittest.main()
