"""
Computation Engines Package.

This package contains the pure Python pricing calculators: COGS, margins,
investor metrics and AI token costs, plus shared rounding/formatting helpers.
These modules hold no state and perform no I/O.
"""

from .formatting import (
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

from .cogs_engine import (
    TierStatus,
    LimitKind,
    BillingCycle,
    VariableCostItem,
    FixedCostItem,
    CostBreakdown,
    TierLimit,
    Tier,
    calculate_item_cost_per_customer,
    calculate_variable_costs,
    calculate_total_variable_costs,
    get_cost_rate_by_id,
    calculate_total_fixed_costs,
    calculate_fixed_cost_per_customer,
    calculate_cogs_breakdown,
    calculate_total_cogs,
    calculate_cogs_per_customer,
    build_tier_price_map,
    calculate_mrr,
    calculate_total_variable_costs_for_distribution,
    calculate_break_even_customers,
    calculate_monthly_profit
)

from .margin_engine import (
    MarginStatus,
    MarginHealth,
    MarginThresholds,
    GROSS_MARGIN_THRESHOLDS,
    OPERATING_MARGIN_THRESHOLDS,
    MarginInfo,
    MarginBreakdown,
    PricePointComparison,
    TierMargin,
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

from .investor_metrics_engine import (
    HealthStatus,
    ValuationProjection,
    MilestoneTarget,
    InvestorMetrics,
    calculate_valuation,
    calculate_arr,
    calculate_mrr_from_customers,
    calculate_ltv,
    calculate_ltv_from_churn,
    calculate_ltv_cac_ratio,
    get_ltv_cac_health,
    calculate_payback_period,
    get_payback_health,
    calculate_months_to_target,
    calculate_break_even_timeline,
    calculate_milestones,
    milestones_to_frame,
    calculate_investor_metrics,
    format_valuation_range
)
from .investor_metrics_engine import get_gross_margin_health as get_investor_margin_health

from .ai_cost_engine import (
    Confidence,
    CostCategory,
    TokenUsage,
    AICostBreakdown,
    CostEstimate,
    ProviderComparison,
    CostTotals,
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

__all__ = [
    # Formatting
    "round_currency",
    "round_customers",
    "round_percentage",
    "format_currency_compact",
    "format_currency",
    "format_percentage",
    "convert_currency",
    "calculate_percentage",
    "clamp",
    "apply_discount",
    "calculate_annual_price",
    "json_safe",

    # COGS
    "TierStatus",
    "LimitKind",
    "BillingCycle",
    "VariableCostItem",
    "FixedCostItem",
    "CostBreakdown",
    "TierLimit",
    "Tier",
    "calculate_item_cost_per_customer",
    "calculate_variable_costs",
    "calculate_total_variable_costs",
    "get_cost_rate_by_id",
    "calculate_total_fixed_costs",
    "calculate_fixed_cost_per_customer",
    "calculate_cogs_breakdown",
    "calculate_total_cogs",
    "calculate_cogs_per_customer",
    "build_tier_price_map",
    "calculate_mrr",
    "calculate_total_variable_costs_for_distribution",
    "calculate_break_even_customers",
    "calculate_monthly_profit",

    # Margins
    "MarginStatus",
    "MarginHealth",
    "MarginThresholds",
    "GROSS_MARGIN_THRESHOLDS",
    "OPERATING_MARGIN_THRESHOLDS",
    "MarginInfo",
    "MarginBreakdown",
    "PricePointComparison",
    "TierMargin",
    "calculate_gross_margin",
    "calculate_profit",
    "calculate_operating_margin",
    "calculate_tier_margin",
    "get_margin_status",
    "get_margin_health",
    "get_gross_margin_health",
    "get_tier_margin_health",
    "get_operating_margin_health",
    "is_margin_healthy",
    "is_margin_acceptable",
    "get_margin_info",
    "calculate_margin_breakdown",
    "calculate_tier_margins",
    "compare_price_points",
    "find_minimum_price_for_margin",
    "build_price_sensitivity_table",

    # Investor Metrics
    "HealthStatus",
    "ValuationProjection",
    "MilestoneTarget",
    "InvestorMetrics",
    "calculate_valuation",
    "calculate_arr",
    "calculate_mrr_from_customers",
    "calculate_ltv",
    "calculate_ltv_from_churn",
    "calculate_ltv_cac_ratio",
    "get_ltv_cac_health",
    "calculate_payback_period",
    "get_payback_health",
    "get_investor_margin_health",
    "calculate_months_to_target",
    "calculate_break_even_timeline",
    "calculate_milestones",
    "milestones_to_frame",
    "calculate_investor_metrics",
    "format_valuation_range",

    # AI Cost
    "Confidence",
    "CostCategory",
    "TokenUsage",
    "AICostBreakdown",
    "CostEstimate",
    "ProviderComparison",
    "CostTotals",
    "calculate_token_cost",
    "calculate_cost_for_tokens",
    "estimate_tokens_from_chars",
    "estimate_tokens_from_text",
    "estimate_analysis_cost",
    "compare_provider_costs",
    "calculate_monthly_ai_cost_per_customer",
    "get_cost_category",
    "format_cost",
    "format_tokens"
]
