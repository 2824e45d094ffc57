"""
Margin Computation Engine.

Gross, operating and tier margin percentages, margin health classification,
minimum-price inversion and price-point comparison.

Two independently thresholded scales are used:
- Gross / tier margin: >= 70% healthy (great), >= 50% acceptable (ok), else low
- Operating margin: >= 20% healthy, >= 0% acceptable, else low

Threshold records are passed in explicitly (defaulting to the configured
values) so alternative scales can be evaluated side by side.
"""

from typing import List, Dict, Any
from dataclasses import dataclass
from enum import Enum
import logging
import math

import pandas as pd

from basedpricer.config import (
    MARGIN_HEALTHY_THRESHOLD,
    MARGIN_ACCEPTABLE_THRESHOLD,
    OPERATING_MARGIN_HEALTHY_THRESHOLD,
    OPERATING_MARGIN_ACCEPTABLE_THRESHOLD
)
from basedpricer.engines.cogs_engine import Tier

logger = logging.getLogger(__name__)


# ==============================================================================
# ENUMS AND THRESHOLDS
# ==============================================================================

class MarginStatus(Enum):
    """Short-form margin status used on price cards."""
    GREAT = "great"
    OK = "ok"
    LOW = "low"


class MarginHealth(Enum):
    """Descriptive margin health."""
    HEALTHY = "healthy"
    ACCEPTABLE = "acceptable"
    LOW = "low"


@dataclass(frozen=True)
class MarginThresholds:
    """Lower bounds (percent) for the healthy and acceptable bands."""
    healthy: float
    acceptable: float

    def __post_init__(self):
        if self.acceptable > self.healthy:
            raise ValueError(
                f"acceptable threshold ({self.acceptable}) cannot exceed healthy ({self.healthy})"
            )


GROSS_MARGIN_THRESHOLDS = MarginThresholds(
    healthy=MARGIN_HEALTHY_THRESHOLD,
    acceptable=MARGIN_ACCEPTABLE_THRESHOLD
)

OPERATING_MARGIN_THRESHOLDS = MarginThresholds(
    healthy=OPERATING_MARGIN_HEALTHY_THRESHOLD,
    acceptable=OPERATING_MARGIN_ACCEPTABLE_THRESHOLD
)


# ==============================================================================
# MARGIN DATA STRUCTURES
# ==============================================================================

@dataclass(frozen=True)
class MarginInfo:
    """Margin percentage, absolute profit and status for one price point."""
    margin: float
    profit: float
    status: MarginStatus

    def to_dict(self) -> Dict[str, Any]:
        return {"margin": self.margin, "profit": self.profit, "status": self.status.value}


@dataclass(frozen=True)
class MarginBreakdown:
    gross_margin: float
    gross_margin_health: MarginHealth
    profit: float
    cogs: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "grossMargin": self.gross_margin,
            "grossMarginHealth": self.gross_margin_health.value,
            "profit": self.profit,
            "cogs": self.cogs
        }


@dataclass(frozen=True)
class PricePointComparison:
    price: float
    margin: float
    profit: float
    status: MarginStatus

    def to_dict(self) -> Dict[str, Any]:
        return {
            "price": self.price,
            "margin": self.margin,
            "profit": self.profit,
            "status": self.status.value
        }


@dataclass(frozen=True)
class TierMargin:
    """Margin information for a single tier."""
    tier_id: str
    tier_name: str
    price: float
    margin: float
    profit: float
    status: MarginStatus

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tierId": self.tier_id,
            "tierName": self.tier_name,
            "price": self.price,
            "margin": self.margin,
            "profit": self.profit,
            "status": self.status.value
        }


# ==============================================================================
# MARGIN CALCULATIONS
# ==============================================================================

def calculate_gross_margin(price: float, cogs: float) -> float:
    """
    Calculate gross margin percentage.

    Gross Margin = (Price - COGS) / Price * 100

    Args:
        price: Price per customer
        cogs: Cost of goods sold per customer

    Returns:
        Margin percentage (negative when COGS exceeds price), 0 when price <= 0

    Example:
        >>> calculate_gross_margin(100, 30)
        70.0
    """
    if price <= 0:
        return 0
    return ((price - cogs) / price) * 100


def calculate_profit(price: float, cogs: float) -> float:
    """Profit per customer."""
    return price - cogs


def calculate_operating_margin(
    revenue: float,
    cogs: float,
    operating_expenses: float
) -> float:
    """
    Calculate operating margin percentage.

    Operating Margin = (Revenue - COGS - Operating Expenses) / Revenue * 100

    Returns:
        Margin percentage, 0 when revenue <= 0
    """
    if revenue <= 0:
        return 0
    return ((revenue - cogs - operating_expenses) / revenue) * 100


def calculate_tier_margin(tier_price: float, tier_cogs: float) -> float:
    """Gross margin in a tier context."""
    return calculate_gross_margin(tier_price, tier_cogs)


# ==============================================================================
# MARGIN STATUS / HEALTH
# ==============================================================================

def get_margin_status(
    margin: float,
    thresholds: MarginThresholds = GROSS_MARGIN_THRESHOLDS
) -> MarginStatus:
    if margin >= thresholds.healthy:
        return MarginStatus.GREAT
    if margin >= thresholds.acceptable:
        return MarginStatus.OK
    return MarginStatus.LOW


def get_margin_health(
    margin: float,
    thresholds: MarginThresholds = GROSS_MARGIN_THRESHOLDS
) -> MarginHealth:
    if margin >= thresholds.healthy:
        return MarginHealth.HEALTHY
    if margin >= thresholds.acceptable:
        return MarginHealth.ACCEPTABLE
    return MarginHealth.LOW


def get_gross_margin_health(
    margin: float,
    thresholds: MarginThresholds = GROSS_MARGIN_THRESHOLDS
) -> MarginHealth:
    return get_margin_health(margin, thresholds)


def get_tier_margin_health(
    margin: float,
    thresholds: MarginThresholds = GROSS_MARGIN_THRESHOLDS
) -> MarginHealth:
    return get_margin_health(margin, thresholds)


def get_operating_margin_health(
    margin: float,
    thresholds: MarginThresholds = OPERATING_MARGIN_THRESHOLDS
) -> MarginHealth:
    """Operating margin health on its own scale (>= 20% healthy, >= 0% acceptable)."""
    return get_margin_health(margin, thresholds)


def is_margin_healthy(
    margin: float,
    thresholds: MarginThresholds = GROSS_MARGIN_THRESHOLDS
) -> bool:
    return margin >= thresholds.healthy


def is_margin_acceptable(
    margin: float,
    thresholds: MarginThresholds = GROSS_MARGIN_THRESHOLDS
) -> bool:
    return margin >= thresholds.acceptable


# ==============================================================================
# COMBINED MARGIN INFO
# ==============================================================================

def get_margin_info(
    price: float,
    cogs: float,
    thresholds: MarginThresholds = GROSS_MARGIN_THRESHOLDS
) -> MarginInfo:
    """Margin, profit and status for a single price point."""
    margin = calculate_gross_margin(price, cogs)
    return MarginInfo(
        margin=margin,
        profit=calculate_profit(price, cogs),
        status=get_margin_status(margin, thresholds)
    )


def calculate_margin_breakdown(
    price: float,
    variable_cost_per_customer: float,
    fixed_cost_per_customer: float,
    thresholds: MarginThresholds = GROSS_MARGIN_THRESHOLDS
) -> MarginBreakdown:
    """
    Calculate margin with the full per-customer cost breakdown.

    Args:
        price: Price per customer
        variable_cost_per_customer: Variable cost per customer
        fixed_cost_per_customer: Allocated fixed cost per customer

    Returns:
        MarginBreakdown with COGS = variable + fixed allocation
    """
    cogs = variable_cost_per_customer + fixed_cost_per_customer
    gross_margin = calculate_gross_margin(price, cogs)

    return MarginBreakdown(
        gross_margin=gross_margin,
        gross_margin_health=get_margin_health(gross_margin, thresholds),
        profit=calculate_profit(price, cogs),
        cogs=cogs
    )


def calculate_tier_margins(
    tiers: List[Tier],
    cogs_per_customer: float,
    thresholds: MarginThresholds = GROSS_MARGIN_THRESHOLDS
) -> List[TierMargin]:
    """Margin information for every tier at a shared per-customer COGS."""
    results = []
    for tier in tiers:
        info = get_margin_info(tier.monthly_price_myr, cogs_per_customer, thresholds)
        results.append(TierMargin(
            tier_id=tier.id,
            tier_name=tier.name,
            price=tier.monthly_price_myr,
            margin=info.margin,
            profit=info.profit,
            status=info.status
        ))

    logger.debug(f"Calculated margins for {len(tiers)} tiers at COGS {cogs_per_customer}")
    return results


# ==============================================================================
# PRICE POINT ANALYSIS
# ==============================================================================

def compare_price_points(
    prices: List[float],
    cogs: float,
    thresholds: MarginThresholds = GROSS_MARGIN_THRESHOLDS
) -> List[PricePointComparison]:
    """
    Compare margins across candidate price points.

    Example:
        >>> [p.status.value for p in compare_price_points([50, 75, 100], 30)]
        ['low', 'ok', 'great']
    """
    comparisons = []
    for price in prices:
        info = get_margin_info(price, cogs, thresholds)
        comparisons.append(PricePointComparison(
            price=price,
            margin=info.margin,
            profit=info.profit,
            status=info.status
        ))
    return comparisons


def find_minimum_price_for_margin(cogs: float, target_margin: float) -> float:
    """
    Find the lowest price that achieves a target gross margin.

    Inverts margin = (price - cogs) / price * 100:
        price = cogs / (1 - margin / 100)

    Returns:
        Minimum price, or math.inf when target_margin >= 100
    """
    if target_margin >= 100:
        logger.warning(f"Target margin {target_margin}% is unattainable at any price")
        return math.inf
    return cogs / (1 - target_margin / 100)


def build_price_sensitivity_table(
    prices: List[float],
    cogs: float,
    thresholds: MarginThresholds = GROSS_MARGIN_THRESHOLDS
) -> pd.DataFrame:
    """
    Build a price sensitivity table for reporting.

    Args:
        prices: Candidate prices
        cogs: COGS per customer

    Returns:
        DataFrame with columns ['price', 'margin', 'profit', 'status'],
        one row per price in input order
    """
    rows = [p.to_dict() for p in compare_price_points(prices, cogs, thresholds)]
    table = pd.DataFrame(rows, columns=["price", "margin", "profit", "status"])

    logger.debug(f"Built price sensitivity table with {len(table)} rows")
    return table
