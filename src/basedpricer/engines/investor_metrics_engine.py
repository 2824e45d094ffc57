"""
Investor Metrics Computation Engine.

This module provides pure Python implementations of the SaaS investor
metrics: ARR and valuation multiples, LTV (direct and churn-derived),
LTV:CAC, CAC payback, ARR milestone projections and break-even timelines.

Sentinel conventions (part of the contract, never exceptions):
- None      undefined / not applicable (e.g. LTV:CAC with zero CAC)
- math.inf  unbounded (e.g. LTV with zero churn)
- 0         genuinely zero (e.g. a milestone already reached)
"""

from typing import List, Dict, Any, Optional, Tuple
from dataclasses import dataclass
from enum import Enum
import logging
import math

import pandas as pd

from basedpricer.config import (
    DEFAULT_CURRENCY,
    VALUATION_MULTIPLES,
    MILESTONE_TARGETS,
    LTV_CAC_HEALTHY_RATIO,
    LTV_CAC_ACCEPTABLE_RATIO,
    PAYBACK_HEALTHY_MONTHS,
    PAYBACK_ACCEPTABLE_MONTHS
)
from basedpricer.engines.formatting import format_currency_compact
from basedpricer.engines.margin_engine import MarginThresholds, GROSS_MARGIN_THRESHOLDS

logger = logging.getLogger(__name__)


# ==============================================================================
# ENUMS AND DATA STRUCTURES
# ==============================================================================

class HealthStatus(Enum):
    """Investor-facing health scale."""
    HEALTHY = "healthy"
    ACCEPTABLE = "acceptable"
    CONCERNING = "concerning"


@dataclass(frozen=True)
class ValuationProjection:
    current_arr: float
    valuation_low: float
    valuation_mid: float
    valuation_high: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "currentARR": self.current_arr,
            "valuationLow": self.valuation_low,
            "valuationMid": self.valuation_mid,
            "valuationHigh": self.valuation_high
        }


@dataclass(frozen=True)
class MilestoneTarget:
    """
    An ARR milestone and what it takes to reach it.

    months_to_reach is 0 when already reached and None when unreachable
    under the current growth assumptions.
    """
    label: str
    target_arr: float
    customers_needed: float
    months_to_reach: Optional[int]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "label": self.label,
            "targetARR": self.target_arr,
            "customersNeeded": self.customers_needed,
            "monthsToReach": self.months_to_reach
        }


@dataclass(frozen=True)
class InvestorMetrics:
    mrr: float
    arr: float
    paid_customers: float
    arpu: float
    valuation: ValuationProjection
    milestones: List[MilestoneTarget]
    break_even_customers: float
    customers_to_break_even: float
    months_to_break_even: Optional[int]
    gross_margin_health: HealthStatus
    ltv_cac_ratio: Optional[float]
    payback_period_months: Optional[float]

    @property
    def current_paid_customers(self) -> float:
        return self.paid_customers

    def to_dict(self) -> Dict[str, Any]:
        return {
            "mrr": self.mrr,
            "arr": self.arr,
            "paidCustomers": self.paid_customers,
            "arpu": self.arpu,
            "valuation": self.valuation.to_dict(),
            "milestones": [m.to_dict() for m in self.milestones],
            "breakEvenCustomers": self.break_even_customers,
            "currentPaidCustomers": self.paid_customers,
            "customersToBreakEven": self.customers_to_break_even,
            "monthsToBreakEven": self.months_to_break_even,
            "grossMarginHealth": self.gross_margin_health.value,
            "ltvCacRatio": self.ltv_cac_ratio,
            "paybackPeriodMonths": self.payback_period_months
        }


# ==============================================================================
# VALUATION
# ==============================================================================

def calculate_valuation(
    arr: float,
    multiples: Dict[str, float] = VALUATION_MULTIPLES
) -> ValuationProjection:
    """
    Calculate valuation range from ARR multiples (5x / 10x / 15x by default).

    Example:
        >>> calculate_valuation(1_000_000).valuation_mid
        10000000.0
    """
    return ValuationProjection(
        current_arr=arr,
        valuation_low=arr * multiples["low"],
        valuation_mid=arr * multiples["mid"],
        valuation_high=arr * multiples["high"]
    )


def calculate_arr(mrr: float) -> float:
    return mrr * 12


def calculate_mrr_from_customers(customer_count: float, arpu: float) -> float:
    return customer_count * arpu


# ==============================================================================
# LTV / CAC
# ==============================================================================

def calculate_ltv(
    arpu: float,
    gross_margin_percent: float,
    average_lifetime_months: float
) -> float:
    """
    Calculate Customer Lifetime Value.

    LTV = ARPU * Gross Margin % * Average Lifetime (months)
    """
    return arpu * (gross_margin_percent / 100) * average_lifetime_months


def calculate_ltv_from_churn(
    arpu: float,
    gross_margin_percent: float,
    monthly_churn_rate: float
) -> float:
    """
    Calculate LTV from a monthly churn rate (lifetime = 1 / churn).

    Returns:
        LTV, or math.inf when churn <= 0 (infinite lifetime)

    Example:
        >>> calculate_ltv_from_churn(100, 70, 0.05)
        1400.0
    """
    if monthly_churn_rate <= 0:
        logger.warning("Non-positive churn rate; LTV is unbounded")
        return math.inf

    average_lifetime_months = 1 / monthly_churn_rate
    return calculate_ltv(arpu, gross_margin_percent, average_lifetime_months)


def calculate_ltv_cac_ratio(ltv: float, cac: float) -> Optional[float]:
    """
    Calculate the LTV:CAC ratio (3:1 to 5:1 is healthy for SaaS).

    Returns:
        Ratio, or None if CAC is not positive
    """
    if cac <= 0:
        logger.warning("CAC must be positive for LTV:CAC calculation")
        return None
    return ltv / cac


def get_ltv_cac_health(ratio: Optional[float]) -> HealthStatus:
    if ratio is None:
        return HealthStatus.CONCERNING
    if ratio >= LTV_CAC_HEALTHY_RATIO:
        return HealthStatus.HEALTHY
    if ratio >= LTV_CAC_ACCEPTABLE_RATIO:
        return HealthStatus.ACCEPTABLE
    return HealthStatus.CONCERNING


def calculate_payback_period(
    arpu: float,
    gross_margin_percent: float,
    cac: float
) -> Optional[float]:
    """
    Calculate CAC payback period in months.

    Payback = ceil(CAC / (ARPU * Gross Margin %))

    Returns:
        Months, None if any input is not positive, or math.inf when the
        monthly contribution is too small to ever recover CAC

    Example:
        >>> calculate_payback_period(100, 70, 500)
        8
    """
    if arpu <= 0 or gross_margin_percent <= 0 or cac <= 0:
        logger.warning("ARPU, gross margin and CAC must be positive for payback calculation")
        return None

    months = cac / (arpu * (gross_margin_percent / 100))
    if not math.isfinite(months):
        logger.warning("Monthly contribution too small to recover CAC; payback is unbounded")
        return math.inf
    return math.ceil(months)


def get_payback_health(months: Optional[int]) -> HealthStatus:
    if months is None:
        return HealthStatus.CONCERNING
    if months <= PAYBACK_HEALTHY_MONTHS:
        return HealthStatus.HEALTHY
    if months <= PAYBACK_ACCEPTABLE_MONTHS:
        return HealthStatus.ACCEPTABLE
    return HealthStatus.CONCERNING


def get_gross_margin_health(
    gross_margin: float,
    thresholds: MarginThresholds = GROSS_MARGIN_THRESHOLDS
) -> HealthStatus:
    """Gross margin health on the investor scale (low margins are 'concerning')."""
    if gross_margin >= thresholds.healthy:
        return HealthStatus.HEALTHY
    if gross_margin >= thresholds.acceptable:
        return HealthStatus.ACCEPTABLE
    return HealthStatus.CONCERNING


# ==============================================================================
# GROWTH PROJECTIONS
# ==============================================================================

def _months_of_compound_growth(
    current_customers: float,
    target_customers: float,
    monthly_growth_rate: float
) -> Optional[int]:
    """
    Invert compound growth: months = ceil(ln(target / current) / ln(1 + rate)).

    Callers guarantee current > 0, rate > 0 and target > current.
    """
    growth = math.log1p(monthly_growth_rate)
    ratio = target_customers / current_customers
    if growth == 0 or not math.isfinite(ratio):
        return None
    months = math.log(ratio) / growth
    if not math.isfinite(months):
        return None
    return math.ceil(months)


def calculate_months_to_target(
    current_customers: float,
    target_customers: float,
    monthly_growth_rate: float
) -> Optional[int]:
    """
    Months of compound growth needed to reach a target customer count.

    Returns:
        0 if already at target; None if growth or current customers are not
        positive (or the target is unbounded); otherwise the month count

    Example:
        >>> calculate_months_to_target(100, 200, 0.1)
        8
    """
    if current_customers >= target_customers:
        return 0
    if monthly_growth_rate <= 0 or current_customers <= 0:
        return None
    return _months_of_compound_growth(current_customers, target_customers, monthly_growth_rate)


def calculate_break_even_timeline(
    current_paid_customers: float,
    break_even_customers: float,
    monthly_growth_rate: float
) -> Optional[int]:
    """Months until the paid customer base reaches break-even."""
    months = calculate_months_to_target(
        current_paid_customers, break_even_customers, monthly_growth_rate
    )
    if months is None:
        logger.debug("Break-even not reachable under current growth assumptions")
    return months


def calculate_milestones(
    arpu: float,
    current_paid_customers: float,
    monthly_growth_rate: float,
    targets: List[Tuple[str, float]] = MILESTONE_TARGETS
) -> List[MilestoneTarget]:
    """
    Calculate customers needed and time to reach each ARR milestone.

    Args:
        arpu: Average revenue per paying user (monthly)
        current_paid_customers: Current paying customers
        monthly_growth_rate: Compound monthly growth (0.1 = 10%)
        targets: (label, target ARR) pairs

    Returns:
        One MilestoneTarget per target, in order
    """
    milestones = []

    for label, target_arr in targets:
        # ARR = customers * ARPU * 12
        customers_needed = 0
        if arpu > 0:
            customers_needed = target_arr / (arpu * 12)
            if math.isfinite(customers_needed):
                customers_needed = math.ceil(customers_needed)

        months_to_reach = None
        if (monthly_growth_rate > 0 and current_paid_customers > 0
                and customers_needed > current_paid_customers):
            months_to_reach = _months_of_compound_growth(
                current_paid_customers, customers_needed, monthly_growth_rate
            )
        elif current_paid_customers >= customers_needed:
            months_to_reach = 0

        milestones.append(MilestoneTarget(
            label=label,
            target_arr=target_arr,
            customers_needed=customers_needed,
            months_to_reach=months_to_reach
        ))

    logger.debug(f"Calculated {len(milestones)} milestones at ARPU {arpu}")
    return milestones


def milestones_to_frame(milestones: List[MilestoneTarget]) -> pd.DataFrame:
    """Tabulate milestones for reporting (unreachable months appear as missing)."""
    return pd.DataFrame(
        [m.to_dict() for m in milestones],
        columns=["label", "targetARR", "customersNeeded", "monthsToReach"]
    )


# ==============================================================================
# COMPREHENSIVE METRICS CALCULATION
# ==============================================================================

def calculate_investor_metrics(
    mrr: float,
    paid_customers: float,
    arpu: float,
    gross_margin: float,
    break_even_customers: float,
    monthly_growth_rate: float,
    ltv: float,
    estimated_cac: float = 0
) -> InvestorMetrics:
    """
    Calculate the complete investor metrics aggregate.

    Args:
        mrr: Monthly recurring revenue
        paid_customers: Current paying customers
        arpu: Average revenue per paying user (monthly)
        gross_margin: Gross margin percentage
        break_even_customers: Customers needed to break even (may be math.inf)
        monthly_growth_rate: Compound monthly growth rate
        ltv: Customer lifetime value
        estimated_cac: Customer acquisition cost (0 = unknown)

    Returns:
        InvestorMetrics

    Example:
        >>> metrics = calculate_investor_metrics(
        ...     mrr=10000, paid_customers=200, arpu=50, gross_margin=70,
        ...     break_even_customers=100, monthly_growth_rate=0.05,
        ...     ltv=1500, estimated_cac=500
        ... )
        >>> metrics.arr
        120000
    """
    arr = calculate_arr(mrr)
    ltv_cac_ratio = calculate_ltv_cac_ratio(ltv, estimated_cac) if estimated_cac > 0 else None
    payback = (
        calculate_payback_period(arpu, gross_margin, estimated_cac)
        if estimated_cac > 0 else None
    )

    metrics = InvestorMetrics(
        mrr=mrr,
        arr=arr,
        paid_customers=paid_customers,
        arpu=arpu,
        valuation=calculate_valuation(arr),
        milestones=calculate_milestones(arpu, paid_customers, monthly_growth_rate),
        break_even_customers=break_even_customers,
        customers_to_break_even=max(0, break_even_customers - paid_customers),
        months_to_break_even=calculate_break_even_timeline(
            paid_customers, break_even_customers, monthly_growth_rate
        ),
        gross_margin_health=get_gross_margin_health(gross_margin),
        ltv_cac_ratio=ltv_cac_ratio,
        payback_period_months=payback
    )

    logger.debug(f"Calculated investor metrics: ARR={arr}, LTV:CAC={ltv_cac_ratio}")
    return metrics


# ==============================================================================
# FORMATTING
# ==============================================================================

def format_valuation_range(
    valuation: ValuationProjection,
    currency: str = DEFAULT_CURRENCY
) -> str:
    """
    Format the low-high valuation range.

    Example:
        >>> format_valuation_range(calculate_valuation(1_000_000))
        'MYR 5.0M - MYR 15.0M'
    """
    return (
        f"{format_currency_compact(valuation.valuation_low, currency)} - "
        f"{format_currency_compact(valuation.valuation_high, currency)}"
    )
