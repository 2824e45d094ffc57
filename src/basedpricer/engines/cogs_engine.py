"""
COGS (Cost of Goods Sold) Engine.

This module provides variable/fixed cost aggregation, per-customer cost
allocation, MRR, break-even customer counts and monthly profit for SaaS
pricing scenarios, plus the cost and tier value records those calculations
consume.

All functions are pure: they read their arguments and return new values.
"""

from typing import List, Dict, Any, Optional, Union
from dataclasses import dataclass, field
from enum import Enum
import logging
import math

logger = logging.getLogger(__name__)


# ==============================================================================
# ENUMS AND CONSTANTS
# ==============================================================================

class TierStatus(Enum):
    """Publication status of a pricing tier."""
    ACTIVE = "active"
    COMING_SOON = "coming_soon"
    INTERNAL = "internal"


class LimitKind(Enum):
    """Variants of a tier limit value."""
    NUMERIC = "numeric"
    UNLIMITED = "unlimited"
    GATE = "gate"


class BillingCycle(Enum):
    """Billing cycle used when deriving per-month tier prices."""
    MONTHLY = "monthly"
    ANNUAL = "annual"


UNLIMITED = "unlimited"


# ==============================================================================
# COST DATA STRUCTURES
# ==============================================================================

@dataclass(frozen=True)
class VariableCostItem:
    """
    A per-customer, consumption-based cost driver (API calls, storage, ...).

    Cost contribution per customer = cost_per_unit * usage_per_customer.
    """
    id: str
    name: str
    unit: str
    cost_per_unit: float
    usage_per_customer: float
    description: str = ""

    def __post_init__(self):
        if self.cost_per_unit < 0:
            raise ValueError(f"cost_per_unit must be >= 0, got {self.cost_per_unit}")
        if self.usage_per_customer < 0:
            raise ValueError(f"usage_per_customer must be >= 0, got {self.usage_per_customer}")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "unit": self.unit,
            "costPerUnit": self.cost_per_unit,
            "usagePerCustomer": self.usage_per_customer,
            "description": self.description
        }


@dataclass(frozen=True)
class FixedCostItem:
    """A monthly cost independent of customer count, allocated pro-rata."""
    id: str
    name: str
    monthly_cost: float
    description: str = ""

    def __post_init__(self):
        if self.monthly_cost < 0:
            raise ValueError(f"monthly_cost must be >= 0, got {self.monthly_cost}")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "monthlyCost": self.monthly_cost,
            "description": self.description
        }


@dataclass(frozen=True)
class CostBreakdown:
    """Per-customer COGS snapshot (computed, never stored)."""
    variable_total: float
    fixed_total: float
    fixed_per_customer: float
    total_cogs: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "variableTotal": self.variable_total,
            "fixedTotal": self.fixed_total,
            "fixedPerCustomer": self.fixed_per_customer,
            "totalCOGS": self.total_cogs
        }


# ==============================================================================
# TIER DATA STRUCTURES
# ==============================================================================

@dataclass(frozen=True)
class TierLimit:
    """
    A cap binding a feature to a tier.

    The limit is a tagged variant:
    - NUMERIC: `value` holds the numeric cap
    - UNLIMITED: no cap, `value` is None
    - GATE: boolean feature gate, `value` holds the enabled flag
    """
    feature_id: str
    kind: LimitKind
    value: Optional[Union[float, bool]] = None
    unit: Optional[str] = None

    def __post_init__(self):
        if not self.feature_id:
            raise ValueError("feature_id cannot be empty")
        if not isinstance(self.kind, LimitKind):
            raise TypeError(f"kind must be LimitKind, got {type(self.kind).__name__}")

        if self.kind == LimitKind.NUMERIC:
            if isinstance(self.value, bool) or not isinstance(self.value, (int, float)):
                raise TypeError(f"numeric limit requires a number, got {self.value!r}")
        elif self.kind == LimitKind.GATE:
            if not isinstance(self.value, bool):
                raise TypeError(f"gate limit requires a bool, got {self.value!r}")
        elif self.value is not None:
            raise ValueError("unlimited limit cannot carry a value")

    @classmethod
    def numeric(cls, feature_id: str, value: float, unit: Optional[str] = None) -> "TierLimit":
        return cls(feature_id, LimitKind.NUMERIC, value, unit)

    @classmethod
    def unlimited(cls, feature_id: str, unit: Optional[str] = None) -> "TierLimit":
        return cls(feature_id, LimitKind.UNLIMITED, None, unit)

    @classmethod
    def gate(cls, feature_id: str, enabled: bool) -> "TierLimit":
        return cls(feature_id, LimitKind.GATE, enabled)

    @classmethod
    def from_raw(
        cls,
        feature_id: str,
        raw: Union[float, str, bool],
        unit: Optional[str] = None
    ) -> "TierLimit":
        """
        Build a limit from its serialized union form (number, 'unlimited' or bool).

        Example:
            >>> TierLimit.from_raw("exports", "unlimited").kind
            <LimitKind.UNLIMITED: 'unlimited'>
        """
        if isinstance(raw, bool):
            return cls.gate(feature_id, raw)
        if raw == UNLIMITED:
            return cls.unlimited(feature_id, unit)
        if isinstance(raw, (int, float)):
            return cls.numeric(feature_id, raw, unit)
        raise ValueError(f"Unsupported limit value for '{feature_id}': {raw!r}")

    def allows(self, usage: float) -> bool:
        """Check whether a usage level fits within this limit."""
        if self.kind == LimitKind.UNLIMITED:
            return True
        if self.kind == LimitKind.GATE:
            return bool(self.value)
        return usage <= self.value

    def raw_value(self) -> Union[float, str, bool]:
        """The limit in its serialized union form."""
        if self.kind == LimitKind.UNLIMITED:
            return UNLIMITED
        return self.value

    def to_dict(self) -> Dict[str, Any]:
        data = {"featureId": self.feature_id, "limit": self.raw_value()}
        if self.unit is not None:
            data["unit"] = self.unit
        return data


@dataclass(frozen=True)
class Tier:
    """A pricing plan."""
    id: str
    name: str
    monthly_price_myr: float
    limits: List[TierLimit] = field(default_factory=list)
    status: TierStatus = TierStatus.ACTIVE
    annual_price_myr: Optional[float] = None
    description: Optional[str] = None
    features: List[str] = field(default_factory=list)
    is_highlighted: bool = False
    cta_text: Optional[str] = None

    def __post_init__(self):
        if not self.id:
            raise ValueError("tier id cannot be empty")
        if self.monthly_price_myr < 0:
            raise ValueError(f"monthly_price_myr must be >= 0, got {self.monthly_price_myr}")
        if self.annual_price_myr is not None and self.annual_price_myr < 0:
            raise ValueError(f"annual_price_myr must be >= 0, got {self.annual_price_myr}")
        if not isinstance(self.status, TierStatus):
            raise TypeError(f"status must be TierStatus, got {type(self.status).__name__}")

    def get_limit(self, feature_id: str) -> Optional[TierLimit]:
        for limit in self.limits:
            if limit.feature_id == feature_id:
                return limit
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "monthlyPriceMYR": self.monthly_price_myr,
            "annualPriceMYR": self.annual_price_myr,
            "description": self.description,
            "features": list(self.features),
            "limits": [limit.to_dict() for limit in self.limits],
            "status": self.status.value,
            "isHighlighted": self.is_highlighted,
            "ctaText": self.cta_text
        }


# ==============================================================================
# VARIABLE COST CALCULATIONS
# ==============================================================================

def calculate_item_cost_per_customer(
    item: VariableCostItem,
    utilization_rate: float = 1
) -> float:
    """Cost per customer for a single variable cost item."""
    return item.cost_per_unit * item.usage_per_customer * utilization_rate


def calculate_variable_costs(
    items: List[VariableCostItem],
    utilization_rate: float = 1
) -> float:
    """
    Calculate total variable costs per customer.

    Args:
        items: Variable cost items
        utilization_rate: Fraction of the usage allowance actually consumed

    Returns:
        Sum of per-customer item costs (0 for an empty list)
    """
    return sum(
        (calculate_item_cost_per_customer(item, utilization_rate) for item in items),
        0
    )


def calculate_total_variable_costs(
    items: List[VariableCostItem],
    customer_count: float,
    utilization_rate: float = 1
) -> float:
    """Total variable costs across all customers."""
    return calculate_variable_costs(items, utilization_rate) * customer_count


def get_cost_rate_by_id(
    items: List[VariableCostItem],
    cost_id: str,
    default: float = 0
) -> float:
    """Look up the unit cost of a variable cost item by id."""
    for item in items:
        if item.id == cost_id:
            return item.cost_per_unit
    return default


# ==============================================================================
# FIXED COST CALCULATIONS
# ==============================================================================

def calculate_total_fixed_costs(items: List[FixedCostItem]) -> float:
    """Total monthly fixed costs (0 for an empty list)."""
    return sum((item.monthly_cost for item in items), 0)


def calculate_fixed_cost_per_customer(
    items: List[FixedCostItem],
    customer_count: float
) -> float:
    """Fixed costs allocated per customer; 0 when there are no customers."""
    if customer_count <= 0:
        return 0
    return calculate_total_fixed_costs(items) / customer_count


# ==============================================================================
# COGS CALCULATIONS
# ==============================================================================

def calculate_cogs_breakdown(
    variable_costs: List[VariableCostItem],
    fixed_costs: List[FixedCostItem],
    customer_count: float,
    utilization_rate: float = 1
) -> CostBreakdown:
    """
    Calculate the complete per-customer COGS breakdown.

    The utilization rate scales variable costs only; fixed cost allocation
    is unaffected.

    Example:
        >>> breakdown = calculate_cogs_breakdown(variable, fixed, customer_count=100)
        >>> breakdown.total_cogs
        3.75
    """
    variable_total = calculate_variable_costs(variable_costs, utilization_rate)
    fixed_total = calculate_total_fixed_costs(fixed_costs)
    fixed_per_customer = calculate_fixed_cost_per_customer(fixed_costs, customer_count)
    total_cogs = variable_total + fixed_per_customer

    logger.debug(
        f"COGS breakdown for {customer_count} customers: variable={variable_total}, "
        f"fixed/customer={fixed_per_customer}, total={total_cogs}"
    )
    return CostBreakdown(
        variable_total=variable_total,
        fixed_total=fixed_total,
        fixed_per_customer=fixed_per_customer,
        total_cogs=total_cogs
    )


def calculate_total_cogs(
    variable_costs: List[VariableCostItem],
    fixed_costs: List[FixedCostItem],
    customer_count: float,
    utilization_rate: float = 1
) -> float:
    return calculate_cogs_breakdown(
        variable_costs, fixed_costs, customer_count, utilization_rate
    ).total_cogs


def calculate_cogs_per_customer(
    variable_cost_per_customer: float,
    total_fixed_costs: float,
    customer_count: float
) -> float:
    """COGS per customer from pre-aggregated totals; variable cost only without customers."""
    if customer_count <= 0:
        return variable_cost_per_customer
    return variable_cost_per_customer + total_fixed_costs / customer_count


# ==============================================================================
# MRR / REVENUE CALCULATIONS
# ==============================================================================

def build_tier_price_map(
    tiers: List[Tier],
    billing: BillingCycle = BillingCycle.MONTHLY
) -> Dict[str, float]:
    """
    Map tier id to its effective monthly price.

    With annual billing the annual price is spread over twelve months; tiers
    without an annual price fall back to their monthly price.
    """
    prices = {}
    for tier in tiers:
        if billing == BillingCycle.ANNUAL and tier.annual_price_myr is not None:
            prices[tier.id] = tier.annual_price_myr / 12
        else:
            prices[tier.id] = tier.monthly_price_myr
    return prices


def calculate_mrr(
    tier_prices: Dict[str, float],
    tier_distribution: Dict[str, float]
) -> float:
    """
    Calculate MRR for a customer distribution across tiers.

    Args:
        tier_prices: Tier id -> monthly price
        tier_distribution: Tier id -> customer count

    Returns:
        Sum of price * count; distribution keys without a price count as 0
    """
    mrr = 0
    for tier_id, count in tier_distribution.items():
        price = tier_prices.get(tier_id)
        if price is None:
            logger.debug(f"No price for tier '{tier_id}', treating as 0")
            continue
        mrr += price * count
    return mrr


def calculate_total_variable_costs_for_distribution(
    variable_cost_per_customer: float,
    tier_distribution: Dict[str, float],
    utilization_rate: float = 1
) -> float:
    """Variable costs across every customer in a tier distribution."""
    total_customers = sum(tier_distribution.values())
    return variable_cost_per_customer * total_customers * utilization_rate


# ==============================================================================
# BREAK-EVEN / PROFIT
# ==============================================================================

def calculate_break_even_customers(
    total_fixed_costs: float,
    price_per_customer: float,
    variable_cost_per_customer: float
) -> float:
    """
    Calculate the customer count needed to cover fixed costs.

    Break-even = ceil(Fixed Costs / (Price - Variable Cost per Customer))

    Returns:
        Customer count, or math.inf when the contribution margin is <= 0.
        Zero fixed costs with a positive contribution give 0.

    Example:
        >>> calculate_break_even_customers(1000, 50, 20)
        34
    """
    contribution = price_per_customer - variable_cost_per_customer
    if contribution <= 0:
        logger.warning(
            f"Non-positive contribution margin ({contribution}); break-even is unreachable"
        )
        return math.inf
    customers = total_fixed_costs / contribution
    if not math.isfinite(customers):
        logger.warning(f"Contribution margin ({contribution}) too small to cover fixed costs")
        return math.inf
    return math.ceil(customers)


def calculate_monthly_profit(
    mrr: float,
    total_variable_costs: float,
    total_fixed_costs: float
) -> float:
    """Monthly profit; negative when costs exceed revenue."""
    return mrr - total_variable_costs - total_fixed_costs
