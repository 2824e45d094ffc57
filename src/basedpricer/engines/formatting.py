"""
Rounding and Formatting Utilities.

Leaf module shared by every engine: currency / customer-count / percentage
rounding, compact currency strings and small numeric helpers.

Rounding is "half away from zero" on the decimal magnitude
(10.455 -> 10.46, -10.456 -> -10.46), not Python's default banker's rounding.
"""

from typing import Any, Optional
import logging
import math

from basedpricer.config import DEFAULT_CURRENCY
from basedpricer.data.currencies import CURRENCIES, Currency

logger = logging.getLogger(__name__)


# ==============================================================================
# ROUNDING
# ==============================================================================

def _round_half_away(value: float, decimals: int) -> float:
    if not math.isfinite(value):
        return value
    factor = 10 ** decimals
    return math.copysign(math.floor(abs(value) * factor + 0.5), value) / factor


def _to_fixed(value: float, decimals: int) -> str:
    """Fixed-point string using half-away-from-zero rounding."""
    return f"{_round_half_away(value, decimals):.{decimals}f}"


def round_currency(value: float, decimals: int = 2) -> float:
    """
    Round a monetary value (default: 2 decimal places).

    Example:
        >>> round_currency(10.455)
        10.46
    """
    return _round_half_away(value, decimals)


def round_customers(value: float) -> float:
    """
    Round a customer count up (ceiling) for conservative capacity planning.

    Negative inputs move toward zero (-10.1 -> -10). Non-finite values
    pass through unchanged.
    """
    if not math.isfinite(value):
        return value
    return math.ceil(value)


def round_percentage(value: float, decimals: int = 1) -> float:
    """Round a percentage for display (default: 1 decimal place)."""
    return _round_half_away(value, decimals)


# ==============================================================================
# FORMATTING
# ==============================================================================

def format_currency_compact(value: float, currency: str = DEFAULT_CURRENCY) -> str:
    """
    Format a value in compact notation prefixed by the currency code.

    Example:
        >>> format_currency_compact(5000000)
        'MYR 5.0M'
        >>> format_currency_compact(500)
        'MYR 500'
    """
    if value >= 1_000_000:
        return f"{currency} {_to_fixed(value / 1_000_000, 1)}M"
    if value >= 1_000:
        return f"{currency} {_to_fixed(value / 1_000, 0)}K"
    return f"{currency} {_to_fixed(value, 0)}"


def _format_number(value: float, decimals: int, currency: Currency) -> str:
    grouped = f"{_round_half_away(value, decimals):,.{decimals}f}"
    return grouped.translate(str.maketrans({
        ",": currency.thousands_separator,
        ".": currency.decimal_separator
    }))


def _apply_symbol(formatted: str, currency: Currency) -> str:
    if currency.position == "before":
        return f"{currency.symbol}{formatted}"
    return f"{formatted}{currency.symbol}"


def format_currency(
    value: float,
    currency_code: str = DEFAULT_CURRENCY,
    show_symbol: bool = True,
    decimals: Optional[int] = None,
    compact: bool = False
) -> str:
    """
    Format a value using the currency table's symbol and separators.

    Args:
        value: Amount to format
        currency_code: Key into CURRENCIES
        show_symbol: Prefix/suffix the currency symbol
        decimals: Decimal places (currency default when None)
        compact: Use K/M notation with one decimal

    Returns:
        Formatted string, e.g. 'RM1,234.50' or 'RM1.2K'
    """
    currency = CURRENCIES[currency_code]

    if compact:
        if abs(value) >= 1_000_000:
            formatted = f"{_to_fixed(value / 1_000_000, 1)}M"
        elif abs(value) >= 1_000:
            formatted = f"{_to_fixed(value / 1_000, 1)}K"
        else:
            formatted = _to_fixed(value, currency.decimal_places)
        return _apply_symbol(formatted, currency)

    actual_decimals = currency.decimal_places if decimals is None else decimals
    formatted = _format_number(value, actual_decimals, currency)

    if show_symbol:
        return _apply_symbol(formatted, currency)
    return formatted


def format_percentage(value: float, decimals: int = 1) -> str:
    """Format value as percentage."""
    return f"{_to_fixed(value, decimals)}%"


# ==============================================================================
# NUMERIC HELPERS
# ==============================================================================

def convert_currency(amount: float, from_code: str, to_code: str) -> float:
    """Convert between currencies through the MYR base rate."""
    if from_code == to_code:
        return amount

    amount_in_myr = amount / CURRENCIES[from_code].rate
    return amount_in_myr * CURRENCIES[to_code].rate


def calculate_percentage(value: float, total: float) -> float:
    if total == 0:
        return 0
    return (value / total) * 100


def clamp(value: float, minimum: float, maximum: float) -> float:
    return min(max(value, minimum), maximum)


def apply_discount(price: float, discount_percent: float) -> float:
    """Apply a percentage discount to a price."""
    return price * (1 - discount_percent / 100)


def calculate_annual_price(monthly_price: float, annual_discount_percent: float) -> float:
    """Annual price: twelve months of the monthly price, less the annual discount."""
    return apply_discount(monthly_price * 12, annual_discount_percent)


def json_safe(value: Any) -> Any:
    """
    Make engine output JSON-safe.

    Unbounded results (float('inf')) become the string 'Infinity' so the
    distinction between zero, undefined (None) and unbounded survives
    serialization. NaN becomes None.
    """
    if isinstance(value, dict):
        return {k: json_safe(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [json_safe(v) for v in value]
    if isinstance(value, float):
        if math.isnan(value):
            return None
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
    return value
