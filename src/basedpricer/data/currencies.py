"""
Currency reference table.

Exchange rates are expressed relative to MYR, the application's base currency.
"""

from dataclasses import dataclass
from typing import Dict


@dataclass(frozen=True)
class Currency:
    """Display and conversion settings for one currency."""
    code: str
    symbol: str
    name: str
    rate: float
    position: str = "before"
    decimal_places: int = 2
    thousands_separator: str = ","
    decimal_separator: str = "."

    def __post_init__(self):
        if self.rate <= 0:
            raise ValueError(f"rate must be > 0 for currency {self.code}, got {self.rate}")
        if self.position not in ("before", "after"):
            raise ValueError(f"position must be 'before' or 'after', got {self.position!r}")


CURRENCIES: Dict[str, Currency] = {
    "MYR": Currency("MYR", "RM", "Malaysian Ringgit", 1.0),
    "USD": Currency("USD", "$", "US Dollar", 0.22),
    "SGD": Currency("SGD", "S$", "Singapore Dollar", 0.29),
    "EUR": Currency("EUR", "€", "Euro", 0.20, thousands_separator=".", decimal_separator=","),
    "GBP": Currency("GBP", "£", "British Pound", 0.17),
    "AUD": Currency("AUD", "A$", "Australian Dollar", 0.33),
}


def get_currency(code: str) -> Currency:
    """Look up a currency by code; raises KeyError for unsupported codes."""
    return CURRENCIES[code]
