"""
Reference Data Package.

This package holds the static lookup tables consumed by the calculation
engines: AI provider pricing and currency settings.
"""

from .ai_pricing import (
    AIModelPricing,
    ProviderPricing,
    PricingCatalog,
    build_default_catalog,
    DEFAULT_PRICING_CATALOG
)

from .currencies import (
    Currency,
    CURRENCIES,
    get_currency
)

__all__ = [
    "AIModelPricing",
    "ProviderPricing",
    "PricingCatalog",
    "build_default_catalog",
    "DEFAULT_PRICING_CATALOG",
    "Currency",
    "CURRENCIES",
    "get_currency"
]
