"""
Configuration management for the BasedPricer calculation engine.

This module centralizes all configuration settings including currency
defaults, margin thresholds, investor-metric multiples, AI cost estimation
parameters and API/logging settings.
"""

import os
from typing import Dict, Any, List, Tuple


# ==============================================================================
# CURRENCY CONFIGURATION
# ==============================================================================

DEFAULT_CURRENCY = os.getenv("BASEDPRICER_CURRENCY", "MYR")
DEFAULT_USD_TO_MYR_RATE = float(os.getenv("USD_TO_MYR_RATE", "4.47"))


# ==============================================================================
# MARGIN CONFIGURATION
# ==============================================================================

# Gross / tier margin thresholds (percent)
MARGIN_HEALTHY_THRESHOLD = 70.0
MARGIN_ACCEPTABLE_THRESHOLD = 50.0

# Operating margin thresholds (percent)
OPERATING_MARGIN_HEALTHY_THRESHOLD = 20.0
OPERATING_MARGIN_ACCEPTABLE_THRESHOLD = 0.0


# ==============================================================================
# INVESTOR METRICS CONFIGURATION
# ==============================================================================

# ARR multiples used for valuation ranges
VALUATION_MULTIPLES: Dict[str, float] = {
    "low": 5.0,    # conservative
    "mid": 10.0,   # typical
    "high": 15.0   # high growth
}

# ARR milestones (label, target ARR in base currency)
MILESTONE_TARGETS: List[Tuple[str, float]] = [
    (f"{DEFAULT_CURRENCY} 100K ARR", 100_000),
    (f"{DEFAULT_CURRENCY} 500K ARR", 500_000),
    (f"{DEFAULT_CURRENCY} 1M ARR", 1_000_000),
    (f"{DEFAULT_CURRENCY} 5M ARR", 5_000_000),
]

LTV_CAC_HEALTHY_RATIO = 3.0
LTV_CAC_ACCEPTABLE_RATIO = 1.0

PAYBACK_HEALTHY_MONTHS = 12
PAYBACK_ACCEPTABLE_MONTHS = 24


# ==============================================================================
# AI COST ESTIMATION CONFIGURATION
# ==============================================================================

CHARS_PER_TOKEN_ESTIMATE = 4
SYSTEM_PROMPT_OVERHEAD_TOKENS = 500
TYPICAL_OUTPUT_TOKENS = 2500
OUTPUT_TOKENS_PER_FILE = 50
MAX_OUTPUT_TOKENS = 4000

# Confidence bands for analysis cost estimates
COMPLEX_FILE_COUNT = 30
COMPLEX_CHAR_COUNT = 100_000
MEDIUM_FILE_COUNT = 5
MEDIUM_CHAR_COUNT = 10_000

# Cost categories (USD)
CHEAP_COST_THRESHOLD_USD = 0.05
MODERATE_COST_THRESHOLD_USD = 0.20

DEFAULT_COMPARISON_PROVIDERS = ["openai", "anthropic", "groq", "minimax"]


# ==============================================================================
# API CONFIGURATION
# ==============================================================================

API_CONFIG: Dict[str, Any] = {
    "host": os.getenv("API_HOST", "0.0.0.0"),
    "port": int(os.getenv("API_PORT", "8000"))
}


# ==============================================================================
# LOGGING CONFIGURATION
# ==============================================================================

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
