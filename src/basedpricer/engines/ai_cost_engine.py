"""
AI Cost Estimation Engine.

Token-cost arithmetic for LLM usage: per-request cost, pre-analysis cost
estimates from file counts and characters, cross-provider comparisons and
monthly per-customer AI spend.

Prices come from an injectable PricingCatalog (USD per million tokens);
MYR totals use an explicit exchange rate. Unknown providers or models
produce zero-cost results, never exceptions.
"""

from typing import List, Dict, Any, Optional
from dataclasses import dataclass
from enum import Enum
import logging
import math

from basedpricer.config import (
    DEFAULT_USD_TO_MYR_RATE,
    DEFAULT_COMPARISON_PROVIDERS,
    CHARS_PER_TOKEN_ESTIMATE,
    SYSTEM_PROMPT_OVERHEAD_TOKENS,
    TYPICAL_OUTPUT_TOKENS,
    OUTPUT_TOKENS_PER_FILE,
    MAX_OUTPUT_TOKENS,
    COMPLEX_FILE_COUNT,
    COMPLEX_CHAR_COUNT,
    MEDIUM_FILE_COUNT,
    MEDIUM_CHAR_COUNT,
    CHEAP_COST_THRESHOLD_USD,
    MODERATE_COST_THRESHOLD_USD
)
from basedpricer.data.ai_pricing import PricingCatalog, DEFAULT_PRICING_CATALOG

logger = logging.getLogger(__name__)

TOKENS_PER_MILLION = 1_000_000


# ==============================================================================
# ENUMS AND DATA STRUCTURES
# ==============================================================================

class Confidence(Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class CostCategory(Enum):
    CHEAP = "cheap"
    MODERATE = "moderate"
    EXPENSIVE = "expensive"


@dataclass(frozen=True)
class TokenUsage:
    prompt_tokens: int
    completion_tokens: int
    total_tokens: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        total = self.total_tokens
        if total is None:
            total = self.prompt_tokens + self.completion_tokens
        return {
            "promptTokens": self.prompt_tokens,
            "completionTokens": self.completion_tokens,
            "totalTokens": total
        }


@dataclass(frozen=True)
class AICostBreakdown:
    """Cost of a single request, split by input and output tokens."""
    input_cost: float
    output_cost: float
    total_cost_usd: float
    total_cost_myr: float
    input_tokens: int
    output_tokens: int
    provider: str
    model_name: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "inputCost": self.input_cost,
            "outputCost": self.output_cost,
            "totalCostUSD": self.total_cost_usd,
            "totalCostMYR": self.total_cost_myr,
            "inputTokens": self.input_tokens,
            "outputTokens": self.output_tokens,
            "provider": self.provider,
            "modelName": self.model_name
        }


@dataclass(frozen=True)
class CostEstimate:
    estimated_cost_usd: float
    estimated_cost_myr: float
    estimated_tokens: int
    confidence: Confidence
    provider: str
    model_name: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "estimatedCostUSD": self.estimated_cost_usd,
            "estimatedCostMYR": self.estimated_cost_myr,
            "estimatedTokens": self.estimated_tokens,
            "confidence": self.confidence.value,
            "provider": self.provider,
            "modelName": self.model_name
        }


@dataclass(frozen=True)
class ProviderComparison:
    provider: str
    model_name: str
    display_name: str
    estimated_cost_usd: float
    estimated_cost_myr: float
    is_selected: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "provider": self.provider,
            "modelName": self.model_name,
            "displayName": self.display_name,
            "estimatedCostUSD": self.estimated_cost_usd,
            "estimatedCostMYR": self.estimated_cost_myr,
            "isSelected": self.is_selected
        }


@dataclass(frozen=True)
class CostTotals:
    cost_usd: float
    cost_myr: float

    def to_dict(self) -> Dict[str, Any]:
        return {"costUSD": self.cost_usd, "costMYR": self.cost_myr}


# ==============================================================================
# TOKEN COST CALCULATIONS
# ==============================================================================

def _token_cost(tokens: float, price_per_million: float) -> float:
    return (tokens / TOKENS_PER_MILLION) * price_per_million


def calculate_token_cost(
    usage: TokenUsage,
    provider: str,
    model: Optional[str] = None,
    exchange_rate: float = DEFAULT_USD_TO_MYR_RATE,
    catalog: PricingCatalog = DEFAULT_PRICING_CATALOG
) -> AICostBreakdown:
    """
    Calculate the cost of a single request from its token usage.

    Args:
        usage: Prompt/completion token counts (negatives are treated as 0)
        provider: Provider key (e.g. 'openai')
        model: Model id; the provider's default model when None
        exchange_rate: USD to MYR rate
        catalog: Pricing catalog to look prices up in

    Returns:
        AICostBreakdown; all-zero costs when the provider/model is not priced

    Example:
        >>> cost = calculate_token_cost(TokenUsage(1_000_000, 0), "openai", "gpt-4o")
        >>> cost.total_cost_usd
        2.5
    """
    input_tokens = max(0, usage.prompt_tokens)
    output_tokens = max(0, usage.completion_tokens)

    pricing = catalog.get_pricing_for_model(provider, model)
    if pricing is None:
        logger.warning(f"No pricing for provider '{provider}' model '{model}'; reporting zero cost")
        return AICostBreakdown(
            input_cost=0,
            output_cost=0,
            total_cost_usd=0,
            total_cost_myr=0,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            provider=provider,
            model_name=model if model is not None else "unknown"
        )

    input_cost = _token_cost(input_tokens, pricing.input_price_per_million)
    output_cost = _token_cost(output_tokens, pricing.output_price_per_million)
    total_usd = input_cost + output_cost

    return AICostBreakdown(
        input_cost=input_cost,
        output_cost=output_cost,
        total_cost_usd=total_usd,
        total_cost_myr=total_usd * exchange_rate,
        input_tokens=input_tokens,
        output_tokens=output_tokens,
        provider=provider,
        model_name=pricing.display_name
    )


def calculate_cost_for_tokens(
    input_tokens: int,
    output_tokens: int,
    provider: str,
    model: Optional[str] = None,
    exchange_rate: float = DEFAULT_USD_TO_MYR_RATE,
    catalog: PricingCatalog = DEFAULT_PRICING_CATALOG
) -> CostTotals:
    """USD and MYR totals for raw token counts."""
    breakdown = calculate_token_cost(
        TokenUsage(input_tokens, output_tokens, input_tokens + output_tokens),
        provider,
        model,
        exchange_rate,
        catalog
    )
    return CostTotals(cost_usd=breakdown.total_cost_usd, cost_myr=breakdown.total_cost_myr)


# ==============================================================================
# TOKEN ESTIMATION
# ==============================================================================

def estimate_tokens_from_chars(char_count: int) -> int:
    """Rough token count (about 4 characters per token)."""
    return math.ceil(char_count / CHARS_PER_TOKEN_ESTIMATE)


def estimate_tokens_from_text(text: str) -> int:
    return estimate_tokens_from_chars(len(text))


def _estimate_confidence(file_count: int, total_chars: int) -> Confidence:
    if file_count > COMPLEX_FILE_COUNT or total_chars > COMPLEX_CHAR_COUNT:
        return Confidence.LOW
    if file_count > MEDIUM_FILE_COUNT and total_chars > MEDIUM_CHAR_COUNT:
        return Confidence.HIGH
    return Confidence.MEDIUM


def estimate_analysis_cost(
    file_count: int,
    total_chars: int,
    provider: str,
    model: Optional[str] = None,
    exchange_rate: float = DEFAULT_USD_TO_MYR_RATE,
    catalog: PricingCatalog = DEFAULT_PRICING_CATALOG
) -> CostEstimate:
    """
    Estimate the cost of analysing a codebase before running it.

    Input tokens:  ceil(chars / 4) + system prompt overhead (500)
    Output tokens: min(2500 + 50 per file, 4000)

    Confidence is low for large inputs (> 30 files or > 100K chars), high for
    mid-sized inputs (> 5 files and > 10K chars) and medium otherwise.

    Args:
        file_count: Number of files to analyse
        total_chars: Total characters across those files
        provider: Provider key
        model: Model id; the provider's default model when None
        exchange_rate: USD to MYR rate
        catalog: Pricing catalog

    Returns:
        CostEstimate; zero cost with low confidence when the model is not priced
    """
    pricing = catalog.get_pricing_for_model(provider, model)
    if pricing is None:
        logger.warning(f"Cannot estimate cost: no pricing for provider '{provider}' model '{model}'")
        return CostEstimate(
            estimated_cost_usd=0,
            estimated_cost_myr=0,
            estimated_tokens=0,
            confidence=Confidence.LOW,
            provider=provider,
            model_name=model if model is not None else "unknown"
        )

    estimated_input = estimate_tokens_from_chars(total_chars) + SYSTEM_PROMPT_OVERHEAD_TOKENS
    estimated_output = min(
        TYPICAL_OUTPUT_TOKENS + file_count * OUTPUT_TOKENS_PER_FILE,
        MAX_OUTPUT_TOKENS
    )

    cost_usd = (
        _token_cost(estimated_input, pricing.input_price_per_million)
        + _token_cost(estimated_output, pricing.output_price_per_million)
    )

    estimate = CostEstimate(
        estimated_cost_usd=cost_usd,
        estimated_cost_myr=cost_usd * exchange_rate,
        estimated_tokens=estimated_input + estimated_output,
        confidence=_estimate_confidence(file_count, total_chars),
        provider=provider,
        model_name=pricing.display_name
    )

    logger.debug(
        f"Estimated {estimate.estimated_tokens} tokens for {file_count} files "
        f"on {provider}: ${cost_usd:.4f}"
    )
    return estimate


# ==============================================================================
# PROVIDER COMPARISON
# ==============================================================================

def compare_provider_costs(
    input_tokens: int,
    output_tokens: int,
    selected_provider: str,
    providers: Optional[List[str]] = None,
    exchange_rate: float = DEFAULT_USD_TO_MYR_RATE,
    catalog: PricingCatalog = DEFAULT_PRICING_CATALOG
) -> List[ProviderComparison]:
    """
    Compare the cost of the same workload across providers.

    Each provider is priced at its default model. Providers without a
    pricing entry are kept in the output with zero cost.

    Returns:
        One ProviderComparison per provider, in input order
    """
    if providers is None:
        providers = DEFAULT_COMPARISON_PROVIDERS

    comparisons = []
    for provider in providers:
        pricing = catalog.get_pricing_for_model(provider)
        costs = calculate_cost_for_tokens(
            input_tokens, output_tokens, provider,
            exchange_rate=exchange_rate, catalog=catalog
        )

        comparisons.append(ProviderComparison(
            provider=provider,
            model_name=pricing.name if pricing else "unknown",
            display_name=pricing.display_name if pricing else "Unknown",
            estimated_cost_usd=costs.cost_usd,
            estimated_cost_myr=costs.cost_myr,
            is_selected=provider == selected_provider
        ))

    return comparisons


def calculate_monthly_ai_cost_per_customer(
    avg_input_tokens_per_request: int,
    avg_output_tokens_per_request: int,
    requests_per_month: int,
    provider: str,
    model: Optional[str] = None,
    exchange_rate: float = DEFAULT_USD_TO_MYR_RATE,
    catalog: PricingCatalog = DEFAULT_PRICING_CATALOG
) -> CostTotals:
    """
    Monthly AI cost per customer, for feeding into COGS.

    Example:
        >>> calculate_monthly_ai_cost_per_customer(1000, 500, 100, "openai", "gpt-4o-mini").cost_usd
        0.045
    """
    return calculate_cost_for_tokens(
        avg_input_tokens_per_request * requests_per_month,
        avg_output_tokens_per_request * requests_per_month,
        provider,
        model,
        exchange_rate,
        catalog
    )


# ==============================================================================
# PRESENTATION HELPERS
# ==============================================================================

def get_cost_category(cost_usd: float) -> CostCategory:
    if cost_usd < CHEAP_COST_THRESHOLD_USD:
        return CostCategory.CHEAP
    if cost_usd < MODERATE_COST_THRESHOLD_USD:
        return CostCategory.MODERATE
    return CostCategory.EXPENSIVE


def format_cost(
    cost_usd: float,
    cost_myr: Optional[float] = None,
    show_both: bool = True,
    precision: int = 2
) -> str:
    """
    Format an AI cost for display.

    Sub-cent USD amounts use 4 decimals; MYR below 0.10 uses 4 decimals.

    Example:
        >>> format_cost(0.005, 0.0224)
        '$0.0050 (MYR 0.0224)'
    """
    usd_precision = 4 if cost_usd < 0.01 else precision
    usd_str = f"${cost_usd:.{usd_precision}f}"

    if not show_both or cost_myr is None:
        return usd_str

    myr_precision = 4 if cost_myr < 0.1 else precision
    return f"{usd_str} (MYR {cost_myr:.{myr_precision}f})"


def format_tokens(tokens: int) -> str:
    """
    Format a token count with unit suffixes.

    Example:
        >>> format_tokens(1500)
        '1.5k'
    """
    if tokens >= 1_000_000:
        return f"{tokens / 1_000_000:.1f}M"
    if tokens >= 1_000:
        return f"{tokens / 1_000:.1f}k"
    return f"{tokens:,}"
