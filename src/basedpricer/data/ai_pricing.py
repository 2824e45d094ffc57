"""
AI Provider Pricing Catalog.

Static reference data for LLM token pricing, keyed by provider and model id.
Prices are in USD per million tokens.

The catalog is an explicitly constructed, read-only object. Engine functions
accept a catalog argument so tests and callers can substitute their own
pricing tables; `DEFAULT_PRICING_CATALOG` is used when none is given.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, List, Optional, Mapping, Any, Iterable
import logging

logger = logging.getLogger(__name__)


# ==============================================================================
# PRICING DATA STRUCTURES
# ==============================================================================

@dataclass(frozen=True)
class AIModelPricing:
    """Token pricing for a single model."""
    name: str
    display_name: str
    input_price_per_million: float
    output_price_per_million: float
    context_window: int
    last_updated: str = "2026-01-01"
    notes: Optional[str] = None

    def __post_init__(self):
        if not self.name:
            raise ValueError("model name cannot be empty")
        if self.input_price_per_million < 0 or self.output_price_per_million < 0:
            raise ValueError(f"token prices must be >= 0 for model '{self.name}'")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "displayName": self.display_name,
            "inputPricePerMillion": self.input_price_per_million,
            "outputPricePerMillion": self.output_price_per_million,
            "contextWindow": self.context_window,
            "lastUpdated": self.last_updated,
            "notes": self.notes
        }


@dataclass(frozen=True)
class ProviderPricing:
    """All priced models offered by one provider."""
    provider: str
    provider_name: str
    default_model: str
    models: Mapping[str, AIModelPricing] = field(default_factory=dict)

    def __post_init__(self):
        if not self.provider:
            raise ValueError("provider cannot be empty")
        # Freeze the model table so the catalog cannot be mutated after construction
        object.__setattr__(self, "models", MappingProxyType(dict(self.models)))

    def get_model(self, model_id: Optional[str] = None) -> Optional[AIModelPricing]:
        """Return pricing for `model_id` (default model when omitted), or None."""
        return self.models.get(model_id if model_id is not None else self.default_model)


class PricingCatalog:
    """
    Read-only lookup of provider -> model -> pricing.

    Lookups never raise: unknown providers or models yield None so batch
    computations can continue past a miss.
    """

    def __init__(self, providers: Iterable[ProviderPricing]):
        self._providers: Mapping[str, ProviderPricing] = MappingProxyType(
            {p.provider: p for p in providers}
        )

    @property
    def providers(self) -> List[str]:
        return list(self._providers.keys())

    def get_provider(self, provider: str) -> Optional[ProviderPricing]:
        return self._providers.get(provider)

    def get_pricing_for_model(
        self,
        provider: str,
        model_id: Optional[str] = None
    ) -> Optional[AIModelPricing]:
        """
        Get pricing for a provider/model pair.

        Args:
            provider: Provider key (e.g. 'openai')
            model_id: Model id; the provider's default model when None

        Returns:
            AIModelPricing, or None if the provider or model is not priced
        """
        provider_pricing = self._providers.get(provider)
        if provider_pricing is None:
            logger.debug(f"No pricing entry for provider '{provider}'")
            return None
        return provider_pricing.get_model(model_id)

    def all_models(self) -> List[Dict[str, Any]]:
        """Flatten the catalog into a list of model dicts tagged with their provider."""
        models = []
        for provider, pricing in self._providers.items():
            for model in pricing.models.values():
                entry = model.to_dict()
                entry["provider"] = provider
                models.append(entry)
        return models

    def __contains__(self, provider: str) -> bool:
        return provider in self._providers

    def __len__(self) -> int:
        return len(self._providers)


# ==============================================================================
# DEFAULT CATALOG
# ==============================================================================

def build_default_catalog() -> PricingCatalog:
    """Construct the built-in pricing catalog."""
    return PricingCatalog([
        ProviderPricing(
            provider="openai",
            provider_name="OpenAI",
            default_model="gpt-4o",
            models={
                "gpt-4o": AIModelPricing("gpt-4o", "GPT-4o", 2.50, 10.00, 128000),
                "gpt-4o-mini": AIModelPricing("gpt-4o-mini", "GPT-4o Mini", 0.15, 0.60, 128000),
                "gpt-4-turbo": AIModelPricing("gpt-4-turbo", "GPT-4 Turbo", 10.00, 30.00, 128000),
            }
        ),
        ProviderPricing(
            provider="anthropic",
            provider_name="Anthropic",
            default_model="claude-sonnet-4-20250514",
            models={
                "claude-sonnet-4-20250514": AIModelPricing(
                    "claude-sonnet-4-20250514", "Claude Sonnet 4", 3.00, 15.00, 200000
                ),
                "claude-3-5-sonnet-20241022": AIModelPricing(
                    "claude-3-5-sonnet-20241022", "Claude 3.5 Sonnet", 3.00, 15.00, 200000
                ),
                "claude-3-haiku-20240307": AIModelPricing(
                    "claude-3-haiku-20240307", "Claude 3 Haiku", 0.25, 1.25, 200000
                ),
            }
        ),
        ProviderPricing(
            provider="openrouter",
            provider_name="OpenRouter",
            default_model="anthropic/claude-3.5-sonnet",
            models={
                "anthropic/claude-3.5-sonnet": AIModelPricing(
                    "anthropic/claude-3.5-sonnet", "Claude 3.5 Sonnet (via OpenRouter)",
                    3.00, 15.00, 200000, notes="OpenRouter adds small markup"
                ),
                "openai/gpt-4o": AIModelPricing(
                    "openai/gpt-4o", "GPT-4o (via OpenRouter)",
                    2.50, 10.00, 128000, notes="OpenRouter adds small markup"
                ),
            }
        ),
        ProviderPricing(
            provider="minimax",
            provider_name="MiniMax",
            default_model="MiniMax-M2.1",
            models={
                "MiniMax-M2.1": AIModelPricing(
                    "MiniMax-M2.1", "MiniMax M2.1", 0.12, 0.60, 200000,
                    notes="Excellent for coding tasks"
                ),
                "MiniMax-M1": AIModelPricing(
                    "MiniMax-M1", "MiniMax M1", 0.40, 2.20, 1000000,
                    notes="Reasoning model with 1M context"
                ),
            }
        ),
        ProviderPricing(
            provider="glm",
            provider_name="GLM (Zhipu)",
            default_model="glm-4.7",
            models={
                "glm-4.7": AIModelPricing(
                    "glm-4.7", "GLM-4.7", 0.60, 2.20, 200000,
                    notes="Competitive with frontier models"
                ),
                "glm-4.5-flash": AIModelPricing(
                    "glm-4.5-flash", "GLM-4.5 Flash", 0.00, 0.00, 131000,
                    notes="Free tier available"
                ),
            }
        ),
        ProviderPricing(
            provider="groq",
            provider_name="Groq",
            default_model="llama-3.3-70b-versatile",
            models={
                "llama-3.3-70b-versatile": AIModelPricing(
                    "llama-3.3-70b-versatile", "Llama 3.3 70B", 0.59, 0.79, 128000,
                    notes="Fast inference with Groq LPU"
                ),
                "mixtral-8x7b-32768": AIModelPricing(
                    "mixtral-8x7b-32768", "Mixtral 8x7B", 0.24, 0.24, 32768
                ),
            }
        ),
    ])


DEFAULT_PRICING_CATALOG = build_default_catalog()
