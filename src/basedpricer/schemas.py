"""
Input Validation Schemas.

Pydantic models for the user-supplied records that feed the engines: cost
items, tiers and their limits, token usage and report payloads. Field names
accept both the camelCase wire form and snake_case.

`validate(schema, data)` never raises; it returns a ValidationResult with
either the parsed model or the first error message.
"""

from dataclasses import dataclass
from typing import Any, Dict, Generic, List, Literal, Optional, Type, TypeVar, Union
import logging

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from basedpricer.engines.cogs_engine import (
    VariableCostItem,
    FixedCostItem,
    TierLimit,
    Tier,
    TierStatus
)
from basedpricer.engines.ai_cost_engine import TokenUsage

logger = logging.getLogger(__name__)

CurrencyCode = Literal["MYR", "USD", "SGD", "EUR", "GBP", "AUD"]
AIProvider = Literal["openai", "anthropic", "openrouter", "minimax", "glm", "groq"]
StakeholderType = Literal["investor", "accountant", "engineer", "marketer"]

SchemaT = TypeVar("SchemaT", bound=BaseModel)


class CamelModel(BaseModel):
    """Base model accepting camelCase aliases alongside field names."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ==============================================================================
# COST SCHEMAS
# ==============================================================================

class VariableCostItemSchema(CamelModel):
    id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    unit: str = Field(min_length=1)
    cost_per_unit: float = Field(ge=0)
    usage_per_customer: float = Field(ge=0)
    description: str = ""

    def to_record(self) -> VariableCostItem:
        return VariableCostItem(
            id=self.id,
            name=self.name,
            unit=self.unit,
            cost_per_unit=self.cost_per_unit,
            usage_per_customer=self.usage_per_customer,
            description=self.description
        )


class FixedCostItemSchema(CamelModel):
    id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    monthly_cost: float = Field(ge=0)
    description: str = ""

    def to_record(self) -> FixedCostItem:
        return FixedCostItem(
            id=self.id,
            name=self.name,
            monthly_cost=self.monthly_cost,
            description=self.description
        )


# ==============================================================================
# TIER SCHEMAS
# ==============================================================================

class TierLimitSchema(CamelModel):
    """A tier limit in its serialized form: a number, 'unlimited' or a feature gate."""
    feature_id: str = Field(min_length=1)
    limit: Union[bool, float, Literal["unlimited"]]
    unit: Optional[str] = None

    def to_record(self) -> TierLimit:
        return TierLimit.from_raw(self.feature_id, self.limit, self.unit)


class TierSchema(CamelModel):
    id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    monthly_price_myr: float = Field(ge=0, alias="monthlyPriceMYR")
    annual_price_myr: Optional[float] = Field(default=None, ge=0, alias="annualPriceMYR")
    description: Optional[str] = None
    features: List[str] = Field(default_factory=list)
    limits: List[TierLimitSchema] = Field(default_factory=list)
    status: Literal["active", "coming_soon", "internal"] = "active"
    is_highlighted: bool = False
    cta_text: Optional[str] = None

    def to_record(self) -> Tier:
        return Tier(
            id=self.id,
            name=self.name,
            monthly_price_myr=self.monthly_price_myr,
            annual_price_myr=self.annual_price_myr,
            description=self.description,
            features=list(self.features),
            limits=[limit.to_record() for limit in self.limits],
            status=TierStatus(self.status),
            is_highlighted=self.is_highlighted,
            cta_text=self.cta_text
        )


# ==============================================================================
# AI USAGE SCHEMAS
# ==============================================================================

class TokenUsageSchema(CamelModel):
    prompt_tokens: int = Field(ge=0)
    completion_tokens: int = Field(ge=0)
    total_tokens: Optional[int] = Field(default=None, ge=0)

    def to_record(self) -> TokenUsage:
        total = self.total_tokens
        if total is None:
            total = self.prompt_tokens + self.completion_tokens
        return TokenUsage(self.prompt_tokens, self.completion_tokens, total)


# ==============================================================================
# REPORT SCHEMAS
# ==============================================================================

class CostsSchema(CamelModel):
    variable: List[VariableCostItemSchema] = Field(default_factory=list)
    fixed: List[FixedCostItemSchema] = Field(default_factory=list)


class ReportMetricsSchema(CamelModel):
    mrr: Optional[float] = None
    arr: Optional[float] = None
    paid_customers: Optional[float] = None
    arpu: Optional[float] = None


class ReportDataSchema(CamelModel):
    """A saved pricing report: costs, tiers, headline metrics and stakeholder notes."""
    project_name: str = Field(min_length=1)
    created_at: str
    costs: CostsSchema
    tiers: List[TierSchema] = Field(default_factory=list)
    metrics: Optional[ReportMetricsSchema] = None
    notes: Optional[Dict[StakeholderType, str]] = None


# ==============================================================================
# VALIDATION HELPERS
# ==============================================================================

@dataclass(frozen=True)
class ValidationResult(Generic[SchemaT]):
    success: bool
    data: Optional[SchemaT] = None
    error: Optional[str] = None


def _first_error_message(exc: ValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid data"
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    return f"{location}: {first['msg']}" if location else first["msg"]


def validate(schema: Type[SchemaT], data: Any) -> ValidationResult[SchemaT]:
    """
    Validate data against a schema without raising.

    Args:
        schema: Pydantic model class
        data: Raw input (typically a dict decoded from JSON)

    Returns:
        ValidationResult with the parsed model, or the first error message

    Example:
        >>> validate(FixedCostItemSchema, {"id": "db", "name": "DB", "monthlyCost": -1}).success
        False
    """
    try:
        return ValidationResult(success=True, data=schema.model_validate(data))
    except ValidationError as e:
        message = _first_error_message(e)
        logger.debug(f"{schema.__name__} validation failed: {message}")
        return ValidationResult(success=False, error=message)


def validate_variable_cost_item(data: Any) -> ValidationResult[VariableCostItemSchema]:
    return validate(VariableCostItemSchema, data)


def validate_fixed_cost_item(data: Any) -> ValidationResult[FixedCostItemSchema]:
    return validate(FixedCostItemSchema, data)


def validate_tier(data: Any) -> ValidationResult[TierSchema]:
    return validate(TierSchema, data)


def validate_report_data(data: Any) -> ValidationResult[ReportDataSchema]:
    return validate(ReportDataSchema, data)
