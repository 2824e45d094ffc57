"""
BasedPricer HTTP API.

A thin FastAPI surface over the calculation engines. Each endpoint validates
its payload with pydantic, delegates to the engines and returns a JSON
document with a human-readable summary. Infinite results are serialized as
"Infinity" (or null where a count is meaningless).

Run with:
    python -m basedpricer.api_server
"""

from typing import List, Optional
import logging
import math

from fastapi import FastAPI
from pydantic import Field

from basedpricer import __version__
from basedpricer.config import API_CONFIG, LOG_LEVEL, LOG_FORMAT, DEFAULT_USD_TO_MYR_RATE
from basedpricer.data import CURRENCIES, DEFAULT_PRICING_CATALOG
from basedpricer.engines import (
    calculate_item_cost_per_customer,
    calculate_cogs_breakdown,
    calculate_gross_margin,
    get_margin_health,
    get_margin_status,
    is_margin_healthy,
    is_margin_acceptable,
    GROSS_MARGIN_THRESHOLDS,
    calculate_break_even_customers,
    calculate_investor_metrics,
    format_valuation_range,
    calculate_token_cost,
    estimate_analysis_cost,
    compare_provider_costs,
    get_cost_category,
    TokenUsage,
    round_percentage,
    json_safe
)
from basedpricer.schemas import (
    CamelModel,
    CurrencyCode,
    AIProvider,
    VariableCostItemSchema,
    FixedCostItemSchema
)

logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT)
logger = logging.getLogger(__name__)


# ==============================================================================
# REQUEST SCHEMAS
# ==============================================================================

class CogsRequest(CamelModel):
    variable_costs: List[VariableCostItemSchema] = Field(default_factory=list)
    fixed_costs: List[FixedCostItemSchema] = Field(default_factory=list)
    customer_count: int = Field(default=100, gt=0)
    utilization_rate: float = Field(default=1, ge=0)
    currency: CurrencyCode = "MYR"


class MarginRequest(CamelModel):
    price: float = Field(gt=0)
    cogs: float = Field(ge=0)
    currency: CurrencyCode = "MYR"


class BreakEvenRequest(CamelModel):
    total_fixed_costs: float = Field(ge=0)
    price_per_customer: float = Field(gt=0)
    variable_cost_per_customer: float = Field(ge=0)


class InvestorMetricsRequest(CamelModel):
    mrr: float = Field(gt=0)
    paid_customers: float = Field(gt=0)
    arpu: float = Field(gt=0)
    gross_margin: float
    break_even_customers: float = Field(gt=0)
    monthly_growth_rate: float
    ltv: float = Field(gt=0)
    estimated_cac: Optional[float] = Field(default=None, gt=0)


class AICostRequest(CamelModel):
    provider: AIProvider
    model: Optional[str] = None
    estimated_input_tokens: int = Field(gt=0)
    estimated_output_tokens: int = Field(gt=0)
    requests_per_customer: int = Field(default=1, gt=0)
    customer_count: int = Field(default=1, gt=0)
    exchange_rate: float = Field(default=DEFAULT_USD_TO_MYR_RATE, gt=0)


class AnalysisCostRequest(CamelModel):
    provider: AIProvider
    model: Optional[str] = None
    file_count: int = Field(ge=0)
    total_chars: int = Field(ge=0)
    exchange_rate: float = Field(default=DEFAULT_USD_TO_MYR_RATE, gt=0)


class ProviderComparisonRequest(CamelModel):
    input_tokens: int = Field(ge=0)
    output_tokens: int = Field(ge=0)
    selected_provider: str
    providers: Optional[List[str]] = None
    exchange_rate: float = Field(default=DEFAULT_USD_TO_MYR_RATE, gt=0)


# ==============================================================================
# APPLICATION
# ==============================================================================

app = FastAPI(
    title="BasedPricer API",
    version=__version__,
    description="SaaS pricing calculations: COGS, margins, break-even, investor metrics and AI costs."
)


@app.get("/health")
def health_check():
    """Endpoint to check if the server is running."""
    return {"status": "ok", "version": __version__}


@app.post("/cogs")
def calculate_cogs(request: CogsRequest):
    """Per-customer COGS breakdown for a cost structure at a given customer count."""
    variable_costs = [item.to_record() for item in request.variable_costs]
    fixed_costs = [item.to_record() for item in request.fixed_costs]
    symbol = CURRENCIES[request.currency].symbol

    breakdown = calculate_cogs_breakdown(
        variable_costs, fixed_costs, request.customer_count, request.utilization_rate
    )
    logger.info(
        f"COGS for {request.customer_count} customers: {breakdown.total_cogs:.2f} {request.currency}"
    )

    return json_safe({
        "customerCount": request.customer_count,
        "currency": request.currency,
        "breakdown": {
            "variableCostPerCustomer": breakdown.variable_total,
            "fixedCostPerCustomer": breakdown.fixed_per_customer,
            "totalCOGSPerCustomer": breakdown.total_cogs,
            "totalMonthlyFixedCosts": breakdown.fixed_total
        },
        "variableCosts": [
            {
                "name": item.name,
                "costPerCustomer": calculate_item_cost_per_customer(item, request.utilization_rate)
            }
            for item in variable_costs
        ],
        "fixedCosts": [
            {
                "name": item.name,
                "monthlyCost": item.monthly_cost,
                "costPerCustomer": item.monthly_cost / request.customer_count
            }
            for item in fixed_costs
        ],
        "summary": (
            f"Total COGS per customer: {symbol} {breakdown.total_cogs:.2f} "
            f"(Variable: {symbol} {breakdown.variable_total:.2f}, "
            f"Fixed: {symbol} {breakdown.fixed_per_customer:.2f})"
        )
    })


@app.post("/margins")
def calculate_margins(request: MarginRequest):
    """Gross margin, health and recommendations for a price/COGS pair."""
    margin = calculate_gross_margin(request.price, request.cogs)
    profit = request.price - request.cogs
    health = get_margin_health(margin)
    symbol = CURRENCIES[request.currency].symbol

    if not is_margin_acceptable(margin):
        recommendations = ["Consider reducing costs or increasing price to improve margins"]
    elif not is_margin_healthy(margin):
        recommendations = ["Margins are acceptable but could be improved"]
    else:
        recommendations = ["Margins are healthy"]

    return json_safe({
        "price": request.price,
        "cogs": request.cogs,
        "currency": request.currency,
        "profit": profit,
        "grossMargin": margin,
        "marginHealth": health.value,
        "marginStatus": get_margin_status(margin).value,
        "isHealthy": is_margin_healthy(margin),
        "isAcceptable": is_margin_acceptable(margin),
        "summary": (
            f"Gross margin: {margin:.1f}% ({health.value}). "
            f"Profit per customer: {symbol} {profit:.2f}"
        ),
        "recommendations": recommendations
    })


@app.get("/margin-thresholds")
def margin_thresholds():
    """Gross margin bands used for health classification."""
    healthy = GROSS_MARGIN_THRESHOLDS.healthy
    acceptable = GROSS_MARGIN_THRESHOLDS.acceptable
    return {
        "thresholds": {"healthy": healthy, "acceptable": acceptable},
        "explanation": {
            "healthy": f">= {healthy:g}% - Healthy SaaS gross margin",
            "acceptable": f">= {acceptable:g}% - Acceptable but room for improvement",
            "low": f"< {acceptable:g}% - Concerning, review pricing or costs"
        }
    }


@app.post("/break-even")
def calculate_break_even(request: BreakEvenRequest):
    """Customers needed to cover fixed costs."""
    break_even = calculate_break_even_customers(
        request.total_fixed_costs,
        request.price_per_customer,
        request.variable_cost_per_customer
    )
    contribution = request.price_per_customer - request.variable_cost_per_customer
    can_break_even = not math.isinf(break_even)

    return json_safe({
        "breakEvenCustomers": break_even if can_break_even else None,
        "canBreakEven": can_break_even,
        "totalFixedCosts": request.total_fixed_costs,
        "pricePerCustomer": request.price_per_customer,
        "variableCostPerCustomer": request.variable_cost_per_customer,
        "contributionMargin": contribution,
        "contributionMarginPercent": round_percentage(
            contribution / request.price_per_customer * 100
        ),
        "summary": (
            f"Need {break_even} customers to break even" if can_break_even
            else "Cannot break even with current pricing - price must exceed variable costs"
        )
    })


@app.post("/investor-metrics")
def investor_metrics(request: InvestorMetricsRequest):
    """Investor-facing metrics: ARR, valuation range, milestones and unit economics."""
    metrics = calculate_investor_metrics(
        mrr=request.mrr,
        paid_customers=request.paid_customers,
        arpu=request.arpu,
        gross_margin=request.gross_margin,
        break_even_customers=request.break_even_customers,
        monthly_growth_rate=request.monthly_growth_rate,
        ltv=request.ltv,
        estimated_cac=request.estimated_cac or 0
    )

    result = metrics.to_dict()
    result["valuationRange"] = format_valuation_range(metrics.valuation)
    return json_safe(result)


@app.post("/ai-cost/estimate")
def estimate_ai_cost(request: AICostRequest):
    """Monthly AI cost for a per-request token profile across a customer base."""
    per_request = calculate_token_cost(
        TokenUsage(
            request.estimated_input_tokens,
            request.estimated_output_tokens,
            request.estimated_input_tokens + request.estimated_output_tokens
        ),
        request.provider,
        request.model,
        request.exchange_rate
    )

    total_requests = request.requests_per_customer * request.customer_count
    total_usd = per_request.total_cost_usd * total_requests
    total_myr = per_request.total_cost_myr * total_requests

    return json_safe({
        "provider": request.provider,
        "model": per_request.model_name,
        "perRequest": {
            "inputTokens": per_request.input_tokens,
            "outputTokens": per_request.output_tokens,
            "costUSD": per_request.total_cost_usd,
            "costMYR": per_request.total_cost_myr,
            "category": get_cost_category(per_request.total_cost_usd).value
        },
        "monthly": {
            "requestsPerCustomer": request.requests_per_customer,
            "customerCount": request.customer_count,
            "totalRequests": total_requests,
            "totalCostUSD": total_usd,
            "totalCostMYR": total_myr,
            "costPerCustomerUSD": total_usd / request.customer_count,
            "costPerCustomerMYR": total_myr / request.customer_count
        },
        "summary": (
            f"Est. {total_usd:.4f} USD ({total_myr:.2f} MYR) per month "
            f"for {request.customer_count} customers"
        )
    })


@app.post("/ai-cost/analysis")
def estimate_analysis(request: AnalysisCostRequest):
    """Up-front cost estimate for analysing a codebase."""
    estimate = estimate_analysis_cost(
        request.file_count,
        request.total_chars,
        request.provider,
        request.model,
        request.exchange_rate
    )
    return json_safe(estimate.to_dict())


@app.post("/ai-cost/compare")
def compare_ai_costs(request: ProviderComparisonRequest):
    """Same token workload priced at each provider's default model."""
    comparisons = compare_provider_costs(
        request.input_tokens,
        request.output_tokens,
        request.selected_provider,
        request.providers,
        request.exchange_rate
    )
    return json_safe({"comparisons": [c.to_dict() for c in comparisons]})


@app.get("/ai-pricing")
def ai_pricing():
    """Every priced model in the catalog."""
    return {"models": DEFAULT_PRICING_CATALOG.all_models()}


if __name__ == "__main__":
    import uvicorn

    logger.info(f"Starting BasedPricer API on {API_CONFIG['host']}:{API_CONFIG['port']}")
    uvicorn.run(app, host=API_CONFIG["host"], port=API_CONFIG["port"])
