"""
Sample cost items for demos and quick calculations.
"""

from basedpricer.engines.cogs_engine import VariableCostItem, FixedCostItem


SAMPLE_VARIABLE_COSTS = [
    VariableCostItem(
        id="api-1",
        name="AI API Calls",
        unit="1K tokens",
        cost_per_unit=0.03,
        usage_per_customer=100,
        description="OpenAI API"
    ),
    VariableCostItem(
        id="storage-1",
        name="Cloud Storage",
        unit="GB",
        cost_per_unit=0.10,
        usage_per_customer=2,
        description="User data storage"
    ),
    VariableCostItem(
        id="email-1",
        name="Email Service",
        unit="email",
        cost_per_unit=0.005,
        usage_per_customer=50,
        description="Transactional emails"
    ),
]

SAMPLE_FIXED_COSTS = [
    FixedCostItem(id="hosting-1", name="Hosting", monthly_cost=50, description="Vercel Pro"),
    FixedCostItem(id="db-1", name="Database", monthly_cost=25, description="Supabase Pro"),
]
