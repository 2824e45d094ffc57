"""
BasedPricer - SaaS pricing financial calculations.

COGS, margin, break-even, investor metric and AI token-cost calculators
for pricing decisions, with an optional HTTP API (`basedpricer.api_server`).
"""

__version__ = "0.1.0"
