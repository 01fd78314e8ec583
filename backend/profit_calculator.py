"""
KrishiSetu - Profit forecast from cultivation cost, expected yield and market price.
"""
from typing import Dict


def calculate_profit(cultivation_cost: float, yield_quantity: float, market_price: float) -> Dict[str, float]:
    """
    revenue = yield x price, profit = revenue - cost, margin as % of revenue.
    Margin is 0 when there is no revenue. A negative profit is a loss; no status is attached here.
    """
    revenue = yield_quantity * market_price
    profit = revenue - cultivation_cost
    profit_margin = (profit / revenue * 100) if revenue > 0 else 0.0
    return {
        "revenue": revenue,
        "profit": profit,
        "profit_margin": profit_margin,
    }
