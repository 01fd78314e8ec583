"""
KrishiSetu - Cultivation cost breakdown.
Sums the five expense categories and reports each one's share of the total.
"""
from typing import Any, Dict, List

# Output order is fixed regardless of amounts
COST_CATEGORIES = [
    ("seeds", "Seeds"),
    ("fertilizers", "Fertilizers"),
    ("labor", "Labor"),
    ("irrigation", "Irrigation"),
    ("equipment", "Equipment"),
]


def _share(amount: float, total: float) -> float:
    """Percentage of total; 0.0 when there is nothing to divide by."""
    if total == 0:
        return 0.0
    return amount / total * 100


def calculate_cost(
    crop_type: str,
    land_area: float,
    seeds: float,
    fertilizers: float,
    labor: float,
    irrigation: float,
    equipment: float,
) -> Dict[str, Any]:
    """
    Itemized cost breakdown. Percentages are left at full precision for the caller to format.
    crop_type and land_area do not affect the total; they are carried through for display.
    """
    amounts = {
        "seeds": seeds,
        "fertilizers": fertilizers,
        "labor": labor,
        "irrigation": irrigation,
        "equipment": equipment,
    }
    total = seeds + fertilizers + labor + irrigation + equipment

    items: List[Dict[str, Any]] = [
        {
            "category": label,
            "amount": amounts[key],
            "percentage": _share(amounts[key], total),
        }
        for key, label in COST_CATEGORIES
    ]

    return {
        "crop_type": crop_type,
        "land_area": land_area,
        "items": items,
        "total": total,
        "cost_per_acre": total / land_area if land_area else 0.0,
    }
