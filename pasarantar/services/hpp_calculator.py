"""
HPP Calculator

Builds the production cost (HPP) of a product from its raw material,
expected shrinkage and packaging/ingredient components, then derives a
recommended selling price from a margin.
"""

import math
from typing import Iterable

from pasarantar.models.hpp import HPPComponentLine, HPPInput, HPPResult

# Selling prices are rounded up to the next multiple of this many rupiah.
PRICE_ROUNDING_STEP = 500


def round_up_price(amount: float, step: int = PRICE_ROUNDING_STEP) -> int:
    """Ceiling of `amount` to a multiple of `step`."""
    return int(math.ceil(amount / step)) * step


def components_total(components: Iterable[HPPComponentLine]) -> float:
    """Sum of cost * qty over the component lines."""
    return sum((line.cost * line.qty for line in components), 0.0)


def calculate_hpp(calc: HPPInput) -> HPPResult:
    """
    Calculate HPP and the recommended selling price.

    Shrinkage adds cost: it models buying more raw material than ends up
    usable. The margin is applied on top of the full HPP and is not clamped,
    so a negative margin yields a price below cost.

    Args:
        calc: Base material cost, shrinkage %, component lines and margin %

    Returns:
        HPPResult with every intermediate value
    """
    shrinkage_cost = calc.base_material_cost * (calc.shrinkage_percent / 100)
    cost_after_shrinkage = calc.base_material_cost + shrinkage_cost

    components_total_cost = components_total(calc.components)

    total_hpp = cost_after_shrinkage + components_total_cost
    profit = total_hpp * (calc.margin_percent / 100)
    selling_price = total_hpp + profit

    return HPPResult(
        shrinkage_cost=shrinkage_cost,
        cost_after_shrinkage=cost_after_shrinkage,
        components_total_cost=components_total_cost,
        total_hpp=total_hpp,
        profit=profit,
        selling_price=selling_price,
        rounded_price=round_up_price(selling_price),
    )
