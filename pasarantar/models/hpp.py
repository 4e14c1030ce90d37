"""
HPP (Harga Pokok Produksi) Models

Inputs and outputs of the cost-of-goods calculator. A calculation is
ephemeral: nothing is stored until the operator saves the resulting product.
"""

from typing import List, Optional

from pydantic import BaseModel, Field

from pasarantar.models.catalog import CostComponent


class HPPComponentLine(BaseModel):
    """A cost component copied into one calculation."""
    component_id: Optional[str] = None
    name: str = ""
    cost: float = Field(..., ge=0, description="Snapshot of the component cost")
    qty: float = Field(default=1, ge=0)


class HPPInput(BaseModel):
    """Everything the calculator needs."""

    base_material_name: Optional[str] = None
    base_material_cost: float = Field(default=0.0, ge=0)
    shrinkage_percent: float = Field(default=0.0, ge=0, le=100)
    components: List[HPPComponentLine] = Field(default_factory=list)
    # May be negative: the price then falls below cost
    margin_percent: float = 30.0

    def add_component(self, component: CostComponent, qty: float = 1) -> "HPPInput":
        """Return a copy with the library component appended."""
        line = HPPComponentLine(
            component_id=component.id,
            name=component.name,
            cost=component.cost,
            qty=qty,
        )
        return self.model_copy(update={"components": [*self.components, line]})


class HPPResult(BaseModel):
    """All intermediate values are exposed so the price can be explained."""
    shrinkage_cost: float
    cost_after_shrinkage: float
    components_total_cost: float
    total_hpp: float
    profit: float
    selling_price: float
    rounded_price: int


class HPPCalculationResponse(BaseModel):
    """Calculator output with a display label for the final price."""
    result: HPPResult
    rounded_price_label: str


class SaveToCatalogRequest(BaseModel):
    """Commit a calculation as a new catalog product."""
    product_name: str
    product_unit: str = "pack"
    calculation: HPPInput
