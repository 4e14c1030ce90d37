"""Monthly profit & loss report models."""

from datetime import datetime
from typing import List

from pydantic import BaseModel, Field


class TopProduct(BaseModel):
    """Sales of one product name across paid orders."""
    name: str
    qty: float
    total: float


class MonthlyReport(BaseModel):
    """Profit and loss for one calendar month."""

    month: int = Field(..., ge=1, le=12)
    year: int
    generated_at: datetime = Field(default_factory=datetime.utcnow)

    revenue: float = Field(..., description="INCOME transactions in period")
    cogs: float = Field(..., description="'Belanja Pasar' expenses in period")
    opex: float = Field(..., description="All other expenses in period")
    gross_profit: float
    net_profit: float
    gross_margin: float = Field(..., description="Gross profit / revenue * 100")
    net_margin: float = Field(..., description="Net profit / revenue * 100")

    order_count: int = Field(..., description="Paid orders in period")
    avg_order_value: float
    top_products: List[TopProduct] = Field(default_factory=list)

    # Point-in-time snapshot of the current catalog, not filtered by period
    inventory_value: float

    notes: List[str] = Field(
        default_factory=list, description="Plain-language observations about the figures"
    )
