"""
Procurement Models

A procurement session is one day's shopping trip: what to buy (aggregated
from that day's open orders), what it actually cost, and the trip's ad hoc
expenses.
"""

from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from pasarantar.models.common import ProcurementStatus


class ProcurementItem(BaseModel):
    """Planned purchase of one product/unit."""
    id: str
    session_id: str
    product_id: Optional[str] = None
    product_name: str
    unit: str
    total_qty: float = Field(default=0.0, ge=0)
    cost_price: Optional[float] = Field(default=None, ge=0, description="Actual unit cost, once entered")
    is_purchased: bool = False
    notes: Optional[str] = None


class ProcurementExpense(BaseModel):
    """Ad hoc trip cost (parking, fuel, ice...)."""
    id: str
    session_id: str
    category: str
    amount: float = Field(..., ge=0)
    description: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)


class ProcurementSession(BaseModel):
    """A day's shopping trip with derived totals."""

    id: str
    date: date
    status: ProcurementStatus = ProcurementStatus.OPEN
    notes: Optional[str] = None
    items: List[ProcurementItem] = Field(default_factory=list)
    expenses: List[ProcurementExpense] = Field(default_factory=list)

    items_total: float = 0.0
    expenses_total: float = 0.0
    grand_total: float = 0.0

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)


class GenerateSessionRequest(BaseModel):
    session_date: Optional[date] = None


class GenerateSessionResult(BaseModel):
    session: ProcurementSession
    orders_processed: int
    items_created: int


class ProcurementItemUpdate(BaseModel):
    """Partial update of a procurement item."""
    cost_price: Optional[float] = Field(default=None, ge=0)
    clear_cost_price: bool = False
    is_purchased: Optional[bool] = None
    notes: Optional[str] = None


class ExpenseCreate(BaseModel):
    session_id: str
    category: str
    amount: float
    description: Optional[str] = None


class SessionStatusUpdate(BaseModel):
    status: Optional[ProcurementStatus] = None
    notes: Optional[str] = None
