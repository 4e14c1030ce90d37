"""
Order Data Models

Customer orders with their line items. Line totals and order totals are
computed by pasarantar.services.order_totals, never typed in by hand.
"""

from datetime import date, datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from pasarantar.models.common import OrderSource, OrderStatus


class OrderItem(BaseModel):
    """A line on an order. `total` is always qty * price."""

    product_id: Optional[str] = None
    product_name: str
    qty: float = Field(..., gt=0)
    unit: str = "kg"
    price: float = Field(..., ge=0, description="Selling price per unit")
    cost_price: Optional[float] = Field(
        default=None, ge=0, description="Snapshot of the product cost at order time"
    )
    total: float = 0.0


class OrderItemInput(BaseModel):
    """A line as submitted by the operator."""
    product_id: Optional[str] = None
    product_name: str
    qty: float = Field(..., gt=0)
    unit: str = "kg"
    price: float = Field(..., ge=0)
    cost_price: Optional[float] = Field(default=None, ge=0)


class Order(BaseModel):
    """A customer order."""

    id: str
    order_number: str
    date: datetime = Field(default_factory=datetime.utcnow)
    source: OrderSource = OrderSource.OFFLINE

    # Customer
    customer_id: Optional[str] = None
    customer_name: str
    customer_phone: Optional[str] = None
    customer_address: Optional[str] = None

    items: List[OrderItem] = Field(default_factory=list)

    # Totals
    subtotal: float = 0.0
    shipping_fee: float = Field(default=0.0, ge=0)
    service_fee: float = Field(default=0.0, ge=0)
    discount: float = Field(default=0.0, ge=0)
    grand_total: float = 0.0

    status: OrderStatus = OrderStatus.PENDING
    notes: Optional[str] = None
    updated_at: datetime = Field(default_factory=datetime.utcnow)
    stock_taken: Dict[str, float] = Field(
        default_factory=dict,
        description="Stock actually deducted per product id, returned on cancel or delete",
    )


class OrderCreate(BaseModel):
    """Request to create an order."""
    customer_id: Optional[str] = None
    customer_name: str
    customer_phone: Optional[str] = None
    customer_address: Optional[str] = None
    source: OrderSource = OrderSource.OFFLINE
    items: List[OrderItemInput] = Field(default_factory=list)
    shipping_fee: float = Field(default=0.0, ge=0)
    service_fee: float = Field(default=0.0, ge=0)
    discount: float = Field(default=0.0, ge=0)
    notes: Optional[str] = None
    date: Optional[datetime] = None


class OrderItemsUpdate(BaseModel):
    """Replace the lines (and optionally the fees) of an order."""
    items: List[OrderItemInput]
    shipping_fee: Optional[float] = Field(default=None, ge=0)
    service_fee: Optional[float] = Field(default=None, ge=0)
    discount: Optional[float] = Field(default=None, ge=0)


class StatusUpdate(BaseModel):
    """Request to move an order to a new status."""
    status: OrderStatus


class OrderFilter(BaseModel):
    """Filters for listing orders."""
    status: Optional[OrderStatus] = None
    source: Optional[OrderSource] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    search: Optional[str] = None  # customer name or order number
