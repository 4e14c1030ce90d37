"""Common types used across Pasarantar."""

from enum import Enum

from pydantic import BaseModel, Field


class TransactionType(str, Enum):
    """Ledger entry type."""
    INCOME = "INCOME"
    EXPENSE = "EXPENSE"
    CAPITAL = "CAPITAL"


class OrderStatus(str, Enum):
    """Order lifecycle states."""
    PENDING = "PENDING"
    PAID = "PAID"
    CANCELLED = "CANCELLED"
    CONFIRMED = "CONFIRMED"
    PREPARING = "PREPARING"
    SHIPPING = "SHIPPING"
    DELIVERED = "DELIVERED"


class OrderSource(str, Enum):
    """Where an order was entered."""
    OFFLINE = "OFFLINE"  # manual entry from the admin console
    SHOP = "SHOP"        # storefront checkout


class ProcurementStatus(str, Enum):
    """Daily shopping trip status."""
    OPEN = "OPEN"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"


class PaginationParams(BaseModel):
    """Pagination parameters."""
    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=50, ge=1, le=200)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size
