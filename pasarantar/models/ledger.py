"""Ledger (cash book) data models."""

from datetime import date, datetime
from typing import Dict, Optional

from pydantic import BaseModel, Field

from pasarantar.models.common import TransactionType

# Expense category written by restocks. Any EXPENSE whose category contains
# COGS_CATEGORY_MARKER counts as cost of goods in reports.
RESTOCK_EXPENSE_CATEGORY = "Belanja Pasar (HPP)"
COGS_CATEGORY_MARKER = "Belanja Pasar"

# Income categories written when an order is paid
INCOME_PRODUCT_SALES = "Penjualan Online"
INCOME_SHIPPING = "Ongkos Kirim (Delivery)"
INCOME_SERVICE_FEE = "Biaya Layanan"


class Transaction(BaseModel):
    """A single ledger entry."""

    id: str
    date: datetime = Field(default_factory=datetime.utcnow)
    type: TransactionType
    amount: float = Field(..., ge=0)
    category: str
    description: str = ""
    order_id: Optional[str] = None

    @property
    def is_cogs(self) -> bool:
        return self.type == TransactionType.EXPENSE and COGS_CATEGORY_MARKER in self.category


class TransactionCreate(BaseModel):
    """Request to record a manual ledger entry."""
    type: TransactionType
    amount: float = Field(..., ge=0)
    category: str
    description: str = ""
    date: Optional[datetime] = None
    order_id: Optional[str] = None


class TransactionFilter(BaseModel):
    """Filters for listing transactions."""
    type: Optional[TransactionType] = None
    category: Optional[str] = None  # substring match
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    month: Optional[int] = Field(default=None, ge=1, le=12)
    year: Optional[int] = None


class FinancialSummary(BaseModel):
    """Running totals over a set of transactions."""
    total_income: float = 0.0
    total_expense: float = 0.0
    total_capital: float = 0.0
    net_profit: float = 0.0
    balance: float = 0.0
    expense_by_category: Dict[str, float] = Field(default_factory=dict)
