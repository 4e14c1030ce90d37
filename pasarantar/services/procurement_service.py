"""
Procurement Service - daily shopping recap

Aggregates a day's open orders into a shopping list, tracks what each item
actually cost and the trip's side expenses, and totals it all up.
"""

import logging
import uuid
from datetime import date, datetime, time, timedelta
from typing import Dict, Iterable, List, Optional, Tuple

from pasarantar.models.common import OrderStatus, ProcurementStatus
from pasarantar.models.orders import Order
from pasarantar.models.procurement import (
    ExpenseCreate,
    GenerateSessionResult,
    ProcurementExpense,
    ProcurementItem,
    ProcurementItemUpdate,
    ProcurementSession,
)
from pasarantar.storage import sqlite_repo

logger = logging.getLogger(__name__)

# Orders still waiting to be fulfilled feed the shopping list
OPEN_ORDER_STATUSES = [
    OrderStatus.PENDING.value,
    OrderStatus.CONFIRMED.value,
    OrderStatus.PREPARING.value,
]

_STATUS_ORDER = {
    ProcurementStatus.OPEN: 0,
    ProcurementStatus.IN_PROGRESS: 1,
    ProcurementStatus.COMPLETED: 2,
}


# =============================================================================
# Pure helpers
# =============================================================================

def aggregate_order_items(orders: Iterable[Order]) -> List[Dict]:
    """
    Sum quantities per (product id or name, unit) across orders.

    Returns dicts in first-seen order with product_id, product_name, unit
    and total_qty.
    """
    grouped: Dict[Tuple[str, str], Dict] = {}
    for order in orders:
        for item in order.items:
            key = (item.product_id or item.product_name, item.unit)
            entry = grouped.setdefault(key, {
                "product_id": item.product_id,
                "product_name": item.product_name,
                "unit": item.unit,
                "total_qty": 0.0,
            })
            entry["total_qty"] += item.qty
    return list(grouped.values())


def compute_session_totals(
    items: Iterable[ProcurementItem],
    expenses: Iterable[ProcurementExpense],
) -> Tuple[float, float, float]:
    """
    (items_total, expenses_total, grand_total)

    Items without an entered cost price contribute 0.
    """
    items_total = sum(
        ((item.cost_price or 0) * item.total_qty for item in items if item.cost_price is not None),
        0.0,
    )
    expenses_total = sum((e.amount for e in expenses), 0.0)
    return items_total, expenses_total, items_total + expenses_total


def with_totals(session: ProcurementSession) -> ProcurementSession:
    items_total, expenses_total, grand_total = compute_session_totals(
        session.items, session.expenses
    )
    return session.model_copy(update={
        "items_total": items_total,
        "expenses_total": expenses_total,
        "grand_total": grand_total,
    })


def can_advance(current: ProcurementStatus, target: ProcurementStatus) -> bool:
    """Sessions only move forward; COMPLETED is final."""
    if current == ProcurementStatus.COMPLETED:
        return False
    return _STATUS_ORDER[target] > _STATUS_ORDER[current]


# =============================================================================
# Service
# =============================================================================

class ProcurementService:
    """Daily procurement sessions."""

    def __init__(self, db_path: Optional[str] = None):
        self.db_path = db_path

    def get_session(self, session_date: Optional[date] = None) -> Optional[ProcurementSession]:
        """Session for a date (today by default) with its totals."""
        session_date = session_date or datetime.utcnow().date()
        session = sqlite_repo.get_session_by_date(session_date, self.db_path)
        return with_totals(session) if session else None

    def generate_session(self, session_date: Optional[date] = None) -> GenerateSessionResult:
        """
        Build (or rebuild) the shopping list for a date from its open orders.

        Rebuilding replaces the items and reopens the session; recorded
        expenses are kept.
        """
        session_date = session_date or datetime.utcnow().date()
        start = datetime.combine(session_date, time.min)
        end = start + timedelta(days=1)

        orders = sqlite_repo.list_orders_between(start, end, OPEN_ORDER_STATUSES, self.db_path)
        aggregated = aggregate_order_items(orders)

        existing = sqlite_repo.get_session_by_date(session_date, self.db_path)
        now = datetime.utcnow()
        session_id = existing.id if existing else f"proc_{uuid.uuid4().hex[:12]}"

        items = []
        for entry in aggregated:
            cost_price = None
            if entry["product_id"]:
                product = sqlite_repo.get_product(entry["product_id"], self.db_path)
                if product and product.cost_price:
                    cost_price = product.cost_price
            items.append(ProcurementItem(
                id=f"pi_{uuid.uuid4().hex[:12]}",
                session_id=session_id,
                cost_price=cost_price,
                **entry,
            ))

        session = ProcurementSession(
            id=session_id,
            date=session_date,
            status=ProcurementStatus.OPEN,
            notes=existing.notes if existing else None,
            items=items,
            created_at=existing.created_at if existing else now,
            updated_at=now,
        )
        sqlite_repo.upsert_session(session, replace_items=True, db_path=self.db_path)

        logger.info(
            f"Procurement {session_date}: {len(orders)} orders -> {len(items)} items"
        )
        return GenerateSessionResult(
            session=self.get_session(session_date),
            orders_processed=len(orders),
            items_created=len(items),
        )

    def update_item(self, item_id: str, changes: ProcurementItemUpdate) -> Optional[ProcurementItem]:
        """Record the actual cost, purchased flag or notes of an item."""
        item = sqlite_repo.get_procurement_item(item_id, self.db_path)
        if not item:
            return None

        update = {}
        if changes.clear_cost_price:
            update["cost_price"] = None
        elif changes.cost_price is not None:
            update["cost_price"] = changes.cost_price
        if changes.is_purchased is not None:
            update["is_purchased"] = changes.is_purchased
        if changes.notes is not None:
            update["notes"] = changes.notes

        updated = item.model_copy(update=update)
        sqlite_repo.save_procurement_item(updated, self.db_path)
        return updated

    def add_expense(self, data: ExpenseCreate) -> Optional[ProcurementExpense]:
        """Add a trip expense. Returns None if the session does not exist."""
        if not data.category.strip():
            raise ValueError("Expense category is required")
        if data.amount is None or data.amount <= 0:
            raise ValueError("Expense amount must be greater than 0")

        if not sqlite_repo.get_session(data.session_id, self.db_path):
            return None

        expense = ProcurementExpense(
            id=f"pe_{uuid.uuid4().hex[:12]}",
            session_id=data.session_id,
            category=data.category.strip(),
            amount=data.amount,
            description=data.description,
        )
        sqlite_repo.save_expense(expense, self.db_path)
        return expense

    def delete_expense(self, expense_id: str) -> bool:
        return sqlite_repo.delete_expense(expense_id, self.db_path)

    def update_status(
        self,
        session_id: str,
        status: Optional[ProcurementStatus] = None,
        notes: Optional[str] = None,
    ) -> Optional[ProcurementSession]:
        """Advance the session status and/or change its notes."""
        session = sqlite_repo.get_session(session_id, self.db_path)
        if not session:
            return None

        update = {"updated_at": datetime.utcnow()}
        if status is not None and status != session.status:
            if not can_advance(session.status, status):
                raise ValueError(
                    f"Cannot move procurement session from {session.status.value} to {status.value}"
                )
            update["status"] = status
        if notes is not None:
            update["notes"] = notes

        updated = session.model_copy(update=update)
        sqlite_repo.upsert_session(updated, db_path=self.db_path)
        return with_totals(updated)
