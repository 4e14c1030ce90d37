"""
Order Service - order entry, editing and status changes

Stock and ledger side effects of each change are written in the same commit
as the order itself.
"""

import logging
import uuid
from datetime import datetime
from typing import List, Optional

from pasarantar.models.common import OrderStatus, TransactionType
from pasarantar.models.ledger import (
    INCOME_PRODUCT_SALES,
    INCOME_SERVICE_FEE,
    INCOME_SHIPPING,
    Transaction,
)
from pasarantar.models.orders import (
    Order,
    OrderCreate,
    OrderFilter,
    OrderItemsUpdate,
)
from pasarantar.services import order_totals
from pasarantar.storage import sqlite_repo

logger = logging.getLogger(__name__)


def generate_order_number(when: Optional[datetime] = None) -> str:
    """ORD-20240301-A1B2C3"""
    when = when or datetime.utcnow()
    return f"ORD-{when:%Y%m%d}-{uuid.uuid4().hex[:6].upper()}"


class OrderService:
    """Orders CRUD with stock and ledger bookkeeping."""

    def __init__(self, db_path: Optional[str] = None):
        self.db_path = db_path

    # =========================================================================
    # Queries
    # =========================================================================

    def get_order(self, order_id: str) -> Optional[Order]:
        return sqlite_repo.get_order(order_id, self.db_path)

    def list_orders(self, filters: Optional[OrderFilter] = None) -> List[Order]:
        """Orders newest first, optionally filtered."""
        orders = sqlite_repo.list_orders(self.db_path)
        if not filters:
            return orders

        if filters.status:
            orders = [o for o in orders if o.status == filters.status]
        if filters.source:
            orders = [o for o in orders if o.source == filters.source]
        if filters.start_date:
            orders = [o for o in orders if o.date.date() >= filters.start_date]
        if filters.end_date:
            orders = [o for o in orders if o.date.date() <= filters.end_date]
        if filters.search:
            needle = filters.search.lower()
            orders = [
                o for o in orders
                if needle in o.customer_name.lower() or needle in o.order_number.lower()
            ]
        return orders

    # =========================================================================
    # Writes
    # =========================================================================

    def create_order(self, data: OrderCreate) -> Order:
        """
        Create a PENDING order.

        Line totals and order totals are computed here; the stock of linked
        products is reduced (never below zero). The returned order records
        how much stock was actually deducted.
        """
        customer_name = data.customer_name.strip()
        if not customer_name:
            raise ValueError("Customer name is required")
        if not data.items:
            raise ValueError("An order needs at least one item")

        items = [order_totals.build_item(line) for line in data.items]
        subtotal = order_totals.compute_subtotal(items)
        grand_total = order_totals.compute_grand_total(
            subtotal, data.shipping_fee, data.service_fee, data.discount
        )
        order_totals.validate_grand_total(grand_total)

        order_date = data.date or datetime.utcnow()
        order = Order(
            id=f"ord_{uuid.uuid4().hex[:12]}",
            order_number=generate_order_number(order_date),
            date=order_date,
            source=data.source,
            customer_id=data.customer_id,
            customer_name=customer_name,
            customer_phone=data.customer_phone,
            customer_address=data.customer_address,
            items=items,
            subtotal=subtotal,
            shipping_fee=data.shipping_fee,
            service_fee=data.service_fee,
            discount=data.discount,
            grand_total=grand_total,
            notes=data.notes,
        )

        return sqlite_repo.save_order(
            order,
            stock_taken=order_totals.quantities_by_product(items),
            db_path=self.db_path,
        )

    def update_items(self, order_id: str, changes: OrderItemsUpdate) -> Optional[Order]:
        """
        Replace an order's lines and recompute every total.

        Only non-terminal orders can be edited. The stock the old lines
        actually took is returned before the new lines take theirs.
        """
        order = self.get_order(order_id)
        if not order:
            return None
        if order_totals.is_terminal(order.status):
            raise order_totals.OrderLockedError(order.status)
        if not changes.items:
            raise ValueError("An order needs at least one item")

        items = [order_totals.build_item(line) for line in changes.items]
        shipping_fee = order.shipping_fee if changes.shipping_fee is None else changes.shipping_fee
        service_fee = order.service_fee if changes.service_fee is None else changes.service_fee
        discount = order.discount if changes.discount is None else changes.discount

        subtotal = order_totals.compute_subtotal(items)
        grand_total = order_totals.compute_grand_total(subtotal, shipping_fee, service_fee, discount)
        order_totals.validate_grand_total(grand_total)

        updated = order.model_copy(update={
            "items": items,
            "subtotal": subtotal,
            "shipping_fee": shipping_fee,
            "service_fee": service_fee,
            "discount": discount,
            "grand_total": grand_total,
            "updated_at": datetime.utcnow(),
        })

        return sqlite_repo.save_order(
            updated,
            stock_returned=order.stock_taken,
            stock_taken=order_totals.quantities_by_product(items),
            db_path=self.db_path,
        )

    def update_status(self, order_id: str, status: OrderStatus) -> Optional[Order]:
        """
        Move an order along its status machine.

        PAID records income transactions; CANCELLED returns the stock the
        order actually took.
        Raises InvalidTransitionError for disallowed moves.
        """
        order = self.get_order(order_id)
        if not order:
            return None

        try:
            order_totals.ensure_transition(order.source, order.status, status)
        except order_totals.InvalidTransitionError:
            logger.warning(
                f"Rejected status change for {order.order_number}: "
                f"{order.status.value} -> {status.value}"
            )
            raise

        changes = {"status": status, "updated_at": datetime.utcnow()}
        transactions = []
        stock_returned = None
        if status == OrderStatus.PAID:
            transactions = self._income_transactions(order)
        elif status == OrderStatus.CANCELLED:
            stock_returned = order.stock_taken
            changes["stock_taken"] = {}
        updated = order.model_copy(update=changes)

        sqlite_repo.save_order(
            updated,
            stock_returned=stock_returned,
            transactions=transactions,
            db_path=self.db_path,
        )
        return updated

    def delete_order(self, order_id: str) -> bool:
        """Delete an order, returning whatever stock it still holds."""
        order = self.get_order(order_id)
        if not order:
            return False
        return sqlite_repo.delete_order(order_id, order.stock_taken, self.db_path)

    def _income_transactions(self, order: Order) -> List[Transaction]:
        """
        Income entries for a paid order: goods, then delivery, then service fee.

        The discount comes off the goods first. Whatever is left of it comes
        off the shipping fee, then the service fee, so the entries always add
        up to the grand total.
        """
        now = datetime.utcnow()
        goods = max(order.subtotal - order.discount, 0.0)
        leftover = max(order.discount - order.subtotal, 0.0)
        shipping = max(order.shipping_fee - leftover, 0.0)
        leftover = max(leftover - order.shipping_fee, 0.0)
        service = max(order.service_fee - leftover, 0.0)

        entries = [
            (goods, INCOME_PRODUCT_SALES, f"Order #{order.order_number} - {order.customer_name}"),
            (shipping, INCOME_SHIPPING, f"Ongkir Order #{order.order_number}"),
            (service, INCOME_SERVICE_FEE, f"Biaya Layanan Order #{order.order_number}"),
        ]

        transactions = []
        for amount, category, description in entries:
            if amount <= 0:
                continue
            transactions.append(Transaction(
                id=f"tx_{uuid.uuid4().hex[:12]}",
                date=now,
                type=TransactionType.INCOME,
                amount=amount,
                category=category,
                description=description,
                order_id=order.id,
            ))
        return transactions
