"""
Order Totals & Status Rules

Pure functions for line totals, order totals and the order status machine.
"""

from typing import Dict, FrozenSet, Iterable, List, Optional

from pasarantar.models.common import OrderSource, OrderStatus
from pasarantar.models.orders import OrderItem, OrderItemInput


class InvalidTransitionError(ValueError):
    """Raised when an order status change is not allowed."""

    def __init__(self, current: OrderStatus, target: OrderStatus):
        self.current = current
        self.target = target
        super().__init__(f"Cannot change order status from {current.value} to {target.value}")


class OrderLockedError(ValueError):
    """Raised when editing an order that reached a terminal status."""

    def __init__(self, status: OrderStatus):
        self.status = status
        super().__init__(f"Order is {status.value} and can no longer be edited")


TERMINAL_STATUSES: FrozenSet[OrderStatus] = frozenset({
    OrderStatus.PAID,
    OrderStatus.CANCELLED,
    OrderStatus.DELIVERED,
})

# Manual orders are either paid or cancelled
_OFFLINE_TRANSITIONS: Dict[OrderStatus, FrozenSet[OrderStatus]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.PAID, OrderStatus.CANCELLED}),
}

# Storefront orders also go through fulfilment
_SHOP_TRANSITIONS: Dict[OrderStatus, FrozenSet[OrderStatus]] = {
    OrderStatus.PENDING: frozenset({
        OrderStatus.PAID, OrderStatus.CONFIRMED, OrderStatus.CANCELLED,
    }),
    OrderStatus.CONFIRMED: frozenset({OrderStatus.PREPARING, OrderStatus.CANCELLED}),
    OrderStatus.PREPARING: frozenset({OrderStatus.SHIPPING, OrderStatus.CANCELLED}),
    OrderStatus.SHIPPING: frozenset({OrderStatus.DELIVERED, OrderStatus.CANCELLED}),
}


# =============================================================================
# Totals
# =============================================================================

def line_total(qty: float, price: float) -> float:
    return qty * price


def build_item(line: OrderItemInput) -> OrderItem:
    """Turn a submitted line into an order item with its total."""
    return OrderItem(
        product_id=line.product_id,
        product_name=line.product_name,
        qty=line.qty,
        unit=line.unit,
        price=line.price,
        cost_price=line.cost_price,
        total=line_total(line.qty, line.price),
    )


def edit_item(
    item: OrderItem,
    qty: Optional[float] = None,
    price: Optional[float] = None,
) -> OrderItem:
    """Return a copy of the item with new qty/price and a recomputed total."""
    new_qty = item.qty if qty is None else qty
    new_price = item.price if price is None else price
    return item.model_copy(update={
        "qty": new_qty,
        "price": new_price,
        "total": line_total(new_qty, new_price),
    })


def compute_subtotal(items: Iterable[OrderItem]) -> float:
    """Sum of line totals. An empty order has subtotal 0."""
    return sum((item.total for item in items), 0.0)


def compute_grand_total(
    subtotal: float,
    shipping_fee: float = 0.0,
    service_fee: float = 0.0,
    discount: float = 0.0,
) -> float:
    return subtotal + shipping_fee + service_fee - discount


def validate_grand_total(grand_total: float) -> None:
    """A discount larger than everything it discounts is rejected."""
    if grand_total < 0:
        raise ValueError(
            f"Discount exceeds order value (grand total would be {grand_total:.0f})"
        )


# =============================================================================
# Status machine
# =============================================================================

def allowed_transitions(source: OrderSource, current: OrderStatus) -> FrozenSet[OrderStatus]:
    """Statuses reachable from `current` for an order of the given source."""
    table = _SHOP_TRANSITIONS if source == OrderSource.SHOP else _OFFLINE_TRANSITIONS
    return table.get(current, frozenset())


def can_transition(source: OrderSource, current: OrderStatus, target: OrderStatus) -> bool:
    return target in allowed_transitions(source, current)


def ensure_transition(source: OrderSource, current: OrderStatus, target: OrderStatus) -> None:
    """Raise InvalidTransitionError unless current -> target is allowed."""
    if not can_transition(source, current, target):
        raise InvalidTransitionError(current, target)


def is_terminal(status: OrderStatus) -> bool:
    return status in TERMINAL_STATUSES


def quantities_by_product(items: List[OrderItem]) -> Dict[str, float]:
    """Quantity per linked product id, used to return or take stock."""
    quantities: Dict[str, float] = {}
    for item in items:
        if item.product_id:
            quantities[item.product_id] = quantities.get(item.product_id, 0.0) + item.qty
    return quantities
