"""Order endpoints."""

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Body, Depends, Query

from api.dependencies import get_api_key, get_order_service, get_pagination, paginate
from api.middleware.errors import NotFoundError
from pasarantar.models.common import OrderSource, OrderStatus, PaginationParams
from pasarantar.models.orders import (
    Order,
    OrderCreate,
    OrderFilter,
    OrderItemsUpdate,
    StatusUpdate,
)
from pasarantar.services import OrderService
from pasarantar.services.order_totals import allowed_transitions

router = APIRouter()


def get_order_filter(
    status: Optional[OrderStatus] = Query(None),
    source: Optional[OrderSource] = Query(None),
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    search: Optional[str] = Query(None, description="Customer name or order number"),
) -> OrderFilter:
    return OrderFilter(
        status=status,
        source=source,
        start_date=start_date,
        end_date=end_date,
        search=search,
    )


@router.get("", response_model=List[Order])
async def list_orders(
    filters: OrderFilter = Depends(get_order_filter),
    pagination: PaginationParams = Depends(get_pagination),
    api_key: str = Depends(get_api_key),
    service: OrderService = Depends(get_order_service),
):
    """List orders, newest first."""
    return paginate(service.list_orders(filters), pagination)


@router.post("", response_model=Order, status_code=201)
async def create_order(
    request: OrderCreate = Body(...),
    api_key: str = Depends(get_api_key),
    service: OrderService = Depends(get_order_service),
):
    """
    Create a PENDING order and take its quantities out of stock.

    Totals are computed server side:
    grand total = subtotal + shipping fee + service fee - discount.
    """
    return service.create_order(request)


@router.get("/{order_id}", response_model=Order)
async def get_order(
    order_id: str,
    api_key: str = Depends(get_api_key),
    service: OrderService = Depends(get_order_service),
):
    order = service.get_order(order_id)
    if not order:
        raise NotFoundError("Order", order_id)
    return order


@router.get("/{order_id}/transitions", response_model=List[OrderStatus])
async def get_allowed_transitions(
    order_id: str,
    api_key: str = Depends(get_api_key),
    service: OrderService = Depends(get_order_service),
):
    """Statuses the order can move to next."""
    order = service.get_order(order_id)
    if not order:
        raise NotFoundError("Order", order_id)
    return sorted(allowed_transitions(order.source, order.status), key=lambda s: s.value)


@router.put("/{order_id}/items", response_model=Order)
async def update_order_items(
    order_id: str,
    request: OrderItemsUpdate = Body(...),
    api_key: str = Depends(get_api_key),
    service: OrderService = Depends(get_order_service),
):
    """Replace the items (and optionally the fees) of an order that is still open."""
    order = service.update_items(order_id, request)
    if not order:
        raise NotFoundError("Order", order_id)
    return order


@router.patch("/{order_id}/status", response_model=Order)
async def update_order_status(
    order_id: str,
    request: StatusUpdate = Body(...),
    api_key: str = Depends(get_api_key),
    service: OrderService = Depends(get_order_service),
):
    """
    Move the order to a new status.

    PAID records income in the ledger; CANCELLED puts the stock back.
    Moves the status machine does not allow return 409.
    """
    order = service.update_status(order_id, request.status)
    if not order:
        raise NotFoundError("Order", order_id)
    return order


@router.delete("/{order_id}")
async def delete_order(
    order_id: str,
    api_key: str = Depends(get_api_key),
    service: OrderService = Depends(get_order_service),
):
    if not service.delete_order(order_id):
        raise NotFoundError("Order", order_id)
    return {"deleted": True, "id": order_id}
