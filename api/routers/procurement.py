"""Daily procurement (shopping list) endpoints."""

from datetime import date, datetime
from typing import Optional

from fastapi import APIRouter, Body, Depends, Query

from api.dependencies import get_api_key, get_procurement_service
from api.middleware.errors import NotFoundError
from pasarantar.models.procurement import (
    ExpenseCreate,
    GenerateSessionRequest,
    GenerateSessionResult,
    ProcurementExpense,
    ProcurementItem,
    ProcurementItemUpdate,
    ProcurementSession,
    SessionStatusUpdate,
)
from pasarantar.services import ProcurementService

router = APIRouter()


@router.get("", response_model=ProcurementSession)
async def get_session(
    session_date: Optional[date] = Query(None, alias="date", description="Defaults to today (UTC)"),
    api_key: str = Depends(get_api_key),
    service: ProcurementService = Depends(get_procurement_service),
):
    """Session for a date with its items, expenses and totals."""
    session = service.get_session(session_date)
    if not session:
        raise NotFoundError("Procurement session", str(session_date or datetime.utcnow().date()))
    return session


@router.post("/generate", response_model=GenerateSessionResult)
async def generate_session(
    request: Optional[GenerateSessionRequest] = Body(None),
    api_key: str = Depends(get_api_key),
    service: ProcurementService = Depends(get_procurement_service),
):
    """
    Build the shopping list from the day's PENDING, CONFIRMED and PREPARING orders.

    Quantities are summed per product and unit. Running it again replaces
    the items and reopens the session; expenses are kept.
    """
    return service.generate_session(request.session_date if request else None)


@router.patch("/items/{item_id}", response_model=ProcurementItem)
async def update_item(
    item_id: str,
    request: ProcurementItemUpdate = Body(...),
    api_key: str = Depends(get_api_key),
    service: ProcurementService = Depends(get_procurement_service),
):
    item = service.update_item(item_id, request)
    if not item:
        raise NotFoundError("Procurement item", item_id)
    return item


@router.post("/expenses", response_model=ProcurementExpense, status_code=201)
async def add_expense(
    request: ExpenseCreate = Body(...),
    api_key: str = Depends(get_api_key),
    service: ProcurementService = Depends(get_procurement_service),
):
    """Record a trip cost such as parking, fuel or porters."""
    expense = service.add_expense(request)
    if not expense:
        raise NotFoundError("Procurement session", request.session_id)
    return expense


@router.delete("/expenses/{expense_id}")
async def delete_expense(
    expense_id: str,
    api_key: str = Depends(get_api_key),
    service: ProcurementService = Depends(get_procurement_service),
):
    if not service.delete_expense(expense_id):
        raise NotFoundError("Procurement expense", expense_id)
    return {"deleted": True, "id": expense_id}


@router.patch("/{session_id}/status", response_model=ProcurementSession)
async def update_session_status(
    session_id: str,
    request: SessionStatusUpdate = Body(...),
    api_key: str = Depends(get_api_key),
    service: ProcurementService = Depends(get_procurement_service),
):
    """Advance OPEN -> IN_PROGRESS -> COMPLETED, or edit the notes."""
    session = service.update_status(session_id, request.status, request.notes)
    if not session:
        raise NotFoundError("Procurement session", session_id)
    return session
