"""Cash ledger endpoints."""

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Body, Depends, Query

from api.dependencies import get_api_key, get_ledger_service, get_pagination, paginate
from api.middleware.errors import NotFoundError
from pasarantar.models.common import PaginationParams, TransactionType
from pasarantar.models.ledger import (
    FinancialSummary,
    Transaction,
    TransactionCreate,
    TransactionFilter,
)
from pasarantar.services import LedgerService

router = APIRouter()


def get_transaction_filter(
    type: Optional[TransactionType] = Query(None, description="INCOME, EXPENSE or CAPITAL"),
    category: Optional[str] = Query(None, description="Category contains this text"),
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    month: Optional[int] = Query(None, ge=1, le=12),
    year: Optional[int] = Query(None),
) -> TransactionFilter:
    return TransactionFilter(
        type=type,
        category=category,
        start_date=start_date,
        end_date=end_date,
        month=month,
        year=year,
    )


@router.get("", response_model=List[Transaction])
async def list_transactions(
    filters: TransactionFilter = Depends(get_transaction_filter),
    pagination: PaginationParams = Depends(get_pagination),
    api_key: str = Depends(get_api_key),
    service: LedgerService = Depends(get_ledger_service),
):
    """List transactions, newest first."""
    return paginate(service.list_transactions(filters), pagination)


@router.post("", response_model=Transaction, status_code=201)
async def create_transaction(
    request: TransactionCreate = Body(...),
    api_key: str = Depends(get_api_key),
    service: LedgerService = Depends(get_ledger_service),
):
    """
    Record a manual income, expense or capital entry.

    Expenses whose category contains "Belanja Pasar" count as cost of goods
    in the monthly report; every other expense is operating cost.
    """
    return service.create_transaction(request)


@router.get("/summary", response_model=FinancialSummary)
async def summarize_transactions(
    filters: TransactionFilter = Depends(get_transaction_filter),
    api_key: str = Depends(get_api_key),
    service: LedgerService = Depends(get_ledger_service),
):
    """Income, expense and capital totals for the filtered transactions."""
    return service.summarize(filters)


@router.get("/{transaction_id}", response_model=Transaction)
async def get_transaction(
    transaction_id: str,
    api_key: str = Depends(get_api_key),
    service: LedgerService = Depends(get_ledger_service),
):
    transaction = service.get_transaction(transaction_id)
    if not transaction:
        raise NotFoundError("Transaction", transaction_id)
    return transaction


@router.delete("/{transaction_id}")
async def delete_transaction(
    transaction_id: str,
    api_key: str = Depends(get_api_key),
    service: LedgerService = Depends(get_ledger_service),
):
    if not service.delete_transaction(transaction_id):
        raise NotFoundError("Transaction", transaction_id)
    return {"deleted": True, "id": transaction_id}
