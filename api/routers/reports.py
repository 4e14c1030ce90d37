"""Financial report endpoints."""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query

from api.dependencies import get_api_key, get_report_service
from pasarantar.models.reports import MonthlyReport
from pasarantar.services import ReportService

router = APIRouter()


@router.get("/monthly", response_model=MonthlyReport)
async def monthly_report(
    month: Optional[int] = Query(None, ge=1, le=12, description="1-12, defaults to current month"),
    year: Optional[int] = Query(None, ge=2000, le=2100, description="Defaults to current year"),
    api_key: str = Depends(get_api_key),
    service: ReportService = Depends(get_report_service),
):
    """
    Profit & loss for one calendar month.

    **Revenue** is INCOME in the month. **COGS** is expenses whose category
    contains "Belanja Pasar"; other expenses are **opex**. Order count and
    top products only use PAID orders. Inventory value is the
    current stock at cost, not a month-end snapshot. The default month
    follows the UTC clock that stamps orders and transactions.
    """
    today = datetime.utcnow()
    return service.generate_monthly_report(month or today.month, year or today.year)
