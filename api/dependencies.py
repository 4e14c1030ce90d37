"""
API Dependencies

Dependency injection for services.
"""

from functools import lru_cache
from typing import List, TypeVar

from fastapi import Query

from api.config import get_settings
from pasarantar.models.common import PaginationParams
from pasarantar.services import (
    CatalogService,
    CatalogSpreadsheetService,
    LedgerService,
    OrderService,
    ProcurementService,
    ReportService,
)

# Re-export verify_api_key as get_api_key
from api.middleware.auth import verify_api_key as get_api_key  # noqa: F401

T = TypeVar("T")


@lru_cache()
def get_catalog_service() -> CatalogService:
    """Get singleton catalog service."""
    return CatalogService(db_path=get_settings().database_path)


@lru_cache()
def get_spreadsheet_service() -> CatalogSpreadsheetService:
    """Get singleton catalog spreadsheet service."""
    return CatalogSpreadsheetService(db_path=get_settings().database_path)


@lru_cache()
def get_ledger_service() -> LedgerService:
    """Get singleton ledger service."""
    return LedgerService(db_path=get_settings().database_path)


@lru_cache()
def get_order_service() -> OrderService:
    """Get singleton order service."""
    return OrderService(db_path=get_settings().database_path)


@lru_cache()
def get_procurement_service() -> ProcurementService:
    """Get singleton procurement service."""
    return ProcurementService(db_path=get_settings().database_path)


@lru_cache()
def get_report_service() -> ReportService:
    """Get singleton report service."""
    return ReportService(db_path=get_settings().database_path)


def get_pagination(
    page: int = Query(1, ge=1, description="Page number"),
    page_size: int = Query(50, ge=1, le=200, description="Items per page"),
) -> PaginationParams:
    return PaginationParams(page=page, page_size=page_size)


def paginate(items: List[T], pagination: PaginationParams) -> List[T]:
    """Slice an already sorted list to the requested page."""
    return items[pagination.offset:pagination.offset + pagination.page_size]
