"""
Pasarantar Business Logic Services

hpp_calculator, order_totals and report_builder are pure functions;
the *Service classes combine them with the SQLite repository.
"""

from pasarantar.services.catalog_io_service import CatalogSpreadsheetService
from pasarantar.services.catalog_service import CatalogService
from pasarantar.services.hpp_calculator import PRICE_ROUNDING_STEP, calculate_hpp, round_up_price
from pasarantar.services.ledger_service import LedgerService
from pasarantar.services.order_service import OrderService
from pasarantar.services.order_totals import InvalidTransitionError, OrderLockedError
from pasarantar.services.procurement_service import ProcurementService
from pasarantar.services.report_builder import build_monthly_report, summarize_transactions
from pasarantar.services.report_service import ReportService

__all__ = [
    "calculate_hpp",
    "round_up_price",
    "PRICE_ROUNDING_STEP",
    "build_monthly_report",
    "summarize_transactions",
    "InvalidTransitionError",
    "OrderLockedError",
    "CatalogService",
    "CatalogSpreadsheetService",
    "LedgerService",
    "OrderService",
    "ProcurementService",
    "ReportService",
]
