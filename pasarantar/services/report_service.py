"""
Report Service - loads ledger, orders and catalog and builds reports
"""

from typing import Optional

from pasarantar.models.reports import MonthlyReport
from pasarantar.services.report_builder import build_monthly_report
from pasarantar.storage import sqlite_repo


class ReportService:
    """Monthly profit & loss from persisted data."""

    def __init__(self, db_path: Optional[str] = None):
        self.db_path = db_path

    def generate_monthly_report(self, month: int, year: int) -> MonthlyReport:
        return build_monthly_report(
            transactions=sqlite_repo.list_transactions(self.db_path),
            orders=sqlite_repo.list_orders(self.db_path),
            products=sqlite_repo.list_products(self.db_path),
            month=month,
            year=year,
        )
