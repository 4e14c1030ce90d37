"""
Ledger Service - manual and automatic cash book entries
"""

import logging
import uuid
from datetime import datetime
from typing import List, Optional

from pasarantar.models.ledger import (
    FinancialSummary,
    Transaction,
    TransactionCreate,
    TransactionFilter,
)
from pasarantar.services.report_builder import summarize_transactions
from pasarantar.storage import sqlite_repo

logger = logging.getLogger(__name__)


class LedgerService:
    """Transactions CRUD and summaries."""

    def __init__(self, db_path: Optional[str] = None):
        self.db_path = db_path

    def create_transaction(self, data: TransactionCreate) -> Transaction:
        category = data.category.strip()
        if not category:
            raise ValueError("Category is required")
        if data.amount < 0:
            raise ValueError("Amount cannot be negative")

        tx = Transaction(
            id=f"tx_{uuid.uuid4().hex[:12]}",
            date=data.date or datetime.utcnow(),
            type=data.type,
            amount=data.amount,
            category=category,
            description=data.description,
            order_id=data.order_id,
        )
        sqlite_repo.save_transaction(tx, self.db_path)
        logger.info(f"Recorded {tx.type.value} {tx.id}: {tx.amount} ({tx.category})")
        return tx

    def get_transaction(self, transaction_id: str) -> Optional[Transaction]:
        return sqlite_repo.get_transaction(transaction_id, self.db_path)

    def list_transactions(self, filters: Optional[TransactionFilter] = None) -> List[Transaction]:
        """Transactions newest first, optionally filtered."""
        transactions = sqlite_repo.list_transactions(self.db_path)
        if filters:
            transactions = self._apply_filters(transactions, filters)
        return transactions

    def delete_transaction(self, transaction_id: str) -> bool:
        return sqlite_repo.delete_transaction(transaction_id, self.db_path)

    def summarize(self, filters: Optional[TransactionFilter] = None) -> FinancialSummary:
        return summarize_transactions(self.list_transactions(filters))

    def _apply_filters(
        self,
        transactions: List[Transaction],
        filters: TransactionFilter,
    ) -> List[Transaction]:
        result = transactions

        if filters.type:
            result = [t for t in result if t.type == filters.type]

        if filters.category:
            needle = filters.category.lower()
            result = [t for t in result if needle in t.category.lower()]

        if filters.start_date:
            result = [t for t in result if t.date.date() >= filters.start_date]
        if filters.end_date:
            result = [t for t in result if t.date.date() <= filters.end_date]

        if filters.month:
            result = [t for t in result if t.date.month == filters.month]
        if filters.year:
            result = [t for t in result if t.date.year == filters.year]

        return result
