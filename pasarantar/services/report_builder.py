"""
Report Builder

Monthly profit & loss and ledger summaries. Pure functions over
in-memory transactions, orders and products.
"""

import logging
from typing import Dict, Iterable, List

from pasarantar.models.catalog import Product
from pasarantar.models.common import OrderStatus, TransactionType
from pasarantar.models.ledger import COGS_CATEGORY_MARKER, FinancialSummary, Transaction
from pasarantar.models.orders import Order
from pasarantar.models.reports import MonthlyReport, TopProduct

logger = logging.getLogger(__name__)

TOP_PRODUCTS_LIMIT = 5
LOW_GROSS_MARGIN_PERCENT = 20

NOTE_LOSS = (
    "Bisnis mengalami kerugian bulan ini. "
    "Cek kembali pengeluaran operasional atau sesuaikan harga jual."
)
NOTE_LOW_MARGIN = (
    "Margin kotor rendah (<20%). "
    "Hati-hati dengan HPP (Harga Pasar) yang naik atau penyusutan barang."
)
NOTE_STOCK_PILE_UP = (
    "Stok barang menumpuk lebih besar dari omzet bulanan. "
    "Waspada cashflow macet di barang."
)
NOTE_PROFIT = "Bisnis dalam kondisi untung. Pertahankan efisiensi."


def is_cogs_category(category: str) -> bool:
    """
    Expense categories containing "Belanja Pasar" are cost of goods.

    This is a naming convention, so any expense whose text happens to contain
    the marker is counted as COGS.
    """
    return COGS_CATEGORY_MARKER in category


def _in_period(moment, month: int, year: int) -> bool:
    return moment.month == month and moment.year == year


def _sum_amounts(transactions: Iterable[Transaction]) -> float:
    return sum((t.amount for t in transactions), 0.0)


def _percent_of(part: float, whole: float) -> float:
    return (part / whole) * 100 if whole > 0 else 0.0


def top_products(orders: Iterable[Order], limit: int = TOP_PRODUCTS_LIMIT) -> List[TopProduct]:
    """
    Aggregate qty and total per product name, best sellers first.

    Ties keep the order in which product names were first seen.
    """
    stats: Dict[str, Dict[str, float]] = {}
    for order in orders:
        for item in order.items:
            entry = stats.setdefault(item.product_name, {"qty": 0.0, "total": 0.0})
            entry["qty"] += item.qty
            entry["total"] += item.total

    ranked = sorted(stats.items(), key=lambda kv: kv[1]["total"], reverse=True)
    return [
        TopProduct(name=name, qty=entry["qty"], total=entry["total"])
        for name, entry in ranked[:limit]
    ]


def inventory_value(products: Iterable[Product]) -> float:
    """Current stock valued at cost."""
    return sum(((p.stock or 0) * (p.cost_price or 0) for p in products), 0.0)


def analysis_notes(
    revenue: float,
    net_profit: float,
    gross_margin: float,
    stock_value: float,
) -> List[str]:
    """Observations shown under the report, in display order."""
    notes = []
    if net_profit < 0:
        notes.append(NOTE_LOSS)
    if gross_margin < LOW_GROSS_MARGIN_PERCENT and revenue > 0:
        notes.append(NOTE_LOW_MARGIN)
    if stock_value > revenue:
        notes.append(NOTE_STOCK_PILE_UP)
    if net_profit > 0:
        notes.append(NOTE_PROFIT)
    return notes


def build_monthly_report(
    transactions: Iterable[Transaction],
    orders: Iterable[Order],
    products: Iterable[Product],
    month: int,
    year: int,
) -> MonthlyReport:
    """
    Build the profit & loss report for a calendar month.

    Args:
        transactions: Ledger entries (any period, filtered here)
        orders: Orders (any period/status, only PAID ones in the month count)
        products: Current catalog, used for the inventory snapshot
        month: 1-12
        year: Four-digit year

    Returns:
        MonthlyReport
    """
    if not 1 <= month <= 12:
        raise ValueError(f"Month must be between 1 and 12, got {month}")

    monthly_tx = [t for t in transactions if _in_period(t.date, month, year)]
    paid_orders = [
        o for o in orders
        if o.status == OrderStatus.PAID and _in_period(o.date, month, year)
    ]

    expenses = [t for t in monthly_tx if t.type == TransactionType.EXPENSE]

    revenue = _sum_amounts(t for t in monthly_tx if t.type == TransactionType.INCOME)
    cogs = _sum_amounts(t for t in expenses if is_cogs_category(t.category))
    opex = _sum_amounts(t for t in expenses if not is_cogs_category(t.category))

    gross_profit = revenue - cogs
    net_profit = gross_profit - opex

    gross_margin = _percent_of(gross_profit, revenue)
    stock_value = inventory_value(products)

    order_count = len(paid_orders)
    avg_order_value = revenue / order_count if order_count > 0 else 0.0

    logger.debug(
        f"Report {year}-{month:02d}: {len(monthly_tx)} transactions, {order_count} paid orders"
    )

    return MonthlyReport(
        month=month,
        year=year,
        revenue=revenue,
        cogs=cogs,
        opex=opex,
        gross_profit=gross_profit,
        net_profit=net_profit,
        gross_margin=gross_margin,
        net_margin=_percent_of(net_profit, revenue),
        order_count=order_count,
        avg_order_value=avg_order_value,
        top_products=top_products(paid_orders),
        inventory_value=stock_value,
        notes=analysis_notes(revenue, net_profit, gross_margin, stock_value),
    )


def summarize_transactions(transactions: Iterable[Transaction]) -> FinancialSummary:
    """Dashboard totals. Capital is tracked but never counted as profit."""
    total_income = 0.0
    total_expense = 0.0
    total_capital = 0.0
    expense_by_category: Dict[str, float] = {}

    for t in transactions:
        if t.type == TransactionType.INCOME:
            total_income += t.amount
        elif t.type == TransactionType.EXPENSE:
            total_expense += t.amount
            expense_by_category[t.category] = expense_by_category.get(t.category, 0.0) + t.amount
        elif t.type == TransactionType.CAPITAL:
            total_capital += t.amount

    return FinancialSummary(
        total_income=total_income,
        total_expense=total_expense,
        total_capital=total_capital,
        net_profit=total_income - total_expense,
        balance=total_income - total_expense,
        expense_by_category=expense_by_category,
    )
