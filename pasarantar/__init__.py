"""
Pasarantar Core Package

Pricing (HPP), stock, ledger and reporting rules for the Pasarantar grocery
delivery back office. No web framework dependencies in this package.
"""

__version__ = "1.0.0"

from pasarantar.models.catalog import CostComponent, Product
from pasarantar.models.hpp import HPPInput, HPPResult
from pasarantar.models.ledger import Transaction
from pasarantar.models.orders import Order, OrderItem
from pasarantar.models.reports import MonthlyReport

__all__ = [
    "CostComponent",
    "Product",
    "HPPInput",
    "HPPResult",
    "Transaction",
    "Order",
    "OrderItem",
    "MonthlyReport",
]
