"""Pasarantar Data Models"""

from pasarantar.models.common import (
    OrderSource,
    OrderStatus,
    PaginationParams,
    ProcurementStatus,
    TransactionType,
)
from pasarantar.models.ledger import (
    FinancialSummary,
    Transaction,
    TransactionCreate,
    TransactionFilter,
)
from pasarantar.models.catalog import (
    CatalogImportResult,
    CostComponent,
    CostComponentCreate,
    Product,
    ProductCreate,
    ProductUpdate,
    ProductVariant,
    RestockRequest,
    RestockResult,
)
from pasarantar.models.hpp import (
    HPPCalculationResponse,
    HPPComponentLine,
    HPPInput,
    HPPResult,
    SaveToCatalogRequest,
)
from pasarantar.models.orders import (
    Order,
    OrderCreate,
    OrderFilter,
    OrderItem,
    OrderItemInput,
    OrderItemsUpdate,
    StatusUpdate,
)
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
from pasarantar.models.reports import MonthlyReport, TopProduct

__all__ = [
    # Common
    "TransactionType", "OrderStatus", "OrderSource", "ProcurementStatus", "PaginationParams",
    # Ledger
    "Transaction", "TransactionCreate", "TransactionFilter", "FinancialSummary",
    # Catalog
    "CostComponent", "CostComponentCreate", "Product", "ProductCreate", "ProductUpdate",
    "ProductVariant", "RestockRequest", "RestockResult", "CatalogImportResult",
    # HPP
    "HPPComponentLine", "HPPInput", "HPPResult", "HPPCalculationResponse", "SaveToCatalogRequest",
    # Orders
    "OrderItem", "OrderItemInput", "Order", "OrderCreate", "OrderItemsUpdate",
    "StatusUpdate", "OrderFilter",
    # Procurement
    "ProcurementItem", "ProcurementExpense", "ProcurementSession", "GenerateSessionRequest",
    "GenerateSessionResult", "ProcurementItemUpdate", "ExpenseCreate", "SessionStatusUpdate",
    # Reports
    "MonthlyReport", "TopProduct",
]
