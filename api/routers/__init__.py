"""API Routers"""

from api.routers import (
    cost_components,
    health,
    hpp,
    orders,
    procurement,
    products,
    reports,
    transactions,
)

__all__ = [
    "cost_components",
    "health",
    "hpp",
    "orders",
    "procurement",
    "products",
    "reports",
    "transactions",
]
