"""
Catalog Service - cost components, products and restocking

Wraps the SQLite repository with validation and the HPP commit flow.
"""

import logging
import uuid
from datetime import datetime
from typing import List, Optional

from pasarantar.formatting import format_rupiah
from pasarantar.models.catalog import (
    CostComponent,
    Product,
    ProductCreate,
    ProductUpdate,
    RestockResult,
)
from pasarantar.models.common import TransactionType
from pasarantar.models.hpp import HPPInput
from pasarantar.models.ledger import RESTOCK_EXPENSE_CATEGORY, Transaction
from pasarantar.services.hpp_calculator import calculate_hpp
from pasarantar.storage import sqlite_repo

logger = logging.getLogger(__name__)


def _format_qty(qty: float) -> str:
    """5.0 -> '5', 2.5 -> '2.5'"""
    return f"{qty:g}"


class CatalogService:
    """Product catalog and cost component library."""

    def __init__(self, db_path: Optional[str] = None):
        self.db_path = db_path

    # =========================================================================
    # Cost Component Library
    # =========================================================================

    def add_cost_component(self, name: str, cost: float, unit: str = "pcs") -> CostComponent:
        """Append a component. Blank names and non-positive costs are rejected."""
        name = (name or "").strip()
        if not name:
            raise ValueError("Component name is required")
        if cost is None or cost <= 0:
            raise ValueError("Component cost must be greater than 0")

        component = CostComponent(
            id=f"cc_{uuid.uuid4().hex[:12]}",
            name=name,
            cost=cost,
            unit=(unit or "pcs").strip() or "pcs",
        )
        sqlite_repo.save_cost_component(component, self.db_path)
        logger.info(f"Added cost component {component.id} ({component.name})")
        return component

    def remove_cost_component(self, component_id: str) -> bool:
        """Delete a component. Calculations holding its cost are unaffected."""
        return sqlite_repo.delete_cost_component(component_id, self.db_path)

    def list_cost_components(self) -> List[CostComponent]:
        return sqlite_repo.list_cost_components(self.db_path)

    # =========================================================================
    # Products
    # =========================================================================

    def save_product(self, data: ProductCreate) -> Product:
        """Create a new catalog product."""
        name = data.name.strip()
        if not name:
            raise ValueError("Product name is required")

        product = Product(
            id=f"prd_{uuid.uuid4().hex[:12]}",
            **data.model_dump(exclude={"name"}),
            name=name,
        )
        sqlite_repo.save_product(product, self.db_path)
        logger.info(f"Saved product {product.id} ({product.name})")
        return product

    def get_product(self, product_id: str) -> Optional[Product]:
        return sqlite_repo.get_product(product_id, self.db_path)

    def list_products(self) -> List[Product]:
        return sqlite_repo.list_products(self.db_path)

    def update_product(self, product_id: str, changes: ProductUpdate) -> Optional[Product]:
        """Apply a partial update. Price and cost price are independent."""
        product = self.get_product(product_id)
        if not product:
            return None

        update = changes.model_dump(exclude_unset=True)
        if "name" in update:
            update["name"] = (update["name"] or "").strip()
            if not update["name"]:
                raise ValueError("Product name is required")
        update["updated_at"] = datetime.utcnow()

        updated = Product.model_validate({**product.model_dump(), **update})
        sqlite_repo.save_product(updated, self.db_path)
        return updated

    def delete_product(self, product_id: str) -> bool:
        return sqlite_repo.delete_product(product_id, self.db_path)

    # =========================================================================
    # HPP commit
    # =========================================================================

    def save_hpp_to_catalog(
        self,
        calculation: HPPInput,
        product_name: str,
        product_unit: str = "pack",
    ) -> Product:
        """
        Create a product priced from an HPP calculation.

        cost_price = total HPP, price = rounded selling price, stock = 0.
        The cost component library is not touched.
        """
        if not (product_name or "").strip():
            raise ValueError("Product name is required")

        result = calculate_hpp(calculation)
        product = self.save_product(ProductCreate(
            name=product_name,
            unit=product_unit or "pack",
            cost_price=result.total_hpp,
            price=result.rounded_price,
            stock=0,
        ))
        logger.info(
            f"HPP saved to catalog: {product.name} HPP {format_rupiah(result.total_hpp)}, "
            f"price {format_rupiah(result.rounded_price)}"
        )
        return product

    # =========================================================================
    # Restock
    # =========================================================================

    def restock(
        self,
        product_id: str,
        qty_to_add: float,
        total_cost: float = 0.0,
    ) -> Optional[RestockResult]:
        """
        Add purchased stock and record what it cost.

        The stock increase and the "Belanja Pasar (HPP)" expense are committed
        together. No expense is recorded when total_cost is 0. The product's
        cost price is left as is.

        Returns None if the product does not exist.
        """
        if qty_to_add is None or qty_to_add <= 0:
            raise ValueError("Quantity to add must be greater than 0")
        if total_cost is None or total_cost < 0:
            raise ValueError("Total cost cannot be negative")

        product = self.get_product(product_id)
        if not product:
            return None

        updated = product.model_copy(update={
            "stock": (product.stock or 0) + qty_to_add,
            "updated_at": datetime.utcnow(),
        })

        transaction = None
        if total_cost > 0:
            transaction = Transaction(
                id=f"tx_{uuid.uuid4().hex[:12]}",
                type=TransactionType.EXPENSE,
                amount=total_cost,
                category=RESTOCK_EXPENSE_CATEGORY,
                description=f"Restock {product.name} ({_format_qty(qty_to_add)} {product.unit})",
            )

        sqlite_repo.apply_restock(updated, transaction, self.db_path)
        return RestockResult(product=updated, transaction=transaction)
