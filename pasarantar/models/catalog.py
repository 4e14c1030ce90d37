"""
Catalog Data Models

Products, their unit variants, and the reusable cost components used by the
HPP calculator.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from pasarantar.models.ledger import Transaction


class CostComponent(BaseModel):
    """A reusable priced item (packaging, ice, seasoning...)."""

    id: str = Field(..., description="Unique identifier")
    name: str
    cost: float = Field(..., ge=0, description="Cost per one unit")
    unit: str = Field(default="pcs")
    created_at: datetime = Field(default_factory=datetime.utcnow)


class CostComponentCreate(BaseModel):
    """Request to add a cost component to the library."""
    name: str
    cost: float
    unit: str = "pcs"


class ProductVariant(BaseModel):
    """Alternate unit/price combination for the same product."""
    unit: str
    price: float = Field(..., ge=0)
    cost_price: Optional[float] = Field(default=None, ge=0)
    is_default: bool = False


class Product(BaseModel):
    """A catalog product."""

    id: str
    name: str
    unit: str = Field(default="kg", description="kg, pack, ekor...")
    price: float = Field(default=0.0, ge=0, description="Selling price")
    cost_price: float = Field(default=0.0, ge=0, description="HPP / cost basis")
    stock: float = Field(default=0.0, ge=0, description="On-hand quantity, may be fractional")

    description: Optional[str] = None
    category: Optional[str] = None
    is_active: bool = True

    # Promo
    is_promo: bool = False
    promo_price: Optional[float] = Field(default=None, ge=0)
    promo_discount: Optional[float] = Field(default=None, ge=0, le=100)

    variants: List[ProductVariant] = Field(default_factory=list)

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    @property
    def default_variant(self) -> Optional[ProductVariant]:
        """First variant flagged default, else the first variant."""
        for variant in self.variants:
            if variant.is_default:
                return variant
        return self.variants[0] if self.variants else None

    @property
    def estimated_margin(self) -> float:
        return self.price - self.cost_price


class ProductCreate(BaseModel):
    """Request to create a product."""
    name: str
    unit: str = "kg"
    price: float = Field(default=0.0, ge=0)
    cost_price: float = Field(default=0.0, ge=0)
    stock: float = Field(default=0.0, ge=0)
    description: Optional[str] = None
    category: Optional[str] = None
    is_active: bool = True
    is_promo: bool = False
    promo_price: Optional[float] = Field(default=None, ge=0)
    promo_discount: Optional[float] = Field(default=None, ge=0, le=100)
    variants: List[ProductVariant] = Field(default_factory=list)


class ProductUpdate(BaseModel):
    """Partial product update. Unset fields are left untouched."""
    name: Optional[str] = None
    unit: Optional[str] = None
    price: Optional[float] = Field(default=None, ge=0)
    cost_price: Optional[float] = Field(default=None, ge=0)
    stock: Optional[float] = Field(default=None, ge=0)
    description: Optional[str] = None
    category: Optional[str] = None
    is_active: Optional[bool] = None
    is_promo: Optional[bool] = None
    promo_price: Optional[float] = Field(default=None, ge=0)
    promo_discount: Optional[float] = Field(default=None, ge=0, le=100)
    variants: Optional[List[ProductVariant]] = None


class RestockRequest(BaseModel):
    """Stock purchase for a single product."""
    qty_to_add: float = Field(..., description="Quantity bought, must be > 0")
    total_cost: float = Field(default=0.0, description="Cash paid for the purchase")


class RestockResult(BaseModel):
    """Outcome of a restock: the updated product and the expense, if any."""
    product: Product
    transaction: Optional[Transaction] = None


class CatalogImportResult(BaseModel):
    """Result of a catalog spreadsheet import."""
    success: bool
    filename: str
    added_count: int = 0
    updated_count: int = 0
    skipped_count: int = 0
    warnings: List[str] = Field(default_factory=list)
