"""Tests for the catalog service: cost components, products, HPP commit and restock."""

import pytest

from pasarantar.models.catalog import Product, ProductCreate, ProductUpdate, ProductVariant
from pasarantar.models.common import TransactionType
from pasarantar.models.hpp import HPPComponentLine, HPPInput
from pasarantar.models.ledger import RESTOCK_EXPENSE_CATEGORY
from pasarantar.storage import sqlite_repo


# =============================================================================
# Cost components
# =============================================================================

def test_add_cost_component(catalog_service):
    component = catalog_service.add_cost_component("Plastik Vakum", 750)

    assert component.id.startswith("cc_")
    assert component.unit == "pcs"
    assert catalog_service.list_cost_components() == [component]


def test_cost_components_listed_in_insertion_order(catalog_service):
    names = ["Plastik", "Label", "Es Batu"]
    for name in names:
        catalog_service.add_cost_component(name, 500)

    assert [c.name for c in catalog_service.list_cost_components()] == names


@pytest.mark.parametrize("name,cost", [("", 500), ("   ", 500), ("Label", 0), ("Label", -10)])
def test_invalid_cost_component_rejected(catalog_service, name, cost):
    with pytest.raises(ValueError):
        catalog_service.add_cost_component(name, cost)
    assert catalog_service.list_cost_components() == []


def test_remove_cost_component(catalog_service):
    component = catalog_service.add_cost_component("Label", 200)

    assert catalog_service.remove_cost_component(component.id) is True
    assert catalog_service.remove_cost_component(component.id) is False
    assert catalog_service.list_cost_components() == []


# =============================================================================
# Products
# =============================================================================

def test_save_and_get_product(catalog_service):
    product = catalog_service.save_product(ProductCreate(
        name="  Ayam Potong ", price=38000, cost_price=30000, stock=1.5,
    ))

    loaded = catalog_service.get_product(product.id)
    assert loaded.name == "Ayam Potong"
    assert loaded.stock == 1.5
    assert loaded.estimated_margin == 8000


def test_default_variant_prefers_flagged_variant():
    product = Product(id="p1", name="Ayam", variants=[
        ProductVariant(unit="kg", price=38000),
        ProductVariant(unit="ekor", price=55000, is_default=True),
        ProductVariant(unit="pack", price=20000, is_default=True),
    ])

    assert product.default_variant.unit == "ekor"


def test_default_variant_falls_back_to_first():
    product = Product(id="p1", name="Ayam", variants=[
        ProductVariant(unit="kg", price=38000),
        ProductVariant(unit="ekor", price=55000),
    ])

    assert product.default_variant.unit == "kg"
    assert Product(id="p2", name="Tahu").default_variant is None


def test_variants_persist_in_order(catalog_service):
    variants = [
        ProductVariant(unit="kg", price=38000, cost_price=30000),
        ProductVariant(unit="ekor", price=55000, is_default=True),
    ]
    product = catalog_service.save_product(ProductCreate(name="Ayam Kampung", price=38000, variants=variants))

    loaded = catalog_service.get_product(product.id)
    assert loaded.variants == variants
    assert loaded.default_variant.unit == "ekor"

    updated = catalog_service.update_product(product.id, ProductUpdate(variants=variants[:1]))
    assert catalog_service.get_product(product.id).variants == updated.variants == variants[:1]
    assert updated.default_variant.unit == "kg"


def test_blank_product_name_rejected(catalog_service):
    with pytest.raises(ValueError):
        catalog_service.save_product(ProductCreate(name=" ", price=1000))


def test_update_price_and_cost_independently(catalog_service, sample_products):
    ayam = sample_products["ayam"]

    updated = catalog_service.update_product(ayam.id, ProductUpdate(price=40000))
    assert updated.price == 40000
    assert updated.cost_price == 30000

    updated = catalog_service.update_product(ayam.id, ProductUpdate(cost_price=31000))
    assert updated.price == 40000
    assert updated.cost_price == 31000


def test_update_unknown_product_returns_none(catalog_service):
    assert catalog_service.update_product("prd_missing", ProductUpdate(price=1)) is None


def test_list_products_sorted_by_name(catalog_service, sample_products):
    catalog_service.save_product(ProductCreate(name="anggur", price=1000))

    names = [p.name for p in catalog_service.list_products()]
    assert names == ["anggur", "Ayam Potong", "Bawang Merah"]


def test_delete_product(catalog_service, sample_products):
    product_id = sample_products["ayam"].id

    assert catalog_service.delete_product(product_id) is True
    assert catalog_service.get_product(product_id) is None


# =============================================================================
# HPP -> catalog
# =============================================================================

def test_save_hpp_to_catalog(catalog_service):
    calc = HPPInput(
        base_material_cost=100000,
        shrinkage_percent=10,
        components=[HPPComponentLine(name="Plastik", cost=500, qty=4)],
        margin_percent=30,
    )

    product = catalog_service.save_hpp_to_catalog(calc, "Daging Sapi 1kg")

    assert product.cost_price == pytest.approx(112000)
    assert product.price == 146000
    assert product.stock == 0
    assert product.unit == "pack"
    assert catalog_service.list_cost_components() == []


def test_save_hpp_requires_name(catalog_service):
    with pytest.raises(ValueError):
        catalog_service.save_hpp_to_catalog(HPPInput(base_material_cost=1000), "")
    assert catalog_service.list_products() == []


# =============================================================================
# Restock
# =============================================================================

def test_restock_without_cost_records_no_expense(catalog_service, ledger_service, sample_products):
    ayam = sample_products["ayam"]

    result = catalog_service.restock(ayam.id, qty_to_add=5, total_cost=0)

    assert result.product.stock == 25
    assert result.transaction is None
    assert catalog_service.get_product(ayam.id).stock == 25
    assert ledger_service.list_transactions() == []


def test_restock_with_cost_records_one_expense(catalog_service, ledger_service, sample_products):
    ayam = sample_products["ayam"]

    result = catalog_service.restock(ayam.id, qty_to_add=5, total_cost=50000)

    transactions = ledger_service.list_transactions()
    assert len(transactions) == 1
    tx = transactions[0]
    assert tx.id == result.transaction.id
    assert tx.type == TransactionType.EXPENSE
    assert tx.category == RESTOCK_EXPENSE_CATEGORY
    assert tx.amount == 50000
    assert tx.description == "Restock Ayam Potong (5 kg)"


def test_restock_keeps_cost_price(catalog_service, sample_products):
    ayam = sample_products["ayam"]

    catalog_service.restock(ayam.id, qty_to_add=10, total_cost=500000)

    assert catalog_service.get_product(ayam.id).cost_price == 30000


def test_restock_fractional_qty(catalog_service, sample_products):
    bawang = sample_products["bawang"]

    result = catalog_service.restock(bawang.id, qty_to_add=0.5, total_cost=17500)

    assert result.product.stock == pytest.approx(10.5)
    assert result.transaction.description == "Restock Bawang Merah (0.5 kg)"


@pytest.mark.parametrize("qty,cost", [(0, 1000), (-1, 1000), (1, -5)])
def test_restock_invalid_input(catalog_service, ledger_service, sample_products, qty, cost):
    ayam = sample_products["ayam"]

    with pytest.raises(ValueError):
        catalog_service.restock(ayam.id, qty_to_add=qty, total_cost=cost)

    assert catalog_service.get_product(ayam.id).stock == 20
    assert ledger_service.list_transactions() == []


def test_restock_unknown_product(catalog_service):
    assert catalog_service.restock("prd_missing", qty_to_add=1) is None


def test_restock_is_atomic(catalog_service, ledger_service, sample_products, monkeypatch):
    """If the expense cannot be written the stock change is rolled back."""
    ayam = sample_products["ayam"]

    def fail_write(cursor, tx):
        raise RuntimeError("disk full")

    monkeypatch.setattr(sqlite_repo, "_write_transaction", fail_write)

    with pytest.raises(RuntimeError):
        catalog_service.restock(ayam.id, qty_to_add=5, total_cost=50000)

    monkeypatch.undo()
    assert catalog_service.get_product(ayam.id).stock == 20
    assert ledger_service.list_transactions() == []
