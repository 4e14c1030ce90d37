"""
Catalog Spreadsheet Service - export/import the product catalog

Export writes one row per product; import reads the same layout (or common
aliases of its column names) and updates or creates products.
"""

import logging
import re
import uuid
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import pandas as pd

from pasarantar.models.catalog import CatalogImportResult, Product
from pasarantar.storage import sqlite_repo

logger = logging.getLogger(__name__)

SHEET_NAME = "Data Produk"

COL_NAME = "Nama Produk"
COL_UNIT = "Satuan"
COL_STOCK = "Stok Tersedia"
COL_COST = "Harga Modal (HPP)"
COL_PRICE = "Harga Jual"
COL_MARGIN = "Estimasi Laba"
COL_ID = "ID System (Jangan Ubah)"

EXPORT_COLUMNS = [COL_NAME, COL_UNIT, COL_STOCK, COL_COST, COL_PRICE, COL_MARGIN, COL_ID]

# Accepted headers per field, first match wins
COLUMN_ALIASES = {
    "name": [COL_NAME, "Name", "Nama"],
    "unit": [COL_UNIT, "Unit"],
    "stock": [COL_STOCK, "Stok", "Stock", "Qty"],
    "price": [COL_PRICE, "Harga", "Price", "Jual"],
    "cost_price": [COL_COST, "Harga Modal", "Modal", "HPP"],
    "id": [COL_ID, "ID"],
}

_NON_NUMERIC = re.compile(r"[^0-9.\-]+")


def clean_number(value: Any) -> Optional[float]:
    """'Rp 15.000' style cells -> float. Empty cells -> None."""
    if value is None or (isinstance(value, float) and pd.isna(value)):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    text = str(value).strip()
    # Rupiah uses dots for thousands: drop them when there is no decimal part
    if re.fullmatch(r"[^0-9]*\d{1,3}(\.\d{3})+[^0-9]*", text):
        text = text.replace(".", "")
    cleaned = _NON_NUMERIC.sub("", text)
    if cleaned in ("", "-", ".", "-."):
        return None
    try:
        return float(cleaned)
    except ValueError:
        return None


def _clean_text(value: Any) -> Optional[str]:
    if value is None or (isinstance(value, float) and pd.isna(value)):
        return None
    text = str(value).strip()
    return text or None


class CatalogSpreadsheetService:
    """Reads and writes catalog spreadsheets."""

    def __init__(self, db_path: Optional[str] = None):
        self.db_path = db_path

    # =========================================================================
    # Export
    # =========================================================================

    def to_dataframe(self, products: Optional[List[Product]] = None) -> pd.DataFrame:
        products = products if products is not None else sqlite_repo.list_products(self.db_path)
        rows = [
            {
                COL_NAME: p.name,
                COL_UNIT: p.unit,
                COL_STOCK: p.stock or 0,
                COL_COST: p.cost_price or 0,
                COL_PRICE: p.price,
                COL_MARGIN: p.price - (p.cost_price or 0),
                COL_ID: p.id,
            }
            for p in products
        ]
        return pd.DataFrame(rows, columns=EXPORT_COLUMNS)

    def export_file(self, file_path: str) -> str:
        """Write the catalog to .xlsx or .csv, chosen by extension."""
        path = Path(file_path)
        df = self.to_dataframe()

        if path.suffix.lower() == ".xlsx":
            df.to_excel(path, sheet_name=SHEET_NAME, index=False)
        elif path.suffix.lower() == ".csv":
            df.to_csv(path, index=False)
        else:
            raise ValueError(f"Unsupported file type: {path.suffix}")

        logger.info(f"Exported {len(df)} products to {path.name}")
        return str(path)

    @staticmethod
    def export_filename(extension: str = "xlsx") -> str:
        return f"Pasarantar_Katalog_{datetime.utcnow():%Y-%m-%d}.{extension}"

    # =========================================================================
    # Import
    # =========================================================================

    def import_file(self, file_path: str) -> CatalogImportResult:
        """Update products with a known system ID, create the rest."""
        path = Path(file_path)
        if path.suffix.lower() in [".xlsx", ".xls"]:
            # First sheet only
            df = pd.read_excel(file_path, sheet_name=0)
        elif path.suffix.lower() == ".csv":
            df = pd.read_csv(file_path)
        else:
            raise ValueError(f"Unsupported file type: {path.suffix}")

        if df.empty:
            raise ValueError("File contains no data")

        df.columns = [str(c).strip() for c in df.columns]
        mapping = self._detect_columns(df)
        if "name" not in mapping or "price" not in mapping:
            raise ValueError("Could not find product name and selling price columns")

        products, skipped, warnings = self._parse_rows(df, mapping)
        added = sum(1 for _, is_new in products if is_new)
        updated = len(products) - added

        sqlite_repo.save_products([p for p, _ in products], self.db_path)
        logger.info(f"Imported {path.name}: {added} added, {updated} updated, {skipped} skipped")

        return CatalogImportResult(
            success=True,
            filename=path.name,
            added_count=added,
            updated_count=updated,
            skipped_count=skipped,
            warnings=warnings,
        )

    def _detect_columns(self, df: pd.DataFrame) -> Dict[str, str]:
        mapping = {}
        for field, aliases in COLUMN_ALIASES.items():
            for alias in aliases:
                if alias in df.columns:
                    mapping[field] = alias
                    break
        return mapping

    def _parse_rows(
        self,
        df: pd.DataFrame,
        mapping: Dict[str, str],
    ) -> Tuple[List[Tuple[Product, bool]], int, List[str]]:
        """Returns ([(product, is_new)], skipped_count, warnings)."""
        results: List[Tuple[Product, bool]] = []
        warnings: List[str] = []
        skipped = 0
        now = datetime.utcnow()

        def cell(row, field):
            column = mapping.get(field)
            return row[column] if column else None

        for idx, row in df.iterrows():
            name = _clean_text(cell(row, "name"))
            price = clean_number(cell(row, "price"))
            if not name or not price:
                skipped += 1
                continue

            unit = _clean_text(cell(row, "unit")) or "kg"
            cost_price = clean_number(cell(row, "cost_price")) or 0.0
            stock = clean_number(cell(row, "stock")) or 0.0
            if price < 0 or cost_price < 0 or stock < 0:
                warnings.append(f"Row {idx + 2}: negative values for '{name}', skipped")
                skipped += 1
                continue

            product_id = _clean_text(cell(row, "id"))
            existing = sqlite_repo.get_product(product_id, self.db_path) if product_id else None

            if existing:
                results.append((existing.model_copy(update={
                    "name": name,
                    "unit": unit,
                    "price": price,
                    "cost_price": cost_price,
                    "stock": stock,
                    "updated_at": now,
                }), False))
            else:
                if product_id:
                    warnings.append(f"Row {idx + 2}: unknown ID {product_id}, created as new product")
                results.append((Product(
                    id=f"prd_{uuid.uuid4().hex[:12]}",
                    name=name,
                    unit=unit,
                    price=price,
                    cost_price=cost_price,
                    stock=stock,
                ), True))

        return results, skipped, warnings
