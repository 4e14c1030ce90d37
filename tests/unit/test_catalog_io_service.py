"""Tests for catalog spreadsheet export and import."""

import pandas as pd
import pytest

from pasarantar.services.catalog_io_service import (
    COL_ID,
    COL_MARGIN,
    COL_NAME,
    EXPORT_COLUMNS,
    SHEET_NAME,
    clean_number,
)


@pytest.mark.parametrize("raw,expected", [
    ("Rp 15.000", 15000.0),
    ("Rp 1.250.000", 1250000.0),
    ("12.5", 12.5),
    ("38000", 38000.0),
    (42, 42.0),
    (2.5, 2.5),
    ("", None),
    ("-", None),
    (None, None),
    (float("nan"), None),
])
def test_clean_number(raw, expected):
    assert clean_number(raw) == expected


def test_dataframe_columns(spreadsheet_service, sample_products):
    df = spreadsheet_service.to_dataframe()

    assert list(df.columns) == EXPORT_COLUMNS
    row = df[df[COL_NAME] == "Ayam Potong"].iloc[0]
    assert row[COL_MARGIN] == 8000
    assert row[COL_ID] == sample_products["ayam"].id


def test_export_xlsx(spreadsheet_service, sample_products, temp_dir):
    path = spreadsheet_service.export_file(str(temp_dir / "katalog.xlsx"))

    df = pd.read_excel(path, sheet_name=SHEET_NAME)
    assert len(df) == 2


def test_export_rejects_unknown_extension(spreadsheet_service, temp_dir):
    with pytest.raises(ValueError):
        spreadsheet_service.export_file(str(temp_dir / "katalog.pdf"))


def test_reimport_updates_existing(spreadsheet_service, catalog_service, sample_products, temp_dir):
    path = temp_dir / "katalog.xlsx"
    spreadsheet_service.export_file(str(path))

    df = pd.read_excel(path)
    df.loc[df[COL_NAME] == "Ayam Potong", "Harga Jual"] = 40000
    df.to_excel(path, index=False)

    result = spreadsheet_service.import_file(str(path))

    assert result.added_count == 0
    assert result.updated_count == 2
    assert catalog_service.get_product(sample_products["ayam"].id).price == 40000
    assert len(catalog_service.list_products()) == 2


def test_import_csv_with_aliases(spreadsheet_service, catalog_service, temp_dir):
    path = temp_dir / "produk.csv"
    path.write_text(
        "Nama,Unit,Stok,Harga,Modal\n"
        "Tahu Putih,pack,12,\"Rp 5.000\",\"Rp 3.500\"\n"
        ",pack,1,1000,500\n"
        "Tempe,pack,3,,2000\n"
        "Kerupuk,pack,-2,8000,5000\n",
        encoding="utf-8",
    )

    result = spreadsheet_service.import_file(str(path))

    assert result.added_count == 1
    assert result.updated_count == 0
    assert result.skipped_count == 3
    assert len(result.warnings) == 1

    products = catalog_service.list_products()
    assert [p.name for p in products] == ["Tahu Putih"]
    assert products[0].price == 5000
    assert products[0].cost_price == 3500
    assert products[0].stock == 12


def test_import_unknown_id_creates_product(spreadsheet_service, catalog_service, temp_dir):
    path = temp_dir / "produk.csv"
    path.write_text(
        f"{COL_NAME},Harga Jual,{COL_ID}\n"
        "Telur Ayam,28000,prd_doesnotexist\n",
        encoding="utf-8",
    )

    result = spreadsheet_service.import_file(str(path))

    assert result.added_count == 1
    assert "prd_doesnotexist" in result.warnings[0]
    assert catalog_service.list_products()[0].id != "prd_doesnotexist"


def test_import_requires_name_and_price_columns(spreadsheet_service, temp_dir):
    path = temp_dir / "produk.csv"
    path.write_text("Produk,Stok\nTahu,3\n", encoding="utf-8")

    with pytest.raises(ValueError):
        spreadsheet_service.import_file(str(path))


def test_import_rejects_unknown_extension(spreadsheet_service, temp_dir):
    path = temp_dir / "produk.txt"
    path.write_text("Nama,Harga\nTahu,3000\n", encoding="utf-8")

    with pytest.raises(ValueError):
        spreadsheet_service.import_file(str(path))
