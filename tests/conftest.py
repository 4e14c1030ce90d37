"""Pytest configuration and fixtures."""

import os
import tempfile
from pathlib import Path
from typing import Generator

import pytest
from fastapi.testclient import TestClient

# Set test environment before importing app
_TEST_ROOT = tempfile.mkdtemp(prefix="pasarantar-tests-")
os.environ["DEBUG"] = "true"
os.environ["API_KEYS"] = ""
os.environ["DATABASE_PATH"] = os.path.join(_TEST_ROOT, "app.db")
os.environ["UPLOAD_DIR"] = os.path.join(_TEST_ROOT, "uploads")
os.environ["EXPORT_DIR"] = os.path.join(_TEST_ROOT, "exports")

from pasarantar.models.catalog import ProductCreate  # noqa: E402
from pasarantar.services import (  # noqa: E402
    CatalogService,
    CatalogSpreadsheetService,
    LedgerService,
    OrderService,
    ProcurementService,
    ReportService,
)
from pasarantar.storage import init_database  # noqa: E402


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def db_path(temp_dir: Path) -> str:
    """Fresh database with all tables created."""
    path = str(temp_dir / "pasarantar.db")
    init_database(path)
    return path


@pytest.fixture
def catalog_service(db_path: str) -> CatalogService:
    return CatalogService(db_path=db_path)


@pytest.fixture
def ledger_service(db_path: str) -> LedgerService:
    return LedgerService(db_path=db_path)


@pytest.fixture
def order_service(db_path: str) -> OrderService:
    return OrderService(db_path=db_path)


@pytest.fixture
def procurement_service(db_path: str) -> ProcurementService:
    return ProcurementService(db_path=db_path)


@pytest.fixture
def report_service(db_path: str) -> ReportService:
    return ReportService(db_path=db_path)


@pytest.fixture
def spreadsheet_service(db_path: str) -> CatalogSpreadsheetService:
    return CatalogSpreadsheetService(db_path=db_path)


@pytest.fixture
def sample_products(catalog_service: CatalogService) -> dict:
    """Two catalog products keyed by a short name."""
    ayam = catalog_service.save_product(ProductCreate(
        name="Ayam Potong",
        unit="kg",
        price=38000,
        cost_price=30000,
        stock=20,
    ))
    bawang = catalog_service.save_product(ProductCreate(
        name="Bawang Merah",
        unit="kg",
        price=45000,
        cost_price=35000,
        stock=10,
    ))
    return {"ayam": ayam, "bawang": bawang}


@pytest.fixture
def api_client(db_path: str) -> Generator[TestClient, None, None]:
    """FastAPI test client whose services all use the per-test database."""
    from api import dependencies
    from api.main import app

    app.dependency_overrides[dependencies.get_catalog_service] = lambda: CatalogService(db_path)
    app.dependency_overrides[dependencies.get_spreadsheet_service] = (
        lambda: CatalogSpreadsheetService(db_path)
    )
    app.dependency_overrides[dependencies.get_ledger_service] = lambda: LedgerService(db_path)
    app.dependency_overrides[dependencies.get_order_service] = lambda: OrderService(db_path)
    app.dependency_overrides[dependencies.get_procurement_service] = (
        lambda: ProcurementService(db_path)
    )
    app.dependency_overrides[dependencies.get_report_service] = lambda: ReportService(db_path)

    with TestClient(app) as client:
        yield client

    app.dependency_overrides.clear()
