"""Product catalog endpoints: CRUD, restock and spreadsheet export/import."""

import os
import uuid
from typing import List

from fastapi import APIRouter, Body, Depends, File, Query, UploadFile
from fastapi.responses import FileResponse

from api.config import get_settings
from api.dependencies import get_api_key, get_catalog_service, get_spreadsheet_service
from api.middleware.errors import NotFoundError, ProcessingError, ValidationError
from pasarantar.models.catalog import (
    CatalogImportResult,
    Product,
    ProductCreate,
    ProductUpdate,
    RestockRequest,
    RestockResult,
)
from pasarantar.services import CatalogService, CatalogSpreadsheetService

router = APIRouter()

SPREADSHEET_TYPES = {
    "xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "csv": "text/csv",
}


@router.get("", response_model=List[Product])
async def list_products(
    active_only: bool = Query(False, description="Hide inactive products"),
    api_key: str = Depends(get_api_key),
    service: CatalogService = Depends(get_catalog_service),
):
    """List catalog products sorted by name."""
    products = service.list_products()
    if active_only:
        products = [p for p in products if p.is_active]
    return products


@router.post("", response_model=Product, status_code=201)
async def create_product(
    request: ProductCreate = Body(...),
    api_key: str = Depends(get_api_key),
    service: CatalogService = Depends(get_catalog_service),
):
    return service.save_product(request)


# =============================================================================
# Spreadsheet Endpoints
# =============================================================================

@router.get("/export")
async def export_catalog(
    format: str = Query("xlsx", pattern="^(xlsx|csv)$", description="File format"),
    api_key: str = Depends(get_api_key),
    service: CatalogSpreadsheetService = Depends(get_spreadsheet_service),
):
    """Download the catalog as a spreadsheet the import endpoint accepts back."""
    settings = get_settings()
    os.makedirs(settings.export_dir, exist_ok=True)

    filename = service.export_filename(format)
    path = service.export_file(os.path.join(settings.export_dir, filename))

    return FileResponse(path, media_type=SPREADSHEET_TYPES[format], filename=filename)


@router.post("/import", response_model=CatalogImportResult)
async def import_catalog(
    file: UploadFile = File(...),
    api_key: str = Depends(get_api_key),
    service: CatalogSpreadsheetService = Depends(get_spreadsheet_service),
):
    """
    Upload an edited catalog spreadsheet (Excel or CSV).

    Rows whose system ID matches a product update it; all other rows
    create new products.
    """
    settings = get_settings()

    if not file.filename:
        raise ValidationError("No filename provided")

    ext = file.filename.rsplit(".", 1)[-1].lower()
    if ext not in ["xlsx", "xls", "csv"]:
        raise ValidationError(
            f"Unsupported file type: {ext}. Use .xlsx, .xls, or .csv",
            details={"filename": file.filename},
        )

    content = await file.read()
    if len(content) > settings.max_upload_size_mb * 1024 * 1024:
        raise ValidationError(f"File exceeds {settings.max_upload_size_mb} MB")

    os.makedirs(settings.upload_dir, exist_ok=True)
    temp_path = os.path.join(settings.upload_dir, f"{uuid.uuid4().hex}_{file.filename}")

    try:
        with open(temp_path, "wb") as f:
            f.write(content)
        result = service.import_file(temp_path)
    except ValueError as e:
        raise ProcessingError(str(e), details={"filename": file.filename})
    finally:
        if os.path.exists(temp_path):
            os.remove(temp_path)

    return result.model_copy(update={"filename": file.filename})


# =============================================================================
# Single Product Endpoints
# =============================================================================

@router.get("/{product_id}", response_model=Product)
async def get_product(
    product_id: str,
    api_key: str = Depends(get_api_key),
    service: CatalogService = Depends(get_catalog_service),
):
    product = service.get_product(product_id)
    if not product:
        raise NotFoundError("Product", product_id)
    return product


@router.patch("/{product_id}", response_model=Product)
async def update_product(
    product_id: str,
    request: ProductUpdate = Body(...),
    api_key: str = Depends(get_api_key),
    service: CatalogService = Depends(get_catalog_service),
):
    """Partial update. Stock changes that cost money should go through restock."""
    product = service.update_product(product_id, request)
    if not product:
        raise NotFoundError("Product", product_id)
    return product


@router.delete("/{product_id}")
async def delete_product(
    product_id: str,
    api_key: str = Depends(get_api_key),
    service: CatalogService = Depends(get_catalog_service),
):
    if not service.delete_product(product_id):
        raise NotFoundError("Product", product_id)
    return {"deleted": True, "id": product_id}


@router.post("/{product_id}/restock", response_model=RestockResult)
async def restock_product(
    product_id: str,
    request: RestockRequest = Body(...),
    api_key: str = Depends(get_api_key),
    service: CatalogService = Depends(get_catalog_service),
):
    """
    Add purchased stock.

    When `total_cost` is above 0 a "Belanja Pasar (HPP)" expense is recorded
    in the same database transaction as the stock change.
    """
    result = service.restock(product_id, request.qty_to_add, request.total_cost)
    if result is None:
        raise NotFoundError("Product", product_id)
    return result
