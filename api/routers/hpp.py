"""HPP calculator endpoints."""

from fastapi import APIRouter, Body, Depends

from api.dependencies import get_api_key, get_catalog_service
from pasarantar.formatting import format_rupiah
from pasarantar.models.catalog import Product
from pasarantar.models.hpp import HPPCalculationResponse, HPPInput, SaveToCatalogRequest
from pasarantar.services import CatalogService, calculate_hpp

router = APIRouter()


@router.post("/calculate", response_model=HPPCalculationResponse)
async def calculate(
    request: HPPInput = Body(...),
    api_key: str = Depends(get_api_key),
):
    """
    Price a product from its raw material and packaging costs.

    **Steps:**
    - shrinkage cost = base cost x shrinkage %
    - total HPP = base cost + shrinkage cost + sum(component cost x qty)
    - selling price = total HPP x (1 + margin %)
    - rounded price = selling price rounded up to the next Rp 500

    Nothing is stored.
    """
    result = calculate_hpp(request)
    return HPPCalculationResponse(
        result=result,
        rounded_price_label=format_rupiah(result.rounded_price),
    )


@router.post("/save", response_model=Product, status_code=201)
async def save_to_catalog(
    request: SaveToCatalogRequest = Body(...),
    api_key: str = Depends(get_api_key),
    service: CatalogService = Depends(get_catalog_service),
):
    """Create a catalog product priced from the calculation (stock starts at 0)."""
    return service.save_hpp_to_catalog(
        request.calculation,
        product_name=request.product_name,
        product_unit=request.product_unit,
    )
