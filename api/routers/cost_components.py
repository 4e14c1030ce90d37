"""Cost component library endpoints."""

from typing import List

from fastapi import APIRouter, Body, Depends

from api.dependencies import get_api_key, get_catalog_service
from api.middleware.errors import NotFoundError
from pasarantar.models.catalog import CostComponent, CostComponentCreate
from pasarantar.services import CatalogService

router = APIRouter()


@router.get("", response_model=List[CostComponent])
async def list_cost_components(
    api_key: str = Depends(get_api_key),
    service: CatalogService = Depends(get_catalog_service),
):
    """List the cost components in the order they were added."""
    return service.list_cost_components()


@router.post("", response_model=CostComponent, status_code=201)
async def add_cost_component(
    request: CostComponentCreate = Body(...),
    api_key: str = Depends(get_api_key),
    service: CatalogService = Depends(get_catalog_service),
):
    """
    Add a reusable cost item (packaging, ice, seasoning...).

    The name must not be blank and the cost must be greater than 0.
    """
    return service.add_cost_component(request.name, request.cost, request.unit)


@router.delete("/{component_id}")
async def remove_cost_component(
    component_id: str,
    api_key: str = Depends(get_api_key),
    service: CatalogService = Depends(get_catalog_service),
):
    if not service.remove_cost_component(component_id):
        raise NotFoundError("Cost component", component_id)
    return {"deleted": True, "id": component_id}
