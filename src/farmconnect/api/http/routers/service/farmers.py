"""Farmer directory endpoints."""

from fastapi import APIRouter, Depends

from src.farmconnect.api.http.deps import get_catalog_service
from src.farmconnect.core.models.catalog import ProductListing
from src.farmconnect.core.services import CatalogService
from src.farmconnect.entities.core.profile import Profile

router = APIRouter(prefix="/farmers", tags=["farmers"])


@router.get("", response_model=list[Profile])
def list_farmers(
    search: str | None = None,
    catalog: CatalogService = Depends(get_catalog_service),
) -> list[Profile]:
    """List farmers, optionally matching name, location or specialty."""
    return catalog.list_farmers(search)


@router.get("/{farmer_id}", response_model=Profile)
def get_farmer(
    farmer_id: str,
    catalog: CatalogService = Depends(get_catalog_service),
) -> Profile:
    return catalog.get_farmer(farmer_id)


@router.get("/{farmer_id}/products", response_model=list[ProductListing])
def get_farmer_products(
    farmer_id: str,
    catalog: CatalogService = Depends(get_catalog_service),
) -> list[ProductListing]:
    return catalog.get_farmer_products(farmer_id)
