"""Product catalogue endpoints."""

from fastapi import APIRouter, Depends, File, Form, UploadFile, status

from src.farmconnect.api.http.deps import (
    get_authenticated_user,
    get_catalog_service,
    read_image_upload,
    require_user_type,
)
from src.farmconnect.core.models.auth import CurrentUser
from src.farmconnect.core.models.catalog import ProductListing
from src.farmconnect.core.services import CatalogService
from src.farmconnect.core.services.marketplace import Category, NewProduct
from src.farmconnect.entities.core.profile import Profile
from src.farmconnect.entities.service.product import ProductSort

router = APIRouter(prefix="/products", tags=["products"])


@router.get("", response_model=list[ProductListing])
def list_products(
    category: str | None = None,
    search: str | None = None,
    sort: ProductSort = "newest",
    catalog: CatalogService = Depends(get_catalog_service),
) -> list[ProductListing]:
    """List products with their farmer. ``category=all`` disables the filter."""
    return catalog.list_products(category, search, sort)


@router.get("/categories", response_model=list[Category])
def list_categories() -> list[Category]:
    return CatalogService.list_categories()


@router.get("/followed", response_model=list[ProductListing])
def followed_farmer_products(
    user: CurrentUser = Depends(get_authenticated_user),
    catalog: CatalogService = Depends(get_catalog_service),
) -> list[ProductListing]:
    """Products from the farmers the current user follows."""
    return catalog.followed_farmer_products(user.id)


@router.get("/{product_id}", response_model=ProductListing)
def get_product(
    product_id: str,
    catalog: CatalogService = Depends(get_catalog_service),
) -> ProductListing:
    return catalog.get_product(product_id)


@router.post("", response_model=ProductListing, status_code=status.HTTP_201_CREATED)
async def create_product(
    name: str = Form(...),
    price: str = Form(...),
    description: str | None = Form(None),
    quantity: str | None = Form(None),
    category: str | None = Form(None),
    latitude: float | None = Form(None),
    longitude: float | None = Form(None),
    image: UploadFile | None = File(None),
    farmer: Profile = Depends(require_user_type("farmer")),
    catalog: CatalogService = Depends(get_catalog_service),
) -> ProductListing:
    """List a new product. Form fields arrive as text, as from the add-product form."""
    form = NewProduct(
        name=name,
        description=description,
        price=price,
        quantity=quantity,
        category=category,
        latitude=latitude,
        longitude=longitude,
    )
    return catalog.create_product(farmer, form, await read_image_upload(image))


@router.delete("/{product_id}")
def delete_product(
    product_id: str,
    farmer: Profile = Depends(require_user_type("farmer")),
    catalog: CatalogService = Depends(get_catalog_service),
) -> dict[str, str]:
    catalog.delete_product(farmer, product_id)
    return {"message": "Product deleted successfully"}
