"""Shopping cart endpoints."""

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from src.farmconnect.api.http.deps import get_cart_service, get_catalog_service
from src.farmconnect.core.models.cart import Cart, CartUpdate
from src.farmconnect.core.services import CartService, CatalogService

router = APIRouter(prefix="/cart", tags=["cart"])


class AddToCartRequest(BaseModel):
    product_id: str
    quantity: int = 1


class QuantityRequest(BaseModel):
    quantity: int


@router.get("", response_model=Cart)
async def get_cart(cart: CartService = Depends(get_cart_service)) -> Cart:
    return await cart.get()


@router.post("/items", response_model=CartUpdate)
async def add_to_cart(
    body: AddToCartRequest,
    cart: CartService = Depends(get_cart_service),
    catalog: CatalogService = Depends(get_catalog_service),
) -> CartUpdate:
    """Add a product, or raise its quantity when it is already in the cart."""
    product = catalog.get_product(body.product_id)
    return await cart.add(product, body.quantity)


@router.patch("/items/{product_id}", response_model=CartUpdate)
async def update_quantity(
    product_id: str,
    body: QuantityRequest,
    cart: CartService = Depends(get_cart_service),
) -> CartUpdate:
    """Set an item's quantity; zero or less removes it."""
    return await cart.update_quantity(product_id, body.quantity)


@router.delete("/items/{product_id}", response_model=CartUpdate)
async def remove_from_cart(
    product_id: str,
    cart: CartService = Depends(get_cart_service),
) -> CartUpdate:
    return await cart.remove(product_id)


@router.delete("", response_model=CartUpdate)
async def clear_cart(cart: CartService = Depends(get_cart_service)) -> CartUpdate:
    return await cart.clear()
