"""Shopping carts kept in session storage under ``cart:{client_id}``."""

from fastapi import HTTPException

from src.farmconnect.core.models.cart import Cart, CartFarmer, CartItem, CartUpdate
from src.farmconnect.core.models.catalog import ProductListing
from src.farmconnect.core.storage.session_storage import SessionStorage
from src.farmconnect.runtime.context import get_config

CART_KEY = "cart"


def cart_key(client_id: str) -> str:
    return f"{CART_KEY}:{client_id}"


def item_from_listing(product: ProductListing, quantity: int = 1) -> CartItem:
    return CartItem(
        id=product.id,
        name=product.name,
        price=product.price,
        image=product.image,
        category=product.category,
        description=product.description,
        farmer=CartFarmer(
            id=product.farmer.id,
            name=product.farmer.name,
            location=product.farmer.location,
            phone_number=product.farmer.phone,
        ),
        quantity=quantity,
    )


class CartService:
    """Cart operations for one client.

    Every mutation loads the cart, applies the change and writes it back. An
    empty cart is never written; its key is deleted instead.
    """

    def __init__(self, storage: SessionStorage, client_id: str):
        self._storage = storage
        self._key = cart_key(client_id)

    async def get(self) -> Cart:
        return await self._storage.get(self._key, Cart) or Cart()

    async def _save(self, cart: Cart) -> Cart:
        if cart.items:
            await self._storage.set(self._key, cart, get_config().cart.ttl_seconds)
        else:
            await self._storage.delete(self._key)
        return cart

    async def add(self, product: ProductListing, quantity: int = 1) -> CartUpdate:
        if quantity < 1:
            raise HTTPException(status_code=400, detail="Quantity must be at least 1")
        cart = await self.get()
        existing = cart.find(product.id)
        if existing is not None:
            existing.quantity += quantity
            await self._save(cart)
            return CartUpdate(
                cart=cart,
                message="Updated cart",
                detail=f"Increased quantity of {product.name} to {existing.quantity}",
            )
        cart.items.append(item_from_listing(product, quantity))
        await self._save(cart)
        return CartUpdate(
            cart=cart,
            message="Added to cart",
            detail=f"{product.name} has been added to your cart",
        )

    async def remove(self, product_id: str) -> CartUpdate:
        cart = await self.get()
        existing = cart.find(product_id)
        if existing is None:
            return CartUpdate(cart=cart)
        cart.items = [item for item in cart.items if item.id != product_id]
        await self._save(cart)
        return CartUpdate(
            cart=cart,
            message="Removed from cart",
            detail=f"{existing.name} has been removed from your cart",
        )

    async def update_quantity(self, product_id: str, quantity: int) -> CartUpdate:
        if quantity <= 0:
            return await self.remove(product_id)
        cart = await self.get()
        existing = cart.find(product_id)
        if existing is not None:
            existing.quantity = quantity
            await self._save(cart)
        return CartUpdate(cart=cart)

    async def clear(self) -> CartUpdate:
        await self._storage.delete(self._key)
        return CartUpdate(
            cart=Cart(),
            message="Cart cleared",
            detail="All items have been removed from your cart",
        )
