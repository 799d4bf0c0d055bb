"""Tests for carts kept in session storage."""

from datetime import UTC, datetime

import pytest
from fastapi import HTTPException

from src.farmconnect.core.models.cart import Cart, CartItem
from src.farmconnect.core.models.catalog import FarmerCard, ProductListing
from src.farmconnect.core.services import CartService


def listing(product_id: str, name: str, price: float) -> ProductListing:
    return ProductListing(
        id=product_id,
        name=name,
        category="vegetables",
        price=price,
        created_at=datetime(2024, 5, 10, tzinfo=UTC),
        farmer=FarmerCard(id="farmer-1", name="John Smith", phone="+91 98765 43210"),
    )


TOMATOES = listing("p-1", "Organic Tomatoes", 40)
SPINACH = listing("p-2", "Fresh Spinach", 30)


@pytest.fixture
def cart(session_storage) -> CartService:
    return CartService(session_storage, "client-1")


class TestCartTotals:
    def test_totals_follow_items(self):
        cart = Cart(
            items=[
                CartItem(id="p-1", name="Organic Tomatoes", price=40, quantity=2),
                CartItem(id="p-2", name="Fresh Spinach", price=30.5, quantity=1),
            ]
        )
        assert cart.total_items == 3
        assert cart.total_price == 110.5

    def test_totals_are_serialized(self):
        dumped = Cart().model_dump()
        assert dumped["total_items"] == 0
        assert dumped["total_price"] == 0


class TestCartService:
    @pytest.mark.asyncio
    async def test_add_new_item(self, cart: CartService):
        update = await cart.add(TOMATOES)

        assert update.message == "Added to cart"
        assert update.detail == "Organic Tomatoes has been added to your cart"
        assert update.cart.items[0].farmer.phone_number == "+91 98765 43210"
        assert (await cart.get()).total_items == 1

    @pytest.mark.asyncio
    async def test_adding_again_increases_quantity(self, cart: CartService):
        await cart.add(TOMATOES)
        update = await cart.add(TOMATOES, quantity=2)

        assert update.message == "Updated cart"
        assert update.detail == "Increased quantity of Organic Tomatoes to 3"
        assert len(update.cart.items) == 1
        assert update.cart.total_price == 120

    @pytest.mark.asyncio
    async def test_add_rejects_non_positive_quantity(self, cart: CartService):
        with pytest.raises(HTTPException) as exc_info:
            await cart.add(TOMATOES, quantity=0)
        assert exc_info.value.status_code == 400

    @pytest.mark.asyncio
    async def test_remove(self, cart: CartService):
        await cart.add(TOMATOES)
        await cart.add(SPINACH)

        update = await cart.remove("p-1")

        assert update.message == "Removed from cart"
        assert [item.id for item in update.cart.items] == ["p-2"]

    @pytest.mark.asyncio
    async def test_remove_missing_item_is_silent(self, cart: CartService):
        update = await cart.remove("p-9")
        assert update.message is None
        assert update.cart.items == []

    @pytest.mark.asyncio
    async def test_update_quantity(self, cart: CartService):
        await cart.add(TOMATOES)
        update = await cart.update_quantity("p-1", 5)
        assert update.cart.total_items == 5
        assert update.message is None

    @pytest.mark.asyncio
    async def test_zero_quantity_removes_item(self, cart: CartService, session_storage):
        await cart.add(TOMATOES)

        update = await cart.update_quantity("p-1", 0)

        assert update.message == "Removed from cart"
        # An empty cart is not kept in storage
        assert not await session_storage.exists("cart:client-1")

    @pytest.mark.asyncio
    async def test_clear(self, cart: CartService, session_storage):
        await cart.add(TOMATOES)
        update = await cart.clear()

        assert update.message == "Cart cleared"
        assert update.cart.total_items == 0
        assert not await session_storage.exists("cart:client-1")

    @pytest.mark.asyncio
    async def test_carts_are_per_client(self, cart: CartService, session_storage):
        await cart.add(TOMATOES)
        other = CartService(session_storage, "client-2")
        assert (await other.get()).items == []
