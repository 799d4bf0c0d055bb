"""Entity: Product."""

from typing import Any, Literal

from pydantic import Field

from src.farmconnect.entities.core._base import Entity

PRODUCT_CATEGORIES: tuple[str, ...] = ("vegetables", "fruits", "grains", "spices")

ProductSort = Literal["newest", "price_asc", "price_desc", "name"]


class Product(Entity):
    """Produce listed for sale by a farmer."""

    farmer_id: str | None = Field(default=None, description="Owning farmer profile")
    name: str = Field(description="Product name")
    description: str | None = Field(default=None)
    category: str = Field(default="vegetables")
    price: float = Field(description="Unit price")
    quantity: int | None = Field(default=0, description="Units in stock")
    image_url: str | None = Field(default=None)
    latitude: float | None = Field(default=None)
    longitude: float | None = Field(default=None)

    def __eq__(self, other: Any) -> bool:
        """Compare products by business attributes, ignoring timestamps."""
        if not isinstance(other, Product):
            return False

        return (
            self.id == other.id
            and self.farmer_id == other.farmer_id
            and self.name == other.name
            and self.category == other.category
            and self.price == other.price
            and self.quantity == other.quantity
        )

    def __hash__(self) -> int:
        """Hash based on business attributes, ignoring timestamps."""
        return hash((
            self.id,
            self.farmer_id,
            self.name,
            self.category,
            self.price,
            self.quantity,
        ))


class ProductWithFarmer(Product):
    """A product joined with the public details of its farmer."""

    farmer_name: str | None = None
    farmer_location: str | None = None
    farmer_avatar: str | None = None
    farmer_email: str | None = None
    farmer_phone: str | None = None
    farmer_latitude: float | None = None
    farmer_longitude: float | None = None
