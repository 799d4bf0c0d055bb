"""Shopping cart models.

Totals are derived from the items on every read, so they always reflect the
current contents.
"""

from pydantic import BaseModel, Field, computed_field


class CartFarmer(BaseModel):
    id: str = ""
    name: str = ""
    location: str | None = None
    phone_number: str | None = None


class CartItem(BaseModel):
    """Snapshot of a product at the time it was added, plus a quantity."""

    id: str
    name: str
    price: float
    image: str | None = None
    category: str | None = None
    description: str | None = None
    farmer: CartFarmer | None = None
    quantity: int = Field(default=1, ge=1)

    @property
    def subtotal(self) -> float:
        return self.price * self.quantity


class Cart(BaseModel):
    items: list[CartItem] = Field(default_factory=list)

    @computed_field
    @property
    def total_items(self) -> int:
        return sum(item.quantity for item in self.items)

    @computed_field
    @property
    def total_price(self) -> float:
        return round(sum(item.subtotal for item in self.items), 2)

    def find(self, product_id: str) -> CartItem | None:
        return next((item for item in self.items if item.id == product_id), None)


class CartUpdate(BaseModel):
    """Result of a cart mutation with the notification shown to the shopper."""

    cart: Cart
    message: str | None = None
    detail: str | None = None
