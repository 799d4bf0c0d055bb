"""Product database table model."""

from sqlmodel import Field

from src.farmconnect.entities.core._base import EntityTable


class ProductTable(EntityTable, table=True):
    """Database persistence model for products."""

    __tablename__ = "products"

    farmer_id: str | None = Field(
        default=None, foreign_key="profiles.id", index=True, ondelete="CASCADE"
    )
    name: str
    description: str | None = None
    category: str = Field(default="vegetables", index=True)
    price: float
    quantity: int | None = Field(default=0)
    image_url: str | None = None
    latitude: float | None = None
    longitude: float | None = None
