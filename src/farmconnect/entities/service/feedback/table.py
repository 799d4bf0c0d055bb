"""Rating and comment database table models."""

from sqlalchemy import UniqueConstraint
from sqlmodel import Field

from src.farmconnect.entities.core._base import EntityTable


class ProductRatingTable(EntityTable, table=True):
    """Database persistence model for product ratings.

    Exactly one row exists per (product, user) pair.
    """

    __tablename__ = "product_ratings"
    __table_args__ = (UniqueConstraint("product_id", "user_id"),)

    product_id: str = Field(foreign_key="products.id", index=True, ondelete="CASCADE")
    user_id: str = Field(foreign_key="profiles.id", index=True, ondelete="CASCADE")
    rating: int


class ProductCommentTable(EntityTable, table=True):
    """Database persistence model for product comments."""

    __tablename__ = "product_comments"

    product_id: str = Field(foreign_key="products.id", index=True, ondelete="CASCADE")
    user_id: str = Field(foreign_key="profiles.id", index=True, ondelete="CASCADE")
    comment: str
