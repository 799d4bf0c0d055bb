"""Entities: ProductRating and ProductComment."""

from pydantic import BaseModel, Field

from src.farmconnect.entities.core._base import Entity


class ProductRating(Entity):
    """One member's star rating of one product."""

    product_id: str
    user_id: str
    rating: int = Field(ge=1, le=5, description="Stars, 1 to 5")


class RatingSummary(BaseModel):
    average_rating: float = 0
    total_ratings: int = 0


class ProductComment(Entity):
    """Free-text comment left on a product."""

    product_id: str
    user_id: str
    comment: str


class CommentAuthor(BaseModel):
    full_name: str | None = None
    avatar_url: str | None = None


class ProductCommentWithAuthor(ProductComment):
    profiles: CommentAuthor = Field(
        default_factory=CommentAuthor, description="Public details of the author"
    )
