from sqlalchemy import func
from sqlmodel import Session, col, select

from src.farmconnect.entities.core._base import utcnow
from src.farmconnect.entities.core.profile.table import ProfileTable

from .entity import (
    CommentAuthor,
    ProductComment,
    ProductCommentWithAuthor,
    ProductRating,
    RatingSummary,
)
from .table import ProductCommentTable, ProductRatingTable


class ProductRatingRepository:
    """Data-access layer for product ratings."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def get_product_rating(self, product_id: str) -> RatingSummary:
        """Average (one decimal) and count of ratings for a product."""
        statement = select(
            func.avg(ProductRatingTable.rating), func.count(ProductRatingTable.id)
        ).where(ProductRatingTable.product_id == product_id)
        average, total = self._session.exec(statement).one()
        if not total:
            return RatingSummary()
        return RatingSummary(average_rating=round(float(average), 1), total_ratings=total)

    def set_product_rating(self, product_id: str, user_id: str, rating: int) -> ProductRating:
        """Insert or replace the rating ``user_id`` gave ``product_id``."""
        statement = select(ProductRatingTable).where(
            (ProductRatingTable.product_id == product_id)
            & (ProductRatingTable.user_id == user_id)
        )
        row = self._session.exec(statement).first()
        if row is None:
            row = ProductRatingTable.model_validate(
                ProductRating(product_id=product_id, user_id=user_id, rating=rating),
                from_attributes=True,
            )
        else:
            row.rating = rating
            row.updated_at = utcnow()
        self._session.add(row)
        self._session.flush()
        return ProductRating.model_validate(row, from_attributes=True)

    def get_user_rating(self, product_id: str, user_id: str) -> int | None:
        statement = select(ProductRatingTable.rating).where(
            (ProductRatingTable.product_id == product_id)
            & (ProductRatingTable.user_id == user_id)
        )
        return self._session.exec(statement).first()

    def average_for_products(self, product_ids: list[str]) -> RatingSummary:
        """Pooled rating across several products."""
        if not product_ids:
            return RatingSummary()
        statement = select(
            func.avg(ProductRatingTable.rating), func.count(ProductRatingTable.id)
        ).where(col(ProductRatingTable.product_id).in_(product_ids))
        average, total = self._session.exec(statement).one()
        if not total:
            return RatingSummary()
        return RatingSummary(average_rating=round(float(average), 1), total_ratings=total)


class ProductCommentRepository:
    """Data-access layer for product comments."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def create(self, comment: ProductComment) -> ProductComment:
        row = ProductCommentTable.model_validate(comment, from_attributes=True)
        self._session.add(row)
        self._session.flush()
        return ProductComment.model_validate(row, from_attributes=True)

    def list_for_product(self, product_id: str) -> list[ProductCommentWithAuthor]:
        """Comments on a product, newest first, with their authors."""
        statement = (
            select(ProductCommentTable, ProfileTable)
            .join(ProfileTable, ProductCommentTable.user_id == ProfileTable.id, isouter=True)
            .where(ProductCommentTable.product_id == product_id)
            .order_by(col(ProductCommentTable.created_at).desc())
        )
        comments = []
        for row, author in self._session.exec(statement):
            data = row.model_dump()
            data["profiles"] = CommentAuthor(
                full_name=author.full_name if author else None,
                avatar_url=author.avatar_url if author else None,
            )
            comments.append(ProductCommentWithAuthor.model_validate(data))
        return comments
