from fastapi import HTTPException
from sqlmodel import Session

from src.farmconnect.entities.service.feedback import (
    ProductComment,
    ProductCommentRepository,
    ProductCommentWithAuthor,
    ProductRatingRepository,
    RatingSummary,
)
from src.farmconnect.entities.service.product import ProductRepository


class FeedbackService:
    """Star ratings (one per member and product) and comments."""

    def __init__(self, db_session: Session):
        self._db = db_session
        self._ratings = ProductRatingRepository(db_session)
        self._comments = ProductCommentRepository(db_session)
        self._products = ProductRepository(db_session)

    def _require_product(self, product_id: str) -> None:
        if self._products.get(product_id) is None:
            raise HTTPException(status_code=404, detail="Product not found")

    def get_product_rating(self, product_id: str) -> RatingSummary:
        return self._ratings.get_product_rating(product_id)

    def set_product_rating(self, product_id: str, user_id: str, rating: int) -> RatingSummary:
        if isinstance(rating, bool) or not isinstance(rating, int) or not 1 <= rating <= 5:
            raise HTTPException(status_code=400, detail="Rating must be between 1 and 5")
        self._require_product(product_id)
        self._ratings.set_product_rating(product_id, user_id, rating)
        self._db.commit()
        return self._ratings.get_product_rating(product_id)

    def get_user_rating(self, product_id: str, user_id: str) -> int | None:
        return self._ratings.get_user_rating(product_id, user_id)

    def list_comments(self, product_id: str) -> list[ProductCommentWithAuthor]:
        return self._comments.list_for_product(product_id)

    def add_comment(self, product_id: str, user_id: str, text: str) -> ProductComment:
        comment = (text or "").strip()
        if not comment:
            raise HTTPException(status_code=400, detail="Please enter a comment")
        self._require_product(product_id)
        created = self._comments.create(
            ProductComment(product_id=product_id, user_id=user_id, comment=comment)
        )
        self._db.commit()
        return created
