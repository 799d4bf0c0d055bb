"""Product ratings and comments."""

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel

from src.farmconnect.api.http.deps import get_authenticated_user, get_feedback_service
from src.farmconnect.core.models.auth import CurrentUser
from src.farmconnect.core.services import FeedbackService
from src.farmconnect.entities.service.feedback import (
    ProductComment,
    ProductCommentWithAuthor,
    RatingSummary,
)

router = APIRouter(prefix="/products/{product_id}", tags=["feedback"])


class RatingRequest(BaseModel):
    rating: int


class UserRating(BaseModel):
    rating: int | None = None


class CommentRequest(BaseModel):
    comment: str


@router.get("/rating", response_model=RatingSummary)
def get_product_rating(
    product_id: str,
    feedback: FeedbackService = Depends(get_feedback_service),
) -> RatingSummary:
    return feedback.get_product_rating(product_id)


@router.put("/rating", response_model=RatingSummary)
def set_product_rating(
    product_id: str,
    body: RatingRequest,
    user: CurrentUser = Depends(get_authenticated_user),
    feedback: FeedbackService = Depends(get_feedback_service),
) -> RatingSummary:
    """Rate a product 1-5. Rating again replaces the previous rating."""
    return feedback.set_product_rating(product_id, user.id, body.rating)


@router.get("/rating/mine", response_model=UserRating)
def get_user_rating(
    product_id: str,
    user: CurrentUser = Depends(get_authenticated_user),
    feedback: FeedbackService = Depends(get_feedback_service),
) -> UserRating:
    return UserRating(rating=feedback.get_user_rating(product_id, user.id))


@router.get("/comments", response_model=list[ProductCommentWithAuthor])
def list_comments(
    product_id: str,
    feedback: FeedbackService = Depends(get_feedback_service),
) -> list[ProductCommentWithAuthor]:
    return feedback.list_comments(product_id)


@router.post(
    "/comments", response_model=ProductComment, status_code=status.HTTP_201_CREATED
)
def add_comment(
    product_id: str,
    body: CommentRequest,
    user: CurrentUser = Depends(get_authenticated_user),
    feedback: FeedbackService = Depends(get_feedback_service),
) -> ProductComment:
    return feedback.add_comment(product_id, user.id, body.comment)
