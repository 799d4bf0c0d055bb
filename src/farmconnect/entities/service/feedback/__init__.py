"""Entity package: product ratings and comments."""

from .entity import CommentAuthor, ProductComment, ProductCommentWithAuthor, ProductRating, RatingSummary
from .repository import ProductCommentRepository, ProductRatingRepository
from .table import ProductCommentTable, ProductRatingTable

__all__ = [
    "CommentAuthor",
    "ProductComment",
    "ProductCommentRepository",
    "ProductCommentTable",
    "ProductCommentWithAuthor",
    "ProductRating",
    "ProductRatingRepository",
    "ProductRatingTable",
    "RatingSummary",
]
