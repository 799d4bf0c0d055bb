"""Entities module with hybrid entity-centric structure.

Each entity has its own package containing:
- entity.py: Domain model
- table.py: Database persistence model
- repository.py: Data access layer

Importing this package registers every table with the SQLModel metadata.
"""

from .core.account import Account, AccountRepository, AccountTable
from .core.profile import Profile, ProfileRepository, ProfileTable, ProfileUpdate
from .service.feedback import (
    ProductComment,
    ProductCommentRepository,
    ProductCommentTable,
    ProductRating,
    ProductRatingRepository,
    ProductRatingTable,
)
from .service.follow import Follow, FollowRepository, FollowTable
from .service.market import (
    MarketplaceItem,
    MarketplaceItemRepository,
    MarketplaceItemTable,
    MarketPriceCache,
    MarketPriceCacheRepository,
    MarketPriceCacheTable,
)
from .service.product import Product, ProductRepository, ProductTable

__all__ = [
    "Account",
    "AccountRepository",
    "AccountTable",
    "Follow",
    "FollowRepository",
    "FollowTable",
    "MarketPriceCache",
    "MarketPriceCacheRepository",
    "MarketPriceCacheTable",
    "MarketplaceItem",
    "MarketplaceItemRepository",
    "MarketplaceItemTable",
    "Product",
    "ProductComment",
    "ProductCommentRepository",
    "ProductCommentTable",
    "ProductRating",
    "ProductRatingRepository",
    "ProductRatingTable",
    "ProductRepository",
    "ProductTable",
    "Profile",
    "ProfileRepository",
    "ProfileTable",
    "ProfileUpdate",
]
