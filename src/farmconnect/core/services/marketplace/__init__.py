"""Marketplace domain services."""

from .cart import CartService, cart_key
from .catalog import CatalogService, Category, NewProduct
from .dashboard import DashboardService, FarmerDashboard, UserDashboard
from .feedback import FeedbackService
from .follows import FollowService, FollowState
from .profiles import ProfileService

__all__ = [
    "CartService",
    "CatalogService",
    "Category",
    "DashboardService",
    "FarmerDashboard",
    "FeedbackService",
    "FollowService",
    "FollowState",
    "NewProduct",
    "ProfileService",
    "UserDashboard",
    "cart_key",
]
