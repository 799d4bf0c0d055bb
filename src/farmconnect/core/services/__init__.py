"""Core services exports."""

from src.farmconnect.core.storage.session_storage import (
    InMemorySessionStorage,
    RedisSessionStorage,
    SessionStorage,
)

from .assistant import ChatService
from .auth import AuthService
from .database.db_manage import DbManageService
from .database.db_session import DbSessionService
from .jwt import JwtGeneratorService, JwtVerificationService
from .market import MarketPriceService
from .marketplace import (
    CartService,
    CatalogService,
    DashboardService,
    FeedbackService,
    FollowService,
    ProfileService,
)
from .session.user_session import UserSessionService
from .storage import FileStorageService

__all__ = [
    # Auth
    "AuthService",
    "JwtGeneratorService",
    "JwtVerificationService",
    "UserSessionService",
    # Storage
    "InMemorySessionStorage",
    "RedisSessionStorage",
    "SessionStorage",
    "FileStorageService",
    # Database
    "DbManageService",
    "DbSessionService",
    # Marketplace
    "CartService",
    "CatalogService",
    "DashboardService",
    "FeedbackService",
    "FollowService",
    "ProfileService",
    # Functions
    "ChatService",
    "MarketPriceService",
]
