"""FastAPI dependency implementations."""

from __future__ import annotations

from collections.abc import Iterator

from fastapi import Depends, HTTPException, Request, Response, UploadFile
from loguru import logger
from sqlmodel import Session

from src.farmconnect.api.http.app_data import ApplicationDependencies
from src.farmconnect.core.models.auth import CurrentUser
from src.farmconnect.core.security import generate_secure_token
from src.farmconnect.core.services import (
    AuthService,
    CartService,
    CatalogService,
    ChatService,
    DashboardService,
    FeedbackService,
    FileStorageService,
    FollowService,
    JwtGeneratorService,
    JwtVerificationService,
    MarketPriceService,
    ProfileService,
    SessionStorage,
    UserSessionService,
)
from src.farmconnect.core.services.storage import ImageUpload
from src.farmconnect.entities.core.profile import Profile
from src.farmconnect.runtime.context import get_config

SESSION_COOKIE = "user_session_id"


def _app_deps(request: Request) -> ApplicationDependencies:
    return request.app.state.app_dependencies


def get_db_session(request: Request) -> Iterator[Session]:
    """Get a database session that is closed once the request finishes.

    Services commit their own writes; anything left uncommitted is discarded.
    """
    session = _app_deps(request).database_service.get_session()
    try:
        yield session
    finally:
        session.close()


def get_session_storage(request: Request) -> SessionStorage:
    return _app_deps(request).session_storage


def get_user_session_service(request: Request) -> UserSessionService:
    """Get the User Session service instance."""
    return _app_deps(request).user_session_service


def get_jwt_generation_service(request: Request) -> JwtGeneratorService:
    return _app_deps(request).jwt_generation_service


def get_jwt_verify_service(request: Request) -> JwtVerificationService:
    """Get the JWT verification service instance."""
    return _app_deps(request).jwt_verify_service


def get_file_storage(request: Request) -> FileStorageService:
    return _app_deps(request).file_storage


def get_chat_service(request: Request) -> ChatService:
    return _app_deps(request).chat_service


def get_market_price_service(request: Request) -> MarketPriceService:
    return _app_deps(request).market_price_service


def get_auth_service(
    db: Session = Depends(get_db_session),
    user_session_service: UserSessionService = Depends(get_user_session_service),
    jwt_generator: JwtGeneratorService = Depends(get_jwt_generation_service),
) -> AuthService:
    return AuthService(db, user_session_service, jwt_generator)


def get_catalog_service(
    db: Session = Depends(get_db_session),
    storage: FileStorageService = Depends(get_file_storage),
) -> CatalogService:
    return CatalogService(db, storage)


def get_profile_service(
    db: Session = Depends(get_db_session),
    storage: FileStorageService = Depends(get_file_storage),
) -> ProfileService:
    return ProfileService(db, storage)


def get_follow_service(db: Session = Depends(get_db_session)) -> FollowService:
    return FollowService(db)


def get_feedback_service(db: Session = Depends(get_db_session)) -> FeedbackService:
    return FeedbackService(db)


def get_dashboard_service(db: Session = Depends(get_db_session)) -> DashboardService:
    return DashboardService(db)


async def _authenticate_with_session(
    request: Request,
    auth_service: AuthService,
    user_session_service: UserSessionService,
) -> CurrentUser | None:
    session_id = request.cookies.get(SESSION_COOKIE)
    if not session_id:
        return None

    user_session = await user_session_service.validate_user_session(
        session_id, request.headers.get("user-agent")
    )
    if not user_session:
        return None

    request.state.session_id = session_id
    request.state.auth_method = "session"
    return auth_service.current_user(user_session.user_id)


async def _authenticate_with_bearer(
    request: Request,
    auth_service: AuthService,
    jwt_verify: JwtVerificationService,
) -> CurrentUser | None:
    auth_header = request.headers.get("Authorization")
    if not auth_header or not auth_header.startswith("Bearer "):
        return None

    claims = await jwt_verify.verify_jwt(auth_header.split(" ", 1)[1])
    request.state.claims = claims
    request.state.auth_method = "jwt"
    return auth_service.current_user(claims.subject)


async def get_optional_user(
    request: Request,
    auth_service: AuthService = Depends(get_auth_service),
    jwt_verify: JwtVerificationService = Depends(get_jwt_verify_service),
    user_session_service: UserSessionService = Depends(get_user_session_service),
) -> CurrentUser | None:
    """The signed-in user, or None for anonymous requests.

    Authentication priority:
    1. Session cookie - for the web client
    2. Bearer token - for API clients
    """
    user = await _authenticate_with_session(request, auth_service, user_session_service)
    if user is None:
        user = await _authenticate_with_bearer(request, auth_service, jwt_verify)
    if user is not None:
        request.state.user_id = user.id
    return user


async def get_authenticated_user(
    user: CurrentUser | None = Depends(get_optional_user),
) -> CurrentUser:
    if user is None:
        raise HTTPException(
            status_code=401,
            detail="Authentication required. Provide either a session cookie or Bearer token.",
        )
    return user


async def get_current_profile(
    user: CurrentUser = Depends(get_authenticated_user),
) -> Profile:
    """Profile of the signed-in user. Accounts without a valid profile are refused."""
    if user.profile is None:
        raise HTTPException(status_code=403, detail="Profile not found")
    return user.profile


def require_user_type(required_type: str):
    """Create a dependency that only admits profiles of ``required_type``."""

    async def dep(profile: Profile = Depends(get_current_profile)) -> Profile:
        if profile.user_type != required_type:
            raise HTTPException(
                status_code=403, detail=f"This action requires a {required_type} account"
            )
        return profile

    return dep


async def get_cart_service(
    request: Request,
    response: Response,
    user: CurrentUser | None = Depends(get_optional_user),
    storage: SessionStorage = Depends(get_session_storage),
) -> CartService:
    """Cart of the signed-in user, or of the anonymous ``cart_id`` cookie.

    A fresh anonymous id is issued when the client has none.
    """
    if user is not None:
        return CartService(storage, user.id)

    cart_config = get_config().cart
    client_id = request.cookies.get(cart_config.cookie_name)
    if not client_id:
        client_id = generate_secure_token(16)
        response.set_cookie(
            key=cart_config.cookie_name,
            value=client_id,
            max_age=cart_config.ttl_seconds,
            httponly=True,
            samesite="lax",
            secure=get_config().app.environment == "production",
        )
        logger.debug("Issued anonymous cart id")
    return CartService(storage, client_id)


async def read_image_upload(file: UploadFile | None) -> ImageUpload | None:
    """Read a multipart upload into memory. An empty file field counts as no upload."""
    if file is None or not file.filename:
        return None
    data = await file.read()
    return ImageUpload(filename=file.filename, content_type=file.content_type, data=data)
