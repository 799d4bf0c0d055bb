"""Email/password authentication endpoints."""

from typing import Any

from fastapi import APIRouter, Depends, Request, Response, status

from src.farmconnect.api.http.deps import (
    SESSION_COOKIE,
    get_auth_service,
    get_authenticated_user,
)
from src.farmconnect.api.http.middleware.limiter import rate_limit
from src.farmconnect.core.models.auth import (
    ChangePasswordRequest,
    CurrentUser,
    SignInRequest,
    SignInResult,
    SignUpRequest,
)
from src.farmconnect.core.services import AuthService
from src.farmconnect.runtime.context import get_config

router = APIRouter(prefix="/auth", tags=["auth"])


def _get_session_cookie_settings() -> dict[str, Any]:
    """Cookie flags for the first-party session cookie.

    ``secure`` is only required in production so the cookie also works on
    plain-http localhost.
    """
    config = get_config()
    return {
        "httponly": True,
        "secure": config.app.environment == "production",
        "samesite": "lax",
        "path": "/",
    }


@router.post(
    "/sign-up",
    response_model=CurrentUser,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(rate_limit())],
)
def sign_up(
    body: SignUpRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> CurrentUser:
    """Register a shopper or farmer account."""
    return auth_service.sign_up(body)


@router.post("/sign-in", response_model=SignInResult, dependencies=[Depends(rate_limit())])
async def sign_in(
    body: SignInRequest,
    request: Request,
    response: Response,
    auth_service: AuthService = Depends(get_auth_service),
) -> SignInResult:
    """Open a session cookie and return an access token for API clients."""
    result = await auth_service.sign_in(
        body.email, body.password, request.headers.get("user-agent")
    )
    response.set_cookie(
        key=SESSION_COOKIE,
        value=result.session_id,
        max_age=get_config().app.session_max_age,
        **_get_session_cookie_settings(),
    )
    return result


@router.post("/sign-out")
async def sign_out(
    request: Request,
    response: Response,
    auth_service: AuthService = Depends(get_auth_service),
) -> dict[str, str]:
    """Delete the server-side session. Safe to call when already signed out."""
    await auth_service.sign_out(request.cookies.get(SESSION_COOKIE))
    response.delete_cookie(SESSION_COOKIE, path="/")
    return {"message": "Signed out"}


@router.get("/me", response_model=CurrentUser)
async def me(user: CurrentUser = Depends(get_authenticated_user)) -> CurrentUser:
    return user


@router.post("/change-password")
async def change_password(
    body: ChangePasswordRequest,
    request: Request,
    user: CurrentUser = Depends(get_authenticated_user),
    auth_service: AuthService = Depends(get_auth_service),
) -> dict[str, str]:
    await auth_service.change_password(
        user.id,
        body.current_password,
        body.new_password,
        keep_session=getattr(request.state, "session_id", None),
    )
    return {"message": "Password updated successfully"}
