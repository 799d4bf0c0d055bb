from fastapi import HTTPException
from loguru import logger
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from src.farmconnect.core.models.auth import (
    CurrentUser,
    SignInResult,
    SignUpRequest,
)
from src.farmconnect.core.security import (
    MIN_PASSWORD_LENGTH,
    hash_password,
    verify_password,
)
from src.farmconnect.core.services.jwt.jwt_gen import JwtGeneratorService
from src.farmconnect.core.services.session.user_session import UserSessionService
from src.farmconnect.entities.core.account import Account, AccountRepository
from src.farmconnect.entities.core.profile import Profile, ProfileRepository
from src.farmconnect.runtime.context import get_config

VALID_USER_TYPES = ("user", "farmer")


def _normalize_email(email: str) -> str:
    normalized = email.strip().lower()
    local, _, domain = normalized.partition("@")
    if not local or "." not in domain:
        raise HTTPException(status_code=400, detail="Invalid email address")
    return normalized


def _check_password(password: str) -> None:
    if len(password) < MIN_PASSWORD_LENGTH:
        raise HTTPException(
            status_code=400,
            detail=f"Password should be at least {MIN_PASSWORD_LENGTH} characters",
        )


class AuthService:
    """Email/password accounts, sign-in sessions and access tokens."""

    def __init__(
        self,
        db_session: Session,
        user_session_service: UserSessionService,
        jwt_generator: JwtGeneratorService,
    ):
        self._db = db_session
        self._accounts = AccountRepository(db_session)
        self._profiles = ProfileRepository(db_session)
        self._sessions = user_session_service
        self._jwt = jwt_generator

    def sign_up(self, request: SignUpRequest) -> CurrentUser:
        """Create an account and its profile in one transaction.

        Raises:
            HTTPException: 400 on invalid input, 409 when the email is taken
        """
        email = _normalize_email(request.email)
        _check_password(request.password)
        if request.user_type not in VALID_USER_TYPES:
            raise HTTPException(status_code=400, detail="Invalid user type")
        if self._accounts.get_by_email(email) is not None:
            raise HTTPException(status_code=409, detail="User already registered")

        account = Account(email=email, password_hash=hash_password(request.password))
        try:
            account = self._accounts.create(account)
            profile = self._profiles.create(
                Profile(
                    id=account.id,
                    user_type=request.user_type,
                    full_name=request.full_name.strip() or None,
                    email=email,
                )
            )
            self._db.commit()
        except IntegrityError as e:
            self._db.rollback()
            raise HTTPException(status_code=409, detail="User already registered") from e

        logger.info("Registered {} account {}", profile.user_type, account.id)
        return CurrentUser(id=account.id, email=account.email, profile=profile)

    async def sign_in(self, email: str, password: str, user_agent: str | None) -> SignInResult:
        """Verify credentials and open a session.

        Raises:
            HTTPException: 401 "Invalid login credentials" for any mismatch
        """
        account = self._accounts.get_by_email(email)
        if account is None or not verify_password(account.password_hash, password):
            logger.info("Failed sign-in attempt")
            raise HTTPException(status_code=401, detail="Invalid login credentials")

        user = self.current_user(account.id)
        session_id = await self._sessions.create_user_session(
            account.id, user_agent, user_type=user.user_type
        )
        token = self._jwt.generate_access_token(
            account.id, user_type=user.user_type, email=account.email
        )
        logger.info("Account {} signed in", account.id)
        return SignInResult(
            user=user,
            access_token=token,
            expires_in=get_config().jwt.access_token_ttl_seconds,
            session_id=session_id,
        )

    async def sign_out(self, session_id: str | None) -> None:
        if session_id:
            await self._sessions.delete_user_session(session_id)

    def current_user(self, account_id: str) -> CurrentUser:
        """Account plus profile. A profile with an unknown role is reported as None."""
        account = self._accounts.get(account_id)
        if account is None:
            raise HTTPException(status_code=401, detail="Account no longer exists")

        profile = self._profiles.get(account_id)
        if profile is not None and profile.user_type not in VALID_USER_TYPES:
            logger.error("Invalid user_type in profile {}: {}", profile.id, profile.user_type)
            profile = None
        return CurrentUser(id=account.id, email=account.email, profile=profile)

    async def change_password(
        self,
        account_id: str,
        current_password: str,
        new_password: str,
        keep_session: str | None = None,
    ) -> None:
        """Replace the password after re-checking the current one.

        Other sessions of the account are signed out.
        """
        account = self._accounts.get(account_id)
        if account is None:
            raise HTTPException(status_code=401, detail="Account no longer exists")
        if not verify_password(account.password_hash, current_password):
            raise HTTPException(status_code=400, detail="Current password is incorrect")
        _check_password(new_password)

        self._accounts.update_password(account_id, hash_password(new_password))
        self._db.commit()
        removed = await self._sessions.delete_sessions_for_user(account_id, keep=keep_session)
        logger.info("Password changed for {}; {} other sessions closed", account_id, removed)
