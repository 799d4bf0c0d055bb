"""Tests for account registration, sign-in and password changes."""

import pytest
from fastapi import HTTPException

from src.farmconnect.core.models.auth import SignUpRequest
from src.farmconnect.core.services import AuthService
from src.farmconnect.entities.core.profile import ProfileRepository

BROWSER = "Mozilla/5.0"


@pytest.fixture
def auth_service(session, user_session_service, jwt_generator) -> AuthService:
    return AuthService(session, user_session_service, jwt_generator)


class TestSignUp:
    def test_creates_account_and_profile(self, auth_service: AuthService, session):
        user = auth_service.sign_up(
            SignUpRequest(
                email="  Priya.Sharma@Example.com ",
                password="secret123",
                full_name="Priya Sharma",
                user_type="farmer",
            )
        )

        assert user.email == "priya.sharma@example.com"
        assert user.is_farmer
        profile = ProfileRepository(session).get(user.id)
        assert profile.full_name == "Priya Sharma"
        assert profile.email == "priya.sharma@example.com"

    def test_defaults_to_shopper(self, auth_service: AuthService):
        user = auth_service.sign_up(
            SignUpRequest(email="asha@example.com", password="secret123")
        )
        assert user.user_type == "user"
        assert user.profile.full_name is None

    def test_duplicate_email_conflicts(self, auth_service: AuthService):
        request = SignUpRequest(email="asha@example.com", password="secret123")
        auth_service.sign_up(request)

        with pytest.raises(HTTPException) as exc_info:
            auth_service.sign_up(request.model_copy(update={"email": "ASHA@example.com"}))
        assert exc_info.value.status_code == 409

    @pytest.mark.parametrize(
        "email, password",
        [("not-an-email", "secret123"), ("asha@localhost", "secret123"), ("asha@example.com", "123")],
    )
    def test_invalid_input(self, auth_service: AuthService, email, password):
        with pytest.raises(HTTPException) as exc_info:
            auth_service.sign_up(SignUpRequest(email=email, password=password))
        assert exc_info.value.status_code == 400


class TestSignIn:
    @pytest.mark.asyncio
    async def test_returns_session_and_token(
        self, auth_service: AuthService, farmer, user_session_service, jwt_verifier
    ):
        result = await auth_service.sign_in("john.smith@example.com", "secret123", BROWSER)

        assert result.user.id == farmer.id
        assert result.token_type == "bearer"
        user_session = await user_session_service.validate_user_session(
            result.session_id, BROWSER
        )
        assert user_session.user_type == "farmer"
        claims = await jwt_verifier.verify_jwt(result.access_token)
        assert claims.subject == farmer.id
        assert claims.user_type == "farmer"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "email, password",
        [("john.smith@example.com", "wrong-password"), ("nobody@example.com", "secret123")],
    )
    async def test_bad_credentials(self, auth_service: AuthService, farmer, email, password):
        with pytest.raises(HTTPException) as exc_info:
            await auth_service.sign_in(email, password, BROWSER)
        assert exc_info.value.status_code == 401
        assert exc_info.value.detail == "Invalid login credentials"

    @pytest.mark.asyncio
    async def test_sign_out_drops_session(
        self, auth_service: AuthService, shopper, user_session_service
    ):
        result = await auth_service.sign_in("asha.rao@example.com", "secret123", BROWSER)
        await auth_service.sign_out(result.session_id)
        assert await user_session_service.get_user_session(result.session_id) is None
        # Signing out without a session is harmless
        await auth_service.sign_out(None)


class TestCurrentUser:
    def test_unknown_role_hides_profile(self, auth_service: AuthService, make_profile):
        profile = make_profile("odd@example.com", user_type="admin")
        user = auth_service.current_user(profile.id)
        assert user.profile is None
        assert user.user_type is None

    def test_missing_account(self, auth_service: AuthService):
        with pytest.raises(HTTPException) as exc_info:
            auth_service.current_user("missing")
        assert exc_info.value.status_code == 401


class TestChangePassword:
    @pytest.mark.asyncio
    async def test_changes_password_and_closes_other_sessions(
        self, auth_service: AuthService, shopper, user_session_service
    ):
        current = await auth_service.sign_in("asha.rao@example.com", "secret123", BROWSER)
        other = await auth_service.sign_in("asha.rao@example.com", "secret123", BROWSER)

        await auth_service.change_password(
            shopper.id, "secret123", "harvest2024", keep_session=current.session_id
        )

        assert await user_session_service.get_user_session(current.session_id)
        assert await user_session_service.get_user_session(other.session_id) is None
        assert await auth_service.sign_in("asha.rao@example.com", "harvest2024", BROWSER)

    @pytest.mark.asyncio
    async def test_wrong_current_password(self, auth_service: AuthService, shopper):
        with pytest.raises(HTTPException) as exc_info:
            await auth_service.change_password(shopper.id, "nope", "harvest2024")
        assert exc_info.value.status_code == 400
        assert exc_info.value.detail == "Current password is incorrect"

    @pytest.mark.asyncio
    async def test_new_password_too_short(self, auth_service: AuthService, shopper):
        with pytest.raises(HTTPException) as exc_info:
            await auth_service.change_password(shopper.id, "secret123", "abc")
        assert exc_info.value.status_code == 400
