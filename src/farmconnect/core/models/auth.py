"""Authentication request and response models."""

from pydantic import BaseModel, Field

from src.farmconnect.entities.core.profile import Profile, UserType


class SignUpRequest(BaseModel):
    email: str
    password: str
    full_name: str = ""
    user_type: UserType = "user"


class SignInRequest(BaseModel):
    email: str
    password: str


class ChangePasswordRequest(BaseModel):
    current_password: str
    new_password: str


class CurrentUser(BaseModel):
    """The signed-in account and its profile."""

    id: str
    email: str
    profile: Profile | None = None

    @property
    def user_type(self) -> str | None:
        return self.profile.user_type if self.profile else None

    @property
    def is_farmer(self) -> bool:
        return self.user_type == "farmer"


class SignInResult(BaseModel):
    user: CurrentUser
    access_token: str
    token_type: str = "bearer"
    expires_in: int
    session_id: str = Field(exclude=True)
