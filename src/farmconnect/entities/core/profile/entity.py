"""Profile domain entity."""

from typing import Any, Literal

from pydantic import BaseModel, Field

from src.farmconnect.entities.core._base import Entity

UserType = Literal["user", "farmer"]


class Profile(Entity):
    """Public profile of a marketplace member.

    ``user_type`` separates sellers (``farmer``) from buyers (``user``). The
    profile id is the same as the owning account id.
    """

    user_type: str = Field(default="user", description="Either 'user' or 'farmer'")
    full_name: str | None = Field(default=None)
    email: str | None = Field(default=None)
    avatar_url: str | None = Field(default=None)
    bio: str | None = Field(default=None)
    location: str | None = Field(default=None)
    phone_number: str | None = Field(default=None)
    latitude: float | None = Field(default=None)
    longitude: float | None = Field(default=None)
    specialties: list[str] = Field(default_factory=list)

    @property
    def is_farmer(self) -> bool:
        return self.user_type == "farmer"

    def matches(self, term: str) -> bool:
        """Case-insensitive match against name, location or any specialty."""
        needle = term.strip().lower()
        if not needle:
            return True
        if self.full_name and needle in self.full_name.lower():
            return True
        if self.location and needle in self.location.lower():
            return True
        return any(needle in specialty.lower() for specialty in self.specialties)

    def __eq__(self, other: Any) -> bool:
        """Compare profiles by business attributes, ignoring timestamps."""
        if not isinstance(other, Profile):
            return False

        return (
            self.id == other.id
            and self.user_type == other.user_type
            and self.full_name == other.full_name
            and self.email == other.email
        )

    def __hash__(self) -> int:
        return hash((self.id, self.user_type, self.full_name, self.email))


class ProfileUpdate(BaseModel):
    """Fields a member may change on their own profile."""

    full_name: str | None = None
    bio: str | None = None
    location: str | None = None
    phone_number: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    specialties: list[str] | None = None
    avatar_url: str | None = None
