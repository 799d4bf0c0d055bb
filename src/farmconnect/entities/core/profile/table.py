"""Profile database table model."""

from sqlalchemy import JSON, Column
from sqlmodel import Field

from src.farmconnect.entities.core._base import EntityTable


class ProfileTable(EntityTable, table=True):
    """Database persistence model for profiles."""

    __tablename__ = "profiles"

    user_type: str = Field(default="user", index=True)
    full_name: str | None = None
    email: str | None = None
    avatar_url: str | None = None
    bio: str | None = None
    location: str | None = None
    phone_number: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    specialties: list[str] = Field(default_factory=list, sa_column=Column(JSON))
