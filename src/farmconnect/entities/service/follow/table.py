"""Follow database table model."""

from sqlalchemy import UniqueConstraint
from sqlmodel import Field

from src.farmconnect.entities.core._base import EntityTable


class FollowTable(EntityTable, table=True):
    """Database persistence model for follows.

    A user can follow a given farmer at most once.
    """

    __tablename__ = "follows"
    __table_args__ = (UniqueConstraint("user_id", "farmer_id"),)

    user_id: str = Field(foreign_key="profiles.id", index=True, ondelete="CASCADE")
    farmer_id: str = Field(foreign_key="profiles.id", index=True, ondelete="CASCADE")
