"""Account database table model."""

from sqlmodel import Field

from src.farmconnect.entities.core._base import EntityTable


class AccountTable(EntityTable, table=True):
    """Database persistence model for accounts."""

    __tablename__ = "accounts"

    email: str = Field(index=True, unique=True)
    password_hash: str
