"""Account domain entity."""

from pydantic import Field, field_validator

from src.farmconnect.entities.core._base import Entity


class Account(Entity):
    """Sign-in credentials for a person using the marketplace.

    The account id is shared with the person's profile row, the same way
    the hosted auth user id keys the ``profiles`` table.
    """

    email: str = Field(description="Login email, stored lower-cased")
    password_hash: str = Field(description="Salted password hash", repr=False)

    @field_validator("email")
    @classmethod
    def _normalize_email(cls, value: str) -> str:
        return value.strip().lower()
