"""Session and token models."""

import time
from typing import Any

from pydantic import BaseModel, Field


class UserSession(BaseModel):
    """Server-side session created at sign-in."""

    id: str = Field(description="Session identifier")
    user_id: str = Field(description="Account / profile id")
    user_type: str | None = Field(default=None, description="Role at sign-in time")
    client_fingerprint: str = Field(description="Hashed client context fingerprint")
    created_at: int = Field(description="Creation timestamp")
    last_accessed_at: int = Field(description="Last access timestamp")
    expires_at: int = Field(description="Session expiration timestamp")

    @classmethod
    def create(
        cls,
        session_id: str,
        user_id: str,
        client_fingerprint: str,
        user_type: str | None = None,
        session_max_age: int = 3600,
    ) -> "UserSession":
        """Create a new user session with timestamps."""
        now = int(time.time())
        return cls(
            id=session_id,
            user_id=user_id,
            user_type=user_type,
            client_fingerprint=client_fingerprint,
            created_at=now,
            last_accessed_at=now,
            expires_at=now + session_max_age,
        )

    def is_expired(self) -> bool:
        return time.time() > self.expires_at

    def update_access(self) -> None:
        self.last_accessed_at = int(time.time())


class TokenClaims(BaseModel):
    """Structured representation of access token claims."""

    raw_token: str = Field(default="", description="Original JWT token")
    issuer: str = Field(description="Issuer")
    subject: str = Field(description="Subject (account id)")
    audience: str | list[str] = Field(description="Audience")
    expires_at: int = Field(description="Expiration time")
    issued_at: int = Field(description="Issued at")
    not_before: int | None = Field(default=None)
    jti: str | None = Field(default=None, description="Unique token identifier")
    email: str | None = Field(default=None)
    user_type: str | None = Field(default=None, description="Marketplace role")
    all_claims: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_jwt_payload(cls, payload: dict[str, Any], raw_token: str = "") -> "TokenClaims":
        """Create TokenClaims from a decoded JWT payload."""
        claim_mapping = {
            "iss": "issuer",
            "sub": "subject",
            "aud": "audience",
            "exp": "expires_at",
            "iat": "issued_at",
            "nbf": "not_before",
        }
        extracted: dict[str, Any] = {"all_claims": dict(payload), "raw_token": raw_token}
        for key, value in payload.items():
            mapped_field = claim_mapping.get(key, key)
            if mapped_field in cls.model_fields and mapped_field not in extracted:
                extracted[mapped_field] = value
        return cls(**extracted)

    def is_expired(self, clock_skew: int = 60) -> bool:
        return time.time() > self.expires_at + clock_skew
