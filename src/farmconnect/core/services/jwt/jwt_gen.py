import time
from typing import Any

from authlib.common.security import generate_token
from authlib.jose import JoseError, jwt
from fastapi import HTTPException
from loguru import logger

from src.farmconnect.runtime.config.config_data import ConfigData
from src.farmconnect.runtime.context import get_config

_RESERVED_CLAIMS = {"iss", "sub", "aud", "exp", "iat", "nbf", "jti"}


class JwtGeneratorService:
    """Service for generating access tokens for API authentication."""

    def generate_jwt(
        self,
        subject: str,
        claims: dict[str, Any] | None = None,
        expires_in_seconds: int | None = None,
        algorithm: str = "HS256",
        secret: str | None = None,
    ) -> str:
        """Generate a signed JWT using authlib.

        Args:
            subject: Subject (sub) claim, the account id
            claims: Additional claims to include in the token
            expires_in_seconds: Token lifetime (defaults to ``jwt.access_token_ttl_seconds``)
            algorithm: Signing algorithm (default: HS256)
            secret: Optional signing secret. If None, the configured secret is used.

        Returns:
            Signed JWT token string

        Raises:
            HTTPException: If configuration is missing or invalid
        """
        config: ConfigData = get_config()

        secret = secret or config.app.session_signing_secret
        if not secret:
            raise HTTPException(status_code=500, detail="JWT signing secret not configured")

        if algorithm not in config.jwt.allowed_algorithms:
            logger.debug(
                f"Attempted to use disallowed algorithm: {algorithm}, "
                f"only {config.jwt.allowed_algorithms} are allowed"
            )
            raise HTTPException(status_code=500, detail=f"Algorithm {algorithm} not allowed")

        now = int(time.time())
        ttl = expires_in_seconds or config.jwt.access_token_ttl_seconds
        payload: dict[str, Any] = {
            "iss": config.jwt.gen_issuer,
            "sub": subject,
            "aud": config.jwt.audiences[0] if len(config.jwt.audiences) == 1 else config.jwt.audiences,
            "exp": now + ttl,
            "iat": now,
            "nbf": now,
            "jti": generate_token(16),
        }
        if claims:
            payload.update({k: v for k, v in claims.items() if k not in _RESERVED_CLAIMS})

        try:
            token = jwt.encode({"alg": algorithm, "typ": "JWT"}, payload, secret)
        except JoseError as e:
            raise HTTPException(status_code=500, detail=f"JWT encoding failed: {e}") from e
        return token.decode() if isinstance(token, bytes) else token

    def generate_access_token(
        self,
        user_id: str,
        user_type: str | None = None,
        email: str | None = None,
        **extra_claims: Any,
    ) -> str:
        """Generate an access token carrying the marketplace role.

        Example:
            token = generate_access_token("8f0c...", user_type="farmer", email="a@b.c")
        """
        claims: dict[str, Any] = dict(extra_claims)
        if user_type:
            claims["user_type"] = user_type
        if email:
            claims["email"] = email
        return self.generate_jwt(subject=user_id, claims=claims)
