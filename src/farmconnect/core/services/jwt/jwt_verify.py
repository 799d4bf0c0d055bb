"""Access token verification."""

from authlib.jose import JoseError, jwt
from fastapi import HTTPException
from loguru import logger

from src.farmconnect.core.models.session import TokenClaims
from src.farmconnect.runtime.context import get_config


def _as_list(v):
    return [v] if isinstance(v, str) else list(v or ())


class JwtVerificationService:
    async def verify_jwt(self, token: str, *, key: str | None = None) -> TokenClaims:
        """Verify a token issued by this API and return its claims.

        Raises:
            HTTPException: 401 when the token is malformed, expired, signed with a
                different key, or issued for another audience
        """
        cfg = get_config()
        verification_key = key or cfg.app.session_signing_secret
        if not verification_key:
            raise HTTPException(status_code=500, detail="JWT signing secret not configured")

        claims_options = {
            "iss": {"essential": True, "values": [cfg.jwt.gen_issuer]},
            "aud": {"essential": True, "values": _as_list(cfg.jwt.audiences)},
            "sub": {"essential": True},
        }
        try:
            claims = jwt.decode(token, verification_key, claims_options=claims_options)
            header_alg = claims.header.get("alg")
            if header_alg not in cfg.jwt.allowed_algorithms:
                raise HTTPException(status_code=401, detail="Disallowed JWT algorithm")
            claims.validate(leeway=cfg.jwt.clock_skew)
        except (JoseError, ValueError) as exc:
            logger.debug("Rejected access token: {}", exc)
            raise HTTPException(status_code=401, detail=f"JWT error: {exc}") from exc

        return TokenClaims.from_jwt_payload(dict(claims), raw_token=token)
