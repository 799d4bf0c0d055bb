"""Security utilities: password hashing, tokens and client fingerprints."""

import base64
import hashlib
import secrets

from fastapi import Request
from werkzeug.security import check_password_hash, generate_password_hash

MIN_PASSWORD_LENGTH = 6


def hash_password(password: str) -> str:
    """Return a salted hash suitable for storing on the account row."""
    return generate_password_hash(password)


def verify_password(password_hash: str, password: str) -> bool:
    return check_password_hash(password_hash, password)


def generate_secure_token(length: int = 32) -> str:
    """Generate a cryptographically secure random token.

    Args:
        length: Number of random bytes to generate (default 32)

    Returns:
        URL-safe base64 encoded token
    """
    return (
        base64.urlsafe_b64encode(secrets.token_bytes(length))
        .decode("utf-8")
        .rstrip("=")
    )


def hash_client_fingerprint(user_agent: str | None) -> str:
    """Create a stable fingerprint binding a session to a client.

    Args:
        user_agent: Client User-Agent header

    Returns:
        SHA256 hash of client characteristics
    """
    fingerprint_data = user_agent.strip() if user_agent else "unknown-client"
    return hashlib.sha256(fingerprint_data.encode("utf-8")).hexdigest()


def extract_client_fingerprint(request: Request) -> str:
    """Extract and hash the client fingerprint from a request."""
    return hash_client_fingerprint(request.headers.get("user-agent"))


def client_ip(request: Request) -> str | None:
    """Best-effort client IP, honouring common proxy headers."""
    for header in ("x-forwarded-for", "x-real-ip", "cf-connecting-ip"):
        value = request.headers.get(header)
        if value:
            return value.split(",")[0].strip()
    if request.client:
        return request.client.host
    return None
