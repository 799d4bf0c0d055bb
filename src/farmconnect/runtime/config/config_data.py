"""Pydantic models for parsing the config.yaml configuration file.

This module contains Pydantic models that correspond to the structure of config.yaml.
These models handle validation and type conversion of the YAML configuration data.
"""

from __future__ import annotations

import os
from typing import Literal

from loguru import logger
from pydantic import BaseModel, Field, computed_field


class CORSConfig(BaseModel):
    """CORS configuration for the application."""

    origins: list[str] = Field(
        default=["http://localhost:5173", "http://localhost:8080"]
    )
    allow_credentials: bool = True
    allow_methods: list[str] = Field(
        default=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]
    )
    allow_headers: list[str] = Field(
        default=["authorization", "x-client-info", "apikey", "content-type"]
    )


class RateLimiterConfig(BaseModel):
    """Rate limiter configuration model."""

    requests: int = Field(
        default=100, description="Number of requests allowed per window"
    )
    window_ms: int = Field(default=60000, description="Time window in milliseconds")
    enabled: bool = Field(default=True, description="Enable rate limiting")
    per_endpoint: bool = Field(
        default=True, description="Apply rate limiting per endpoint"
    )
    per_method: bool = Field(
        default=True, description="Apply rate limiting per HTTP method"
    )


class RedisConfig(BaseModel):
    """Redis configuration model."""

    enabled: bool = Field(default=False, description="Enable Redis service")
    url: str | None = Field(default=None, description="Redis connection URL")
    password: str | None = Field(
        default=None, description="Password for Redis authentication"
    )
    decode_responses: bool = Field(
        default=True, description="Decode Redis responses to strings"
    )

    @computed_field
    @property
    def connection_string(self) -> str:
        """Construct the Redis connection string with password if provided."""
        if not self.url:
            return ""
        if self.password:
            if "@" in self.url:
                return self.url
            parts = self.url.split("://", 1)
            if len(parts) == 2:
                scheme, rest = parts
                return f"{scheme}://:{self.password}@{rest}"
        return self.url


class JWTConfig(BaseModel):
    """Access token configuration."""

    allowed_algorithms: list[str] = Field(
        default_factory=lambda: ["HS256"],
        description="JWT algorithms allowed for token validation",
    )
    gen_issuer: str = Field(
        default="farmconnect-api", description="Issuer name to use when generating tokens"
    )
    audiences: list[str] = Field(
        default_factory=lambda: ["farmconnect"],
        description="JWT audiences that this API accepts",
    )
    clock_skew: int = Field(default=60, description="Clock skew tolerance in seconds")
    access_token_ttl_seconds: int = Field(
        default=3600, description="Lifetime of issued access tokens"
    )


class LoggingConfig(BaseModel):
    """Logging configuration model."""

    level: str = Field(default="INFO", description="Logging level")
    format: Literal["json", "plain"] = Field(default="plain", description="Log format")
    file: str | None = Field(default=None, description="Log file path")
    max_size_mb: int = Field(default=10, description="Maximum log file size in MB")
    backup_count: int = Field(
        default=5, description="Number of backup log files to keep"
    )


class DatabaseConfig(BaseModel):
    """Database configuration model."""

    url: str = Field(
        default="sqlite:///./farmconnect.db",
        description="Database connection URL",
    )
    user: str | None = Field(default=None, description="Database username override")
    app_db: str | None = Field(default=None, description="Database name override")
    pool_size: int = Field(default=20, description="Connection pool size")
    environment_mode: str = Field(
        default="development", description="Environment mode: development or production"
    )
    max_overflow: int = Field(default=10, description="Maximum pool overflow")
    pool_timeout: int = Field(default=30, description="Pool timeout in seconds")
    pool_recycle: int = Field(default=1800, description="Pool recycle time in seconds")
    password_env_var: str | None = Field(
        default=None,
        description="Environment variable name containing database password",
    )
    password_file: str | None = Field(
        default=None,
        description="Path to file containing database password",
    )

    @property
    def is_sqlite(self) -> bool:
        return self.url.startswith("sqlite")

    @computed_field
    @property
    def password(self) -> str | None:
        """
        Get the database password from the appropriate source.
        1. In development and test mode, parse it from the URL
        2. In production mode, read it from the mounted secrets file or the
           environment variable named by `password_env_var`
        """
        if self.is_sqlite:
            return None

        from sqlalchemy.engine import make_url

        if self.environment_mode in ("development", "test"):
            return make_url(self.url).password

        if self.environment_mode != "production":
            raise ValueError(
                "Invalid environment_mode; must be 'development', 'production', or 'test'"
            )

        if self.password_file:
            try:
                with open(self.password_file) as f:
                    return f.read().strip()
            except OSError as e:
                raise ValueError("Failed to read database password from file.") from e
        if self.password_env_var:
            password = os.getenv(self.password_env_var)
            if password:
                return password
            raise ValueError(f"Environment variable {self.password_env_var} not set")
        return make_url(self.url).password

    @computed_field
    @property
    def connection_string(self) -> str:
        """Construct the database connection string with password if provided."""
        if self.is_sqlite:
            return self.url

        from sqlalchemy.engine import make_url

        base_url = make_url(self.url)
        if base_url.password and self.environment_mode == "production":
            logger.warning(
                "Database URL contains a password in production mode; "
                "consider using a secrets file or environment variable."
            )

        if self.user and self.user != base_url.username:
            base_url = base_url.set(username=self.user)
        if self.app_db and self.app_db != base_url.database:
            base_url = base_url.set(database=self.app_db)

        resolved_password = self.password
        if resolved_password:
            base_url = base_url.set(password=resolved_password)
        # render_as_string keeps the password instead of SQLAlchemy's "***" mask
        return base_url.render_as_string(hide_password=False)


class AppConfig(BaseModel):
    """Application configuration model."""

    environment: Literal["development", "production", "test"] = Field(
        default="development", description="Application environment"
    )
    host: str = Field(default="localhost", description="Application host")
    port: int = Field(default=8000, description="Application port")
    session_max_age: int = Field(
        default=3600 * 24 * 7, description="Session maximum age in seconds"
    )
    session_signing_secret: str | None = Field(
        default="dev-session-secret-change-me",
        description="Secret for signing access tokens",
    )
    cors: CORSConfig = Field(
        default_factory=CORSConfig, description="CORS configuration"
    )

    @property
    def base_url(self) -> str:
        """Construct the base URL from host and port."""
        scheme = "https" if self.environment == "production" else "http"
        return f"{scheme}://{self.host}:{self.port}"


class LLMConfig(BaseModel):
    """Chat assistant upstream configuration (Gemini generateContent API)."""

    api_key: str | None = Field(default=None, description="Gemini API key")
    base_url: str = Field(
        default="https://generativelanguage.googleapis.com/v1",
        description="Gemini REST base URL",
    )
    model: str = Field(default="gemini-1.5-flash", description="Model name")
    temperature: float = Field(default=0.7)
    top_k: int = Field(default=40)
    top_p: float = Field(default=0.95)
    max_output_tokens: int = Field(default=1000)
    timeout_seconds: float = Field(default=30.0)
    rate_limit_requests: int = Field(
        default=20, description="Chat requests allowed per rate limiter window"
    )


class MarketPricesConfig(BaseModel):
    """Market price snapshot configuration."""

    provider: Literal["synthetic", "rapidapi"] = Field(
        default="synthetic", description="Where fresh snapshots come from"
    )
    rapidapi_key: str | None = Field(default=None)
    rapidapi_host: str = Field(default="agriculture-api.p.rapidapi.com")
    country: str = Field(default="India")
    snapshot_limit: int = Field(
        default=50, description="Rows returned from the persisted table"
    )
    cache_id: str = Field(default="latest", description="Cache row identifier")
    memo_ttl_seconds: int = Field(
        default=0, description="In-process memo of the last live snapshot (0 = off)"
    )
    timeout_seconds: float = Field(default=10.0)


class StorageConfig(BaseModel):
    """File storage configuration for uploaded images."""

    root: str = Field(default="storage", description="Directory holding the buckets")
    public_base_url: str = Field(
        default="http://localhost:8000/storage",
        description="Public URL prefix for stored objects",
    )
    max_image_bytes: int = Field(default=5 * 1024 * 1024)
    product_bucket: str = Field(default="product-images")
    profile_bucket: str = Field(default="profile-images")


class CartConfig(BaseModel):
    """Cart persistence configuration."""

    ttl_seconds: int = Field(
        default=60 * 60 * 24 * 30, description="How long an idle cart is kept"
    )
    cookie_name: str = Field(default="cart_id")


class ConfigData(BaseModel):
    """Root configuration model that matches the config.yaml structure."""

    rate_limiter: RateLimiterConfig = Field(
        default_factory=RateLimiterConfig, description="Rate limiter configuration"
    )
    redis: RedisConfig = Field(
        default_factory=RedisConfig, description="Redis configuration"
    )
    jwt: JWTConfig = Field(
        default_factory=JWTConfig, description="Access token configuration"
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )
    database: DatabaseConfig = Field(
        default_factory=DatabaseConfig, description="Database configuration"
    )
    app: AppConfig = Field(
        default_factory=AppConfig, description="Application configuration"
    )
    llm: LLMConfig = Field(default_factory=LLMConfig, description="Chat assistant")
    market_prices: MarketPricesConfig = Field(
        default_factory=MarketPricesConfig, description="Market price snapshots"
    )
    storage: StorageConfig = Field(
        default_factory=StorageConfig, description="Image storage"
    )
    cart: CartConfig = Field(default_factory=CartConfig, description="Cart storage")
