"""Environment variables read from the process and an optional .env file.

The values here are primitive secrets and URLs that config.yaml references
through ``${VAR}`` placeholders. Loading them through pydantic-settings lets a
developer keep them in a local .env file instead of exporting them.
"""

from __future__ import annotations

import os
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class EnvironmentVariables(BaseSettings):
    """Simple primitive values loaded from environment variables and .env files."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        extra="ignore",
    )

    app_environment: Literal["development", "production", "test"] = Field(
        default="development", validation_alias="APP_ENVIRONMENT"
    )
    database_url: str | None = Field(default=None, validation_alias="DATABASE_URL")
    redis_url: str | None = Field(default=None, validation_alias="REDIS_URL")
    session_signing_secret: str | None = Field(
        default=None, validation_alias="SESSION_SIGNING_SECRET"
    )
    gemini_api_key: str | None = Field(default=None, validation_alias="GEMINI_API_KEY")
    rapid_api_key: str | None = Field(default=None, validation_alias="RAPID_API_KEY")

    def export(self) -> list[str]:
        """Copy values found only in .env into os.environ.

        Variables that are already set in the process environment win.

        Returns:
            Names of the variables that were exported
        """
        exported = []
        for field_name, field_info in type(self).model_fields.items():
            env_name = field_info.validation_alias or field_name.upper()
            value = getattr(self, field_name)
            if value is None or env_name in os.environ:
                continue
            os.environ[str(env_name)] = str(value)
            exported.append(str(env_name))
        return exported
