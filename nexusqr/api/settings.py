"""
nexusqr.api.settings

Purpose:
    Centralized configuration for the FastAPI service.
    Loaded from environment variables (and an optional .env file) with pydantic-settings,
    so a bad value fails at startup instead of mid-request.

Created:
    2026-02-15
"""

from __future__ import annotations

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from nexusqr.api.contracts.api_paths import ApiPaths
from nexusqr.api.contracts.cors_policy import CorsPolicy


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    service_name: str = Field(default="nexusqr-api")
    service_version: str = Field(default="1.0.0")

    # Application
    app_env: Literal["development", "production", "test"] = Field(default="development")
    app_host: str = Field(default="0.0.0.0")
    app_port: int = Field(default=3000)
    app_url: str = Field(default="http://localhost:3000")
    api_prefix: str = Field(default=ApiPaths().v1_prefix)
    cors_origin: str = Field(default="*")
    cors_origin_regex: str | None = Field(default=None)
    cookie_secret: str = Field(default="change-me-in-production", min_length=1)

    # Logging
    log_level: Literal["fatal", "error", "warn", "info", "debug", "trace"] = Field(default="info")
    log_json: bool = Field(default=False)

    # Database (PostgreSQL)
    db_host: str = Field(default="localhost")
    db_port: int = Field(default=5432)
    db_username: str | None = Field(default=None)
    db_password: str | None = Field(default=None)
    db_database: str | None = Field(default=None)
    db_ssl: bool = Field(default=False)

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"

    @property
    def cors_policy(self) -> CorsPolicy:
        return CorsPolicy.from_settings(self.cors_origin, self.cors_origin_regex)

    @property
    def database_url(self) -> str | None:
        if not (self.db_username and self.db_database):
            return None
        auth = self.db_username if not self.db_password else f"{self.db_username}:{self.db_password}"
        url = f"postgresql://{auth}@{self.db_host}:{self.db_port}/{self.db_database}"
        return f"{url}?sslmode=require" if self.db_ssl else url


def get_settings() -> Settings:
    return Settings()
