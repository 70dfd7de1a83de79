"""Configuration management for the FriendForce client."""
from __future__ import annotations

import os
from functools import lru_cache
from typing import Any

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

load_dotenv()


class Settings(BaseModel):
    """Client configuration loaded from environment variables."""

    app_env: str = "dev"
    version: str = "0.1.0"
    api_base_url: str = "http://localhost:8000/api/friendforce"
    session_cookie_name: str = "sessionid"
    session_id: str = ""
    csrf_cookie_name: str = "csrftoken"
    csrf_token: str = ""
    request_timeout: float | None = None
    cache_retention_seconds: float = Field(default=300.0, ge=0)

    @field_validator("api_base_url")
    @classmethod
    def strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @field_validator("request_timeout", mode="before")
    @classmethod
    def parse_timeout(cls, value: Any) -> float | None:
        if value is None:
            return None
        if isinstance(value, str):
            value = value.strip()
            if not value or value.lower() == "none":
                return None
        timeout = float(value)
        return timeout if timeout > 0 else None

    @property
    def initial_cookies(self) -> dict[str, str]:
        cookies: dict[str, str] = {}
        if self.session_id:
            cookies[self.session_cookie_name] = self.session_id
        if self.csrf_token:
            cookies[self.csrf_cookie_name] = self.csrf_token
        return cookies


def _build_settings() -> Settings:
    raw_values: dict[str, Any] = {
        "app_env": os.getenv("APP_ENV"),
        "version": os.getenv("APP_VERSION"),
        "api_base_url": os.getenv("FRIENDFORCE_API_BASE"),
        "session_cookie_name": os.getenv("FRIENDFORCE_SESSION_COOKIE"),
        "session_id": os.getenv("FRIENDFORCE_SESSION_ID"),
        "csrf_cookie_name": os.getenv("FRIENDFORCE_CSRF_COOKIE"),
        "csrf_token": os.getenv("FRIENDFORCE_CSRF_TOKEN"),
        "request_timeout": os.getenv("FRIENDFORCE_REQUEST_TIMEOUT"),
        "cache_retention_seconds": os.getenv("FRIENDFORCE_CACHE_RETENTION"),
    }
    filtered_values = {key: value for key, value in raw_values.items() if value is not None}
    return Settings(**filtered_values)


@lru_cache()
def get_settings() -> Settings:
    """Return a cached settings instance."""
    return _build_settings()
