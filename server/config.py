"""Configuration management for the SMS dispatch service."""

from __future__ import annotations

import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


def _load_env_file() -> None:
    """Load .env from root directory if present."""
    env_path = Path(__file__).parent.parent / ".env"
    if not env_path.is_file():
        return
    try:
        lines = env_path.read_text(encoding="utf-8").splitlines()
    except OSError as exc:
        logger.warning("Could not read %s: %s", env_path, exc)
        return
    for line in lines:
        stripped = line.strip()
        if stripped and not stripped.startswith("#") and "=" in stripped:
            key, value = stripped.split("=", 1)
            key, value = key.strip(), value.strip().strip("'\"")
            if key and value and key not in os.environ:
                os.environ[key] = value


_load_env_file()


DEFAULT_APP_NAME = "SMS Dispatch"
DEFAULT_APP_VERSION = "0.1.0"
DEFAULT_TWILIO_API_BASE = "https://api.twilio.com"


def _env_int(name: str, fallback: int) -> int:
    try:
        return int(os.getenv(name, str(fallback)))
    except (TypeError, ValueError):
        return fallback


def _env_float(name: str, fallback: Optional[float]) -> Optional[float]:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return fallback
    try:
        return float(raw)
    except ValueError:
        return fallback


def _env(name: str, fallback: Optional[str] = None) -> Optional[str]:
    # Empty strings count as unset so that `NAME=` in .env does not satisfy a requirement.
    value = os.getenv(name)
    return value if value else fallback


class Settings(BaseModel):
    """Application settings read from the environment at construction time."""

    # App metadata
    app_name: str = Field(default=DEFAULT_APP_NAME)
    app_version: str = Field(default=DEFAULT_APP_VERSION)

    # Server runtime
    server_host: str = Field(default_factory=lambda: _env("SMS_HOST", "0.0.0.0"))
    server_port: int = Field(default_factory=lambda: _env_int("SMS_PORT", 8000))

    # Environment
    env: str = Field(default_factory=lambda: _env("ENV", "dev"))
    log_level: str = Field(default_factory=lambda: _env("LOG_LEVEL", "INFO"))

    # HTTP behaviour
    cors_allow_origins_raw: str = Field(default_factory=lambda: os.getenv("CORS_ORIGINS", "*"))
    enable_docs: bool = Field(default_factory=lambda: os.getenv("SMS_ENABLE_DOCS", "1") != "0")
    docs_url: Optional[str] = Field(default_factory=lambda: _env("DOCS_URL", "/docs"))

    # Provider selection (name registered in AdapterRegistry)
    sms_provider: str = Field(default_factory=lambda: _env("SMS_PROVIDER", "twilio"))

    # Twilio configuration
    twilio_account_sid: Optional[str] = Field(default_factory=lambda: _env("TWILIO_ACCOUNT_SID"))
    twilio_auth_token: Optional[str] = Field(default_factory=lambda: _env("TWILIO_AUTH_TOKEN"))
    twilio_phone_number: Optional[str] = Field(default_factory=lambda: _env("TWILIO_PHONE_NUMBER"))
    twilio_api_base: str = Field(
        default_factory=lambda: _env("TWILIO_API_BASE", DEFAULT_TWILIO_API_BASE)
    )
    twilio_timeout_seconds: float = Field(
        default_factory=lambda: _env_float("TWILIO_TIMEOUT_SECONDS", 15.0)
    )

    # Dispatch behaviour
    dispatch_max_concurrency: int = Field(
        default_factory=lambda: max(1, _env_int("DISPATCH_MAX_CONCURRENCY", 10))
    )
    dispatch_timeout_seconds: Optional[float] = Field(
        default_factory=lambda: _env_float("DISPATCH_TIMEOUT_SECONDS", None)
    )

    @property
    def cors_allow_origins(self) -> List[str]:
        """Parse CORS origins from comma-separated string."""
        if self.cors_allow_origins_raw.strip() in {"", "*"}:
            return ["*"]
        return [origin.strip() for origin in self.cors_allow_origins_raw.split(",") if origin.strip()]

    @property
    def resolved_docs_url(self) -> Optional[str]:
        """Return documentation URL when docs are enabled."""
        return (self.docs_url or "/docs") if self.enable_docs else None


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
