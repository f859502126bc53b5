"""Runtime configuration, read from ``SHOPSYNC_*`` environment variables or ``.env``."""

from __future__ import annotations

from pathlib import Path

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ShopSettings(BaseSettings):
    """Settings for the catalog client and local state storage."""

    # ── Remote catalog ──
    api_base_url: str = "http://localhost:8080/api"
    api_token: SecretStr | None = None
    request_timeout: float = Field(default=10.0, gt=0)
    retry_attempts: int = Field(default=3, ge=1)

    # ── Local snapshots ──
    data_dir: Path = Path("data")
    cart_storage_key: str = "ecommerce-cart"

    # ── Logging ──
    log_format: str = "console"
    log_level: str = "WARNING"

    model_config = SettingsConfigDict(
        env_prefix="SHOPSYNC_", env_file=".env", extra="ignore"
    )

    @field_validator("api_base_url")
    @classmethod
    def strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @field_validator("log_format")
    @classmethod
    def known_log_format(cls, value: str) -> str:
        value = value.lower()
        if value not in ("console", "json"):
            raise ValueError(f"log_format must be 'console' or 'json', got {value!r}")
        return value
