"""Application configuration for the listings browsing service."""
from __future__ import annotations

from functools import lru_cache
from typing import Annotated

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    app_env: str = Field(default="development")
    log_level: str = Field(default="INFO")
    cors_allow_origins: Annotated[list[str], NoDecode] = Field(default_factory=lambda: ["*"])

    listings_source_url: str = Field(default="")
    listings_fetch_timeout_seconds: float = Field(default=10.0, gt=0)
    listings_cache_seconds: float = Field(default=60.0, ge=0)
    image_base_url: str = Field(default="https://images.example.com")
    image_count: int = Field(default=5, ge=1)

    page_size: int = Field(default=24, ge=1)
    page_increment: int = Field(default=20, ge=1)
    scroll_threshold_px: int = Field(default=400, ge=0)
    filter_button_offset_px: int = Field(default=200, ge=0)
    scroll_top_offset_px: int = Field(default=400, ge=0)
    reset_window_on_filter_change: bool = Field(default=False)

    price_floor: float = Field(default=0)
    price_ceiling: float = Field(default=5000)

    carousel_fade_out_seconds: float = Field(default=0.15, ge=0)
    carousel_fade_in_seconds: float = Field(default=0.05, ge=0)
    swipe_threshold_px: int = Field(default=50, ge=0)

    default_contact_handle: str = Field(default="966500000000")
    contact_tracking_url: str = Field(default="")

    session_ttl_seconds: int = Field(default=1800, ge=1)

    @field_validator("cors_allow_origins", mode="before")
    @classmethod
    def _split_origins(cls, value: object) -> object:
        """Allow comma-separated env values for CORS origins."""

        if isinstance(value, str):
            parts = [item.strip() for item in value.split(",") if item.strip()]
            return parts
        return value


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance."""

    return Settings()


settings = get_settings()
