"""Runtime configuration based on environment variables."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import BaseModel, Field, HttpUrl
from pydantic_settings import BaseSettings, SettingsConfigDict


class StoreApiSettings(BaseModel):
    base_url: HttpUrl = Field(
        default="https://itunes.apple.com/search",
        description="Catalog search endpoint.",
    )
    lang: str = Field(default="en_us", min_length=1)
    result_limit: int = Field(default=30, ge=1, le=200)
    request_timeout_seconds: int = Field(default=10, ge=1, le=60)


class ImageCacheSettings(BaseModel):
    max_entries: int = Field(default=256, ge=1)


class StoreSearchSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="STORESEARCH_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
    )

    environment: Literal["dev", "staging", "prod"] = "dev"
    debounce_seconds: float = Field(default=0.3, ge=0, le=5)

    api: StoreApiSettings = Field(default_factory=StoreApiSettings)
    image_cache: ImageCacheSettings = Field(default_factory=ImageCacheSettings)


@lru_cache
def get_settings() -> StoreSearchSettings:
    """Return cached settings instance."""

    return StoreSearchSettings()


__all__ = [
    "StoreApiSettings",
    "ImageCacheSettings",
    "StoreSearchSettings",
    "get_settings",
]
