"""Shared settings loaded from environment / .env file."""

from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Limits applied to every decode.

    Values are read from ``YAMLSHAPE_*`` environment variables and from a
    ``.env`` file in the working directory.
    """

    model_config = SettingsConfigDict(
        env_prefix="YAMLSHAPE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    max_document_size: int = 5_000_000  # characters
    max_depth: int = 64  # nested collections


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the process-wide settings instance."""
    return Settings()
