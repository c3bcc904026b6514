"""Runtime settings read from ``TPO_*`` environment variables or ``.env``."""
from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="TPO_", env_file=".env", extra="ignore")

    store_path: str = Field(default="pricing_store.json", description="JSON file holding the extracted pricing model")
    session_file: str = Field(default="session_data.json", description="JSON file for persisted UI session keys")
    log_level: str = Field(default="INFO", description="Root logging level")
    sheet_format: str = Field(default="v2", description="Default rate sheet format revision")
    zip_lookup_url: str = Field(default="https://api.zippopotam.us/us/{zip}", description="Postal code lookup endpoint")
    zip_lookup_timeout: float = Field(default=5.0, gt=0, description="Postal code lookup timeout in seconds")


@lru_cache()
def get_settings() -> Settings:
    return Settings()
