"""Application settings and configuration."""

from __future__ import annotations

import os
from typing import Any

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseModel):
    """Claim store configuration."""

    db_path: str = "claims.db"
    timeout_seconds: float = 5.0


class EligibilitySettings(BaseModel):
    """Eligibility service configuration."""

    base_url: str = "http://localhost:8090"
    timeout_seconds: float = Field(default=5.0, gt=0)


class EventSettings(BaseModel):
    """Event publishing configuration."""

    topic: str = "claims.events"
    async_dispatch: bool = False


class Settings(BaseSettings):
    """Application configuration.

    Settings are loaded from environment variables or .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_nested_delimiter="__",
    )

    # Storage Configuration
    storage: StorageSettings = Field(default_factory=StorageSettings)

    # Eligibility Configuration
    eligibility: EligibilitySettings = Field(default_factory=EligibilitySettings)

    # Event Configuration
    events: EventSettings = Field(default_factory=EventSettings)

    # Logging
    log_level: str = "INFO"

    def __init__(self, **data: Any) -> None:
        """Initialize settings with environment variable overrides."""
        super().__init__(**data)
        self._load_env_overrides()

    def _load_env_overrides(self) -> None:
        """Load environment variable overrides for nested settings."""
        # Storage overrides
        if db_path := os.getenv("CLAIMS_DB_PATH"):
            self.storage.db_path = db_path
        if db_timeout := os.getenv("CLAIMS_DB_TIMEOUT"):
            self.storage.timeout_seconds = float(db_timeout)

        # Eligibility overrides
        if url := os.getenv("ELIGIBILITY_SERVICE_URL"):
            self.eligibility.base_url = url
        if timeout := os.getenv("ELIGIBILITY_TIMEOUT"):
            self.eligibility.timeout_seconds = float(timeout)

        # Event overrides
        if topic := os.getenv("CLAIMS_EVENTS_TOPIC"):
            self.events.topic = topic
        if async_dispatch := os.getenv("CLAIMS_EVENTS_ASYNC"):
            self.events.async_dispatch = async_dispatch.lower() in ("true", "1", "yes")
