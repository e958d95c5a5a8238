"""Configuration module."""

from __future__ import annotations

from claimintake.config.settings import (
    EligibilitySettings,
    EventSettings,
    Settings,
    StorageSettings,
)


__all__ = ["EligibilitySettings", "EventSettings", "Settings", "StorageSettings"]
