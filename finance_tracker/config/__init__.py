"""Configuration package."""

from finance_tracker.config.settings import (
    STORAGE_BACKENDS,
    AppSettings,
    AuthSettings,
    GoogleSheetsSettings,
    MongoSettings,
    Settings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "STORAGE_BACKENDS",
    "AppSettings",
    "AuthSettings",
    "GoogleSheetsSettings",
    "MongoSettings",
    "Settings",
    "get_settings",
    "validate_all_settings",
]
