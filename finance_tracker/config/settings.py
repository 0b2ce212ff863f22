"""
Configuration Management for Finance Tracker

Every knob comes from the environment (or .env) through pydantic-settings.

DESIGN DECISION: One settings class per concern, each with its own env
prefix. A backend that is not selected never has its settings loaded, so
the in-memory setup needs nothing but AUTH_SECRET_KEY.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


STORAGE_BACKENDS = ("memory", "mongodb", "google_sheets")


class AuthSettings(BaseSettings):
    """Token signing and password hashing configuration."""

    model_config = SettingsConfigDict(
        env_prefix="AUTH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    secret_key: str = Field(
        ...,
        min_length=8,
        description="Secret used to sign bearer tokens"
    )
    algorithm: str = Field(
        default="HS256",
        description="JWT signing algorithm"
    )
    token_expire_minutes: int = Field(
        default=60 * 24 * 7,
        ge=1,
        description="Lifetime of an issued token in minutes"
    )
    bcrypt_rounds: int = Field(
        default=12,
        ge=4,
        le=16,
        description="bcrypt cost factor"
    )
    min_password_length: int = Field(
        default=6,
        ge=1,
        description="Minimum password length accepted at registration"
    )


class MongoSettings(BaseSettings):
    """MongoDB document store configuration."""

    model_config = SettingsConfigDict(
        env_prefix="MONGO_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    uri: str = Field(
        default="mongodb://localhost:27017",
        description="MongoDB connection string"
    )
    database: str = Field(
        default="finance-tracker",
        description="Database name"
    )
    users_collection: str = Field(default="users")
    transactions_collection: str = Field(default="transactions")


class GoogleSheetsSettings(BaseSettings):
    """Google Sheets storage configuration."""

    model_config = SettingsConfigDict(
        env_prefix="GOOGLE_SHEETS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    credentials_path: str = Field(
        ...,
        description="Path to Google service account credentials JSON"
    )
    spreadsheet_id: str = Field(
        ...,
        description="ID of the Google Sheets spreadsheet to use"
    )

    # Sheet names within the spreadsheet
    users_sheet_name: str = Field(
        default="Users",
        description="Name of the sheet for user accounts"
    )
    transactions_sheet_name: str = Field(
        default="Transactions",
        description="Name of the sheet for transactions"
    )

    @field_validator('credentials_path')
    @classmethod
    def validate_credentials_path(cls, v: str) -> str:
        """A missing file only warns; it may be mounted after import."""
        if not Path(v).exists():
            import warnings
            warnings.warn(
                f"Google credentials file not found at {v}. "
                "Sheets storage will fail to connect until it exists."
            )
        return v


class AppSettings(BaseSettings):
    """
    Server, client and backend selection.

    Unprefixed variables, read from the environment and .env.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    debug_mode: bool = Field(
        default=False,
        description="Return FastAPI debug tracebacks"
    )
    log_level: str = Field(
        default="INFO",
        description="Root log level"
    )

    # Persistence
    storage_backend: str = Field(
        default="memory",
        description="One of: memory, mongodb, google_sheets"
    )

    # HTTP
    api_prefix: str = Field(
        default="/api",
        description="Path prefix the REST routes are mounted under"
    )
    cors_origins: str = Field(
        default="http://localhost:3000,http://localhost:8501",
        description="Comma-separated list of allowed CORS origins"
    )
    host: str = Field(default="127.0.0.1")
    port: int = Field(default=5000, ge=1, le=65535)

    # Client
    api_base_url: str = Field(
        default="http://localhost:5000/api",
        description="Base URL the Streamlit client talks to"
    )

    @field_validator('storage_backend')
    @classmethod
    def validate_storage_backend(cls, v: str) -> str:
        """Only accept known backends."""
        v = v.strip().lower()
        if v not in STORAGE_BACKENDS:
            raise ValueError(
                f"Unknown storage backend: {v}. Allowed: {', '.join(STORAGE_BACKENDS)}"
            )
        return v

    @property
    def cors_origins_list(self) -> list[str]:
        """Get CORS origins as a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


class Settings(BaseSettings):
    """
    Lazily built view over all settings groups.

    Entry point to every settings group.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Sub-settings are loaded lazily so that a backend that is not in use
    # does not need to be configured.

    @property
    def auth(self) -> AuthSettings:
        return AuthSettings()

    @property
    def mongo(self) -> MongoSettings:
        return MongoSettings()

    @property
    def google_sheets(self) -> GoogleSheetsSettings:
        return GoogleSheetsSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Process-wide settings, built once.

    Tests call get_settings.cache_clear() after changing the environment.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Try to load every settings group.

    Returns a dict of {setting_name: is_valid}, plus
    {setting_name}_error entries for the ones that failed.
    """
    results = {}
    settings = get_settings()

    for name in ("auth", "mongo", "google_sheets", "app"):
        try:
            getattr(settings, name)
            results[name] = True
        except Exception as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
