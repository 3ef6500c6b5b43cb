"""
Configuration Management for the Confidential Ledger

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
This makes it easy to see which knobs exist and ensures all required
configuration is validated at startup.
"""

from enum import Enum
from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from confidential_ledger.models.ciphertext import is_reserved_principal, normalize_principal


class TotalsExposure(str, Enum):
    """
    Who may decrypt a user total once the ledger hands out its handle.

    PUBLIC: every exposing command marks the total publicly decryptable.
    CALLER: the total is granted to the reading caller and to its owner
            principal only; it is never made public.
    """
    PUBLIC = "public"
    CALLER = "caller"


class LedgerSettings(BaseSettings):
    """Ledger core configuration."""

    model_config = SettingsConfigDict(
        env_prefix="LEDGER_",
        extra="ignore"
    )

    initial_owner: str = Field(
        ...,
        description="Principal that owns the ledger when it is created"
    )
    totals_exposure: TotalsExposure = Field(
        default=TotalsExposure.PUBLIC,
        description="Decryption exposure applied to user totals"
    )
    event_log_path: Optional[str] = Field(
        default=None,
        description="JSON-lines file for emitted events (None = in-memory only)"
    )

    @field_validator("initial_owner")
    @classmethod
    def validate_initial_owner(cls, v: str) -> str:
        owner = normalize_principal(v)
        if owner is None:
            raise ValueError("initial_owner cannot be the null principal")
        if is_reserved_principal(owner):
            raise ValueError(f"initial_owner cannot be the reserved name {owner!r}")
        return owner


class DecryptionSettings(BaseSettings):
    """Retry policy for the external decryption authority."""

    model_config = SettingsConfigDict(
        env_prefix="DECRYPTION_",
        extra="ignore"
    )

    max_attempts: int = Field(
        default=5,
        ge=1,
        le=20,
        description="Attempts per decryption request while the authority is pending"
    )
    wait_multiplier: float = Field(
        default=0.5,
        ge=0.0,
        description="Exponential back-off multiplier (seconds)"
    )
    wait_min_seconds: float = Field(
        default=0.5,
        ge=0.0,
        description="Minimum wait between attempts"
    )
    wait_max_seconds: float = Field(
        default=8.0,
        ge=0.0,
        description="Maximum wait between attempts"
    )

    @model_validator(mode="after")
    def check_wait_bounds(self) -> "DecryptionSettings":
        if self.wait_max_seconds < self.wait_min_seconds:
            raise ValueError("wait_max_seconds cannot be below wait_min_seconds")
        return self


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    log_level: str = Field(
        default="INFO",
        description="Minimum level for ledger logs"
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Note: Sub-settings are loaded lazily to allow partial configuration

    @property
    def ledger(self) -> LedgerSettings:
        return LedgerSettings()

    @property
    def decryption(self) -> DecryptionSettings:
        return DecryptionSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}, plus "<name>_error"
    entries describing what failed. Useful for startup checks.
    """
    results = {}

    settings = get_settings()

    for name in ("ledger", "decryption", "app"):
        try:
            getattr(settings, name)
            results[name] = True
        except Exception as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
