"""Configuration package."""

from confidential_ledger.config.settings import (
    AppSettings,
    DecryptionSettings,
    LedgerSettings,
    Settings,
    TotalsExposure,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AppSettings",
    "DecryptionSettings",
    "LedgerSettings",
    "Settings",
    "TotalsExposure",
    "get_settings",
    "validate_all_settings",
]
