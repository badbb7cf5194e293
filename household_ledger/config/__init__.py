"""Configuration package."""

from household_ledger.config.settings import (
    InsightSettings,
    LedgerSettings,
    Settings,
    get_settings,
)

__all__ = [
    "InsightSettings",
    "LedgerSettings",
    "Settings",
    "get_settings",
]
