"""Configuration package."""

from sheets_migrator.config.settings import (
    ConfigurationError,
    DatabaseSettings,
    GoogleSheetsSettings,
    ImporterSettings,
    Settings,
    get_settings,
    load_sheets_settings,
    validate_all_settings,
)

__all__ = [
    "ConfigurationError",
    "DatabaseSettings",
    "GoogleSheetsSettings",
    "ImporterSettings",
    "Settings",
    "get_settings",
    "load_sheets_settings",
    "validate_all_settings",
]
