"""
Configuration Management for Sheets Migrator

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here and handed to the
orchestrator explicitly. Nothing below the entry point reads the
environment, so tests can build settings objects directly.
"""

from functools import lru_cache

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigurationError(Exception):
    """Required configuration is missing or invalid."""
    pass


class GoogleSheetsSettings(BaseSettings):
    """Google Sheets source configuration."""

    model_config = SettingsConfigDict(
        env_prefix="GOOGLE_SHEETS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    spreadsheet_id: str = Field(
        ...,
        min_length=1,
        description="ID of the source spreadsheet"
    )
    api_key: str = Field(
        ...,
        min_length=1,
        description="Google API key with Sheets read access"
    )

    # Sheet names within the spreadsheet
    revenue_sheet_name: str = Field(
        default="Net Sale",
        description="Name of the sheet holding daily revenue"
    )
    expenses_sheet_name: str = Field(
        default="Expenses",
        description="Name of the sheet holding expenses"
    )
    salaries_sheet_name: str = Field(
        default="Salaries",
        description="Name of the sheet holding salary payments"
    )
    cell_range: str = Field(
        default="A:Z",
        description="Column range read from every sheet"
    )

    @field_validator("spreadsheet_id", "api_key")
    @classmethod
    def strip_value(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v


class DatabaseSettings(BaseSettings):
    """Target database configuration."""

    model_config = SettingsConfigDict(
        env_prefix="DATABASE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    url: str = Field(
        default="sqlite:///./dashboard.db",
        description="SQLAlchemy database URL"
    )
    echo: bool = Field(
        default=False,
        description="Echo SQL statements"
    )


class ImporterSettings(BaseSettings):
    """
    Behaviour of the import run itself.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="IMPORTER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    created_by: int = Field(
        default=1,
        ge=1,
        description="User id stamped on imported records (the admin user)"
    )
    log_format: str = Field(
        default="console",
        pattern="^(console|json)$",
        description="structlog renderer: console or json"
    )
    log_level: str = Field(
        default="INFO",
        description="Minimum log level"
    )
    backup_dir: str = Field(
        default="backups",
        description="Directory the backup command writes into"
    )
    low_success_rate_percent: float = Field(
        default=90.0,
        ge=0.0,
        le=100.0,
        description="Warn in the summary when the success rate is below this"
    )


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

    # Sub-settings are loaded lazily so a missing Sheets key does not
    # prevent the backup command from running.

    @property
    def google_sheets(self) -> GoogleSheetsSettings:
        return GoogleSheetsSettings()

    @property
    def database(self) -> DatabaseSettings:
        return DatabaseSettings()

    @property
    def importer(self) -> ImporterSettings:
        return ImporterSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def load_sheets_settings() -> GoogleSheetsSettings:
    """
    Load the Google Sheets settings or fail with a readable message.

    Raises:
        ConfigurationError: naming every missing or invalid variable
    """
    try:
        return get_settings().google_sheets
    except ValidationError as e:
        missing = [
            "GOOGLE_SHEETS_" + str(err["loc"][0]).upper()
            for err in e.errors()
            if err.get("loc")
        ]
        raise ConfigurationError(
            "Missing Google Sheets configuration: "
            + ", ".join(missing)
            + ". Set them in the environment or in .env"
        ) from e


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}.
    Useful for startup checks.
    """
    results = {}

    settings = get_settings()

    try:
        _ = settings.google_sheets
        results["google_sheets"] = True
    except ValidationError as e:
        results["google_sheets"] = False
        results["google_sheets_error"] = str(e)

    try:
        _ = settings.database
        results["database"] = True
    except ValidationError as e:
        results["database"] = False
        results["database_error"] = str(e)

    try:
        _ = settings.importer
        results["importer"] = True
    except ValidationError as e:
        results["importer"] = False
        results["importer_error"] = str(e)

    return results
