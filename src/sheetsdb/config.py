"""Configuration management using Pydantic Settings."""

from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """sheetsdb settings loaded from ``SHEETSDB_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="SHEETSDB_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Spreadsheet
    spreadsheet_id: str = ""
    sheet: Optional[str] = None  # sheet id or title, None selects gid 0

    # Credentials (service account JSON), None uses gspread's default location
    credentials_file: Optional[str] = None

    # Writes
    value_input_option: Literal["USER_ENTERED", "RAW"] = "USER_ENTERED"

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "console"] = "console"


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get or create settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Reset settings (for testing)."""
    global _settings
    _settings = None
