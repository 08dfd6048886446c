"""Configuration management using Pydantic Settings."""

from importlib.metadata import PackageNotFoundError, version as _pkg_version
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

CONFIG_DIR = Path.home() / ".config" / "gmail-order-status"


def _get_version() -> str:
    try:
        return _pkg_version("gmail-order-status")
    except PackageNotFoundError:
        return "0.0.0"


class Settings(BaseSettings):
    """Runtime settings loaded from environment variables and `.env`.

    Every paging default lives here so callers never repeat the numbers.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="GMAIL_ORDER_STATUS_",
        extra="ignore",
    )

    # Server metadata
    server_name: str = Field(default="gmail-order-status")
    server_version: str = Field(default_factory=_get_version)
    application_name: str = Field(default="Gmail Order Status Parser")

    # Storage
    settings_path: Path = Field(default=CONFIG_DIR / "settings.json")
    entries_db_path: Path = Field(default=CONFIG_DIR / "entries.sqlite3")

    # Paging: scheduled entry updates
    update_batch_size: int = Field(default=50, ge=1)
    update_max_pages: int = Field(default=300, ge=1)

    # Paging: message listings by filter/account
    scan_batch_size: int = Field(default=500, ge=1)
    scan_max_pages: int = Field(default=300, ge=1)

    # Paging: "show all" listing for one filter
    listing_max_pages: int = Field(default=10, ge=1)

    # Paging: interactive test preview
    preview_batch_size: int = Field(default=500, ge=1)
    preview_max_pages: int = Field(default=3, ge=1)
    preview_limit: int = Field(default=5, ge=1)

    # Whether messages that pass the mask but match no status are reported
    report_unmatched_status: bool = Field(default=False)


_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create the global settings singleton."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Reset the global settings (for testing)."""
    global _settings
    _settings = None
