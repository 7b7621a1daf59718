"""
Centralized configuration management.
Settings are read from RECEIPT_LEDGER_* environment variables or a .env file.
"""
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

MAX_UPLOAD_BYTES = 10 * 1024 * 1024  # 10 MiB


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="RECEIPT_LEDGER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Storage
    storage_path: str = Field(default="uploads/receipts")
    database_path: str = Field(default="receipts.sqlite")
    receipt_url_prefix: str = Field(default="/uploads/receipts")

    # Intake
    max_upload_bytes: int = Field(default=MAX_UPLOAD_BYTES)

    # Extraction
    ocr_language: str = Field(default="eng")

    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level is one of the standard levels."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Log level must be one of: {valid_levels}")
        return v_upper

    @field_validator("max_upload_bytes")
    @classmethod
    def validate_max_upload_bytes(cls, v):
        if v < 1:
            raise ValueError("Max upload size must be at least 1 byte")
        return v

    @field_validator("receipt_url_prefix")
    @classmethod
    def strip_trailing_slash(cls, v):
        return v.rstrip("/")

    @property
    def storage_root(self) -> Path:
        return Path(self.storage_path)


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """
    Get application settings singleton.

    Returns:
        Settings instance
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Reset settings singleton (useful for testing)."""
    global _settings
    _settings = None
