"""Configuration management with Pydantic Settings."""

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_prefix="SCREENSHOT_AGENT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="DEBUG", description="Level of the stderr log sink enabled by --verbose"
    )

    # Arbitration
    arbitration_window_seconds: float = Field(
        default=30.0,
        gt=0,
        description="A file modified within this window beats a clipboard image",
    )

    # Clipboard capture
    clipboard_max_bytes: int = Field(
        default=50 * 1024 * 1024,
        ge=1,
        description="Cap on image bytes read from a clipboard tool's stdout",
    )

    # Naming
    temp_path_attempts: int = Field(
        default=20, ge=1, description="Random temp names tried before giving up"
    )
    trash_name_attempts: int = Field(
        default=10000, ge=1, description="Numbered trash names probed before giving up"
    )

    # Paths
    temp_dir: Path | None = Field(
        default=None, description="Override for the system temp directory"
    )
    home_dir: Path | None = Field(
        default=None, description="Override for the user's home directory"
    )

    @property
    def home_path(self) -> Path:
        """Home directory used for Desktop/Downloads lookup and trash."""
        if self.home_dir is not None:
            return self.home_dir.expanduser()
        return Path.home()


# Global settings instance
settings = Settings()
