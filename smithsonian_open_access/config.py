"""Application configuration using Pydantic Settings."""

import json
import logging
import os
import tempfile
from functools import lru_cache
from pathlib import Path

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from smithsonian_open_access.exceptions import ConfigurationError
from smithsonian_open_access.models import DEFAULT_BASE_URI, ApiSettings

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="SI_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Open Access API Configuration
    api_key: str = Field(default="", description="api.data.gov key for the Open Access API")
    base_uri: str = Field(default=DEFAULT_BASE_URI, description="Versioned base URI of the API")
    timeout: float = Field(default=15.0, description="HTTP request timeout in seconds")
    settings_file: str = Field(
        default="data/smithsonian_open_access.json",
        description="Where the settings screen persists API settings",
    )

    # Application Configuration
    app_title: str = Field(default="Smithsonian Open Access", description="Application title")
    app_version: str = Field(default="1.0.0", description="Application version")
    debug: bool = Field(default=False, description="Debug mode")

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Log level (DEBUG, INFO, WARNING, ERROR)")
    log_json: bool = Field(default=True, description="Use JSON log format")
    log_file: str | None = Field(default=None, description="Optional log file path")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


class SettingsStore:
    """JSON file holding the API settings edited on the settings screen.

    Environment values are the defaults; anything saved through the screen
    overrides them. Every ``load`` reads the file again so callers always
    see the current configuration.
    """

    def __init__(self, path: str | Path, defaults: ApiSettings | None = None):
        self.path = Path(path)
        self.defaults = defaults or ApiSettings()

    @classmethod
    def from_settings(cls, settings: Settings) -> "SettingsStore":
        defaults = ApiSettings(base_uri=settings.base_uri, api_key=settings.api_key)
        return cls(settings.settings_file, defaults=defaults)

    def load(self) -> ApiSettings:
        """Return the current API settings."""
        if not self.path.exists():
            return self.defaults.model_copy()

        try:
            saved = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigurationError(f"Cannot read settings file {self.path}: {e}") from e
        if not isinstance(saved, dict):
            raise ConfigurationError(f"Settings file {self.path} must hold a JSON object")

        merged = self.defaults.model_dump()
        # Blank saved values fall back to the environment defaults
        merged.update({k: v for k, v in saved.items() if k in merged and v not in (None, "")})
        try:
            return ApiSettings(**merged)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid settings in {self.path}: {e}") from e

    def save(self, api_settings: ApiSettings) -> None:
        """Persist settings atomically."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=".settings-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(api_settings.model_dump_json(indent=2))
            os.replace(tmp_name, self.path)
        except OSError:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        logger.info(f"Saved Open Access API settings to {self.path}")
