"""
Application configuration using Pydantic Settings.

Loads configuration from SLASHCMD_* environment variables and a .env file.
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(
        env_prefix="SLASHCMD_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="slashcmd", description="Application name")
    app_env: str = Field(default="development", description="Environment (development/production)")
    debug: bool = Field(default=False, description="Verbose load/skip/reload logging")
    log_level: str = Field(default="INFO", description="Logging level")

    # Command discovery
    commands_dir: str = Field(
        default=".gemini/commands",
        description="Commands directory, relative to the project root and the user home",
    )

    # Hot reload
    hot_reload: bool | None = Field(
        default=None,
        description="Enable the directory watcher (None = only in development)",
    )
    reload_debounce_ms: int = Field(default=500, description="Quiet period before a reload")
    watch_poll_interval: float = Field(default=0.25, description="Directory poll interval in seconds")

    @field_validator("log_level")
    @classmethod
    def _validate_log_level(cls, value: str) -> str:
        upper = value.upper()
        if upper not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of {sorted(_LOG_LEVELS)}, got {value!r}")
        return upper

    @field_validator("reload_debounce_ms")
    @classmethod
    def _validate_debounce(cls, value: int) -> int:
        if value < 0:
            raise ValueError("reload_debounce_ms must be >= 0")
        return value

    @field_validator("watch_poll_interval")
    @classmethod
    def _validate_poll_interval(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("watch_poll_interval must be > 0")
        return value

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.app_env.lower() == "development"

    @property
    def watch_enabled(self) -> bool:
        """Whether hot reload should be activated by front ends."""
        if self.hot_reload is not None:
            return self.hot_reload
        return self.is_development

    @property
    def reload_debounce_seconds(self) -> float:
        return self.reload_debounce_ms / 1000.0


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the process-wide settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()
