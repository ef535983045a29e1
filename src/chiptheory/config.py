"""Configuration management for Chiptheory."""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Sampling step of the period dumps produced by the capture subsystem
# (one chip state snapshot per NTSC video frame).
RESOLUTION_SECONDS = 1 / 60

DEFAULT_BEATS_PER_MEASURE = 4


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="CHIPTHEORY_",
        env_file=".env",
        env_file_encoding="utf-8",
    )

    # Directories
    output_dir: Path = Field(
        default=Path("./output"),
        description="Default output directory for annotation files",
    )
    store_dir: Path = Field(
        default=Path("~/.cache/chiptheory/analyses").expanduser(),
        description="Directory where per-track analysis state is saved",
    )

    # Sampling
    resolution_seconds: float = Field(
        default=RESOLUTION_SECONDS,
        gt=0,
        description="Time step between consecutive period samples, in seconds",
    )

    # Grid
    beats_per_measure: int = Field(
        default=DEFAULT_BEATS_PER_MEASURE,
        ge=1,
        description="Uniform beat subdivision applied to every measure",
    )

    # Playback
    cursor_lag_ms: int = Field(
        default=70,
        description="Subtracted from the polled playback position, which runs ahead of audio",
    )

    # Logging
    log_level: str = Field(
        default="WARNING",
        description="Log level for the chiptheory logger (DEBUG, INFO, WARNING, ERROR)",
    )


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def configure(**overrides: object) -> Settings:
    """Configure settings with overrides. Useful for testing."""
    global _settings
    _settings = Settings(**overrides)  # type: ignore[arg-type]
    return _settings
