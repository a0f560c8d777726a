"""Configuration: typed settings loaded from the environment and .env."""

import logging
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

_config_instance: "BrightnessConfig | None" = None


class BrightnessConfig(BaseSettings):
    """All settings, loaded from environment variables with DDC_BRIGHTNESS_ prefix."""

    # Logging
    log_level: str = "WARNING"
    log_to_file: bool = False
    log_dir: Path = Path.home() / ".ddc-brightness" / "logs"

    # Targeting
    default_display: int | None = Field(default=None, ge=0)

    # Fail a sweep when any display does not answer (False: only when none answered)
    strict_sweep: bool = True

    # Output
    no_color: bool = False

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="DDC_BRIGHTNESS_",
        env_file_encoding="utf-8",
        extra="ignore",
    )


def get_config() -> BrightnessConfig:
    """Get the singleton BrightnessConfig instance.

    Returns:
        The shared BrightnessConfig loaded from environment.
    """
    global _config_instance
    if _config_instance is None:
        _config_instance = BrightnessConfig()
        logger.debug("Loaded configuration: %s", _config_instance)
    return _config_instance
