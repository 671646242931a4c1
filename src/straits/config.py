"""Settings for straits, loaded from `STRAITS_*` environment variables or a `.env` file."""

import logging

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def parse_log_level(value: int | str) -> int:
    """
    Convert a level name (any case) or number into a `logging` level.

    Raises:
        ValueError: If `value` is neither a known level name nor a non-negative number.

    """
    if isinstance(value, str):
        name = value.strip().upper()
        if name.isdigit():
            return int(name)
        level = logging.getLevelName(name)
        if not isinstance(level, int):
            raise ValueError(f"Invalid log level '{value}'.")
        return level
    if isinstance(value, int) and not isinstance(value, bool) and value >= 0:
        return value
    raise ValueError(f"Invalid log level {value!r}.")


class StraitsSettings(BaseSettings):
    """
    Library settings.

    Values are loaded from environment variables prefixed with `STRAITS_`
    and/or a `.env` file in the working directory.
    """

    STRICT_REBINDING: bool = Field(False)
    """Refuse to replace an implementation already bound on a target."""

    LOG_LEVEL: int = Field(logging.WARNING)
    """Level of the `straits` logger set by `setup_logging`; a name such as "DEBUG" or a number."""

    model_config = SettingsConfigDict(
        env_prefix="STRAITS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def validate_log_level(cls, value: int | str) -> int:
        """Accept level names as well as numbers."""
        return parse_log_level(value)


_settings: StraitsSettings | None = None


def get_settings() -> StraitsSettings:
    """Get the cached settings instance, loading it on first use."""
    global _settings
    if _settings is None:
        _settings = StraitsSettings()
    return _settings


def reload_settings() -> StraitsSettings:
    """Rebuild the cached settings from the current environment."""
    global _settings
    _settings = StraitsSettings()
    return _settings
