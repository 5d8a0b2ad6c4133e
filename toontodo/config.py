# -*- coding: utf-8 -*-
"""Location: ./toontodo/config.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0

toontodo Configuration.
This module defines configuration settings for toontodo using Pydantic.
It loads configuration from environment variables with sensible defaults.

Environment variables:
- TOONTODO_DATA_DIR: Directory holding the .toon files (default: "~/.local/share/toontodo")
- TOONTODO_LOG_LEVEL: Logging level (default: "WARNING")
- TOONTODO_LOG_FORMAT: Logging format string

Examples:
    >>> from toontodo.config import Settings
    >>> s = Settings(data_dir='/tmp/toontodo-doc', log_level='debug')
    >>> s.log_level
    'DEBUG'
    >>> str(s.data_dir)
    '/tmp/toontodo-doc'
    >>> try:
    ...     Settings(log_level='chatty')
    ... except ValueError:
    ...     print('error')
    error
"""

# Standard
from functools import lru_cache
import logging
from pathlib import Path
import sys
from typing import Any

# Third-Party
import orjson
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

_VALID_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


def _default_data_dir() -> Path:
    """Return the per-user data directory used when none is configured.

    Returns:
        Path: ``~/.local/share/toontodo``.
    """
    return Path.home() / ".local" / "share" / "toontodo"


class Settings(BaseSettings):
    """
    toontodo configuration settings.

    Examples:
        >>> s = Settings(data_dir='~/todo-data')
        >>> s.data_dir.is_absolute()
        True
        >>> s.data_dir.name
        'todo-data'
    """

    data_dir: Path = Field(default_factory=_default_data_dir, description="Directory holding projects.toon, settings.toon and todos-*.toon")
    log_level: str = Field(default="WARNING", description="Root log level")
    log_format: str = Field(default="%(asctime)s - %(name)s - %(levelname)s - %(message)s", description="stdlib logging format string")
    log_datefmt: str = "%Y-%m-%dT%H:%M:%S"

    model_config = SettingsConfigDict(env_prefix="TOONTODO_", env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore")

    @field_validator("data_dir", mode="before")
    @classmethod
    def _expand_data_dir(cls, v: Any) -> Any:
        """Expand ``~`` in configured data directories.

        Args:
            v: Raw value from the environment or constructor.

        Returns:
            Path with the user directory expanded, or the value unchanged.
        """
        if isinstance(v, (str, Path)):
            return Path(v).expanduser()
        return v

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalize_log_level(cls, v: Any) -> str:
        """Upper-case and validate the log level.

        Args:
            v: Raw log level.

        Returns:
            str: Normalized level name.

        Raises:
            ValueError: If the level is not a stdlib logging level name.
        """
        level = str(v).strip().upper()
        if level not in _VALID_LOG_LEVELS:
            raise ValueError(f"Invalid log level: {v!r}. Must be one of {', '.join(_VALID_LOG_LEVELS)}")
        return level

    def log_summary(self) -> None:
        """Log a summary of the application settings at INFO level."""
        summary = self.model_dump(mode="json")
        logger.info(f"Application settings summary: {summary}")


@lru_cache()
def get_settings(**kwargs: Any) -> Settings:
    """Get cached settings instance.

    Args:
        **kwargs: Keyword arguments to pass to the Settings setup.

    Returns:
        Settings: A cached instance of the Settings class.

    Examples:
        >>> settings = get_settings()
        >>> isinstance(settings, Settings)
        True
        >>> settings is get_settings()
        True
    """
    return Settings(**kwargs)


# Lazy "instance" of settings
class LazySettingsWrapper:
    """Lazily initialize settings singleton on getattr"""

    def __getattr__(self, key: str) -> Any:
        """Get the real settings object and forward to it

        Args:
            key: The key to fetch from settings

        Returns:
            Any: The value of the attribute on the settings
        """
        return getattr(get_settings(), key)


settings = LazySettingsWrapper()


if __name__ == "__main__":
    if "--schema" in sys.argv:
        print(orjson.dumps(Settings.model_json_schema(mode="validation"), option=orjson.OPT_INDENT_2).decode())
        sys.exit(0)
    get_settings().log_summary()
