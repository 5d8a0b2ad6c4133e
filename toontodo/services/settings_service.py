# -*- coding: utf-8 -*-
"""Location: ./toontodo/services/settings_service.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0

Settings Service Implementation.
Holds the ``AppSettings`` singleton backed by ``settings.toon``. Loading never
fails: a missing or unreadable file yields the defaults.
"""

# Standard
from pathlib import Path
from typing import Optional, Union

# First-Party
from toontodo.schemas import AppSettings, WindowBounds
from toontodo.services.logging_service import LoggingService
from toontodo.services.storage_service import load_settings, save_settings, SaveError

# Initialize logging service first
logging_service = LoggingService()
logger = logging_service.get_logger(__name__)


class SettingsService:
    """Application settings store.

    Examples:
        >>> service = SettingsService("/tmp/settings.toon")
        >>> service.active_project_id
        ''
        >>> service.window_bounds.width
        600
    """

    def __init__(self, path: Union[str, Path]) -> None:
        """Initialize the service with default settings.

        Args:
            path: Settings file.
        """
        self.path = Path(path)
        self._settings = AppSettings()
        self.last_save_error: Optional[SaveError] = None

    @property
    def settings(self) -> AppSettings:
        """Current settings."""
        return self._settings

    async def load(self) -> None:
        """Load settings from disk; defaults on any failure."""
        self._settings = await load_settings(self.path)
        logger.info(f"Settings loaded from {self.path}")

    async def save(self) -> bool:
        """Persist the settings. Never raises.

        Returns:
            bool: True on success, False if the write failed.
        """
        try:
            await save_settings(self.path, self._settings)
        except SaveError as e:
            self.last_save_error = e
            logger.error(f"Settings save failed: {e}")
            return False
        self.last_save_error = None
        return True

    @property
    def active_project_id(self) -> str:
        """Id of the active project, empty when unset."""
        return self._settings.active_project_id or ""

    async def set_active_project(self, project_id: str) -> None:
        """Make ``project_id`` the active project and save.

        Args:
            project_id: Project id; not validated here.
        """
        self._settings.active_project_id = project_id
        await self.save()

    @property
    def window_bounds(self) -> WindowBounds:
        """Saved window rectangle."""
        return self._settings.window_bounds

    async def set_window_bounds(self, bounds: WindowBounds) -> None:
        """Store new window bounds and save.

        Args:
            bounds: Window rectangle.
        """
        self._settings.window_bounds = bounds
        await self.save()
