# -*- coding: utf-8 -*-
"""Location: ./toontodo/services/logging_service.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0

Logging Service Implementation.
Central place where toontodo configures stdlib logging. Modules obtain their
loggers through ``LoggingService.get_logger`` so that handler setup happens once.

Examples:
    >>> from toontodo.services.logging_service import LoggingService
    >>> service = LoggingService()
    >>> service.get_logger("toontodo.example").name
    'toontodo.example'
"""

# Standard
import logging
from typing import Optional

# First-Party
from toontodo.config import settings

_configured = False


class LoggingService:
    """Configure root logging and hand out named loggers."""

    def configure(self, level: Optional[str] = None) -> None:
        """Install a stderr handler on the root logger.

        Idempotent: later calls only adjust the level.

        Args:
            level: Level name overriding ``settings.log_level``.
        """
        global _configured  # pylint: disable=global-statement
        root = logging.getLogger()
        resolved = (level or settings.log_level).upper()
        if not _configured and not root.handlers:
            handler = logging.StreamHandler()
            handler.setFormatter(logging.Formatter(settings.log_format, datefmt=settings.log_datefmt))
            root.addHandler(handler)
        _configured = True
        root.setLevel(getattr(logging, resolved, logging.INFO))

    def get_logger(self, name: str) -> logging.Logger:
        """Return a logger for ``name``.

        Args:
            name: Logger name, usually ``__name__``.

        Returns:
            logging.Logger: The named logger.
        """
        return logging.getLogger(name)
