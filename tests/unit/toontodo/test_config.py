# -*- coding: utf-8 -*-
"""Location: ./tests/unit/toontodo/test_config.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0

Tests for the environment-driven settings.
"""

# Standard
import logging
from pathlib import Path
from unittest.mock import patch

# Third-Party
import pytest

# First-Party
from toontodo.config import get_settings, settings, Settings
from toontodo.services.logging_service import LoggingService


def test_data_dir_from_environment(monkeypatch, tmp_path):
    monkeypatch.setenv("TOONTODO_DATA_DIR", str(tmp_path / "elsewhere"))
    assert Settings().data_dir == tmp_path / "elsewhere"


def test_data_dir_expands_user(monkeypatch, tmp_path):
    monkeypatch.setenv("HOME", str(tmp_path))
    assert Settings(data_dir="~/todos").data_dir == tmp_path / "todos"


def test_default_data_dir(monkeypatch, tmp_path):
    monkeypatch.delenv("TOONTODO_DATA_DIR")
    monkeypatch.setenv("HOME", str(tmp_path))
    assert Settings(_env_file=None).data_dir == tmp_path / ".local" / "share" / "toontodo"


def test_log_level_normalized(monkeypatch):
    monkeypatch.setenv("TOONTODO_LOG_LEVEL", "info")
    assert Settings().log_level == "INFO"


def test_log_level_default():
    assert Settings(_env_file=None).log_level == "WARNING"


def test_invalid_log_level():
    with pytest.raises(ValueError, match="Invalid log level"):
        Settings(log_level="verbose")


def test_get_settings_is_cached():
    assert get_settings() is get_settings()


def test_lazy_wrapper_forwards(tmp_path):
    assert settings.data_dir == Path(tmp_path / "default-data")


def test_logging_service_configure_sets_root_level():
    root = logging.getLogger()
    original = root.level
    try:
        with patch("toontodo.services.logging_service.settings") as mock_settings:
            mock_settings.log_level = "ERROR"
            mock_settings.log_format = "%(message)s"
            mock_settings.log_datefmt = None
            service = LoggingService()
            service.configure()
            assert root.level == logging.ERROR
            service.configure("debug")
            assert root.level == logging.DEBUG
    finally:
        root.setLevel(original)
