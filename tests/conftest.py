# -*- coding: utf-8 -*-
"""Location: ./tests/conftest.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0

Shared fixtures for the toontodo test suite.
"""

# Standard
from pathlib import Path
from typing import List

# Third-Party
import pytest

# First-Party
from toontodo.config import get_settings
from toontodo.schemas import Project, Todo

LEGACY_TODOS_TEXT = "todos[2]{id,text,completed,createdAt}:\n  a1,Buy milk,false,2025-11-20T10:00:00.000Z\n  a2,Call Bob,true,2025-11-20T11:00:00.000Z\n\nversion: 1.0"


@pytest.fixture(autouse=True)
def _isolate_settings(monkeypatch, tmp_path):
    """Keep tests away from the user's environment and real data directory."""
    monkeypatch.setenv("TOONTODO_DATA_DIR", str(tmp_path / "default-data"))
    monkeypatch.delenv("TOONTODO_LOG_LEVEL", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def data_dir(tmp_path) -> Path:
    """An existing, empty data directory."""
    path = tmp_path / "data"
    path.mkdir()
    return path


@pytest.fixture
def sample_todos() -> List[Todo]:
    return [
        Todo(id="t1", text="Buy milk", completed=False, created_at="2025-11-20T10:00:00.000Z"),
        Todo(id="t2", text='Call Bob, then say "hi"', completed=True, created_at="2025-11-20T11:00:00.000Z"),
        Todo(id="t3", text="Line one\nLine two", completed=False, created_at="2025-11-20T12:00:00.000Z"),
    ]


@pytest.fixture
def sample_projects() -> List[Project]:
    return [
        Project(id="550e8400-e29b-41d4-a716-446655440000", name="Work", created_at="2025-11-20T10:00:00.000Z"),
        Project(id="6ba7b810-9dad-11d1-80b4-00c04fd430c8", name="Home, garden", created_at="2025-11-21T10:00:00.000Z"),
    ]


@pytest.fixture
def legacy_data_dir(data_dir) -> Path:
    """A data directory in the pre-projects layout: only ``todos.toon``."""
    (data_dir / "todos.toon").write_bytes(LEGACY_TODOS_TEXT.encode("utf-8"))
    return data_dir
