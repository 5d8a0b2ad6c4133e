# -*- coding: utf-8 -*-
"""Location: ./tests/unit/toontodo/services/test_todo_service.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0

Tests for the per-project todo store.
"""

# Standard
from unittest.mock import AsyncMock, patch

# Third-Party
import pytest
import pytest_asyncio

# First-Party
from toontodo.services.storage_service import CorruptFileError, load_todos, save_todos
from toontodo.services.todo_service import TodoNotFoundError, TodoService, TodoValidationError


@pytest.fixture
def todo_path(data_dir):
    return data_dir / "todos-p1.toon"


@pytest_asyncio.fixture
async def loaded_service(todo_path, sample_todos):
    await save_todos(todo_path, sample_todos)
    service = TodoService(todo_path)
    await service.load()
    return service


@pytest.mark.asyncio
async def test_load_missing_file_is_empty(todo_path):
    service = TodoService(todo_path)
    await service.load()
    assert service.get_all() == []


@pytest.mark.asyncio
async def test_add_trims_and_persists(todo_path):
    service = TodoService(todo_path)
    todo = await service.add("  Buy milk  ")
    assert todo.text == "Buy milk"
    assert todo.completed is False
    assert todo.created_at.endswith("Z")
    assert await load_todos(todo_path) == [todo]


@pytest.mark.asyncio
@pytest.mark.parametrize("text", ["", "   ", "\n\t"])
async def test_add_blank_is_ignored(todo_path, text):
    service = TodoService(todo_path)
    assert await service.add(text) is None
    assert service.get_all() == []
    assert not todo_path.exists()


@pytest.mark.asyncio
async def test_add_appends_in_order(todo_path):
    service = TodoService(todo_path)
    for text in ("one", "two", "three"):
        await service.add(text)
    assert [t.text for t in service.get_all()] == ["one", "two", "three"]
    assert [t.text for t in await load_todos(todo_path)] == ["one", "two", "three"]


@pytest.mark.asyncio
async def test_add_undecodable_text_rejected(todo_path):
    service = TodoService(todo_path)
    with pytest.raises(TodoValidationError, match="Invalid todo text"):
        await service.add("bad \udcff text")
    assert service.get_all() == []
    assert not todo_path.exists()


@pytest.mark.asyncio
async def test_toggle(loaded_service, todo_path):
    todo = await loaded_service.toggle("t1")
    assert todo.completed is True
    assert (await load_todos(todo_path))[0].completed is True
    assert (await loaded_service.toggle("t1")).completed is False


@pytest.mark.asyncio
async def test_toggle_unknown(loaded_service):
    with pytest.raises(TodoNotFoundError):
        await loaded_service.toggle("missing")


@pytest.mark.asyncio
async def test_filters(loaded_service):
    assert [t.id for t in loaded_service.get_active()] == ["t1", "t3"]
    assert [t.id for t in loaded_service.get_completed()] == ["t2"]


@pytest.mark.asyncio
async def test_delete_completed(loaded_service, todo_path):
    assert await loaded_service.delete_completed() == 1
    assert [t.id for t in loaded_service.get_all()] == ["t1", "t3"]
    assert [t.id for t in await load_todos(todo_path)] == ["t1", "t3"]


@pytest.mark.asyncio
async def test_get_all_returns_copy(loaded_service):
    loaded_service.get_all().clear()
    assert len(loaded_service.get_all()) == 3


@pytest.mark.asyncio
async def test_save_failure_keeps_memory_state(todo_path):
    service = TodoService(todo_path)
    with patch("toontodo.utils.fs.write_bytes_atomic", new=AsyncMock(side_effect=OSError("disk full"))):
        todo = await service.add("survives")
    assert service.get_all() == [todo]
    assert service.last_save_error is not None
    assert not todo_path.exists()

    assert await service.save() is True
    assert service.last_save_error is None
    assert await load_todos(todo_path) == [todo]


@pytest.mark.asyncio
async def test_corrupt_file_propagates(todo_path):
    todo_path.write_bytes(b"not toon")
    service = TodoService(todo_path)
    with pytest.raises(CorruptFileError):
        await service.load()
    assert service.get_all() == []
