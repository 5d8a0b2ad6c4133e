# -*- coding: utf-8 -*-
"""Location: ./toontodo/services/todo_service.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0

Todo Service Implementation.
In-memory todo list for one project, backed by that project's ``todos-{id}.toon``.
Every mutation saves the whole list; a failed save is logged and kept in
``last_save_error`` while the in-memory list stays as the user left it.
"""

# Standard
from pathlib import Path
from typing import List, Optional, Union

# Third-Party
from pydantic import ValidationError

# First-Party
from toontodo.schemas import Todo
from toontodo.services.logging_service import LoggingService
from toontodo.services.storage_service import load_todos, save_todos, SaveError
from toontodo.utils import ids

# Initialize logging service first
logging_service = LoggingService()
logger = logging_service.get_logger(__name__)


class TodoError(Exception):
    """Base class for todo-related errors."""


class TodoNotFoundError(TodoError):
    """Raised when a todo id does not exist in the list.

    Examples:
        >>> str(TodoNotFoundError("Todo not found: x"))
        'Todo not found: x'
    """


class TodoValidationError(TodoError):
    """Raised when todo text cannot be stored."""


class TodoService:
    """Todo list of a single project.

    Examples:
        >>> service = TodoService("/tmp/does-not-matter.toon")
        >>> service.get_all()
        []
    """

    def __init__(self, path: Union[str, Path]) -> None:
        """Initialize the service.

        Args:
            path: Todo file for this project.
        """
        self.path = Path(path)
        self._todos: List[Todo] = []
        self.last_save_error: Optional[SaveError] = None

    async def load(self) -> None:
        """Replace the in-memory list with the file content.

        Raises:
            CorruptFileError: If the file is corrupt; it has been moved aside and
                the caller decides how to continue.
        """
        self._todos = await load_todos(self.path)
        logger.info(f"Todos loaded: {len(self._todos)} from {self.path}")

    async def save(self) -> bool:
        """Persist the list. Never raises.

        Returns:
            bool: True on success, False if the write failed.
        """
        try:
            await save_todos(self.path, self._todos)
        except SaveError as e:
            self.last_save_error = e
            logger.error(f"Todos save failed ({len(self._todos)} todos): {e}")
            return False
        self.last_save_error = None
        logger.debug(f"Todos saved: {len(self._todos)}")
        return True

    async def add(self, text: str) -> Optional[Todo]:
        """Append a new active todo.

        Args:
            text: Todo text; surrounding whitespace is removed.

        Returns:
            The new todo, or None when ``text`` is blank.

        Raises:
            TodoValidationError: If the text is not a valid string, e.g. it
                holds lone surrogates from undecodable input.
        """
        trimmed = text.strip()
        if not trimmed:
            return None
        try:
            todo = Todo(id=ids.generate_id(), text=trimmed, completed=False, created_at=ids.now_iso())
        except ValidationError as e:
            raise TodoValidationError(f"Invalid todo text: {e.errors()[0]['msg']}") from e
        self._todos.append(todo)
        await self.save()
        return todo

    async def toggle(self, todo_id: str) -> Todo:
        """Flip the completion flag of a todo.

        Args:
            todo_id: Id of the todo.

        Returns:
            Todo: The updated todo.

        Raises:
            TodoNotFoundError: If no todo has that id.
        """
        todo = self.find_by_id(todo_id)
        if todo is None:
            raise TodoNotFoundError(f"Todo not found: {todo_id}")
        todo.completed = not todo.completed
        await self.save()
        return todo

    async def delete_completed(self) -> int:
        """Remove every completed todo.

        Returns:
            int: Number of todos removed.
        """
        before = len(self._todos)
        self._todos = [t for t in self._todos if not t.completed]
        await self.save()
        return before - len(self._todos)

    def find_by_id(self, todo_id: str) -> Optional[Todo]:
        """Return the todo with ``todo_id``, if any."""
        return next((t for t in self._todos if t.id == todo_id), None)

    def get_all(self) -> List[Todo]:
        """Return a shallow copy of all todos in order."""
        return list(self._todos)

    def get_active(self) -> List[Todo]:
        """Return todos that are not completed."""
        return [t for t in self._todos if not t.completed]

    def get_completed(self) -> List[Todo]:
        """Return completed todos."""
        return [t for t in self._todos if t.completed]
