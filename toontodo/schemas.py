# -*- coding: utf-8 -*-
"""Location: ./toontodo/schemas.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0

toontodo Schema Definitions.
Pydantic models for the records persisted in .toon files: todos, projects and
the application settings singleton. Field names are snake_case in Python and
camelCase on disk (``createdAt``, ``activeProjectId``).

Examples:
    >>> from toontodo.schemas import Todo
    >>> todo = Todo(id="t1", text="Buy milk", completed=False, createdAt="2025-11-20T10:00:00.000Z")
    >>> todo.to_row()
    {'id': 't1', 'text': 'Buy milk', 'completed': False, 'createdAt': '2025-11-20T10:00:00.000Z'}
    >>> Todo.from_row({"id": "t1", "text": "Buy milk", "completed": "true", "createdAt": "x"}).completed
    True
"""

# Standard
from typing import Any, ClassVar, Dict, Mapping, Tuple

# Third-Party
from pydantic import BaseModel, ConfigDict, Field, field_validator


class BaseModelWithConfigDict(BaseModel):
    """Base for all toontodo models: alias population and assignment validation."""

    model_config = ConfigDict(populate_by_name=True, validate_assignment=True)


class RecordModel(BaseModelWithConfigDict):
    """A record stored as one row of a TOON table.

    Subclasses declare ``WIRE_FIELDS``, the column order written to disk.
    """

    WIRE_FIELDS: ClassVar[Tuple[str, ...]] = ()

    def to_row(self) -> Dict[str, Any]:
        """Return the record keyed by wire field names, in column order.

        Returns:
            Dict[str, Any]: Column name to value.
        """
        dumped = self.model_dump(by_alias=True)
        return {name: dumped[name] for name in self.WIRE_FIELDS}

    @classmethod
    def from_row(cls, row: Mapping[str, str]) -> "RecordModel":
        """Build a record from decoded string cells.

        Args:
            row: Column name to raw string value.

        Returns:
            RecordModel: The validated record.
        """
        return cls.model_validate(dict(row))


class Todo(RecordModel):
    """A single todo item, owned by exactly one project's todo file."""

    WIRE_FIELDS: ClassVar[Tuple[str, ...]] = ("id", "text", "completed", "createdAt")

    id: str = Field(..., min_length=1)
    text: str = Field(..., min_length=1)
    completed: bool = False
    created_at: str = Field(..., alias="createdAt", min_length=1)

    @field_validator("completed", mode="before")
    @classmethod
    def _parse_completed(cls, v: Any) -> bool:
        """Only the literal ``true`` is truthy when read from disk.

        Args:
            v: Raw value.

        Returns:
            bool: Parsed flag.
        """
        if isinstance(v, str):
            return v == "true"
        return bool(v)


class Project(RecordModel):
    """A named todo list. Owns the file ``todos-{id}.toon``."""

    WIRE_FIELDS: ClassVar[Tuple[str, ...]] = ("id", "name", "createdAt")

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    created_at: str = Field(..., alias="createdAt", min_length=1)


class WindowBounds(BaseModelWithConfigDict):
    """Window rectangle in screen pixels. Off-screen values are valid.

    Examples:
        >>> WindowBounds(x=1, y=2, width=3, height=4).as_tuple()
        (1, 2, 3, 4)
    """

    x: int
    y: int
    width: int
    height: int

    def as_tuple(self) -> Tuple[int, int, int, int]:
        """Return ``(x, y, width, height)``.

        Returns:
            Tuple[int, int, int, int]: The bounds.
        """
        return (self.x, self.y, self.width, self.height)


DEFAULT_WINDOW_BOUNDS = WindowBounds(x=100, y=100, width=600, height=400)
DEFAULT_SETTINGS_VERSION = "1.0"


def default_window_bounds() -> WindowBounds:
    """Return a fresh copy of the default window bounds.

    Returns:
        WindowBounds: ``100,100,600,400``.
    """
    return DEFAULT_WINDOW_BOUNDS.model_copy()


class AppSettings(BaseModelWithConfigDict):
    """Installation-wide settings singleton persisted to ``settings.toon``.

    ``active_project_id`` may be empty or point at a deleted project; callers
    validate it against the loaded projects.

    Examples:
        >>> s = AppSettings()
        >>> s.active_project_id
        ''
        >>> s.window_bounds.as_tuple()
        (100, 100, 600, 400)
        >>> s.version
        '1.0'
    """

    active_project_id: str = Field(default="", alias="activeProjectId")
    window_bounds: WindowBounds = Field(default_factory=default_window_bounds, alias="windowBounds")
    version: str = DEFAULT_SETTINGS_VERSION
