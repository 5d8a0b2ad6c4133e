# -*- coding: utf-8 -*-
"""Location: ./toontodo/toon.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0

TOON (Token-Oriented Object Notation) codecs for toontodo files.

Two shapes are used on disk:

1. Tables - an ordered list of uniform records::

       todos[2]{id,text,completed,createdAt}:
         a1,Buy milk,false,2025-11-20T10:00:00.000Z
         a2,"Call Bob, then Alice",true,2025-11-20T11:00:00.000Z

       version: 1.0

2. Settings - flat ``key: value`` lines plus one tuple line for window bounds::

       activeProjectId: 550e8400-e29b-41d4-a716-446655440000
       windowBounds{x,y,width,height}: 100,100,600,400
       version: 1.0

Table cells use CSV quoting: a cell is wrapped in double quotes only when it
contains a comma, a double quote or a newline, and inner double quotes are
doubled. Table decoding is strict; settings decoding tolerates unknown,
missing and reordered lines.

Examples:
    >>> from toontodo.toon import encode_table, decode_table
    >>> text = encode_table([{"id": "p1", "name": "Home, garden"}], ["id", "name"], "projects", "2.0")
    >>> print(text)
    projects[1]{id,name}:
      p1,"Home, garden"
    <BLANKLINE>
    version: 2.0
    >>> decode_table(text, "projects", ["id", "name"])
    [{'id': 'p1', 'name': 'Home, garden'}]
"""

from __future__ import annotations

# Standard
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple, Type

# Third-Party
from pydantic import ValidationError

# First-Party
from toontodo.schemas import AppSettings, DEFAULT_SETTINGS_VERSION, Project, RecordModel, Todo, WindowBounds

# =============================================================================
# Constants
# =============================================================================

# Rows are indented one level below the header (2 spaces)
_INDENT_SIZE = 2
_ROW_INDENT = " " * _INDENT_SIZE

# Separator between the table body and its version trailer
_VERSION_TRAILER = "\n\nversion:"

# Characters that force a cell to be quoted
_QUOTE_TRIGGERS = (",", '"', "\n")

ACTIVE_PROJECT_KEY = "activeProjectId"
WINDOW_BOUNDS_KEY = "windowBounds{x,y,width,height}"
VERSION_KEY = "version"


class FormatError(ValueError):
    """Raised when TOON text cannot be decoded.

    Attributes:
        operation: Which decode operation failed (``decode_table:todos``, ``decode_settings``).
        row: Zero-based data row index, when the failure is row-specific.

    Examples:
        >>> err = FormatError("bad header", operation="decode_table:todos")
        >>> str(err)
        'bad header'
        >>> err.operation, err.row
        ('decode_table:todos', None)
        >>> isinstance(err, ValueError)
        True
    """

    def __init__(self, message: str, *, operation: str, row: Optional[int] = None):
        """Initialize the error with its decode context.

        Args:
            message: Human readable description.
            operation: Name of the decode operation.
            row: Offending row index, if any.
        """
        super().__init__(message)
        self.operation = operation
        self.row = row


# =============================================================================
# Table encoder
# =============================================================================


def _encode_cell(value: Any) -> str:
    """Encode a single table cell.

    Args:
        value: Cell value; booleans become ``true``/``false``.

    Returns:
        The raw or quoted cell text.

    Examples:
        >>> _encode_cell(True)
        'true'
        >>> _encode_cell("plain text")
        'plain text'
        >>> _encode_cell('a "b" c')
        '"a ""b"" c"'
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    text = str(value)
    if any(trigger in text for trigger in _QUOTE_TRIGGERS):
        return '"' + text.replace('"', '""') + '"'
    return text


def encode_table(rows: Sequence[Mapping[str, Any]], fields: Sequence[str], label: str, version: str) -> str:
    """Encode uniform records as a TOON table.

    Row order follows input order. With no rows only the header and the
    version trailer are written.

    Args:
        rows: Records keyed by field name.
        fields: Column names in output order.
        label: Table name written before ``[count]``.
        version: Value of the ``version:`` trailer.

    Returns:
        TOON table text.

    Examples:
        >>> print(encode_table([], ["id", "name"], "projects", "2.0"))
        projects[0]{id,name}:
        <BLANKLINE>
        version: 2.0
    """
    header = f"{label}[{len(rows)}]" + "{" + ",".join(fields) + "}:"
    lines = [header]
    for row in rows:
        lines.append(_ROW_INDENT + ",".join(_encode_cell(row[field]) for field in fields))
    return "\n".join(lines) + f"\n\nversion: {version}"


# =============================================================================
# Table decoder
# =============================================================================


def _split_logical_lines(s: str) -> List[str]:
    """Split on newlines that are not inside a quoted cell.

    Args:
        s: Table body.

    Returns:
        Logical rows, newlines inside quotes preserved.

    Examples:
        >>> _split_logical_lines('a,b\\n"c\\nd",e')
        ['a,b', '"c\\nd",e']
    """
    lines = []
    current: List[str] = []
    in_quotes = False
    for char in s:
        if char == '"':
            in_quotes = not in_quotes
        elif char == "\n" and not in_quotes:
            lines.append("".join(current))
            current = []
            continue
        current.append(char)
    lines.append("".join(current))
    return lines


def _split_row_values(row: str) -> Tuple[List[str], bool]:
    """Split a row into cells, respecting quotes.

    Args:
        row: One logical row, indentation removed.

    Returns:
        Tuple of (cells, terminated) where ``terminated`` is False when a
        quoted cell was left open.

    Examples:
        >>> _split_row_values('id1,"a, ""b"" c",false')
        (['id1', 'a, "b" c', 'false'], True)
        >>> _split_row_values('id1,"open')
        (['id1', 'open'], False)
    """
    values = []
    current: List[str] = []
    in_quotes = False
    i = 0
    while i < len(row):
        char = row[i]
        if char == '"':
            if in_quotes and i + 1 < len(row) and row[i + 1] == '"':
                current.append('"')
                i += 2
                continue
            in_quotes = not in_quotes
        elif char == "," and not in_quotes:
            values.append("".join(current))
            current = []
        else:
            current.append(char)
        i += 1
    values.append("".join(current))
    return values, not in_quotes


def decode_table(text: str, label: str, fields: Sequence[str]) -> List[Dict[str, str]]:
    """Decode a TOON table into string-valued records.

    The ``[count]`` in the header is informational and not checked against
    the number of rows.

    Args:
        text: TOON table text.
        label: Expected table name.
        fields: Expected column names, in order.

    Returns:
        One dict per data row.

    Raises:
        FormatError: On a missing or mismatched header, a row with the wrong
            number of cells, an empty cell or an unterminated quote.

    Examples:
        >>> decode_table("todos[0]{id}:\\n\\nversion: 1.0", "todos", ["id"])
        []
        >>> try:
        ...     decode_table("invalid content", "todos", ["id"])
        ... except FormatError as e:
        ...     print(e)
        Failed to decode todos TOON format: Invalid TOON header format
    """
    operation = f"decode_table:{label}"

    def fail(detail: str, row: Optional[int] = None) -> FormatError:
        return FormatError(f"Failed to decode {label} TOON format: {detail}", operation=operation, row=row)

    body, separator, _ = text.rpartition(_VERSION_TRAILER)
    content = (body if separator else text).strip()
    if not content:
        raise fail("Empty TOON content")

    header, _, rest = content.partition("\n")
    signature = "{" + ",".join(fields) + "}:"
    if f"{label}[" not in header or signature not in header:
        raise fail("Invalid TOON header format")

    data_rows = [line.strip() for line in _split_logical_lines(rest) if line.strip()]

    records = []
    for index, row in enumerate(data_rows):
        values, terminated = _split_row_values(row)
        if not terminated:
            raise fail(f"Invalid TOON row {index}: unterminated quoted field", row=index)
        if len(values) != len(fields):
            raise fail(f"Invalid TOON row {index}: expected {len(fields)} fields, got {len(values)}", row=index)
        if not all(values):
            raise fail(f"Invalid TOON row {index}: missing required field", row=index)
        records.append(dict(zip(fields, values)))
    return records


# =============================================================================
# Typed tables
# =============================================================================


@dataclass(frozen=True)
class TableSpec:
    """Binds a record model to its table label and version tag.

    Examples:
        >>> TODOS_TABLE.fields
        ('id', 'text', 'completed', 'createdAt')
        >>> PROJECTS_TABLE.label, PROJECTS_TABLE.version
        ('projects', '2.0')
    """

    label: str
    model: Type[RecordModel]
    version: str

    @property
    def fields(self) -> Tuple[str, ...]:
        """Column names in on-disk order."""
        return self.model.WIRE_FIELDS


TODOS_TABLE = TableSpec(label="todos", model=Todo, version="1.0")
PROJECTS_TABLE = TableSpec(label="projects", model=Project, version="2.0")


def encode_records(records: Sequence[RecordModel], table: TableSpec) -> str:
    """Encode model instances as a TOON table.

    Args:
        records: Records of ``table.model``.
        table: Table description.

    Returns:
        TOON table text.
    """
    return encode_table([record.to_row() for record in records], table.fields, table.label, table.version)


def decode_records(text: str, table: TableSpec) -> List[Any]:
    """Decode a TOON table into model instances.

    Args:
        text: TOON table text.
        table: Table description.

    Returns:
        Records of ``table.model``.

    Raises:
        FormatError: If the table is malformed or a row fails model validation.
    """
    rows = decode_table(text, table.label, table.fields)
    records = []
    for index, row in enumerate(rows):
        try:
            records.append(table.model.from_row(row))
        except ValidationError as e:
            raise FormatError(
                f"Failed to decode {table.label} TOON format: Invalid TOON row {index}: {e.errors()[0]['msg']}",
                operation=f"decode_table:{table.label}",
                row=index,
            ) from e
    return records


# =============================================================================
# Settings codec
# =============================================================================


def encode_settings(settings: AppSettings) -> str:
    """Encode settings as three ``key: value`` lines.

    Args:
        settings: Settings to encode.

    Returns:
        Settings text without a trailing newline.

    Examples:
        >>> from toontodo.schemas import AppSettings
        >>> print(encode_settings(AppSettings(activeProjectId="p1")))
        activeProjectId: p1
        windowBounds{x,y,width,height}: 100,100,600,400
        version: 1.0
    """
    bounds = settings.window_bounds
    return "\n".join(
        [
            f"{ACTIVE_PROJECT_KEY}: {settings.active_project_id}",
            f"{WINDOW_BOUNDS_KEY}: {bounds.x},{bounds.y},{bounds.width},{bounds.height}",
            f"{VERSION_KEY}: {settings.version}",
        ]
    )


def _parse_window_bounds(value: str) -> WindowBounds:
    """Parse ``x,y,width,height``.

    Args:
        value: Text after the ``windowBounds{...}:`` prefix.

    Returns:
        WindowBounds: Parsed bounds.

    Raises:
        FormatError: Unless the value is exactly four integers.
    """
    parts = [part.strip() for part in value.split(",")]
    try:
        if len(parts) != 4:
            raise ValueError(f"expected 4 values, got {len(parts)}")
        x, y, width, height = (int(part) for part in parts)
    except ValueError as e:
        raise FormatError(f"Failed to decode settings TOON format: Invalid windowBounds values: {value}", operation="decode_settings") from e
    return WindowBounds(x=x, y=y, width=width, height=height)


# Recognized line prefixes -> (settings field, typed parser)
_SETTINGS_LINE_PARSERS: Dict[str, Tuple[str, Callable[[str], Any]]] = {
    f"{ACTIVE_PROJECT_KEY}:": ("active_project_id", lambda value: value),
    f"{WINDOW_BOUNDS_KEY}:": ("window_bounds", _parse_window_bounds),
    f"{VERSION_KEY}:": ("version", lambda value: value or DEFAULT_SETTINGS_VERSION),
}


def decode_settings(text: str) -> AppSettings:
    """Decode settings text.

    Unknown lines are ignored and missing lines fall back to defaults.

    Args:
        text: Settings file content.

    Returns:
        AppSettings: Decoded settings.

    Raises:
        FormatError: If the window bounds are not four integers.

    Examples:
        >>> decode_settings("version: 1.0\\nactiveProjectId: p9").active_project_id
        'p9'
        >>> decode_settings("").window_bounds.as_tuple()
        (100, 100, 600, 400)
    """
    values: Dict[str, Any] = {}
    for line in text.splitlines():
        stripped = line.strip()
        for prefix, (field_name, parser) in _SETTINGS_LINE_PARSERS.items():
            if stripped.startswith(prefix):
                values[field_name] = parser(stripped[len(prefix):].strip())
                break
    return AppSettings(**values)
