# -*- coding: utf-8 -*-
"""Location: ./toontodo/services/storage_service.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0

Storage Service Implementation.
This module wraps the TOON codecs with disk I/O. It handles:
- Missing files, which load as the type's default (empty list / default settings)
- Corrupt files, which are renamed aside to ``{path}.corrupt.{millis}`` and reported
  as ``CorruptFileError``; the original bytes are never deleted
- Saves that create parent directories and replace the target file atomically
- Project-scoped todo files named ``todos-{projectId}.toon``

Examples:
    >>> from pathlib import Path
    >>> todos_path("/data", "p1") == Path("/data/todos-p1.toon")
    True
"""

# Standard
from functools import partial
from pathlib import Path
from typing import Callable, Generic, List, Optional, Tuple, TypeVar, Union

# First-Party
from toontodo.schemas import AppSettings, Project, Todo
from toontodo.services.logging_service import LoggingService
from toontodo.toon import decode_records, decode_settings, encode_records, encode_settings, FormatError, PROJECTS_TABLE, TableSpec, TODOS_TABLE
from toontodo.utils import fs, ids

# Initialize logging service first
logging_service = LoggingService()
logger = logging_service.get_logger(__name__)

T = TypeVar("T")
PathLike = Union[str, Path]


class StorageError(Exception):
    """Base class for storage errors.

    Attributes:
        path: File the failed operation targeted.

    Examples:
        >>> err = StorageError("/data/todos.toon", "boom")
        >>> str(err)
        'boom'
        >>> err.path
        PosixPath('/data/todos.toon')
    """

    def __init__(self, path: PathLike, message: str):
        """Initialize the error.

        Args:
            path: Target file.
            message: Description.
        """
        super().__init__(message)
        self.path = Path(path)


class CorruptFileError(StorageError):
    """Raised when a file exists but its content cannot be decoded.

    The file has been renamed to ``backup_path`` unless that rename failed,
    in which case ``quarantined`` is False and the file is still at ``path``.

    Examples:
        >>> err = CorruptFileError("/d/todos.toon", "/d/todos.toon.corrupt.1", quarantined=True)
        >>> str(err)
        'Corrupt file backed up to /d/todos.toon.corrupt.1'
        >>> err.backup_path.name
        'todos.toon.corrupt.1'
    """

    def __init__(self, path: PathLike, backup_path: PathLike, quarantined: bool):
        """Initialize the error.

        Args:
            path: Original file.
            backup_path: Quarantine location.
            quarantined: Whether the rename succeeded.
        """
        super().__init__(path, f"Corrupt file backed up to {backup_path}" if quarantined else f"Corrupt file {path} (backup to {backup_path} failed)")
        self.backup_path = Path(backup_path)
        self.quarantined = quarantined


class LoadError(StorageError):
    """Raised when a file exists but cannot be read (permissions, not a file)."""


class SaveError(StorageError):
    """Raised when writing a file fails. The in-memory state is unaffected and the save may be retried."""


class DeleteError(StorageError):
    """Raised when deleting a file fails for a reason other than it being absent."""


class ToonFileStore(Generic[T]):
    """Disk persistence for one kind of TOON document.

    Args:
        label: Entity name used in log messages.
        encoder: Turns a value into TOON text.
        decoder: Parses TOON text, raising ``FormatError`` on bad input.
        default_factory: Produces the value returned for a missing file.
    """

    def __init__(self, label: str, encoder: Callable[[T], str], decoder: Callable[[str], T], default_factory: Callable[[], T]) -> None:
        self.label = label
        self._encoder = encoder
        self._decoder = decoder
        self._default_factory = default_factory

    async def load(self, path: PathLike) -> T:
        """Load and decode ``path``.

        Args:
            path: File to read.

        Returns:
            The decoded value, or the default when the file does not exist.

        Raises:
            CorruptFileError: If the content fails to decode.
            LoadError: If the file exists but cannot be read.
        """
        path = Path(path)
        try:
            raw = await fs.read_bytes(path)
        except FileNotFoundError:
            logger.info(f"No {self.label} file found, starting fresh: {path}")
            return self._default_factory()
        except OSError as e:
            raise LoadError(path, f"Failed to read {self.label} file {path}: {e}") from e

        try:
            value = self._decoder(raw.decode("utf-8-sig"))
        except (FormatError, UnicodeDecodeError) as e:
            backup_path, quarantined = await self._quarantine(path, e)
            raise CorruptFileError(path, backup_path, quarantined) from e

        logger.debug(f"Loaded {self.label} from {path}")
        return value

    async def _quarantine(self, path: Path, cause: Exception) -> Tuple[Path, bool]:
        """Rename a corrupt file aside, best effort.

        Args:
            path: Corrupt file.
            cause: Decode error, for the log.

        Returns:
            Tuple of (backup path, whether the rename succeeded).
        """
        backup_path = path.with_name(f"{path.name}.corrupt.{ids.now_millis()}")
        try:
            await fs.rename(path, backup_path)
        except OSError as rename_error:
            logger.error(f"Failed to backup corrupt {self.label} file {path}: {rename_error}")
            return backup_path, False
        logger.error(f"Corrupt {self.label} file {path} backed up to {backup_path}: {cause}")
        return backup_path, True

    async def save(self, path: PathLike, value: T) -> None:
        """Encode ``value`` and write it to ``path``.

        Args:
            path: Destination file; missing parent directories are created.
            value: Value to persist.

        Raises:
            SaveError: If the directory or file cannot be written.
        """
        path = Path(path)
        text = self._encoder(value)
        try:
            await fs.make_dirs(path.parent)
            await fs.write_bytes_atomic(path, text.encode("utf-8"))
        except OSError as e:
            raise SaveError(path, f"Failed to save {self.label} to {path}: {e}") from e
        logger.debug(f"Saved {self.label} to {path}")


def table_store(table: TableSpec) -> "ToonFileStore[List]":
    """Build a file store for a record table.

    Args:
        table: Table description.

    Returns:
        ToonFileStore: Store whose default value is an empty list.
    """
    return ToonFileStore(table.label, partial(encode_records, table=table), partial(decode_records, table=table), list)


todo_store: "ToonFileStore[List[Todo]]" = table_store(TODOS_TABLE)
project_store: "ToonFileStore[List[Project]]" = table_store(PROJECTS_TABLE)
settings_store: "ToonFileStore[AppSettings]" = ToonFileStore("settings", encode_settings, decode_settings, AppSettings)


# --- Record collections ---


async def load_records(path: PathLike, table: TableSpec = TODOS_TABLE) -> List:
    """Load a record table.

    Args:
        path: File to read.
        table: Table description.

    Returns:
        List of records; empty when the file is missing.
    """
    return await table_store(table).load(path)


async def save_records(path: PathLike, records: List, table: TableSpec = TODOS_TABLE) -> None:
    """Save a record table.

    Args:
        path: Destination file.
        records: Records of ``table.model``.
        table: Table description.
    """
    await table_store(table).save(path, records)


async def load_todos(path: PathLike) -> List[Todo]:
    """Load todos from ``path``.

    Args:
        path: Todo file.

    Returns:
        List[Todo]: Todos in file order.
    """
    return await todo_store.load(path)


async def save_todos(path: PathLike, todos: List[Todo]) -> None:
    """Save todos to ``path``.

    Args:
        path: Todo file.
        todos: Todos to write.
    """
    await todo_store.save(path, todos)


async def load_projects(path: PathLike) -> List[Project]:
    """Load projects from ``path``.

    Args:
        path: Projects file.

    Returns:
        List[Project]: Projects in file order.
    """
    return await project_store.load(path)


async def save_projects(path: PathLike, projects: List[Project]) -> None:
    """Save projects to ``path``.

    Args:
        path: Projects file.
        projects: Projects to write.
    """
    await project_store.save(path, projects)


# --- Project-scoped todo files ---


def todos_path(base_dir: PathLike, project_id: str) -> Path:
    """Return the todo file owned by ``project_id``.

    Args:
        base_dir: Data directory.
        project_id: Owning project id.

    Returns:
        Path: ``{base_dir}/todos-{project_id}.toon``.
    """
    return Path(base_dir) / f"todos-{project_id}.toon"


async def load_project_todos(base_dir: PathLike, project_id: str) -> List[Todo]:
    """Load the todos of one project.

    Args:
        base_dir: Data directory.
        project_id: Owning project id.

    Returns:
        List[Todo]: The project's todos.
    """
    return await load_todos(todos_path(base_dir, project_id))


async def save_project_todos(base_dir: PathLike, project_id: str, todos: List[Todo]) -> None:
    """Save the todos of one project.

    Args:
        base_dir: Data directory.
        project_id: Owning project id.
        todos: Todos to write.
    """
    await save_todos(todos_path(base_dir, project_id), todos)


# --- Settings ---


async def load_settings(path: PathLike) -> AppSettings:
    """Load settings, falling back to defaults on any failure.

    A corrupt settings file is still quarantined; the error is logged instead
    of raised.

    Args:
        path: Settings file.

    Returns:
        AppSettings: Loaded or default settings.
    """
    try:
        return await settings_store.load(path)
    except StorageError as e:
        logger.error(f"Settings load failed, using defaults: {e}")
        return AppSettings()


async def save_settings(path: PathLike, settings: AppSettings) -> None:
    """Save settings.

    Args:
        path: Settings file.
        settings: Settings to write.
    """
    await settings_store.save(path, settings)


# --- Deletion ---


async def delete_record_file(path: PathLike) -> None:
    """Delete a record file; a missing file counts as success.

    Args:
        path: File to delete.

    Raises:
        DeleteError: For failures other than the file being absent.
    """
    try:
        await fs.unlink(path)
    except FileNotFoundError:
        logger.debug(f"Nothing to delete at {path}")
        return
    except OSError as e:
        raise DeleteError(path, f"Failed to delete {path}: {e}") from e
    logger.info(f"Deleted {path}")


def find_corrupt_backups(path: PathLike, names: List[str]) -> List[Path]:
    """Filter directory entries down to quarantined copies of ``path``.

    Args:
        path: Original file.
        names: Entry names in ``path``'s directory.

    Returns:
        List[Path]: Matching ``{name}.corrupt.*`` paths.

    Examples:
        >>> [p.name for p in find_corrupt_backups("/d/todos.toon", ["todos.toon.corrupt.5", "x"])]
        ['todos.toon.corrupt.5']
    """
    path = Path(path)
    prefix = f"{path.name}.corrupt."
    return [path.parent / name for name in names if name.startswith(prefix)]


def describe_backup(error: Optional[CorruptFileError]) -> str:
    """Return the user-facing message for a corrupt-file error.

    Args:
        error: The error, or None.

    Returns:
        str: Message naming the backup location.
    """
    if error is None:
        return ""
    if error.quarantined:
        return f"Your data file was unreadable and has been moved to {error.backup_path}. Starting with an empty list."
    return f"Your data file {error.path} is unreadable and could not be moved aside. Starting with an empty list."
