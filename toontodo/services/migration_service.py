# -*- coding: utf-8 -*-
"""Location: ./toontodo/services/migration_service.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0

Migration Service Implementation.
Upgrades the legacy single-file layout (``todos.toon``) to the multi-project
layout (``projects.toon``, ``settings.toon``, ``todos-{projectId}.toon``).

The routine keeps no state of its own: every run re-derives what to do from the
files present in the data directory, so running it twice is a no-op the second
time. Steps run strictly in order and the first failure stops the run. Files
written by earlier steps stay on disk and ``todos.toon.backup`` is never removed,
so an interrupted upgrade can always be recovered by hand.

Examples:
    >>> MigrationResult.skipped(SkipReason.FRESH_INSTALL).reason.value
    'fresh-install'
    >>> MigrationResult.succeeded("p1").status
    <MigrationStatus.SUCCESS: 'success'>
"""

# Standard
from enum import Enum
from pathlib import Path
import re
from typing import List, Optional, Union

# Third-Party
from pydantic import BaseModel, ConfigDict

# First-Party
from toontodo.schemas import AppSettings, default_window_bounds, Project
from toontodo.services.logging_service import LoggingService
from toontodo.services.storage_service import save_projects, save_settings, todos_path
from toontodo.utils import fs, ids

# Initialize logging service first
logging_service = LoggingService()
logger = logging_service.get_logger(__name__)

PathLike = Union[str, Path]

LEGACY_TODOS_FILE = "todos.toon"
LEGACY_BACKUP_FILE = "todos.toon.backup"
PROJECTS_FILE = "projects.toon"
SETTINGS_FILE = "settings.toon"
DEFAULT_PROJECT_NAME = "Default"

_PROJECT_TODOS_RE = re.compile(r"^todos-([0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12})\.toon$")


class MigrationStatus(str, Enum):
    """Outcome of a migration attempt.

    Examples:
        >>> MigrationStatus.SKIPPED.value
        'skipped'
        >>> MigrationStatus("error")
        <MigrationStatus.ERROR: 'error'>
    """

    SUCCESS = "success"
    SKIPPED = "skipped"
    ERROR = "error"


class SkipReason(str, Enum):
    """Why a migration attempt did nothing."""

    FRESH_INSTALL = "fresh-install"
    ALREADY_MIGRATED = "already-migrated"
    NOT_NEEDED = "not-needed"


class MigrationStep(str, Enum):
    """Steps of the upgrade, in execution order."""

    BACKUP = "backup"
    CREATE_PROJECT = "create-project"
    RENAME_TODOS = "rename-todos"
    WRITE_PROJECTS = "write-projects"
    WRITE_SETTINGS = "write-settings"


class MigrationError(Exception):
    """A migration step failed. The underlying error is chained as ``__cause__``.

    Examples:
        >>> err = MigrationError(MigrationStep.RENAME_TODOS, OSError("disk full"))
        >>> str(err)
        'Migration failed at step rename-todos: disk full'
        >>> err.step.value
        'rename-todos'
    """

    def __init__(self, step: MigrationStep, cause: BaseException):
        """Initialize the error.

        Args:
            step: Step that failed.
            cause: Underlying filesystem or codec error.
        """
        super().__init__(f"Migration failed at step {step.value}: {cause}")
        self.step = step
        self.cause = cause
        self.__cause__ = cause


class MigrationResult(BaseModel):
    """Tagged outcome of ``run_migration``: success, skipped or error.

    Callers branch on ``status``; only the matching attribute is set.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    status: MigrationStatus
    project_id: Optional[str] = None
    reason: Optional[SkipReason] = None
    error: Optional[MigrationError] = None

    @classmethod
    def succeeded(cls, project_id: str) -> "MigrationResult":
        """Build a success result.

        Args:
            project_id: Id of the created Default project.

        Returns:
            MigrationResult: ``success`` carrying the project id.
        """
        return cls(status=MigrationStatus.SUCCESS, project_id=project_id)

    @classmethod
    def skipped(cls, reason: SkipReason) -> "MigrationResult":
        """Build a skipped result.

        Args:
            reason: Why nothing was done.

        Returns:
            MigrationResult: ``skipped`` carrying the reason.
        """
        return cls(status=MigrationStatus.SKIPPED, reason=reason)

    @classmethod
    def failed(cls, error: MigrationError) -> "MigrationResult":
        """Build an error result.

        Args:
            error: The step failure.

        Returns:
            MigrationResult: ``error`` carrying the failure.
        """
        return cls(status=MigrationStatus.ERROR, error=error)

    def to_dict(self) -> dict:
        """Convert the result to a JSON-friendly dict.

        Returns:
            dict: ``status`` plus the populated detail field.

        Examples:
            >>> MigrationResult.skipped(SkipReason.NOT_NEEDED).to_dict()
            {'status': 'skipped', 'reason': 'not-needed'}
        """
        data: dict = {"status": self.status.value}
        if self.project_id is not None:
            data["project_id"] = self.project_id
        if self.reason is not None:
            data["reason"] = self.reason.value
        if self.error is not None:
            data["error"] = str(self.error)
            data["step"] = self.error.step.value
        return data


async def needs_migration(base_dir: PathLike) -> bool:
    """Check whether the legacy layout is present and not yet upgraded.

    Args:
        base_dir: Data directory.

    Returns:
        bool: True when ``todos.toon`` exists and ``projects.toon`` does not.
    """
    base = Path(base_dir)
    has_todos = await fs.exists(base / LEGACY_TODOS_FILE)
    has_projects = await fs.exists(base / PROJECTS_FILE)
    migration_needed = has_todos and not has_projects
    logger.info(f"Migration check: has_todos={has_todos}, has_projects={has_projects}, migration_needed={migration_needed}")
    return migration_needed


async def _write_new_layout(base: Path, project: Project) -> None:
    """Write ``projects.toon`` and ``settings.toon`` for a single project.

    Args:
        base: Data directory.
        project: The only project of the new layout.

    Raises:
        MigrationError: If either file cannot be written.
    """
    projects_path = base / PROJECTS_FILE
    try:
        await save_projects(projects_path, [project])
    except Exception as e:
        raise MigrationError(MigrationStep.WRITE_PROJECTS, e) from e
    logger.info(f"Projects file created: {projects_path}")

    settings_path = base / SETTINGS_FILE
    settings = AppSettings(active_project_id=project.id, window_bounds=default_window_bounds(), version="1.0")
    try:
        await save_settings(settings_path, settings)
    except Exception as e:
        raise MigrationError(MigrationStep.WRITE_SETTINGS, e) from e
    logger.info(f"Settings file created: {settings_path}, active_project_id={project.id}")


async def run_migration(base_dir: PathLike) -> MigrationResult:
    """Upgrade the legacy layout in ``base_dir`` if needed.

    Steps, each completing before the next:

    1. copy ``todos.toon`` to ``todos.toon.backup``
    2. create the ``Default`` project (new UUID, current timestamp)
    3. rename ``todos.toon`` to ``todos-{projectId}.toon``
    4. write ``projects.toon`` with that single project
    5. write ``settings.toon`` with the project active and default window bounds

    Args:
        base_dir: Data directory.

    Returns:
        MigrationResult: ``success`` with the new project id, ``skipped`` with a
        reason, or ``error`` with the failed step. Step failures are never raised.
    """
    base = Path(base_dir)
    legacy_path = base / LEGACY_TODOS_FILE
    backup_path = base / LEGACY_BACKUP_FILE

    has_todos = await fs.exists(legacy_path)
    has_projects = await fs.exists(base / PROJECTS_FILE)

    if not has_todos and not has_projects:
        logger.info("Migration skipped: fresh install (no todos.toon)")
        return MigrationResult.skipped(SkipReason.FRESH_INSTALL)
    if has_projects:
        logger.info("Migration skipped: already migrated (projects.toon exists)")
        return MigrationResult.skipped(SkipReason.ALREADY_MIGRATED)
    if not has_todos:
        logger.info("Migration skipped: not needed (no todos.toon)")
        return MigrationResult.skipped(SkipReason.NOT_NEEDED)

    logger.info(f"Migration started in {base}")
    try:
        try:
            await fs.copy_file(legacy_path, backup_path)
        except OSError as e:
            raise MigrationError(MigrationStep.BACKUP, e) from e
        logger.info(f"Backup created: {legacy_path} -> {backup_path}")

        try:
            project = Project(id=ids.generate_id(), name=DEFAULT_PROJECT_NAME, created_at=ids.now_iso())
        except Exception as e:
            raise MigrationError(MigrationStep.CREATE_PROJECT, e) from e
        logger.info(f"Default project created: id={project.id}")

        new_todos_path = todos_path(base, project.id)
        try:
            await fs.rename(legacy_path, new_todos_path)
        except OSError as e:
            raise MigrationError(MigrationStep.RENAME_TODOS, e) from e
        logger.info(f"Todos file renamed: {LEGACY_TODOS_FILE} -> {new_todos_path.name}")

        await _write_new_layout(base, project)
    except MigrationError as e:
        logger.error(f"Migration failed in {base}: {e}")
        return MigrationResult.failed(e)

    logger.warning(f"Migration completed successfully: backup={backup_path}, project_id={project.id}, project_name={project.name}")
    return MigrationResult.succeeded(project.id)


async def find_orphaned_todo_files(base_dir: PathLike) -> List[str]:
    """List project ids of ``todos-{uuid}.toon`` files in ``base_dir``.

    Args:
        base_dir: Data directory.

    Returns:
        List[str]: Project ids, sorted.
    """
    names = await fs.list_dir(base_dir)
    return [match.group(1) for match in (_PROJECT_TODOS_RE.match(name) for name in names) if match]


async def needs_recovery(base_dir: PathLike) -> bool:
    """Detect an upgrade that stopped after renaming the legacy file.

    That state has a backup and exactly one project todo file, but neither
    ``todos.toon`` nor ``projects.toon``.

    Args:
        base_dir: Data directory.

    Returns:
        bool: True when ``recover_migration`` would act.
    """
    base = Path(base_dir)
    if await fs.exists(base / LEGACY_TODOS_FILE) or await fs.exists(base / PROJECTS_FILE):
        return False
    if not await fs.exists(base / LEGACY_BACKUP_FILE):
        return False
    return len(await find_orphaned_todo_files(base)) == 1


async def recover_migration(base_dir: PathLike) -> MigrationResult:
    """Finish an upgrade interrupted between the rename and the new files.

    Re-runs the last two steps for the single orphaned ``todos-{uuid}.toon``,
    adopting its id for the ``Default`` project.

    Args:
        base_dir: Data directory.

    Returns:
        MigrationResult: ``success`` with the adopted id, ``skipped`` with
        ``not-needed`` when there is nothing to recover, or ``error``.
    """
    base = Path(base_dir)
    if not await needs_recovery(base):
        return MigrationResult.skipped(SkipReason.NOT_NEEDED)

    (project_id,) = await find_orphaned_todo_files(base)
    logger.warning(f"Recovering interrupted migration in {base}: adopting todos-{project_id}.toon")
    project = Project(id=project_id, name=DEFAULT_PROJECT_NAME, created_at=ids.now_iso())
    try:
        await _write_new_layout(base, project)
    except MigrationError as e:
        logger.error(f"Migration recovery failed in {base}: {e}")
        return MigrationResult.failed(e)
    logger.warning(f"Migration recovery completed: project_id={project_id}")
    return MigrationResult.succeeded(project_id)
