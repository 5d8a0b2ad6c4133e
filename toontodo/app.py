# -*- coding: utf-8 -*-
"""Location: ./toontodo/app.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0

Application bootstrap.
Wires migration and the three stores together in startup order:

1. upgrade a legacy ``todos.toon`` layout, or finish an interrupted upgrade
2. load settings, then projects
3. make sure at least one project exists and the active project id is valid
4. load the todos of the active project

Corrupt files never stop startup: the file has already been moved aside, a
message is queued in ``notifications`` and the affected list starts empty.

A failed upgrade does stop startup. Creating the initial project would write
``projects.toon``, which marks the directory as upgraded and would hide the
legacy todos from every later run; instead ``UpgradePendingError`` is raised and
the next start retries the upgrade.
"""

# Standard
from pathlib import Path
from typing import List, Optional, Union

# First-Party
from toontodo.schemas import Project
from toontodo.services.logging_service import LoggingService
from toontodo.services.migration_service import (
    DEFAULT_PROJECT_NAME,
    MigrationResult,
    MigrationStatus,
    needs_migration,
    needs_recovery,
    PROJECTS_FILE,
    recover_migration,
    run_migration,
    SETTINGS_FILE,
)
from toontodo.services.project_service import ProjectNotFoundError, ProjectService
from toontodo.services.settings_service import SettingsService
from toontodo.services.storage_service import CorruptFileError, describe_backup, todos_path
from toontodo.services.todo_service import TodoService

# Initialize logging service first
logging_service = LoggingService()
logger = logging_service.get_logger(__name__)


class AppError(Exception):
    """Base class for application startup errors."""


class UpgradePendingError(AppError):
    """Raised when the data directory still needs an upgrade that just failed.

    Examples:
        >>> str(UpgradePendingError("Data upgrade failed"))
        'Data upgrade failed'
        >>> isinstance(UpgradePendingError("x"), AppError)
        True
    """


class TodoApp:
    """The running application: settings, projects and the active project's todos."""

    def __init__(self, data_dir: Union[str, Path]) -> None:
        """Initialize the application for a data directory.

        Args:
            data_dir: Directory holding the .toon files.
        """
        self.data_dir = Path(data_dir)
        self.settings = SettingsService(self.data_dir / SETTINGS_FILE)
        self.projects = ProjectService(self.data_dir / PROJECTS_FILE, self.data_dir)
        self.todos: Optional[TodoService] = None
        self.migration_result: Optional[MigrationResult] = None
        self.notifications: List[str] = []

    def _notify(self, message: str) -> None:
        """Queue a user-visible message."""
        logger.warning(message)
        self.notifications.append(message)

    async def migrate(self) -> Optional[MigrationResult]:
        """Run the layout upgrade or recovery if the data directory needs it.

        Returns:
            The migration result, or None when nothing had to be done.
        """
        result: Optional[MigrationResult] = None
        if await needs_migration(self.data_dir):
            result = await run_migration(self.data_dir)
        elif await needs_recovery(self.data_dir):
            result = await recover_migration(self.data_dir)

        if result is not None and result.status == MigrationStatus.ERROR:
            self._notify(f"Data upgrade failed ({result.error}). Your original list is kept in todos.toon.backup.")
        self.migration_result = result
        return result

    async def start(self) -> "TodoApp":
        """Bring the application to a usable state.

        Returns:
            TodoApp: ``self``, for chaining.

        Raises:
            UpgradePendingError: If the legacy layout, or a half-upgraded one,
                is still on disk after the upgrade attempt.
        """
        await self.migrate()
        if await needs_migration(self.data_dir) or await needs_recovery(self.data_dir):
            message = self.notifications[-1] if self.notifications else "Data upgrade is pending."
            raise UpgradePendingError(message)

        await self.settings.load()

        try:
            await self.projects.load()
        except CorruptFileError as e:
            self._notify(describe_backup(e))

        if not self.projects.get_all():
            project = await self.projects.create(DEFAULT_PROJECT_NAME)
            logger.info(f"Created initial project {project.id}")

        active = self.projects.find_by_id(self.settings.active_project_id)
        if active is None:
            active = self.projects.get_all()[0]
            logger.warning(f"Active project {self.settings.active_project_id!r} not found, switching to {active.id}")
            await self.settings.set_active_project(active.id)

        await self._load_todos(active)
        return self

    async def _load_todos(self, project: Project) -> None:
        """Load the todo list of ``project`` as the current list.

        Args:
            project: Project whose todos to load.
        """
        service = TodoService(todos_path(self.data_dir, project.id))
        try:
            await service.load()
        except CorruptFileError as e:
            self._notify(describe_backup(e))
        self.todos = service

    @property
    def active_project(self) -> Optional[Project]:
        """The currently active project."""
        return self.projects.find_by_id(self.settings.active_project_id)

    async def switch_project(self, project_id: str) -> Project:
        """Activate another project and load its todos.

        Args:
            project_id: Project to activate.

        Returns:
            Project: The newly active project.

        Raises:
            ProjectNotFoundError: If no project has that id.
        """
        project = self.projects.find_by_id(project_id)
        if project is None:
            raise ProjectNotFoundError(f"Project not found: {project_id}")
        await self.settings.set_active_project(project.id)
        await self._load_todos(project)
        return project

    async def delete_project(self, project_id: str) -> None:
        """Delete a project, moving to another one if it was active.

        Args:
            project_id: Project to delete.
        """
        was_active = project_id == self.settings.active_project_id
        await self.projects.delete(project_id)
        if was_active:
            await self.switch_project(self.projects.get_all()[0].id)
