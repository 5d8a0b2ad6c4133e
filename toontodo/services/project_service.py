# -*- coding: utf-8 -*-
"""Location: ./toontodo/services/project_service.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0

Project Service Implementation.
In-memory project list backed by ``projects.toon``. Handles:
- Project creation, renaming and case-insensitive search
- Deletion, which also removes the project's ``todos-{id}.toon``
- The rule that the last remaining project cannot be deleted
"""

# Standard
from pathlib import Path
from typing import List, Optional, Union

# Third-Party
from pydantic import ValidationError

# First-Party
from toontodo.schemas import Project
from toontodo.services.logging_service import LoggingService
from toontodo.services.storage_service import delete_record_file, DeleteError, load_projects, save_projects, SaveError, todos_path
from toontodo.utils import ids

# Initialize logging service first
logging_service = LoggingService()
logger = logging_service.get_logger(__name__)


class ProjectError(Exception):
    """Base class for project-related errors.

    Examples:
        >>> str(ProjectError("Cannot delete last project"))
        'Cannot delete last project'
    """


class ProjectNotFoundError(ProjectError):
    """Raised when a project id does not exist."""


class ProjectValidationError(ProjectError):
    """Raised when a project name is blank."""


class ProjectService:
    """Project list of the installation."""

    def __init__(self, path: Union[str, Path], base_dir: Optional[Union[str, Path]] = None) -> None:
        """Initialize the service.

        Args:
            path: Projects file.
            base_dir: Directory of the per-project todo files; defaults to the
                directory of ``path``.
        """
        self.path = Path(path)
        self.base_dir = Path(base_dir) if base_dir is not None else self.path.parent
        self._projects: List[Project] = []
        self.last_save_error: Optional[SaveError] = None

    async def load(self) -> None:
        """Replace the in-memory list with the file content.

        Raises:
            CorruptFileError: If ``projects.toon`` is corrupt.
        """
        self._projects = await load_projects(self.path)
        logger.info(f"Projects loaded: {len(self._projects)} from {self.path}")

    async def save(self) -> bool:
        """Persist the list. Never raises.

        Returns:
            bool: True on success, False if the write failed.
        """
        try:
            await save_projects(self.path, self._projects)
        except SaveError as e:
            self.last_save_error = e
            logger.error(f"Projects save failed ({len(self._projects)} projects): {e}")
            return False
        self.last_save_error = None
        return True

    @staticmethod
    def _clean_name(name: str) -> str:
        """Strip a project name and reject blanks.

        Args:
            name: Raw name.

        Returns:
            str: Stripped name.

        Raises:
            ProjectValidationError: If the name is blank.
        """
        cleaned = name.strip()
        if not cleaned:
            raise ProjectValidationError("Project name cannot be empty")
        return cleaned

    async def create(self, name: str) -> Project:
        """Create and persist a project.

        Args:
            name: Project name.

        Returns:
            Project: The new project.

        Raises:
            ProjectValidationError: If the name is blank or not a valid string.
        """
        try:
            project = Project(id=ids.generate_id(), name=self._clean_name(name), created_at=ids.now_iso())
        except ValidationError as e:
            raise ProjectValidationError(f"Invalid project name: {e.errors()[0]['msg']}") from e
        self._projects.append(project)
        await self.save()
        logger.info(f"Project created: {project.id} ({project.name})")
        return project

    async def rename(self, project_id: str, new_name: str) -> Project:
        """Rename a project.

        Args:
            project_id: Project id.
            new_name: New name.

        Returns:
            Project: The renamed project.

        Raises:
            ProjectNotFoundError: If no project has that id.
            ProjectValidationError: If the name is blank or not a valid string.
        """
        project = self.find_by_id(project_id)
        if project is None:
            raise ProjectNotFoundError(f"Project not found: {project_id}")
        try:
            project.name = self._clean_name(new_name)
        except ValidationError as e:
            raise ProjectValidationError(f"Invalid project name: {e.errors()[0]['msg']}") from e
        await self.save()
        return project

    async def delete(self, project_id: str) -> None:
        """Delete a project and its todo file.

        Args:
            project_id: Project id.

        Raises:
            ProjectError: If it is the last remaining project.
            ProjectNotFoundError: If no project has that id.
        """
        if len(self._projects) <= 1:
            raise ProjectError("Cannot delete last project")
        if self.find_by_id(project_id) is None:
            raise ProjectNotFoundError(f"Project not found: {project_id}")

        self._projects = [p for p in self._projects if p.id != project_id]
        try:
            await delete_record_file(todos_path(self.base_dir, project_id))
        except DeleteError as e:
            logger.error(f"Failed to delete todos file for project {project_id}: {e}")
        await self.save()
        logger.info(f"Project deleted: {project_id}")

    def get_all(self) -> List[Project]:
        """Return a shallow copy of all projects."""
        return list(self._projects)

    def find_by_id(self, project_id: str) -> Optional[Project]:
        """Return the project with ``project_id``, if any."""
        return next((p for p in self._projects if p.id == project_id), None)

    def search(self, query: str) -> List[Project]:
        """Return projects whose name contains ``query``, ignoring case.

        Args:
            query: Search text; empty returns every project.

        Returns:
            List[Project]: Matches in list order.
        """
        if not query:
            return list(self._projects)
        needle = query.lower()
        return [p for p in self._projects if needle in p.name.lower()]
