# -*- coding: utf-8 -*-
"""Location: ./toontodo/cli.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0

toontodo command line interface.
Terminal front end over the same stores the desktop app uses. Every command
starts the application (running the layout upgrade first when needed) and then
acts on the active project.

Usage:
    toontodo status
    toontodo migrate
    toontodo projects list | add NAME | rename REF NAME | delete REF | switch REF | search QUERY
    toontodo todos list [--active | --completed] | add TEXT | toggle REF | clear

``REF`` is a 1-based position from the matching ``list`` output, or an id
(a unique prefix is enough). ``--json`` prints machine-readable output.
"""

# Standard
import argparse
import asyncio
from pathlib import Path
import sys
from typing import Any, Callable, List, Optional, Sequence, TypeVar

# Third-Party
import orjson

# First-Party
from toontodo import __version__
from toontodo.app import AppError, TodoApp
from toontodo.config import settings
from toontodo.schemas import Project, Todo
from toontodo.services.logging_service import LoggingService
from toontodo.services.migration_service import MigrationStatus, needs_recovery, recover_migration, run_migration
from toontodo.services.project_service import ProjectError
from toontodo.services.storage_service import find_corrupt_backups, StorageError, todos_path
from toontodo.services.todo_service import TodoError
from toontodo.utils import fs

logging_service = LoggingService()
logger = logging_service.get_logger(__name__)

R = TypeVar("R", Project, Todo)


class CLIError(Exception):
    """Base class for CLI-related errors."""


def resolve_ref(items: Sequence[R], ref: str, kind: str) -> R:
    """Find an item by 1-based position, exact id or unique id prefix.

    Args:
        items: Candidates in display order.
        ref: User supplied reference.
        kind: Item kind for error messages.

    Returns:
        The referenced item.

    Raises:
        CLIError: If the reference matches nothing or more than one item.

    Examples:
        >>> from toontodo.schemas import Project
        >>> items = [Project(id="abc1", name="A", createdAt="t"), Project(id="abd2", name="B", createdAt="t")]
        >>> resolve_ref(items, "2", "project").name
        'B'
        >>> resolve_ref(items, "abc", "project").name
        'A'
        >>> try:
        ...     resolve_ref(items, "ab", "project")
        ... except CLIError as e:
        ...     print(e)
        Ambiguous project reference: ab
    """
    if ref.isdigit() and 1 <= int(ref) <= len(items):
        return items[int(ref) - 1]
    exact = [item for item in items if item.id == ref]
    if exact:
        return exact[0]
    matches = [item for item in items if item.id.startswith(ref)]
    if len(matches) == 1:
        return matches[0]
    if matches:
        raise CLIError(f"Ambiguous {kind} reference: {ref}")
    raise CLIError(f"No {kind} matches: {ref}")


def _emit(args: argparse.Namespace, data: Any, lines: List[str]) -> None:
    """Print ``data`` as JSON or ``lines`` as text.

    Args:
        args: Parsed arguments (``json`` flag).
        data: JSON-serializable payload.
        lines: Human readable output.
    """
    if args.json:
        print(orjson.dumps(data, option=orjson.OPT_INDENT_2).decode())
    else:
        for line in lines:
            print(line)


def _todo_lines(todos: List[Todo]) -> List[str]:
    """Format todos as numbered checklist lines.

    Args:
        todos: Todos in display order.

    Returns:
        List[str]: One line per todo, or a placeholder when empty.

    Examples:
        >>> from toontodo.schemas import Todo
        >>> _todo_lines([Todo(id="abcdef123", text="Buy milk", completed=True, createdAt="t")])
        ['  1. [x] Buy milk  (abcdef12)']
        >>> _todo_lines([])
        ['(no todos)']
    """
    if not todos:
        return ["(no todos)"]
    return [f"{i:>3}. [{'x' if t.completed else ' '}] {t.text}  ({t.id[:8]})" for i, t in enumerate(todos, start=1)]


def _project_lines(projects: List[Project], active_id: str) -> List[str]:
    """Format projects as numbered lines, marking the active one with ``*``.

    Args:
        projects: Projects in display order.
        active_id: Id of the active project.

    Returns:
        List[str]: One line per project, or a placeholder when empty.
    """
    if not projects:
        return ["(no projects)"]
    return [f"{'*' if p.id == active_id else ' '}{i:>3}. {p.name}  ({p.id[:8]})" for i, p in enumerate(projects, start=1)]


def _dump(records: Sequence[Any]) -> List[dict]:
    """Dump records with their on-disk field names.

    Args:
        records: Pydantic records.

    Returns:
        List[dict]: JSON-friendly dicts.
    """
    return [record.model_dump(by_alias=True) for record in records]


# --- Commands ---


async def status_command(app: TodoApp, args: argparse.Namespace) -> None:
    """Show the data directory, active project and todo counts.

    Args:
        app: Started application.
        args: Parsed command line arguments.
    """
    project = app.active_project
    todos = app.todos.get_all() if app.todos else []
    names = await fs.list_dir(app.data_dir)
    quarantined = [str(p) for p in find_corrupt_backups(app.data_dir / "projects.toon", names)]
    if project is not None:
        quarantined += [str(p) for p in find_corrupt_backups(todos_path(app.data_dir, project.id), names)]
    data = {
        "data_dir": str(app.data_dir),
        "active_project": project.model_dump(by_alias=True) if project else None,
        "projects": len(app.projects.get_all()),
        "todos": len(todos),
        "completed": sum(1 for t in todos if t.completed),
        "quarantined": quarantined,
        "notifications": app.notifications,
    }
    lines = [
        f"Data directory: {app.data_dir}",
        f"Active project: {project.name if project else '-'}",
        f"Projects: {data['projects']}",
        f"Todos: {data['todos']} ({data['completed']} completed)",
    ]
    lines += [f"Quarantined file: {q}" for q in quarantined]
    lines += [f"! {n}" for n in app.notifications]
    _emit(args, data, lines)


async def migrate_command(data_dir: Path, args: argparse.Namespace) -> None:
    """Run the layout upgrade (or recovery) explicitly and report the outcome.

    Args:
        data_dir: Data directory.
        args: Parsed command line arguments.

    Raises:
        CLIError: If the upgrade failed.
    """
    if await needs_recovery(data_dir):
        result = await recover_migration(data_dir)
    else:
        result = await run_migration(data_dir)
    data = result.to_dict()
    if result.status == MigrationStatus.SUCCESS:
        line = f"Migration completed. Default project: {result.project_id}"
    elif result.status == MigrationStatus.SKIPPED:
        line = f"Migration skipped: {result.reason.value}"
    else:
        raise CLIError(str(result.error))
    _emit(args, data, [line])


async def projects_command(app: TodoApp, args: argparse.Namespace) -> None:
    """Execute a ``projects`` subcommand.

    Args:
        app: Started application.
        args: Parsed command line arguments.
    """
    action = args.action or "list"
    projects = app.projects.get_all()
    if action == "list":
        _emit(args, _dump(projects), _project_lines(projects, app.settings.active_project_id))
    elif action == "search":
        found = app.projects.search(args.query)
        _emit(args, _dump(found), _project_lines(found, app.settings.active_project_id))
    elif action == "add":
        project = await app.projects.create(args.name)
        _emit(args, project.model_dump(by_alias=True), [f"Created project {project.name} ({project.id})"])
    elif action == "rename":
        project = resolve_ref(projects, args.ref, "project")
        await app.projects.rename(project.id, args.name)
        _emit(args, project.model_dump(by_alias=True), [f"Renamed project to {project.name}"])
    elif action == "delete":
        project = resolve_ref(projects, args.ref, "project")
        await app.delete_project(project.id)
        _emit(args, {"deleted": project.id}, [f"Deleted project {project.name}"])
    elif action == "switch":
        project = await app.switch_project(resolve_ref(projects, args.ref, "project").id)
        _emit(args, project.model_dump(by_alias=True), [f"Active project: {project.name}"])


async def todos_command(app: TodoApp, args: argparse.Namespace) -> None:
    """Execute a ``todos`` subcommand on the active project.

    Args:
        app: Started application.
        args: Parsed command line arguments.

    Raises:
        CLIError: If the todo text is blank.
    """
    action = args.action or "list"
    service = app.todos
    if action == "list":
        if getattr(args, "active", False):
            todos = service.get_active()
        elif getattr(args, "completed", False):
            todos = service.get_completed()
        else:
            todos = service.get_all()
        _emit(args, _dump(todos), _todo_lines(todos))
    elif action == "add":
        todo = await service.add(" ".join(args.text))
        if todo is None:
            raise CLIError("Todo text cannot be empty")
        _emit(args, todo.model_dump(by_alias=True), [f"Added: {todo.text}"])
    elif action == "toggle":
        todo = await service.toggle(resolve_ref(service.get_all(), args.ref, "todo").id)
        _emit(args, todo.model_dump(by_alias=True), [f"{'Completed' if todo.completed else 'Reopened'}: {todo.text}"])
    elif action == "clear":
        removed = await service.delete_completed()
        _emit(args, {"deleted": removed}, [f"Deleted {removed} completed todo(s)"])

    if service.last_save_error is not None:
        print(f"Warning: changes are kept in memory but could not be saved: {service.last_save_error}", file=sys.stderr)


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser.

    Returns:
        Configured argument parser
    """
    parser = argparse.ArgumentParser(prog="toontodo", description="Per-project todo lists stored as TOON files")
    parser.add_argument("--version", "-V", action="version", version=f"toontodo {__version__}")
    parser.add_argument("--data-dir", "-d", help="Directory holding the .toon files (default: TOONTODO_DATA_DIR or ~/.local/share/toontodo)")
    parser.add_argument("--json", action="store_true", help="Print JSON output")
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose logging")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("status", help="Show active project and counts")
    subparsers.add_parser("migrate", help="Upgrade a legacy todos.toon layout")

    projects_parser = subparsers.add_parser("projects", help="Manage projects")
    project_actions = projects_parser.add_subparsers(dest="action")
    project_actions.add_parser("list", help="List projects (* marks the active one)")
    add_project = project_actions.add_parser("add", help="Create a project")
    add_project.add_argument("name")
    rename_project = project_actions.add_parser("rename", help="Rename a project")
    rename_project.add_argument("ref")
    rename_project.add_argument("name")
    delete_project = project_actions.add_parser("delete", help="Delete a project and its todos")
    delete_project.add_argument("ref")
    switch_project = project_actions.add_parser("switch", help="Make a project active")
    switch_project.add_argument("ref")
    search_project = project_actions.add_parser("search", help="Search projects by name")
    search_project.add_argument("query")

    todos_parser = subparsers.add_parser("todos", help="Manage todos of the active project")
    todo_actions = todos_parser.add_subparsers(dest="action")
    list_todos = todo_actions.add_parser("list", help="List todos")
    only = list_todos.add_mutually_exclusive_group()
    only.add_argument("--active", action="store_true", help="Only open todos")
    only.add_argument("--completed", action="store_true", help="Only completed todos")
    add_todo = todo_actions.add_parser("add", help="Add a todo")
    add_todo.add_argument("text", nargs="+")
    toggle_todo = todo_actions.add_parser("toggle", help="Toggle a todo's completion")
    toggle_todo.add_argument("ref")
    todo_actions.add_parser("clear", help="Delete completed todos")

    return parser


_APP_COMMANDS: dict = {"status": status_command, "projects": projects_command, "todos": todos_command}


async def run(args: argparse.Namespace) -> None:
    """Dispatch parsed arguments to a command.

    Args:
        args: Parsed command line arguments.
    """
    data_dir = Path(args.data_dir).expanduser() if args.data_dir else settings.data_dir
    command = args.command or "status"
    logger.debug(f"Running {command} in {data_dir}")
    if command == "migrate":
        await migrate_command(data_dir, args)
        return
    app = await TodoApp(data_dir).start()
    handler: Callable = _APP_COMMANDS[command]
    await handler(app, args)


def main(argv: Optional[List[str]] = None) -> None:
    """Main CLI entry point.

    Args:
        argv: Arguments, defaults to ``sys.argv[1:]``.
    """
    parser = create_parser()
    args = parser.parse_args(argv)
    logging_service.configure("DEBUG" if args.verbose else None)
    try:
        asyncio.run(run(args))
    except (CLIError, AppError, ProjectError, StorageError, TodoError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except KeyboardInterrupt:
        print("\nOperation cancelled by user", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
