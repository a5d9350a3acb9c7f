# src/tasklist/cli/commands.py

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from typing import cast

from ..config import DEFAULT_DATE_FORMAT
from ..core.state import AppState
from ..errors import TaskStoreError, ValidationError
from ..tasks.task_api import (
    format_task_list,
    friendly_store_error_message,
    load_tasks_or_empty,
    resolve_task_ref,
)
from ..tasks.task_models import Task

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by connectors (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.

        Store errors (bad input, unknown task, storage failure) become a reply;
        anything else propagates to the connector.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except (TypeError, ValueError):
            nparams = 3

        try:
            if nparams >= 3:
                h3 = cast(CommandHandler3, handler)
                return h3(state, args, emit)

            h2 = cast(CommandHandler2, handler)
            return h2(state, args)
        except TaskStoreError as e:
            logger.info("/%s failed: %s", name, e)
            return friendly_store_error_message(e)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def _date_format(state: AppState) -> str:
    fmt = getattr(state.settings, "date_format", None)
    return fmt or DEFAULT_DATE_FORMAT


def _current_tasks(state: AppState) -> list[Task]:
    return state.task_store.list_tasks()


def _parse_row(raw: str) -> int:
    try:
        return int(raw)
    except ValueError:
        raise ValidationError(f"Expected a row number, got {raw!r}.") from None


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help() + "\nPlain text (without /) adds a new task.\n  /exit - quit"


def cmd_status(state: AppState, args: list[str]) -> str:
    settings = state.settings
    tasks = _current_tasks(state)
    done = sum(1 for t in tasks if t.done)
    return (
        "Status:\n"
        f"  Backend: {getattr(settings, 'backend', 'sqlite')} "
        f"({state.task_store.location})\n"
        f"  Tasks: {len(tasks)} total, {done} done"
    )


def cmd_list(
    state: AppState,
    args: list[str],
    emit: CommandEmitter | None = None,
) -> str:
    """
    /list -> re-read the list from storage and show it.

    An unreadable store is reported and shown as an empty list.
    """
    tasks, err = load_tasks_or_empty(state.task_store)
    if err is not None and emit:
        emit(friendly_store_error_message(err))
    return format_task_list(tasks, _date_format(state))


def cmd_add(state: AppState, args: list[str]) -> str:
    """/add <title>"""
    task = state.task_store.add(" ".join(args))
    return f"Added #{state.task_store.index_of(task.id) + 1}: {task.title}"


def cmd_rename(state: AppState, args: list[str]) -> str:
    """/rename <row|id> <new title>"""
    if len(args) < 2:
        return "Usage: /rename <row|id> <new title>"
    task = resolve_task_ref(_current_tasks(state), args[0])
    state.task_store.rename(task.id, " ".join(args[1:]))
    return f"Renamed: {task.title} -> {state.task_store.get(task.id).title}"


def cmd_delete(state: AppState, args: list[str]) -> str:
    """/delete <row|id>"""
    if len(args) != 1:
        return "Usage: /delete <row|id>"
    task = resolve_task_ref(_current_tasks(state), args[0])
    state.task_store.delete(task.id)
    return f"Deleted: {task.title}"


def cmd_move(state: AppState, args: list[str]) -> str:
    """
    /move <row|id> <to_row>

    Rows are 1-based here; the store clamps out-of-range targets.
    """
    if len(args) != 2:
        return "Usage: /move <row|id> <to_row>"
    task = resolve_task_ref(_current_tasks(state), args[0])
    to_row = _parse_row(args[1])
    state.task_store.move(task.id, to_row - 1)
    new_row = state.task_store.index_of(task.id) + 1
    return f"Moved: {task.title} -> row {new_row}"


def cmd_done(state: AppState, args: list[str]) -> str:
    """/done <row|id> -> toggle completion"""
    if len(args) != 1:
        return "Usage: /done <row|id>"
    task = resolve_task_ref(_current_tasks(state), args[0])
    updated = state.task_store.toggle_done(task.id)
    return f"{'Done' if updated.done else 'Not done'}: {updated.title}"


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("list", cmd_list, help_text="Show the task list.", aliases=["ls"])
registry.register("add", cmd_add, help_text="Add a task: /add <title>.", aliases=["new"])
registry.register(
    "rename", cmd_rename, help_text="Rename a task: /rename <row|id> <title>.", aliases=["edit"]
)
registry.register(
    "delete", cmd_delete, help_text="Delete a task: /delete <row|id>.", aliases=["del", "rm"]
)
registry.register("move", cmd_move, help_text="Reorder: /move <row|id> <to_row>.", aliases=["mv"])
registry.register("done", cmd_done, help_text="Toggle done: /done <row|id>.", aliases=["toggle"])
registry.register("status", cmd_status, help_text="Show storage backend and totals.")
