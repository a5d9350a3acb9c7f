# src/tasklist/connectors/console_connector.py

from __future__ import annotations

import logging
import sys
from collections.abc import Callable
from datetime import datetime

from ..cli.commands import registry as command_registry
from ..core.state import AppState
from ..errors import TaskStoreError
from ..tasks.task_api import friendly_store_error_message

logger = logging.getLogger(__name__)

PROMPT = "> "


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _rewrite_prev_line(line: str) -> None:
    """
    Replace the last terminal line with `line`.
    Best-effort: if not a TTY, just print a new line.
    """
    if sys.stdout.isatty():
        sys.stdout.write("\033[1A\033[2K\r")
        sys.stdout.write(line + "\n")
        sys.stdout.flush()
    else:
        print(line)


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}")


def handle_line(state: AppState, line: str, emit: Callable[[str], None] | None = None) -> str:
    """
    One line of user input -> one reply.

    Slash commands go through the registry; plain text adds a task
    (same as the "New task" dialog of a GUI front end).
    """
    with state.lock:
        reply = command_registry.handle(state, line, emit=emit)
        if reply is not None:
            return reply

        try:
            task = state.task_store.add(line)
        except TaskStoreError as e:
            logger.info("Add from plain text failed: %s", e)
            return friendly_store_error_message(e)
        return f"Added #{state.task_store.index_of(task.id) + 1}: {task.title}"


def run_console_loop(state: AppState) -> None:
    logger.info("Console connector started.")
    app_name = str(getattr(getattr(state, "settings", None), "app_name", "tasklist"))
    _print_ts(f"[{app_name}] Type a task to add it. Use /help for commands. Use /exit to quit.\n")

    def emit(text: str) -> None:
        # Immediate user-visible feedback before the final reply
        print(f"[{_ts_local()}] {text}", flush=True)

    try:
        print(handle_line(state, "/list", emit=emit))
    except Exception:
        logger.exception("Initial task list render failed.")
        _print_ts("Internal error while showing the task list.")

    while True:
        try:
            user_input = input(PROMPT).strip()
            _rewrite_prev_line(f"[{_ts_local()}] {PROMPT}{user_input}")
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if not user_input:
            continue

        if user_input.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        try:
            reply = handle_line(state, user_input, emit=emit)
        except Exception:
            logger.exception("Command handler crashed.")
            reply = "Internal error while handling a command."

        print(f"[{_ts_local()}] {reply}")

    logger.info("Console connector finished.")
