# tests/test_commands.py

from __future__ import annotations

import pytest

from tasklist.cli.commands import CommandRegistry, registry
from tasklist.errors import NotFoundError
from tasklist.tasks.task_api import resolve_task_ref
from tasklist.tasks.task_models import Task


def _titles(state) -> list[str]:
    return [t.title for t in state.task_store.load_all()]


def test_command_registry_routes_2_and_3_params(state) -> None:
    reg = CommandRegistry()
    called = {"h2": 0, "h3": 0}
    notes: list[str] = []

    def h2(state, args):
        called["h2"] += 1
        return "h2:" + ",".join(args)

    def h3(state, args, emit):
        called["h3"] += 1
        if emit is not None:
            emit("note")
        return "h3"

    reg.register("a", h2, "a", aliases=["alpha"])
    reg.register("b", h3, "b")

    assert reg.handle(state, "/a x y") == "h2:x,y"
    assert reg.handle(state, "/ALPHA") == "h2:"
    assert reg.handle(state, "/b", emit=notes.append) == "h3"
    assert called == {"h2": 2, "h3": 1}
    assert notes == ["note"]


def test_command_registry_unknown_and_non_command(state) -> None:
    reg = CommandRegistry()
    assert reg.handle(state, "hello") is None
    assert "Unknown command" in (reg.handle(state, "/nope") or "")
    assert "Empty command" in (reg.handle(state, "/") or "")


def test_help_lists_registered_commands(state) -> None:
    text = registry.handle(state, "/help") or ""
    for name in ("list", "add", "rename", "delete", "move", "done", "status"):
        assert f"/{name}" in text


def test_add_list_and_rows(state) -> None:
    assert registry.handle(state, "/add Buy milk") == "Added #1: Buy milk"
    assert registry.handle(state, "/add  Walk   the dog ") == "Added #2: Walk the dog"

    listing = registry.handle(state, "/list") or ""
    assert "1. [ ] Buy milk" in listing
    assert "2. [ ] Walk the dog" in listing
    assert "2 tasks, 0 done" in listing


def test_add_without_title_is_reported(state) -> None:
    reply = registry.handle(state, "/add") or ""
    assert reply.startswith("Invalid input")
    assert _titles(state) == []


def test_rename_by_row(state) -> None:
    registry.handle(state, "/add a")
    registry.handle(state, "/add b")

    assert registry.handle(state, "/rename 2 New title") == "Renamed: b -> New title"
    assert _titles(state) == ["a", "New title"]


def test_rename_by_id_prefix(state) -> None:
    registry.handle(state, "/add a")
    task: Task = state.task_store.list_tasks()[0]

    registry.handle(state, f"/edit {task.id[:6]} renamed")
    assert _titles(state) == ["renamed"]


def test_delete_unknown_row_is_reported(state) -> None:
    registry.handle(state, "/add a")
    reply = registry.handle(state, "/delete 5") or ""
    assert reply.startswith("No such task")
    assert _titles(state) == ["a"]


def test_delete_by_row(state) -> None:
    for t in ("a", "b", "c"):
        registry.handle(state, f"/add {t}")
    assert registry.handle(state, "/rm 2") == "Deleted: b"
    assert _titles(state) == ["a", "c"]


def test_move_uses_one_based_rows_and_clamps(state) -> None:
    for t in ("a", "b", "c"):
        registry.handle(state, f"/add {t}")

    assert registry.handle(state, "/move 3 1") == "Moved: c -> row 1"
    assert _titles(state) == ["c", "a", "b"]

    assert registry.handle(state, "/mv 1 99") == "Moved: c -> row 3"
    assert _titles(state) == ["a", "b", "c"]

    assert (registry.handle(state, "/move 1 x") or "").startswith("Invalid input")


def test_done_toggles(state) -> None:
    registry.handle(state, "/add a")
    assert registry.handle(state, "/done 1") == "Done: a"
    assert "1. [x] a" in (registry.handle(state, "/list") or "")
    assert registry.handle(state, "/toggle 1") == "Not done: a"


def test_list_degrades_to_empty_on_unreadable_store(state, settings) -> None:
    registry.handle(state, "/add a")
    settings.tasks_db_path.write_bytes(b"garbage" * 1000)
    for suffix in ("-wal", "-shm"):
        side = settings.tasks_db_path.with_name(settings.tasks_db_path.name + suffix)
        if side.exists():
            side.unlink()

    notes: list[str] = []
    listing = registry.handle(state, "/list", emit=notes.append) or ""

    assert "Task list is empty" in listing
    assert notes and notes[0].startswith("Could not access task storage")


def test_status_reports_backend(state) -> None:
    registry.handle(state, "/add a")
    reply = registry.handle(state, "/status") or ""
    assert "sqlite" in reply
    assert "1 total, 0 done" in reply


def test_digit_ref_falls_back_to_id_prefix() -> None:
    tasks = [
        Task(id="a1b2c3d4e5f6", title="first", created_at=1.0),
        Task(id="12345678abcdef", title="digits", created_at=2.0),
    ]

    assert resolve_task_ref(tasks, "2").title == "digits"
    assert resolve_task_ref(tasks, "12345678").title == "digits"
    with pytest.raises(NotFoundError):
        resolve_task_ref(tasks, "99")


def test_list_uses_default_date_format_when_unset(state, settings) -> None:
    settings.date_format = None
    registry.handle(state, "/add a")

    listing = registry.handle(state, "/list") or ""
    assert " at " in listing
