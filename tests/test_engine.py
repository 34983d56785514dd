# tests/test_engine.py

from __future__ import annotations

import asyncio

import httpx
import pytest

from tiny_tasks.core.engine import TaskListEngine
from tiny_tasks.core.state import TaskListState
from tiny_tasks.tasks.task_client import TaskStoreClient, TransportError
from tiny_tasks.tasks.task_models import Task

from .fakes import FakeTaskStore, server_error


async def _settle() -> None:
    # Let a freshly created task run up to its first blocked await.
    for _ in range(3):
        await asyncio.sleep(0)


# ---- load ----


@pytest.mark.asyncio
async def test_load_replaces_collection_in_server_order() -> None:
    store = FakeTaskStore(tasks=[Task(id=3, title="c"), Task(id=1, title="a")])
    engine = TaskListEngine(store)

    await engine.load_tasks()

    assert [t.id for t in engine.tasks] == [3, 1]
    assert engine.loading is False
    assert engine.error == ""


@pytest.mark.asyncio
async def test_load_failure_keeps_collection_and_sets_error(engine, store) -> None:
    before = engine.tasks
    store.fail["list"] = server_error("Load", "db down")

    await engine.load_tasks()

    assert engine.tasks == before
    assert engine.error == "db down"
    assert engine.loading is False


@pytest.mark.asyncio
async def test_load_failure_without_message_uses_fallback(engine, store) -> None:
    store.fail["list"] = TransportError("")

    await engine.load_tasks()

    assert engine.error == "Failed to load tasks"


@pytest.mark.asyncio
async def test_loading_flag_is_set_while_in_flight(store) -> None:
    store.gate = asyncio.Event()
    engine = TaskListEngine(store)

    runner = asyncio.create_task(engine.load_tasks())
    await _settle()
    assert engine.loading is True

    store.gate.set()
    await runner
    assert engine.loading is False


# ---- create ----


@pytest.mark.asyncio
async def test_create_trims_title_and_reloads(engine, store) -> None:
    engine.set_draft_title(" buy milk ")

    await engine.add_task()

    assert store.calls[0].op == "create"
    assert store.calls[0].args == ("buy milk",)
    assert store.ops() == ["create", "list"]
    assert engine.state.draft_title == ""
    assert [t.title for t in engine.tasks] == ["a", "b", "c", "buy milk"]


@pytest.mark.asyncio
async def test_create_shows_server_list_not_a_local_guess(engine, store) -> None:
    store.normalize_title = True

    await engine.add_task("milk")

    assert list(engine.tasks) == await store.list_tasks()
    assert engine.tasks[-1].title == "MILK"


@pytest.mark.asyncio
async def test_create_does_not_insert_optimistically(engine, store) -> None:
    store.gate = asyncio.Event()

    runner = asyncio.create_task(engine.add_task("new"))
    await _settle()
    assert len(engine.tasks) == 3
    assert engine.state.saving is True

    store.gate.set()
    await runner
    assert len(engine.tasks) == 4
    assert engine.state.saving is False


@pytest.mark.asyncio
async def test_create_failure_keeps_draft(engine, store) -> None:
    engine.set_draft_title("buy milk")
    store.fail["create"] = server_error("Create")

    await engine.add_task()

    assert engine.error == "Create failed (500)"
    assert engine.state.draft_title == "buy milk"
    assert engine.state.saving is False
    assert store.ops() == ["create"]


@pytest.mark.asyncio
@pytest.mark.parametrize("title", ["", " ", "\t\n", "  \u3000 "])
async def test_blank_titles_are_noops(engine, store, title) -> None:
    engine.state.error = "previous"
    engine.set_draft_title(title)
    before = engine.tasks

    await engine.add_task()
    await engine.rename_task(1, title)

    assert store.calls == []
    assert engine.tasks == before
    assert engine.error == "previous"


# ---- delete ----


@pytest.mark.asyncio
async def test_delete_removes_immediately_and_stays_removed(engine, store) -> None:
    store.gate = asyncio.Event()

    runner = asyncio.create_task(engine.delete_task(2))
    await _settle()
    assert [t.id for t in engine.tasks] == [1, 3]
    assert engine.is_deleting(2)

    store.gate.set()
    await runner
    assert [t.id for t in engine.tasks] == [1, 3]
    assert not engine.is_deleting(2)
    assert store.ops() == ["remove"]


@pytest.mark.asyncio
async def test_delete_failure_restores_full_snapshot(engine, store, abc_tasks) -> None:
    store.gate = asyncio.Event()
    store.fail["remove"] = server_error("Delete", "nope")

    runner = asyncio.create_task(engine.delete_task(2))
    await _settle()
    assert [t.id for t in engine.tasks] == [1, 3]

    store.gate.set()
    await runner
    assert list(engine.tasks) == abc_tasks
    assert engine.error == "nope"
    assert not engine.is_deleting(2)


@pytest.mark.asyncio
async def test_delete_of_unknown_id_is_noop(engine, store) -> None:
    await engine.delete_task(99)

    assert store.calls == []
    assert len(engine.tasks) == 3
    assert engine.error == ""


@pytest.mark.asyncio
async def test_second_delete_while_pending_is_ignored(engine, store) -> None:
    store.gate = asyncio.Event()

    first = asyncio.create_task(engine.delete_task(2))
    await _settle()
    await engine.delete_task(2)

    store.gate.set()
    await first
    assert store.ops() == ["remove"]


# ---- toggle ----


@pytest.mark.asyncio
async def test_toggle_flips_immediately_without_reload(store) -> None:
    store.tasks = [Task(id=1, title="a", completed=False)]
    store.gate = asyncio.Event()
    engine = TaskListEngine(store, TaskListState(tasks=(Task(id=1, title="a"),)))

    runner = asyncio.create_task(engine.toggle_task(1))
    await _settle()
    assert engine.tasks == (Task(id=1, title="a", completed=True),)
    assert engine.is_toggling(1)

    store.gate.set()
    await runner
    assert engine.tasks == (Task(id=1, title="a", completed=True),)
    assert not engine.is_toggling(1)
    assert store.ops() == ["patch"]
    assert store.calls[0].kwargs == {"title": None, "completed": True}


@pytest.mark.asyncio
async def test_toggle_failure_restores_snapshot(store) -> None:
    store.tasks = [Task(id=1, title="a", completed=False)]
    store.gate = asyncio.Event()
    store.fail["patch"] = server_error("Update")
    engine = TaskListEngine(store, TaskListState(tasks=(Task(id=1, title="a"),)))

    runner = asyncio.create_task(engine.toggle_task(1))
    await _settle()
    assert engine.tasks[0].completed is True

    store.gate.set()
    await runner
    assert engine.tasks == (Task(id=1, title="a", completed=False),)
    assert engine.error == "Update failed (500)"
    assert not engine.is_toggling(1)


@pytest.mark.asyncio
async def test_toggle_of_unknown_id_is_noop(engine, store) -> None:
    await engine.toggle_task("missing")

    assert store.calls == []


@pytest.mark.asyncio
async def test_delete_rollback_discards_interleaved_toggle(engine, store) -> None:
    store.gate = asyncio.Event()
    store.fail["remove"] = server_error("Delete")

    deleting = asyncio.create_task(engine.delete_task(1))
    await _settle()
    toggling = asyncio.create_task(engine.toggle_task(3))
    await _settle()
    assert [(t.id, t.completed) for t in engine.tasks] == [(2, True), (3, True)]

    store.gate.set()
    await asyncio.gather(deleting, toggling)

    # The delete rollback swaps in its own snapshot, taken before the toggle.
    assert [t.id for t in engine.tasks] == [1, 2, 3]
    assert engine.error == "Delete failed (500)"
    assert engine.state.deleting_ids == set()
    assert engine.state.toggling_ids == set()


# ---- edit ----


def test_start_edit_switches_cursor_silently(engine) -> None:
    engine.start_edit(engine.tasks[0])
    engine.set_edit_title("changed")

    engine.start_edit(2)

    assert engine.state.editing_id == 2
    assert engine.state.edit_title == "b"
    assert engine.is_editing(2)
    assert not engine.is_editing(1)


def test_cancel_edit_clears_cursor_draft_and_error(engine) -> None:
    engine.start_edit(1)
    engine.state.error = "boom"

    engine.cancel_edit()

    assert engine.state.editing_id is None
    assert engine.state.edit_title == ""
    assert engine.error == ""


@pytest.mark.asyncio
async def test_save_edit_renames_reloads_and_exits_edit_mode(engine, store) -> None:
    engine.start_edit(1)
    engine.set_edit_title("  renamed  ")

    await engine.save_edit()

    assert store.ops() == ["patch", "list"]
    assert store.calls[0].args == (1,)
    assert store.calls[0].kwargs == {"title": "renamed", "completed": None}
    assert engine.tasks[0].title == "renamed"
    assert engine.state.editing_id is None
    assert engine.state.edit_title == ""
    assert engine.state.updating is False


@pytest.mark.asyncio
async def test_rename_does_not_change_title_optimistically(engine, store) -> None:
    store.gate = asyncio.Event()
    store.normalize_title = True
    engine.start_edit(1)
    engine.set_edit_title("renamed")

    runner = asyncio.create_task(engine.save_edit())
    await _settle()
    assert engine.tasks[0].title == "a"
    assert engine.state.updating is True

    store.gate.set()
    await runner
    assert engine.tasks[0].title == "RENAMED"


@pytest.mark.asyncio
async def test_save_edit_failure_stays_in_edit_mode(engine, store) -> None:
    engine.start_edit(1)
    engine.set_edit_title("renamed")
    store.fail["patch"] = server_error("Update", "title taken")

    await engine.save_edit()

    assert engine.error == "title taken"
    assert engine.state.editing_id == 1
    assert engine.state.edit_title == "renamed"
    assert engine.tasks[0].title == "a"
    assert engine.state.updating is False


@pytest.mark.asyncio
async def test_save_edit_without_cursor_is_noop(engine, store) -> None:
    await engine.save_edit()

    assert store.calls == []


# ---- error slot ----


@pytest.mark.asyncio
async def test_latest_error_overwrites_previous(engine, store) -> None:
    store.fail["remove"] = server_error("Delete", "first")
    await engine.delete_task(1)
    assert engine.error == "first"

    store.fail["patch"] = server_error("Update", "second")
    await engine.toggle_task(2)

    assert engine.error == "second"


@pytest.mark.asyncio
async def test_new_attempt_clears_previous_error(engine, store) -> None:
    store.fail["remove"] = server_error("Delete")
    await engine.delete_task(1)
    assert engine.error

    await engine.delete_task(1)

    assert engine.error == ""
    assert [t.id for t in engine.tasks] == [2, 3]


@pytest.mark.asyncio
async def test_second_save_while_renaming_is_ignored(engine, store) -> None:
    store.gate = asyncio.Event()
    engine.start_edit(1)
    engine.set_edit_title("renamed")

    first = asyncio.create_task(engine.save_edit())
    await _settle()
    await engine.save_edit()
    await engine.rename_task(2, "other")

    store.gate.set()
    await first
    assert store.ops() == ["patch", "list"]
    assert engine.tasks[0].title == "renamed"
    assert engine.tasks[1].title == "b"


@pytest.mark.asyncio
async def test_whitespace_error_body_is_shown_verbatim() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, text="   ")

    async with TaskStoreClient("http://tasks.test/tasks", transport=httpx.MockTransport(handler)) as client:
        engine = TaskListEngine(client, TaskListState(tasks=(Task(id=1, title="a"),)))

        await engine.toggle_task(1)

    assert engine.error == "   "
    assert engine.tasks == (Task(id=1, title="a", completed=False),)
