# src/tiny_tasks/core/engine.py

from __future__ import annotations

"""
Task-list reconciliation engine.

Keeps a local TaskListState consistent with the remote store:
- delete / toggle are applied locally first and rolled back to a snapshot of
  the whole collection if the store rejects them,
- create / rename wait for the store and then reload the full list, because
  the store decides ids, order and normalized titles,
- every failure lands in the single error slot; nothing is re-raised.

All operations are coroutines for one asyncio loop. Code between two awaits
runs atomically, so no locks are used. Each row's controls are expected to be
disabled while its marker is set; a repeated delete/toggle on the same id, or
a second rename while one is saving, is ignored, but a delete racing a toggle on the same id is not prevented and the
later settlement wins.
"""

import logging
from dataclasses import replace

from ..tasks.task_client import TransportError
from ..tasks.task_models import Task, TaskId
from .ports import TaskRemote
from .state import TaskListState

logger = logging.getLogger(__name__)


def _error_text(err: TransportError, fallback: str) -> str:
    return err.message or fallback


class TaskListEngine:
    def __init__(self, client: TaskRemote, state: TaskListState | None = None) -> None:
        self._client = client
        self.state = state if state is not None else TaskListState()

    # ---- accessors ----

    @property
    def tasks(self) -> tuple[Task, ...]:
        return self.state.tasks

    @property
    def error(self) -> str:
        return self.state.error

    @property
    def loading(self) -> bool:
        return self.state.loading

    def find_task(self, task_id: TaskId) -> Task | None:
        for task in self.state.tasks:
            if task.id == task_id:
                return task
        return None

    def is_deleting(self, task_id: TaskId) -> bool:
        return task_id in self.state.deleting_ids

    def is_toggling(self, task_id: TaskId) -> bool:
        return task_id in self.state.toggling_ids

    def is_editing(self, task_id: TaskId) -> bool:
        return self.state.editing_id is not None and self.state.editing_id == task_id

    # ---- draft mutators ----

    def set_draft_title(self, text: str) -> None:
        self.state.draft_title = text

    def set_edit_title(self, text: str) -> None:
        self.state.edit_title = text

    # ---- read ----

    async def load_tasks(self) -> None:
        """Replace the collection with the store's list. On failure the old list stays."""
        st = self.state
        st.loading = True
        st.error = ""
        try:
            tasks = await self._client.list_tasks()
            st.tasks = tuple(tasks)
            logger.debug("Loaded %d tasks", len(st.tasks))
        except TransportError as e:
            st.error = _error_text(e, "Failed to load tasks")
            logger.warning("Load failed status=%s: %s", e.status, st.error)
        finally:
            st.loading = False

    # ---- create ----

    async def add_task(self, title: str | None = None) -> None:
        """
        Create a task from `title` (or the draft title) and reload the list.

        Blank titles are ignored. The draft is cleared only after the store
        accepted the task, so a failed create can be resubmitted as is.
        """
        st = self.state
        raw = st.draft_title if title is None else title
        trimmed = raw.strip()
        if not trimmed:
            return

        st.saving = True
        st.error = ""
        try:
            created = await self._client.create_task(trimmed)
            logger.info("Created task id=%s", created.id)
            st.draft_title = ""
            await self.load_tasks()
        except TransportError as e:
            st.error = _error_text(e, "Failed to add task")
            logger.warning("Create failed status=%s: %s", e.status, st.error)
        finally:
            st.saving = False

    # ---- delete ----

    async def delete_task(self, task_id: TaskId) -> None:
        st = self.state
        if task_id in st.deleting_ids:
            return
        if self.find_task(task_id) is None:
            logger.debug("Delete ignored, no task id=%s", task_id)
            return

        st.deleting_ids.add(task_id)
        st.error = ""

        snapshot = st.tasks
        st.tasks = tuple(t for t in snapshot if t.id != task_id)

        try:
            await self._client.remove_task(task_id)
            logger.info("Deleted task id=%s", task_id)
        except TransportError as e:
            st.tasks = snapshot
            st.error = _error_text(e, "Failed to delete task")
            logger.warning("Delete id=%s failed status=%s, rolled back", task_id, e.status)
        finally:
            st.deleting_ids.discard(task_id)

    # ---- toggle ----

    async def toggle_task(self, task_id: TaskId) -> None:
        st = self.state
        if task_id in st.toggling_ids:
            return
        task = self.find_task(task_id)
        if task is None:
            logger.debug("Toggle ignored, no task id=%s", task_id)
            return

        st.toggling_ids.add(task_id)
        st.error = ""

        completed = not task.completed
        snapshot = st.tasks
        st.tasks = tuple(
            replace(t, completed=completed) if t.id == task_id else t
            for t in snapshot
        )

        try:
            await self._client.patch_task(task_id, completed=completed)
            logger.info("Toggled task id=%s completed=%s", task_id, completed)
        except TransportError as e:
            st.tasks = snapshot
            st.error = _error_text(e, "Failed to update task")
            logger.warning("Toggle id=%s failed status=%s, rolled back", task_id, e.status)
        finally:
            st.toggling_ids.discard(task_id)

    # ---- edit ----

    def start_edit(self, task: Task | TaskId) -> None:
        """Put one task in edit mode; any other task being edited is dropped silently."""
        st = self.state
        if not isinstance(task, Task):
            found = self.find_task(task)
            if found is None:
                return
            task = found
        st.editing_id = task.id
        st.edit_title = task.title
        st.error = ""

    def cancel_edit(self) -> None:
        self._exit_edit()
        self.state.error = ""

    def _exit_edit(self) -> None:
        self.state.editing_id = None
        self.state.edit_title = ""

    async def save_edit(self) -> None:
        """Rename the task under the editing cursor to the draft edit title."""
        st = self.state
        if st.editing_id is None:
            return
        await self.rename_task(st.editing_id, st.edit_title)

    async def rename_task(self, task_id: TaskId, title: str) -> None:
        """
        Rename a task and reload the list.

        No optimistic change: the store may normalize the title. On success
        edit mode is left (if the cursor is still on this task); on failure
        the cursor and draft stay so the user can retry or cancel.
        """
        st = self.state
        if st.updating:
            return
        trimmed = title.strip()
        if not trimmed:
            return

        st.updating = True
        st.error = ""
        try:
            await self._client.patch_task(task_id, title=trimmed)
            logger.info("Renamed task id=%s", task_id)
            await self.load_tasks()
            if st.editing_id == task_id:
                self._exit_edit()
        except TransportError as e:
            st.error = _error_text(e, "Failed to update task")
            logger.warning("Rename id=%s failed status=%s: %s", task_id, e.status, st.error)
        finally:
            st.updating = False
