# src/tiny_tasks/core/state.py

from __future__ import annotations

from dataclasses import dataclass, field

from ..tasks.task_models import Task, TaskId


@dataclass
class TaskListState:
    """
    Everything a task-list view renders.

    Owned and mutated by TaskListEngine only. `tasks` is always swapped for a
    new tuple, never edited in place, so a captured tuple is a valid snapshot.
    """

    tasks: tuple[Task, ...] = ()

    # Drafts
    draft_title: str = ""
    edit_title: str = ""

    # Busy flags
    loading: bool = False
    saving: bool = False
    updating: bool = False
    deleting_ids: set[TaskId] = field(default_factory=set)
    toggling_ids: set[TaskId] = field(default_factory=set)

    # At most one task is editable at a time.
    editing_id: TaskId | None = None

    # Latest failure only; "" means no error.
    error: str = ""
