# tests/conftest.py

from __future__ import annotations

import pytest

from tiny_tasks.core.engine import TaskListEngine
from tiny_tasks.core.state import TaskListState
from tiny_tasks.tasks.task_models import Task

from .fakes import FakeTaskStore


@pytest.fixture()
def abc_tasks() -> list[Task]:
    return [
        Task(id=1, title="a"),
        Task(id=2, title="b", completed=True),
        Task(id=3, title="c"),
    ]


@pytest.fixture()
def store(abc_tasks: list[Task]) -> FakeTaskStore:
    return FakeTaskStore(tasks=list(abc_tasks))


@pytest.fixture()
def engine(store: FakeTaskStore, abc_tasks: list[Task]) -> TaskListEngine:
    """
    Engine wired to the in-memory store, pre-seeded with the same list
    the store holds (as if a load had already happened).
    """
    return TaskListEngine(store, TaskListState(tasks=tuple(abc_tasks)))
