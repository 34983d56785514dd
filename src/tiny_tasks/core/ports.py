# src/tiny_tasks/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The engine depends on a Protocol instead of the concrete HTTP client,
so tests and alternative transports can be swapped in.
"""

from typing import Protocol

from ..tasks.task_models import Task, TaskId


class TaskRemote(Protocol):
    """
    Remote authoritative task store.

    Implementations raise tiny_tasks.tasks.task_client.TransportError on any failure.
    """

    async def list_tasks(self) -> list[Task]: ...

    async def create_task(self, title: str) -> Task: ...

    async def patch_task(
            self,
            task_id: TaskId,
            *,
            title: str | None = None,
            completed: bool | None = None,
    ) -> Task: ...

    async def remove_task(self, task_id: TaskId) -> None: ...
