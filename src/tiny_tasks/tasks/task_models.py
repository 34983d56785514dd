# src/tiny_tasks/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

TaskId = int | str


def _as_bool(raw: Any) -> bool:
    if isinstance(raw, bool):
        return raw
    if isinstance(raw, str):
        return raw.strip().lower() in {"1", "true", "yes", "y", "on"}
    return bool(raw)


@dataclass(frozen=True, slots=True)
class Task:
    id: TaskId
    title: str
    completed: bool = False

    @classmethod
    def from_api(cls, raw: dict[str, Any]) -> Task:
        """
        Build a Task from a remote payload.

        The store may name the identifier either "id" or "_id"; "id" wins
        when both are present. Raises ValueError if neither is usable.
        """
        if not isinstance(raw, dict):
            raise ValueError(f"task payload must be an object, got {type(raw).__name__}")

        task_id = raw.get("id")
        if task_id is None:
            task_id = raw.get("_id")
        if task_id is None or isinstance(task_id, bool) or not isinstance(task_id, (int, str)):
            raise ValueError("task payload has no usable id")

        title = raw.get("title")
        return cls(
            id=task_id,
            title="" if title is None else str(title),
            completed=_as_bool(raw.get("completed", False)),
        )
