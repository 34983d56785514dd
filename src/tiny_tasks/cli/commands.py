# src/tiny_tasks/cli/commands.py

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable

from ..core.engine import TaskListEngine
from ..tasks.task_models import TaskId

# (engine, args, text): `text` is the raw rest of the line after the command name.
CommandHandler = Callable[[TaskListEngine, list[str], str], Awaitable[str | None]]

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Slash-command registry used by the console connector (/help, /add, ...)."""

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

    async def handle(self, engine: TaskListEngine, line: str) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string (possibly empty) or None if not a command.
        """
        if not line.startswith("/"):
            return None

        body = line[1:].strip()
        if not body:
            return "Empty command. Use /help to list available commands."

        # Titles keep their inner spacing, so only the command name is split off.
        parts = body.split(maxsplit=1)
        name = parts[0].lower()
        text = parts[1] if len(parts) > 1 else ""
        args = text.split()

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        reply = await handler(engine, args, text)
        return "" if reply is None else reply

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def resolve_task_id(engine: TaskListEngine, raw: str) -> TaskId | None:
    """Map a typed id to the id of a task in the current list (ids may be ints or strings)."""
    for task in engine.tasks:
        if str(task.id) == raw:
            return task.id
    return None


async def cmd_help(engine: TaskListEngine, args: list[str], text: str) -> str:
    return registry.build_help()


async def cmd_list(engine: TaskListEngine, args: list[str], text: str) -> None:
    await engine.load_tasks()


async def cmd_add(engine: TaskListEngine, args: list[str], text: str) -> str | None:
    if not text.strip():
        return "Usage: /add <title>"
    engine.set_draft_title(text)
    await engine.add_task()
    return None


async def cmd_remove(engine: TaskListEngine, args: list[str], text: str) -> str | None:
    if len(args) != 1:
        return "Usage: /rm <id>"
    task_id = resolve_task_id(engine, args[0])
    if task_id is None:
        return f"No task with id {args[0]}."
    await engine.delete_task(task_id)
    return None


async def cmd_done(engine: TaskListEngine, args: list[str], text: str) -> str | None:
    if len(args) != 1:
        return "Usage: /done <id>"
    task_id = resolve_task_id(engine, args[0])
    if task_id is None:
        return f"No task with id {args[0]}."
    await engine.toggle_task(task_id)
    return None


async def cmd_edit(engine: TaskListEngine, args: list[str], text: str) -> str | None:
    if not args:
        return "Usage: /edit <id> [new title]"
    task_id = resolve_task_id(engine, args[0])
    if task_id is None:
        return f"No task with id {args[0]}."
    engine.start_edit(task_id)
    rest = text.split(maxsplit=1)
    if len(rest) > 1:
        engine.set_edit_title(rest[1])
        await engine.save_edit()
    return None


async def cmd_title(engine: TaskListEngine, args: list[str], text: str) -> str | None:
    if engine.state.editing_id is None:
        return "Not editing. Use /edit <id> first."
    engine.set_edit_title(text)
    return None


async def cmd_save(engine: TaskListEngine, args: list[str], text: str) -> str | None:
    if engine.state.editing_id is None:
        return "Not editing. Use /edit <id> first."
    await engine.save_edit()
    return None


async def cmd_cancel(engine: TaskListEngine, args: list[str], text: str) -> None:
    engine.cancel_edit()


registry.register("help", cmd_help, "show this help", aliases=["h", "?"])
registry.register("list", cmd_list, "reload tasks from the server", aliases=["ls"])
registry.register("add", cmd_add, "add a task: /add <title>")
registry.register("rm", cmd_remove, "delete a task: /rm <id>", aliases=["del", "delete"])
registry.register("done", cmd_done, "toggle completed: /done <id>", aliases=["toggle"])
registry.register("edit", cmd_edit, "edit a task: /edit <id> [new title]")
registry.register("title", cmd_title, "change the edit draft: /title <text>")
registry.register("save", cmd_save, "save the task being edited")
registry.register("cancel", cmd_cancel, "leave edit mode")
