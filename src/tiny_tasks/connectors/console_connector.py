# src/tiny_tasks/connectors/console_connector.py

from __future__ import annotations

import asyncio
import logging
from datetime import datetime

from ..cli.commands import registry as command_registry
from ..core.engine import TaskListEngine
from ..core.state import TaskListState
from ..tasks.task_models import Task

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}")


def _render_row(state: TaskListState, task: Task) -> str:
    mark = "x" if task.completed else " "
    if state.editing_id is not None and state.editing_id == task.id:
        busy = " (saving...)" if state.updating else ""
        return f"  [{mark}] {task.id}: {state.edit_title!r} <- editing{busy}"

    flags = []
    if task.id in state.deleting_ids:
        flags.append("deleting...")
    if task.id in state.toggling_ids:
        flags.append("updating...")
    suffix = f" ({', '.join(flags)})" if flags else ""
    return f"  [{mark}] {task.id}: {task.title}{suffix}"


def render_tasks(state: TaskListState) -> str:
    """Plain-text view of the task list, its busy markers and the latest error."""
    if state.loading:
        return "Loading..."

    lines: list[str] = []
    if state.error:
        lines.append(f"! {state.error}")
    if not state.tasks:
        lines.append("No tasks yet")
    else:
        lines.extend(_render_row(state, t) for t in state.tasks)
    if state.saving:
        lines.append("Adding...")
    return "\n".join(lines)


async def run_console_loop(engine: TaskListEngine, *, app_name: str = "Tiny Tasks") -> None:
    logger.info("Console connector started.")
    _print_ts(f"[{app_name}] Type a title to add a task. Use /help for commands. Use /exit to quit.\n")

    await engine.load_tasks()
    print(render_tasks(engine.state))

    while True:
        try:
            user_input = (await asyncio.to_thread(input, "> ")).strip()
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
            reply = await command_registry.handle(engine, user_input)
            if reply is None:
                # Plain text is a new task title.
                engine.set_draft_title(user_input)
                await engine.add_task()
        except Exception:
            logger.exception("Command handler crashed.")
            reply = "Internal error while handling a command."

        if reply:
            _print_ts(reply)
        print(render_tasks(engine.state))

    logger.info("Console connector finished.")
