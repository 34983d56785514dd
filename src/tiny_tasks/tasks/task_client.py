# src/tiny_tasks/tasks/task_client.py

from __future__ import annotations

"""
Remote task store client.

Thin async wrapper over the task resource:
- GET    <base>        -> list of tasks
- POST   <base>        -> created task
- PATCH  <base>/<id>   -> updated task
- DELETE <base>/<id>   -> body ignored

Every failure (network error, timeout, non-2xx, unreadable JSON) surfaces as
TransportError. Requests are sent once; nothing is retried here.
"""

import logging
from typing import Any

import httpx

from .task_models import Task, TaskId

logger = logging.getLogger(__name__)

JSON_HEADERS = {"Content-Type": "application/json"}


class TransportError(Exception):
    """A request to the task store did not succeed."""

    def __init__(self, message: str, *, status: int | None = None, body: str = "") -> None:
        super().__init__(message)
        self.message = message
        self.status = status
        self.body = body

    def __str__(self) -> str:
        return self.message


def _failure_message(verb: str, response: httpx.Response) -> str:
    body = response.text
    return body if body else f"{verb} failed ({response.status_code})"


class TaskStoreClient:
    """
    HTTP/JSON client for the remote task store.

    Owns one httpx.AsyncClient. `timeout=None` keeps the httpx default;
    `transport` is injectable (httpx.MockTransport in tests).
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        kwargs: dict[str, Any] = {"headers": JSON_HEADERS}
        if timeout is not None:
            kwargs["timeout"] = timeout
        if transport is not None:
            kwargs["transport"] = transport
        self._http = httpx.AsyncClient(**kwargs)

    @property
    def base_url(self) -> str:
        return self._base_url

    async def aclose(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> TaskStoreClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    # ---- low-level helpers ----

    def _item_url(self, task_id: TaskId) -> str:
        return f"{self._base_url}/{task_id}"

    async def _request(
        self,
        verb: str,
        method: str,
        url: str,
        *,
        payload: dict[str, Any] | None = None,
    ) -> httpx.Response:
        logger.debug("%s %s payload=%s", method, url, payload)
        try:
            response = await self._http.request(method, url, json=payload)
        except httpx.HTTPError as e:
            msg = str(e).strip() or f"{verb} failed ({e.__class__.__name__})"
            logger.warning("%s %s transport error: %s", method, url, msg)
            raise TransportError(msg) from e

        if not response.is_success:
            msg = _failure_message(verb, response)
            logger.warning("%s %s -> %s: %s", method, url, response.status_code, msg)
            raise TransportError(msg, status=response.status_code, body=response.text)

        return response

    @staticmethod
    def _json(verb: str, response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise TransportError(
                f"{verb} failed (invalid JSON response)",
                status=response.status_code,
                body=response.text,
            ) from e

    @classmethod
    def _task(cls, verb: str, response: httpx.Response) -> Task:
        data = cls._json(verb, response)
        try:
            return Task.from_api(data)
        except ValueError as e:
            raise TransportError(
                f"{verb} failed (unexpected task payload)",
                status=response.status_code,
                body=response.text,
            ) from e

    # ---- public API ----

    async def list_tasks(self) -> list[Task]:
        response = await self._request("Load", "GET", self._base_url)
        data = self._json("Load", response)
        if not isinstance(data, list):
            logger.warning("Task list payload is %s, treating as empty", type(data).__name__)
            return []

        tasks: list[Task] = []
        for raw in data:
            try:
                tasks.append(Task.from_api(raw))
            except ValueError as e:
                logger.warning("Skipping malformed task entry: %s", e)
        return tasks

    async def create_task(self, title: str) -> Task:
        response = await self._request("Create", "POST", self._base_url, payload={"title": title})
        return self._task("Create", response)

    async def patch_task(
        self,
        task_id: TaskId,
        *,
        title: str | None = None,
        completed: bool | None = None,
    ) -> Task:
        payload: dict[str, Any] = {}
        if title is not None:
            payload["title"] = title
        if completed is not None:
            payload["completed"] = completed
        response = await self._request("Update", "PATCH", self._item_url(task_id), payload=payload)
        return self._task("Update", response)

    async def remove_task(self, task_id: TaskId) -> None:
        await self._request("Delete", "DELETE", self._item_url(task_id))
