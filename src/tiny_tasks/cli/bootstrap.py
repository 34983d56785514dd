# src/tiny_tasks/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the composition root: it reads settings once and wires the
HTTP store client into a TaskListEngine.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.engine import TaskListEngine
from ..tasks.task_client import TaskStoreClient

logger = logging.getLogger(__name__)


def create_client(*, settings=None) -> TaskStoreClient:
    """
    Build the store client from the provided settings.

    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    client = TaskStoreClient(
        settings.api_url,
        timeout=getattr(settings, "http_timeout_seconds", None),
    )
    logger.info("Task store client ready url=%s", client.base_url)
    return client


def create_engine(client: TaskStoreClient) -> TaskListEngine:
    return TaskListEngine(client)
