"""
Task store factory module.

This module builds a ready-to-use :class:`~store_app.store.TaskStore`
from the configuration classes in ``config.py``, using the factory
pattern so that development, testing and production settings can be
swapped without touching calling code.
"""

from __future__ import annotations

import logging

from config import get_config

from .api import ApiClient
from .models import (
    Category,
    CreateTaskPayload,
    FilterType,
    ImageFilter,
    Task,
    TaskFilter,
    TaskPriority,
    UpdateTaskPayload,
)
from .results import ApiError, ErrorKind, Failure, Result
from .store import TaskStore

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

__all__ = [
    "ApiClient",
    "ApiError",
    "Category",
    "CreateTaskPayload",
    "ErrorKind",
    "Failure",
    "FilterType",
    "ImageFilter",
    "Result",
    "Task",
    "TaskFilter",
    "TaskPriority",
    "TaskStore",
    "UpdateTaskPayload",
    "create_store",
]


def create_store(config_name: str | None = None) -> TaskStore:
    """
    Create a task store wired to the configured API.

    Args:
        config_name: Configuration environment name.
                     If None, uses TASK_STORE_ENV environment variable.

    Returns:
        A :class:`TaskStore` with an empty cache.

    Raises:
        RuntimeError: If no API URL is configured.
    """
    config_class = get_config(config_name)
    logging.getLogger("store_app").setLevel(config_class.LOG_LEVEL)
    logger.info("Creating task store with config: %s", config_class.__name__)

    if not config_class.API_URL:
        raise RuntimeError("Missing API configuration: set API_URL.")

    client = ApiClient(
        base_url=config_class.API_URL,
        api_key=config_class.API_KEY,
        timeout=config_class.API_TIMEOUT,
    )
    return TaskStore(client, items_per_page=config_class.ITEMS_PER_PAGE)
