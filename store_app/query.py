"""
PostgREST query-string helpers.

The API addresses rows through query parameters: ``order=<col>.<dir>``,
``limit``/``offset`` for pagination and ``<col>=eq.<value>`` for equality
predicates. Only equality predicates are ever issued by the store.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from .models import TaskFilter


def eq(value: Any) -> str:
    """
    Render an equality predicate value.

    Booleans are lower-cased (``eq.true``) to match PostgREST's literal
    syntax; enum members use their plain value.
    """
    if isinstance(value, bool):
        literal = "true" if value else "false"
    elif isinstance(value, Enum):
        literal = value.value
    else:
        literal = str(value)
    return f"eq.{literal}"


def order(column: str, *, descending: bool = False) -> str:
    return f"{column}.{'desc' if descending else 'asc'}"


def id_filter(task_id: int) -> dict[str, str]:
    """Query parameters that address a single row by primary key."""
    return {"id": eq(task_id)}


def task_list_params(page: int, items_per_page: int, task_filter: TaskFilter) -> dict[str, Any]:
    """
    Build the query parameters for one page of the task listing.

    Args:
        page: 1-indexed page number.
        items_per_page: Page size, used as ``limit``.
        task_filter: Active filter; contributes at most one predicate.

    Returns:
        Ordered parameter dictionary suitable for ``requests``' ``params``.
    """
    params: dict[str, Any] = {
        "order": order("created_at", descending=True),
        "limit": items_per_page,
        "offset": (page - 1) * items_per_page,
    }
    column = task_filter.column
    if column is not None:
        params[column] = eq(task_filter.value)
    return params
