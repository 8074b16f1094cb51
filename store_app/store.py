"""
Client-side task store.

Holds an in-memory cache of tasks and categories together with the
filtering and pagination state of the task listing, and keeps that cache
in step with the remote API.

The store is an explicit context object: create one per consumer (see
:func:`store_app.create_store`) and pass it around rather than reaching
for a module-level singleton. All operations are coroutines meant to run
on a single event loop; they suspend only while the blocking HTTP call
runs in a worker thread.

Two failure policies apply:

- **Reads** (``fetch_categories``, ``fetch_tasks``) absorb failures and
  record a fixed message on :attr:`TaskStore.error`.
- **Writes** (``add_task``, ``update_task``, ``delete_task``) log the
  failure and re-raise it to the caller; ``error`` is left untouched.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import Any

from .api import ApiClient
from .models import (
    Category,
    CreateTaskPayload,
    FilterType,
    Task,
    TaskFilter,
    UpdateTaskPayload,
)
from .query import id_filter, order, task_list_params
from .results import ApiError, Failure, Result

logger = logging.getLogger(__name__)

DEFAULT_ITEMS_PER_PAGE = 6

CATEGORIES_ERROR = "Failed to load categories"
TASKS_ERROR = "Failed to load tasks"


def _parse_categories(data: Any) -> list[Category]:
    return [Category.from_dict(row) for row in data or []]


def _parse_tasks(data: Any) -> list[Task]:
    return [Task.from_dict(row) for row in data or []]


def _parse_first_task(data: Any) -> Task | None:
    """Return the first echoed row of a mutation, if the server sent one."""
    if not data:
        return None
    return Task.from_dict(data[0])


def _log_failure(action: str, failure: Failure) -> None:
    logger.error(
        "%s (%s): %s",
        action,
        failure.kind.value,
        failure.message,
        exc_info=failure.error,
    )


class TaskStore:
    """
    Cache of tasks and categories synchronised with the remote API.

    Attributes:
        tasks: Current page of tasks, most recently created first.
        categories: All categories, ordered by name.
        is_loading: True while the latest task fetch is in flight.
        error: Message describing the last failed read, or ``None``.
        current_page: 1-indexed page of the task listing.
        items_per_page: Fixed page size.
        has_more_tasks: True when the last fetch returned a full page.
        current_filter: The single active filter.
    """

    def __init__(self, client: ApiClient, items_per_page: int = DEFAULT_ITEMS_PER_PAGE) -> None:
        if items_per_page < 1:
            raise ValueError("items_per_page must be at least 1")
        self._client = client
        self.tasks: list[Task] = []
        self.categories: list[Category] = []
        self.is_loading = False
        self.error: str | None = None
        self.current_page = 1
        self.items_per_page = items_per_page
        self.has_more_tasks = False
        self.current_filter = TaskFilter()
        # Bumped on every fetch_tasks(); only the latest fetch may apply its result.
        self._fetch_generation = 0

    async def _request(
        self,
        call: Callable[..., Any],
        *args: Any,
        parse: Callable[[Any], Any] | None = None,
    ) -> Result:
        """
        Run a blocking client call off the event loop and fold it into a Result.

        Rows that fail to parse are reported as decode failures, so a
        malformed response never leaves the cache half-updated.
        """
        try:
            data = await asyncio.to_thread(call, *args)
            value = parse(data) if parse is not None else data
        except (ApiError, KeyError, TypeError, ValueError) as exc:
            return Result.failed(Failure.from_exception(exc))
        return Result.success(value)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def fetch_categories(self) -> None:
        """Replace the cached categories with the full list, ordered by name."""
        result = await self._request(
            self._client.get,
            "/categories",
            {"order": order("name")},
            parse=_parse_categories,
        )
        if not result.ok:
            _log_failure("Failed to fetch categories", result.failure)
            self.error = CATEGORIES_ERROR
            return
        self.categories = result.value

    async def fetch_tasks(self) -> None:
        """
        Load the current page of tasks for the active filter.

        The page replaces :attr:`tasks` wholesale. ``is_loading`` is set
        for the duration of the call and cleared once the latest issued
        fetch settles, whatever its outcome. A fetch that settles after a
        newer one was issued is discarded.
        """
        self._fetch_generation += 1
        generation = self._fetch_generation
        self.is_loading = True
        self.error = None

        params = task_list_params(self.current_page, self.items_per_page, self.current_filter)
        try:
            result = await self._request(self._client.get, "/tasks", params, parse=_parse_tasks)
        finally:
            if generation == self._fetch_generation:
                self.is_loading = False

        if generation != self._fetch_generation:
            logger.debug(
                "Discarding stale task page (generation %d, latest %d)",
                generation,
                self._fetch_generation,
            )
            return

        if not result.ok:
            _log_failure("Failed to fetch tasks", result.failure)
            self.error = TASKS_ERROR
            return

        self.tasks = result.value[: self.items_per_page]
        self.has_more_tasks = len(self.tasks) == self.items_per_page
        logger.debug(
            "Loaded %d task(s) for page %d with filter %s",
            len(self.tasks),
            self.current_page,
            self.current_filter.type.value,
        )

    # ------------------------------------------------------------------
    # Filtering and pagination
    # ------------------------------------------------------------------

    async def set_filter(self, filter_type: FilterType | str, value: Any = None) -> None:
        """
        Replace the active filter, go back to page 1 and refetch.

        Args:
            filter_type: One of ``all``, ``category``, ``status``, ``priority``.
            value: Value to match; expected unless *filter_type* is ``all``.
        """
        self.current_filter = TaskFilter(type=FilterType(filter_type), value=value)
        self.current_page = 1
        await self.fetch_tasks()

    async def change_page(self, new_page: int) -> None:
        """Move to *new_page* and refetch; pages below 1 are ignored."""
        if new_page < 1:
            return
        self.current_page = new_page
        await self.fetch_tasks()

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def add_task(self, payload: CreateTaskPayload | dict[str, Any]) -> Task | None:
        """
        Create a task and put the echoed row at the top of the page.

        If the page now holds more than ``items_per_page`` tasks the
        oldest ones are dropped, so no refetch is needed.

        Returns:
            The created task, or ``None`` if the server echoed no row.

        Raises:
            ApiError: If the request fails; the cache is left unchanged.
        """
        body = payload.to_json() if isinstance(payload, CreateTaskPayload) else dict(payload)
        result = await self._request(self._client.post, "/tasks", body, parse=_parse_first_task)
        if not result.ok:
            _log_failure("Failed to create task", result.failure)
        task = result.unwrap()

        if task is not None:
            self.tasks.insert(0, task)
            del self.tasks[self.items_per_page :]
        return task

    async def update_task(
        self, task_id: int, payload: UpdateTaskPayload | dict[str, Any]
    ) -> Task | None:
        """
        Apply a partial update and replace the cached row in place.

        A task that is not in the local cache is left alone; no refetch
        is issued for it.

        Returns:
            The updated task, or ``None`` if the server echoed no row.

        Raises:
            ApiError: If the request fails; the cache is left unchanged.
            ValueError: If *payload* names a field that cannot be updated.
        """
        if not isinstance(payload, UpdateTaskPayload):
            payload = UpdateTaskPayload(**payload)
        result = await self._request(
            self._client.patch,
            "/tasks",
            id_filter(task_id),
            payload.to_json(),
            parse=_parse_first_task,
        )
        if not result.ok:
            _log_failure(f"Failed to update task {task_id}", result.failure)
        task = result.unwrap()

        if task is not None:
            for index, cached in enumerate(self.tasks):
                if cached.id == task_id:
                    self.tasks[index] = task
                    break
            else:
                logger.debug("Updated task %s is not cached; leaving page as is", task_id)
        return task

    async def delete_task(self, task_id: int) -> None:
        """
        Delete a task, then refill the page from the server.

        When the deletion empties a page other than the first, the store
        steps back one page; otherwise the current page is refetched so
        the next row beyond the page boundary moves up.

        Raises:
            ApiError: If the request fails; the cache is left unchanged.
        """
        result = await self._request(self._client.delete, "/tasks", id_filter(task_id))
        if not result.ok:
            _log_failure(f"Failed to delete task {task_id}", result.failure)
        result.unwrap()

        self.tasks = [task for task in self.tasks if task.id != task_id]
        if not self.tasks and self.current_page > 1:
            await self.change_page(self.current_page - 1)
        else:
            await self.fetch_tasks()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def category_by_id(self, category_id: int) -> Category | None:
        return next((c for c in self.categories if c.id == category_id), None)

    def clear_error(self) -> None:
        self.error = None
