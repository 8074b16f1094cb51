"""
Integration tests for the task store against an in-memory API.

The store is wired to a real :class:`ApiClient`; ``requests.request`` is
monkeypatched to an in-memory stand-in for the PostgREST backend that
honours ``order``, ``limit``, ``offset`` and ``eq.`` predicates. This
checks that the query strings the store builds select the rows the
store expects.

Key SDET Concepts Demonstrated:
- Stateful fake backends for end-to-end flows without a network
- Scenario tests spanning several store operations
"""

from __future__ import annotations

import itertools
from datetime import datetime, timedelta, timezone
from typing import Any

import pytest

from shared.test_helpers import FakeResponse, make_category_row
from store_app import ApiClient, CreateTaskPayload, TaskStore, UpdateTaskPayload
from store_app.results import ApiError

pytestmark = pytest.mark.integration


class _InMemoryPostgrest:
    """Just enough of PostgREST to serve the tasks and categories resources."""

    def __init__(self) -> None:
        self.tables: dict[str, list[dict[str, Any]]] = {"tasks": [], "categories": []}
        self.requests: list[dict[str, Any]] = []
        self._ids = itertools.count(1)
        self._clock = datetime(2025, 1, 1, tzinfo=timezone.utc)

    def seed_task(self, **fields: Any) -> dict[str, Any]:
        self._clock += timedelta(minutes=1)
        row = {
            "id": next(self._ids),
            "created_at": self._clock.isoformat(),
            "updated_at": None,
            "title": "Task",
            "description": None,
            "priority": "medium",
            "category_id": 1,
            "due_date": None,
            "completed": False,
            "image_url": None,
        }
        row.update(fields)
        self.tables["tasks"].append(row)
        return row

    @staticmethod
    def _matches(row: dict[str, Any], params: dict[str, Any]) -> bool:
        for column, predicate in params.items():
            if column in {"order", "limit", "offset"}:
                continue
            expected = predicate.removeprefix("eq.")
            actual = row[column]
            if isinstance(actual, bool):
                actual = "true" if actual else "false"
            if str(actual) != expected:
                return False
        return True

    def _select(self, table: str, params: dict[str, Any]) -> list[dict[str, Any]]:
        rows = [row for row in self.tables[table] if self._matches(row, params)]
        if "order" in params:
            column, direction = params["order"].split(".")
            rows.sort(key=lambda row: row[column], reverse=direction == "desc")
        offset = int(params.get("offset", 0))
        limit = params.get("limit")
        end = offset + int(limit) if limit is not None else None
        return rows[offset:end]

    def __call__(self, *, method, url, headers, timeout, params=None, json=None):
        self.requests.append({"method": method, "url": url, "params": params, "json": json})
        table = url.rsplit("/", 1)[-1]
        params = params or {}

        if method == "GET":
            return FakeResponse(200, payload=self._select(table, params))
        if method == "POST":
            if not json.get("title"):
                return FakeResponse(400, payload={"message": "title must not be empty"})
            row = self.seed_task(**json)
            return FakeResponse(201, payload=[row])
        if method == "PATCH":
            matched = [row for row in self.tables[table] if self._matches(row, params)]
            for row in matched:
                row.update(json)
            return FakeResponse(200, payload=matched)
        if method == "DELETE":
            self.tables[table] = [
                row for row in self.tables[table] if not self._matches(row, params)
            ]
            return FakeResponse(204)
        return FakeResponse(405, payload={"message": "method not allowed"})


@pytest.fixture
def backend(monkeypatch):
    server = _InMemoryPostgrest()
    monkeypatch.setattr("store_app.api.requests.request", server)
    return server


@pytest.fixture
def live_store(backend):
    client = ApiClient(base_url="http://api.test/rest/v1", api_key="test-anon-key", timeout=1)
    return TaskStore(client, items_per_page=6)


@pytest.mark.asyncio
async def test_pages_through_tasks_newest_first(backend, live_store):
    """Test paging through nine tasks with a page size of six."""
    # Arrange
    rows = [backend.seed_task(title=f"Task {n}") for n in range(9)]

    # Act / Assert
    await live_store.fetch_tasks()
    assert [t.title for t in live_store.tasks] == [f"Task {n}" for n in range(8, 2, -1)]
    assert live_store.has_more_tasks is True

    await live_store.change_page(2)
    assert [t.id for t in live_store.tasks] == [rows[2]["id"], rows[1]["id"], rows[0]["id"]]
    assert live_store.has_more_tasks is False


@pytest.mark.asyncio
async def test_status_filter_selects_completed_tasks(backend, live_store):
    backend.seed_task(title="Open")
    backend.seed_task(title="Done", completed=True)

    await live_store.set_filter("status", True)

    assert [t.title for t in live_store.tasks] == ["Done"]
    assert backend.requests[-1]["params"]["completed"] == "eq.true"


@pytest.mark.asyncio
async def test_category_filter_selects_matching_tasks(backend, live_store):
    backend.seed_task(title="Work item", category_id=2)
    backend.seed_task(title="Home item", category_id=3)

    await live_store.set_filter("category", 3)

    assert [t.title for t in live_store.tasks] == ["Home item"]


@pytest.mark.asyncio
async def test_categories_are_sorted_by_name(backend, live_store):
    backend.tables["categories"] = [
        make_category_row(id=1, name="Work"),
        make_category_row(id=2, name="Errands"),
    ]

    await live_store.fetch_categories()

    assert [c.name for c in live_store.categories] == ["Errands", "Work"]


@pytest.mark.asyncio
async def test_create_update_delete_flow(backend, live_store):
    """Test a task's full lifecycle through the store."""
    # Arrange
    await live_store.fetch_tasks()

    # Act: create
    created = await live_store.add_task(CreateTaskPayload(title="Write report", category_id=1))

    # Assert
    assert live_store.tasks[0].id == created.id

    # Act: update
    await live_store.update_task(created.id, UpdateTaskPayload(completed=True))

    # Assert
    assert live_store.tasks[0].completed is True
    assert backend.tables["tasks"][0]["completed"] is True

    # Act: delete
    await live_store.delete_task(created.id)

    # Assert
    assert live_store.tasks == []
    assert backend.tables["tasks"] == []


@pytest.mark.asyncio
async def test_delete_pulls_in_row_from_next_page(backend, live_store):
    """Test that deleting on a full page refills it from beyond the boundary."""
    # Arrange
    rows = [backend.seed_task(title=f"Task {n}") for n in range(7)]
    await live_store.fetch_tasks()
    assert rows[0]["id"] not in {t.id for t in live_store.tasks}

    # Act
    await live_store.delete_task(rows[6]["id"])

    # Assert
    assert len(live_store.tasks) == 6
    assert live_store.tasks[-1].id == rows[0]["id"]


@pytest.mark.asyncio
async def test_rejected_create_propagates_server_message(backend, live_store):
    with pytest.raises(ApiError, match="title must not be empty"):
        await live_store.add_task({"title": "", "category_id": 1})

    assert live_store.tasks == []
    assert live_store.error is None
