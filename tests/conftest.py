"""
Shared pytest fixtures for the task store test suite.

Fixtures follow the Arrange-Act-Assert (AAA) pattern and ensure test
isolation by providing a fresh store and a fresh recording client for
each test.

Key Concepts Demonstrated:
- Fixture scopes and dependencies
- Test data factories backed by Faker
- Recording fakes in place of the HTTP transport
"""

from __future__ import annotations

import os
from typing import Any

import pytest

# Set testing environment before importing the package
os.environ["TASK_STORE_ENV"] = "testing"

from shared.test_helpers import FakeApiClient, make_category_row, make_task_row, make_task_rows
from store_app import ApiClient, TaskStore


# -----------------------------------------------------------------------------
# Store Fixtures
# -----------------------------------------------------------------------------

@pytest.fixture
def fake_client() -> FakeApiClient:
    """Provide a recording client with an empty reply queue."""
    return FakeApiClient()


@pytest.fixture
def store(fake_client) -> TaskStore:
    """
    Provide a store wired to the recording client.

    Uses the default page size of 6 so scenario tests read naturally.
    """
    return TaskStore(fake_client, items_per_page=6)


@pytest.fixture
def api_client() -> ApiClient:
    """Provide a real API client pointed at a non-routable test host."""
    return ApiClient(base_url="http://api.test/rest/v1/", api_key="test-anon-key", timeout=1)


# -----------------------------------------------------------------------------
# Test Data Factory Fixtures
# -----------------------------------------------------------------------------

@pytest.fixture
def task_row_factory():
    """
    Factory fixture for API task rows.

    Example:
        def test_something(task_row_factory):
            row = task_row_factory(priority="high")
    """

    def _create(**overrides: Any) -> dict[str, Any]:
        return make_task_row(**overrides)

    return _create


@pytest.fixture
def task_page_factory():
    """Factory fixture returning *count* task rows, newest first."""

    def _create(count: int, **overrides: Any) -> list[dict[str, Any]]:
        return make_task_rows(count, **overrides)

    return _create


@pytest.fixture
def category_rows() -> list[dict[str, Any]]:
    """Provide three categories, already sorted by name."""
    return [
        make_category_row(id=1, name="Errands", image_filter="sepia"),
        make_category_row(id=2, name="Home", image_filter="grayscale"),
        make_category_row(id=3, name="Work", image_filter="blur"),
    ]
