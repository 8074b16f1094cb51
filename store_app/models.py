"""
Data models for the task store.

Defines the records returned by the remote API (``Task`` and ``Category``),
the enumerations they use, the request payloads sent when creating or
updating tasks, and the single-dimension filter applied to task listings.

Enumerations inherit from ``str`` so that members serialise straight to
JSON and compare equal to the raw strings the API returns.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any


class TaskPriority(str, Enum):
    """Task priority levels."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ImageFilter(str, Enum):
    """Visual filter applied to a category's artwork."""

    DEFAULT = "default"
    GRAYSCALE = "grayscale"
    SEPIA = "sepia"
    BLUR = "blur"


class FilterType(str, Enum):
    """
    Dimension the task listing is currently filtered by.

    Only one dimension can be active at a time; ``ALL`` means no filter.

    Attributes:
        ALL: No predicate is applied.
        CATEGORY: Filter on ``category_id``.
        STATUS: Filter on ``completed``.
        PRIORITY: Filter on ``priority``.
    """

    ALL = "all"
    CATEGORY = "category"
    STATUS = "status"
    PRIORITY = "priority"


# Column each filter dimension maps to on the tasks resource.
FILTER_COLUMNS = {
    FilterType.CATEGORY: "category_id",
    FilterType.STATUS: "completed",
    FilterType.PRIORITY: "priority",
}


def parse_datetime(value: str | None) -> datetime | None:
    """
    Parse an ISO-8601 timestamp returned by the API.

    Handles the ``Z`` suffix and fractions of any length (Postgres trims
    trailing zeros, e.g. ``.12345``), both of which
    :meth:`datetime.fromisoformat` accepts from Python 3.11 on.
    Naive values are assumed to be UTC.

    Args:
        value: An ISO-8601 string, or ``None``.

    Returns:
        A timezone-aware :class:`datetime`, or ``None`` for empty input.

    Raises:
        ValueError: If the value is not an ISO-8601 timestamp string.
    """
    if not value:
        return None
    if not isinstance(value, str):
        raise ValueError(f"Expected an ISO-8601 string, got {type(value).__name__}")
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def parse_date(value: str | None) -> date | None:
    """Parse a ``due_date`` value, truncating a full timestamp to its date."""
    if not value:
        return None
    if not isinstance(value, str):
        raise ValueError(f"Expected an ISO-8601 date string, got {type(value).__name__}")
    return date.fromisoformat(value[:10])


def _iso(value: date | datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


@dataclass(slots=True)
class Category:
    """
    Read-only task category.

    Attributes:
        id: Server-assigned identifier.
        name: Display name; categories are listed alphabetically by it.
        color: CSS colour used for badges.
        icon_url: URL of the category icon.
        image_filter: Filter applied to the category artwork.
        image_seed_offset: Offset mixed into generated image seeds.
        created_at: Creation timestamp (UTC).
    """

    id: int
    name: str
    color: str
    icon_url: str
    image_filter: ImageFilter = ImageFilter.DEFAULT
    image_seed_offset: int = 0
    created_at: datetime | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Category:
        """Build a category from an API row."""
        return cls(
            id=int(data["id"]),
            name=data["name"],
            color=data.get("color", ""),
            icon_url=data.get("icon_url", ""),
            image_filter=ImageFilter(data.get("image_filter") or ImageFilter.DEFAULT.value),
            image_seed_offset=int(data.get("image_seed_offset") or 0),
            created_at=parse_datetime(data.get("created_at")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "color": self.color,
            "icon_url": self.icon_url,
            "image_filter": self.image_filter.value,
            "image_seed_offset": self.image_seed_offset,
            "created_at": _iso(self.created_at),
        }


@dataclass(slots=True)
class Task:
    """
    Task record as returned by the API.

    The server is the source of truth: instances are always built from
    the canonical row echoed back by a read or a mutation.

    Attributes:
        id: Server-assigned identifier, immutable.
        title: Short summary of the task.
        category_id: Reference to a :class:`Category` (not validated locally).
        priority: Importance level (see ``TaskPriority``).
        completed: Whether the task has been finished.
        description: Optional longer text.
        due_date: Optional deadline (date only).
        image_url: Optional illustration URL.
        created_at: Creation timestamp (UTC); listings sort on it.
        updated_at: Timestamp of the last modification, when known.
    """

    id: int
    title: str
    category_id: int
    priority: TaskPriority = TaskPriority.MEDIUM
    completed: bool = False
    description: str | None = None
    due_date: date | None = None
    image_url: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Task:
        """
        Build a task from an API row.

        Args:
            data: JSON object returned by the tasks resource.

        Returns:
            The parsed :class:`Task`.

        Raises:
            KeyError: If a required column is missing.
            ValueError: If ``priority`` or a date column is malformed.
        """
        return cls(
            id=int(data["id"]),
            title=data["title"],
            category_id=int(data["category_id"]),
            priority=TaskPriority(data.get("priority") or TaskPriority.MEDIUM.value),
            completed=bool(data.get("completed", False)),
            description=data.get("description"),
            due_date=parse_date(data.get("due_date")),
            image_url=data.get("image_url"),
            created_at=parse_datetime(data.get("created_at")),
            updated_at=parse_datetime(data.get("updated_at")),
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialise the task to a JSON-safe dictionary."""
        return {
            "id": self.id,
            "title": self.title,
            "category_id": self.category_id,
            "priority": self.priority.value,
            "completed": self.completed,
            "description": self.description,
            "due_date": _iso(self.due_date),
            "image_url": self.image_url,
            "created_at": _iso(self.created_at),
            "updated_at": _iso(self.updated_at),
        }

    def __repr__(self) -> str:
        return f"<Task {self.id}: {self.title}>"


def _payload_value(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return value


@dataclass(slots=True)
class CreateTaskPayload:
    """
    Body of a create request.

    ``title`` and ``category_id`` are required; optional fields left as
    ``None`` are omitted so the server applies its own defaults.
    """

    title: str
    category_id: int
    description: str | None = None
    priority: TaskPriority | None = None
    due_date: date | None = None
    image_url: str | None = None

    def to_json(self) -> dict[str, Any]:
        body: dict[str, Any] = {"title": self.title, "category_id": self.category_id}
        for name in ("description", "priority", "due_date", "image_url"):
            value = getattr(self, name)
            if value is not None:
                body[name] = _payload_value(value)
        return body


# Columns a partial update is allowed to touch.
UPDATABLE_FIELDS = ("title", "category_id", "description", "priority", "due_date", "completed")


class UpdateTaskPayload:
    """
    Body of a partial update.

    Only fields passed explicitly are sent, which lets callers clear a
    nullable column by passing ``None`` (e.g. ``UpdateTaskPayload(due_date=None)``).

    Raises:
        ValueError: If a field outside ``UPDATABLE_FIELDS`` is given.
    """

    def __init__(self, **fields: Any) -> None:
        unknown = set(fields) - set(UPDATABLE_FIELDS)
        if unknown:
            raise ValueError(f"Cannot update field(s): {', '.join(sorted(unknown))}")
        self.fields = fields

    def to_json(self) -> dict[str, Any]:
        return {name: _payload_value(value) for name, value in self.fields.items()}

    def __repr__(self) -> str:
        return f"UpdateTaskPayload({self.fields!r})"


@dataclass(frozen=True, slots=True)
class TaskFilter:
    """
    The active filter: a tagged ``(type, value)`` pair.

    ``value`` is expected whenever ``type`` is not ``ALL``; that is a
    caller contract and is not enforced here.
    """

    type: FilterType = FilterType.ALL
    value: Any = None

    @property
    def column(self) -> str | None:
        """Column the filter applies to, or ``None`` for ``ALL``."""
        return FILTER_COLUMNS.get(self.type)
