"""Task domain entity."""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any
from uuid import uuid4

from core.exceptions import ValidationError


class TaskStatus(StrEnum):
    """Task completion state."""

    TODO = "ToDo"
    COMPLETED = "Completed"

    @classmethod
    def parse(cls, raw: object) -> "TaskStatus":
        """Return the matching status, ToDo for anything unknown."""
        try:
            return cls(raw)
        except (ValueError, TypeError):
            return cls.TODO


class TaskPriority(StrEnum):
    """Task priority. Unknown input normalizes to Medium."""

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"

    @classmethod
    def parse(cls, raw: object) -> "TaskPriority":
        """Return the matching priority, Medium for anything absent or unknown."""
        try:
            return cls(raw)
        except (ValueError, TypeError):
            return cls.MEDIUM


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(UTC)


def new_task_id() -> str:
    """Random 128-bit identifier rendered as 32 hex characters."""
    return uuid4().hex


def as_aware(value: datetime) -> datetime:
    """Attach the local timezone to naive datetimes so they compare with aware ones."""
    if value.tzinfo is None:
        return value.astimezone()
    return value


def parse_datetime(value: Any) -> datetime | None:
    """Accept a datetime or an ISO-8601 string. Blank or unparseable input is None."""
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        return datetime.fromisoformat(value.strip())
    except ValueError:
        return None


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def clean_title(title: str | None) -> str:
    """Trim the title and reject it when nothing is left."""
    cleaned = (title or "").strip()
    if not cleaned:
        raise ValidationError("Please enter a task title")
    return cleaned


@dataclass
class Task:
    """Domain entity for a single task."""

    title: str
    id: str = field(default_factory=new_task_id)
    description: str = ""
    deadline: datetime | None = None
    priority: TaskPriority = TaskPriority.MEDIUM
    status: TaskStatus = TaskStatus.TODO
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    @classmethod
    def create(
        cls,
        title: str,
        description: str | None = None,
        deadline: datetime | str | None = None,
        priority: str | None = None,
    ) -> "Task":
        """Build a new ToDo task from user input."""
        now = utc_now()
        return cls(
            title=clean_title(title),
            description=description or "",
            deadline=parse_datetime(deadline),
            priority=TaskPriority.parse(priority),
            status=TaskStatus.TODO,
            created_at=now,
            updated_at=now,
        )

    def update(
        self,
        title: str,
        description: str | None = None,
        deadline: datetime | str | None = None,
        priority: str | None = None,
    ) -> None:
        """Replace the editable fields. Nothing changes if the title is invalid."""
        cleaned = clean_title(title)
        self.title = cleaned
        self.description = description or ""
        self.deadline = parse_datetime(deadline)
        self.priority = TaskPriority.parse(priority)
        self._touch()

    def mark_completed(self) -> None:
        """Mark the task as completed."""
        self.status = TaskStatus.COMPLETED
        self._touch()

    def mark_todo(self) -> None:
        """Mark the task as not completed."""
        self.status = TaskStatus.TODO
        self._touch()

    def toggle_status(self) -> None:
        """Flip between ToDo and Completed."""
        if self.is_completed:
            self.mark_todo()
        else:
            self.mark_completed()

    @property
    def is_completed(self) -> bool:
        return self.status == TaskStatus.COMPLETED

    def is_overdue(self, now: datetime | None = None) -> bool:
        """True when the deadline has passed and the task is still open."""
        if self.deadline is None or self.is_completed:
            return False
        return as_aware(self.deadline) < as_aware(now or utc_now())

    def _touch(self) -> None:
        # updated_at never moves backwards, even if the clock does
        self.updated_at = max(utc_now(), self.updated_at)

    def __post_init__(self) -> None:
        """Store timestamps as aware UTC and keep updated_at >= created_at."""
        # Naive timestamps are taken to be UTC, as they are when read back
        self.created_at = _as_utc(self.created_at)
        self.updated_at = _as_utc(self.updated_at)
        if self.updated_at < self.created_at:
            self.updated_at = self.created_at
