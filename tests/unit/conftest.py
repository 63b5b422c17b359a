"""Shared fixtures for unit tests."""

from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any

import pytest

from domain.entities.task import Task, TaskPriority, TaskStatus


@pytest.fixture
def now() -> datetime:
    """A fixed reference time."""
    return datetime(2024, 2, 15, 12, 0, tzinfo=UTC)


@pytest.fixture
def make_task() -> Callable[..., Task]:
    """Factory for tasks with stable timestamps."""

    def _make(
        title: str = "Task",
        priority: TaskPriority = TaskPriority.MEDIUM,
        status: TaskStatus = TaskStatus.TODO,
        deadline: datetime | None = None,
        **kwargs: Any,
    ) -> Task:
        created = datetime(2024, 1, 1, 9, 0, tzinfo=UTC)
        return Task(
            title=title,
            priority=priority,
            status=status,
            deadline=deadline,
            created_at=kwargs.pop("created_at", created),
            updated_at=kwargs.pop("updated_at", created),
            **kwargs,
        )

    return _make
