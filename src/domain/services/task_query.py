"""Filter and sort logic that derives the display list from the collection."""

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import StrEnum

from domain.entities.task import Task, TaskPriority, TaskStatus, as_aware, utc_now


class TaskFilter(StrEnum):
    """Mutually exclusive filter modes."""

    ALL = "all"
    COMPLETED = "completed"
    NOT_COMPLETED = "not-completed"
    HIGH_PRIORITY = "high-priority"

    @classmethod
    def parse(cls, raw: object) -> "TaskFilter":
        """Return the matching filter, ALL for anything unknown."""
        try:
            return cls(raw)
        except (ValueError, TypeError):
            return cls.ALL


class TaskSort(StrEnum):
    """Sort modes applied after filtering."""

    NONE = "none"
    DEADLINE = "deadline"
    PRIORITY = "priority"

    @classmethod
    def parse(cls, raw: object) -> "TaskSort":
        """Return the matching sort, NONE for anything unknown."""
        try:
            return cls(raw)
        except (ValueError, TypeError):
            return cls.NONE


# Higher rank sorts first; anything not listed ranks 0
PRIORITY_RANK: dict[str, int] = {
    TaskPriority.HIGH: 3,
    TaskPriority.MEDIUM: 2,
    TaskPriority.LOW: 1,
}

_FILTERS: dict[TaskFilter, Callable[[Task], bool]] = {
    TaskFilter.ALL: lambda task: True,
    TaskFilter.COMPLETED: lambda task: task.status == TaskStatus.COMPLETED,
    TaskFilter.NOT_COMPLETED: lambda task: task.status == TaskStatus.TODO,
    TaskFilter.HIGH_PRIORITY: lambda task: task.priority == TaskPriority.HIGH,
}


def priority_rank(priority: object) -> int:
    """Severity of a priority value, 0 when unrecognized."""
    return PRIORITY_RANK.get(str(priority), 0)


def _deadline_key(task: Task) -> tuple[int, datetime | None]:
    # Tasks without a deadline share one key after every dated task
    if task.deadline is None:
        return (1, None)
    return (0, as_aware(task.deadline))


@dataclass(frozen=True, slots=True)
class TaskQueryResult:
    """Read-only value object: the derived list plus collection counters."""

    tasks: list[Task] = field(default_factory=list)
    total: int = 0
    overdue: int = 0

    @property
    def shown(self) -> int:
        return len(self.tasks)


@dataclass(frozen=True, slots=True)
class TaskView:
    """Current filter and sort chosen by the user."""

    filter_by: TaskFilter = TaskFilter.ALL
    sort_by: TaskSort = TaskSort.NONE

    def with_filter(self, filter_by: str) -> "TaskView":
        return replace(self, filter_by=TaskFilter.parse(filter_by))

    def with_sort(self, sort_by: str) -> "TaskView":
        return replace(self, sort_by=TaskSort.parse(sort_by))

    def apply(self, tasks: Sequence[Task], now: datetime | None = None) -> TaskQueryResult:
        return derive(tasks, self.filter_by, self.sort_by, now)


def filter_tasks(tasks: Sequence[Task], filter_by: TaskFilter | str) -> list[Task]:
    """Keep the tasks matching the filter, preserving their order."""
    predicate = _FILTERS[TaskFilter.parse(filter_by)]
    return [task for task in tasks if predicate(task)]


def sort_tasks(tasks: Sequence[Task], sort_by: TaskSort | str) -> list[Task]:
    """Return a sorted copy. Sorting is stable, so ties keep their order."""
    mode = TaskSort.parse(sort_by)
    if mode == TaskSort.DEADLINE:
        return sorted(tasks, key=_deadline_key)
    if mode == TaskSort.PRIORITY:
        return sorted(tasks, key=lambda task: priority_rank(task.priority), reverse=True)
    return list(tasks)


def derive(
    tasks: Sequence[Task],
    filter_by: TaskFilter | str = TaskFilter.ALL,
    sort_by: TaskSort | str = TaskSort.NONE,
    now: datetime | None = None,
) -> TaskQueryResult:
    """Produce the ordered list to display without touching the input.

    Args:
        tasks: The full stored collection.
        filter_by: Filter mode; unknown values behave like "all".
        sort_by: Sort mode; unknown values behave like "none".
        now: Reference time for the overdue counter.

    Returns:
        The derived list together with the unfiltered total.
    """
    now = now or utc_now()
    derived = sort_tasks(filter_tasks(tasks, filter_by), sort_by)
    return TaskQueryResult(
        tasks=derived,
        total=len(tasks),
        overdue=sum(1 for task in derived if task.is_overdue(now)),
    )
