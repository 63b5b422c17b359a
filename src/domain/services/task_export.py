"""Plain-text export of the task collection."""

from collections.abc import Sequence
from datetime import datetime, tzinfo

from domain.entities.task import Task, TaskPriority, TaskStatus, as_aware, utc_now

EMPTY_EXPORT = "No tasks to export"
DEFAULT_TITLE = "Task List - Smart Task Organizer"

BANNER = "═" * 39
RULE = "─" * 40
OVERDUE_MARKER = "⚠️ Overdue!"

STATUS_LABELS: dict[str, str] = {
    TaskStatus.COMPLETED: "Completed ✓",
    TaskStatus.TODO: "To Do",
}

PRIORITY_LABELS: dict[str, str] = {
    TaskPriority.HIGH: "High",
    TaskPriority.MEDIUM: "Medium",
    TaskPriority.LOW: "Low",
}


def format_timestamp(value: datetime) -> str:
    """Render a datetime like ``3/1/2024, 9:05:00 AM``."""
    hour = value.hour % 12 or 12
    meridiem = "AM" if value.hour < 12 else "PM"
    return (
        f"{value.month}/{value.day}/{value.year}, "
        f"{hour}:{value.minute:02d}:{value.second:02d} {meridiem}"
    )


def export_filename(now: datetime | None = None) -> str:
    """File name offered to the download mechanism."""
    return f"tasks_export_{(now or utc_now()).date().isoformat()}.txt"


def _local(value: datetime, tz: tzinfo | None) -> datetime:
    # Naive values are already local wall time
    return as_aware(value).astimezone(tz)


def _render_task(index: int, task: Task, now: datetime, tz: tzinfo | None) -> list[str]:
    lines = [
        "",
        f"[{index}] {task.title}",
        RULE,
        f"Status: {STATUS_LABELS.get(task.status, str(task.status))}",
        f"Priority: {PRIORITY_LABELS.get(task.priority, str(task.priority))}",
    ]
    if task.description:
        lines.append(f"Description: {task.description}")
    if task.deadline is not None:
        lines.append(f"Deadline: {format_timestamp(_local(task.deadline, tz))}")
        if task.is_overdue(now):
            lines.append(OVERDUE_MARKER)
    lines.append(f"Created: {format_timestamp(_local(task.created_at, tz))}")
    lines.append(f"Updated: {format_timestamp(_local(task.updated_at, tz))}")
    lines.append("")
    return lines


def render_export(
    tasks: Sequence[Task],
    now: datetime | None = None,
    total: int | None = None,
    title: str = DEFAULT_TITLE,
    tz: tzinfo | None = None,
) -> str:
    """Render the report for the given tasks in the given order.

    ``total`` defaults to the number of rendered tasks; pass the collection
    size when exporting a filtered view. Every timestamp is shown in ``tz``,
    the local timezone by default. The output depends only on the
    arguments, so repeated calls with the same ``now`` are identical.
    """
    if not tasks:
        return EMPTY_EXPORT
    now = now or utc_now()

    lines = [
        BANNER,
        f"     {title}",
        BANNER,
        "",
        f"Export Date: {format_timestamp(_local(now, tz))}",
        f"Total Tasks: {len(tasks) if total is None else total}",
        "",
    ]
    for index, task in enumerate(tasks, start=1):
        lines.extend(_render_task(index, task, now, tz))
    lines.extend(["", BANNER, ""])
    return "\n".join(lines)
