"""Task service layer: the operations the controlling layer calls."""

from datetime import datetime

import structlog

from core.exceptions import PersistenceError, TaskNotFoundError
from domain.entities.task import Task, clean_title
from domain.repositories.task_repository import ITaskRepository
from domain.services.task_export import DEFAULT_TITLE, render_export
from domain.services.task_query import TaskQueryResult, TaskView

logger = structlog.get_logger()


class TaskService:
    """Service layer for task business logic.

    Every mutation reads the current task from the repository, changes it
    and writes it back. If the write fails the change is dropped and
    PersistenceError is raised, so the stored collection stays authoritative.
    """

    def __init__(self, repository: ITaskRepository, export_title: str = DEFAULT_TITLE) -> None:
        self._repository = repository
        self._export_title = export_title

    def list_tasks(self, view: TaskView | None = None, now: datetime | None = None) -> TaskQueryResult:
        """Derive the display list for the given filter and sort."""
        return (view or TaskView()).apply(self._repository.get_all(), now)

    def get_by_id(self, task_id: str) -> Task:
        """Get a specific task."""
        task = self._repository.get_by_id(task_id)
        if not task:
            raise TaskNotFoundError(task_id)
        return task

    def create_task(
        self,
        title: str,
        description: str | None = None,
        deadline: datetime | str | None = None,
        priority: str | None = None,
    ) -> Task:
        """Create a new task and persist it."""
        task = Task.create(title, description, deadline, priority)

        if not self._repository.save(task):
            raise PersistenceError("An error occurred while saving the task")

        logger.info("task_created", task_id=task.id, priority=task.priority.value)
        return task

    def update_task(
        self,
        task_id: str,
        title: str,
        description: str | None = None,
        deadline: datetime | str | None = None,
        priority: str | None = None,
    ) -> Task:
        """Replace the editable fields of an existing task."""
        # Reject bad input before looking anything up
        clean_title(title)
        task = self.get_by_id(task_id)
        task.update(title, description, deadline, priority)

        if not self._repository.save(task):
            raise PersistenceError("An error occurred while updating the task")

        logger.info("task_updated", task_id=task.id)
        return task

    def toggle_task_status(self, task_id: str) -> Task:
        """Flip a task between ToDo and Completed."""
        task = self.get_by_id(task_id)
        task.toggle_status()

        if not self._repository.save(task):
            raise PersistenceError("An error occurred while updating the task")

        logger.info("task_status_toggled", task_id=task.id, status=task.status.value)
        return task

    def delete_task(self, task_id: str) -> None:
        """Delete a task. Unknown IDs are ignored."""
        if not self._repository.delete(task_id):
            raise PersistenceError("An error occurred while deleting the task")
        logger.info("task_deleted", task_id=task_id)

    def export_tasks(self, now: datetime | None = None) -> str:
        """Export the whole collection in stored order."""
        return self._repository.export_to_text(now)

    def export_view(self, view: TaskView, now: datetime | None = None) -> str:
        """Export the tasks currently shown, in the order they are shown."""
        result = self.list_tasks(view, now)
        return render_export(result.tasks, now=now, total=result.total, title=self._export_title)

    def flush(self) -> bool:
        """Write the current collection back once more before shutdown.

        Best effort: a failure is logged and returned, never raised. An
        empty read is not written back so unreadable data is not replaced.
        """
        tasks = self._repository.get_all()
        if not tasks:
            return True
        saved = self._repository.save_all(tasks)
        if not saved:
            logger.warning("task_flush_failed", count=len(tasks))
        return saved
