"""Unit tests for Task service layer."""

import json
from datetime import UTC, datetime
from unittest.mock import MagicMock

import pytest

from core.exceptions import PersistenceError, TaskNotFoundError, ValidationError
from domain.entities.task import Task, TaskPriority, TaskStatus
from domain.services.task_query import TaskFilter, TaskSort, TaskView
from domain.services.task_service import TaskService
from infrastructure.memory_blob_store import InMemoryBlobStore
from infrastructure.repositories.blob_task_repo import BlobTaskRepository

STORAGE_KEY = "test_tasks"


@pytest.fixture
def service(repository: BlobTaskRepository) -> TaskService:
    """Create service over the in-memory repository."""
    return TaskService(repository)


@pytest.fixture
def failing_repository() -> MagicMock:
    """Repository whose writes always report failure."""
    repo = MagicMock(spec=BlobTaskRepository)
    repo.save.return_value = False
    repo.save_all.return_value = False
    repo.delete.return_value = False
    return repo


class TestTaskServiceCreate:
    def test_create_then_get_returns_equal_task(
        self, service: TaskService, repository: BlobTaskRepository
    ) -> None:
        deadline = datetime(2024, 3, 1, 10, 0)

        created = service.create_task(" Plan trip ", "Book hotel", deadline, "High")
        stored = repository.get_by_id(created.id)

        assert stored == created
        assert stored is not None
        assert stored.title == "Plan trip"
        assert stored.status == TaskStatus.TODO
        assert stored.priority == TaskPriority.HIGH

    def test_blank_deadline_from_form_is_none(self, service: TaskService) -> None:
        created = service.create_task("Plan trip", "", "", "High")

        assert created.deadline is None
        assert created.is_overdue() is False

    def test_iso_deadline_from_form_is_parsed(self, service: TaskService) -> None:
        created = service.create_task("Plan trip", deadline="2024-01-01T10:00")

        assert created.deadline == datetime(2024, 1, 1, 10, 0)
        assert "Deadline: 1/1/2024, 10:00:00 AM" in service.export_tasks()

    def test_empty_title_raises_without_writing(
        self, service: TaskService, repository: BlobTaskRepository
    ) -> None:
        with pytest.raises(ValidationError):
            service.create_task("   ")

        assert repository.get_all() == []

    def test_write_failure_raises_persistence_error(self, failing_repository: MagicMock) -> None:
        service = TaskService(failing_repository)

        with pytest.raises(PersistenceError):
            service.create_task("Task")


class TestTaskServiceUpdate:
    def test_updates_fields(self, service: TaskService, repository: BlobTaskRepository) -> None:
        task = service.create_task("Old")

        updated = service.update_task(task.id, "New", "desc", None, "Low")

        stored = repository.get_by_id(task.id)
        assert stored == updated
        assert stored is not None
        assert stored.title == "New"
        assert stored.priority == TaskPriority.LOW
        assert stored.created_at == task.created_at
        assert stored.updated_at >= task.updated_at

    def test_update_not_found_raises(self, service: TaskService) -> None:
        with pytest.raises(TaskNotFoundError) as exc_info:
            service.update_task("missing", "Title")

        assert exc_info.value.details == {"task_id": "missing"}

    def test_invalid_title_checked_before_lookup(self, service: TaskService) -> None:
        with pytest.raises(ValidationError):
            service.update_task("missing", "  ")

    def test_invalid_title_leaves_store_unchanged(
        self, service: TaskService, repository: BlobTaskRepository
    ) -> None:
        task = service.create_task("Keep")

        with pytest.raises(ValidationError):
            service.update_task(task.id, "")

        assert repository.get_by_id(task.id) == task

    def test_failed_write_keeps_previous_state(self, failing_repository: MagicMock) -> None:
        original = Task.create("Original")
        failing_repository.get_by_id.return_value = original
        service = TaskService(failing_repository)

        with pytest.raises(PersistenceError):
            service.update_task(original.id, "Changed")

        failing_repository.save.assert_called_once()


class TestTaskServiceToggle:
    def test_toggle_persists_status(
        self, service: TaskService, repository: BlobTaskRepository
    ) -> None:
        task = service.create_task("Task")

        service.toggle_task_status(task.id)
        stored = repository.get_by_id(task.id)
        assert stored is not None
        assert stored.status == TaskStatus.COMPLETED

        service.toggle_task_status(task.id)
        stored = repository.get_by_id(task.id)
        assert stored is not None
        assert stored.status == TaskStatus.TODO

    def test_toggle_not_found_raises(self, service: TaskService) -> None:
        with pytest.raises(TaskNotFoundError):
            service.toggle_task_status("missing")


class TestTaskServiceDelete:
    def test_delete_removes_task(
        self, service: TaskService, repository: BlobTaskRepository
    ) -> None:
        keep = service.create_task("Keep")
        drop = service.create_task("Drop")

        service.delete_task(drop.id)

        assert [t.id for t in repository.get_all()] == [keep.id]

    def test_delete_unknown_id_is_silent(
        self, service: TaskService, repository: BlobTaskRepository
    ) -> None:
        service.create_task("Keep")

        service.delete_task("missing")

        assert len(repository.get_all()) == 1

    def test_delete_failure_raises(self, failing_repository: MagicMock) -> None:
        with pytest.raises(PersistenceError):
            TaskService(failing_repository).delete_task("any")


class TestTaskServiceListAndExport:
    def test_list_tasks_applies_view(self, service: TaskService) -> None:
        low = service.create_task("low", priority="Low")
        high = service.create_task("high", priority="High")
        done = service.create_task("done", priority="High")
        service.toggle_task_status(done.id)

        result = service.list_tasks(TaskView(TaskFilter.NOT_COMPLETED, TaskSort.PRIORITY))

        assert [t.id for t in result.tasks] == [high.id, low.id]
        assert result.total == 3

    def test_list_tasks_defaults_to_everything(self, service: TaskService) -> None:
        service.create_task("a")
        service.create_task("b")

        assert service.list_tasks().shown == 2

    def test_export_tasks_covers_collection(self, service: TaskService) -> None:
        service.create_task("a")
        service.create_task("b", priority="High")

        text = service.export_tasks(datetime(2024, 1, 1, tzinfo=UTC))

        assert "Total Tasks: 2" in text
        assert "[2] b" in text

    def test_export_view_follows_view_order(self, service: TaskService) -> None:
        service.create_task("a", priority="Low")
        service.create_task("b", priority="High")

        text = service.export_view(TaskView(sort_by=TaskSort.PRIORITY))

        assert text.index("[1] b") < text.index("[2] a")
        assert "Total Tasks: 2" in text

    def test_export_empty(self, service: TaskService) -> None:
        assert service.export_tasks() == "No tasks to export"


class TestTaskServiceFlush:
    def test_flush_rewrites_collection(
        self, service: TaskService, repository: BlobTaskRepository
    ) -> None:
        task = service.create_task("a")

        assert service.flush() is True
        assert repository.get_all() == [task]

    def test_flush_of_empty_collection_skips_write(self, failing_repository: MagicMock) -> None:
        failing_repository.get_all.return_value = []

        assert TaskService(failing_repository).flush() is True
        failing_repository.save_all.assert_not_called()

    def test_flush_failure_is_reported_not_raised(self, failing_repository: MagicMock) -> None:
        failing_repository.get_all.return_value = [Task.create("a")]

        assert TaskService(failing_repository).flush() is False

    def test_flush_keeps_unreadable_records(self, memory_store: InMemoryBlobStore) -> None:
        blob = json.dumps([{"id": "a", "title": "A"}, {"id": "b", "title": ""}])
        memory_store.set(STORAGE_KEY, blob)
        service = TaskService(BlobTaskRepository(memory_store, storage_key=STORAGE_KEY))

        assert service.flush() is True

        records = json.loads(memory_store.get(STORAGE_KEY) or "")
        assert [r["id"] for r in records] == ["a", "b"]
