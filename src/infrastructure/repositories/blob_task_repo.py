"""Task repository persisted as a single blob in a key-value store."""

from collections.abc import Sequence
from datetime import datetime
from typing import Any

import structlog
from pydantic import TypeAdapter
from pydantic import ValidationError as SchemaValidationError
from pydantic_core import PydanticSerializationError

from core.exceptions import AppException, PersistenceError
from domain.entities.task import Task
from domain.entities.task_record import deserialize_task, serialize_task
from domain.repositories.blob_store import IBlobStore
from domain.services.task_export import DEFAULT_TITLE, render_export

logger = structlog.get_logger()

_RECORD_LIST = TypeAdapter(list[Any])


class BlobTaskRepository:
    """ITaskRepository storing the whole collection under one key.

    Each write serializes the full collection and hands it to the blob
    store in one call. Records that could not be read on the last load are
    written back unchanged after the tasks. Storage errors are logged and
    reported as False (writes) or an empty collection (reads); they never
    propagate.
    """

    def __init__(
        self,
        blob_store: IBlobStore,
        storage_key: str = "smart_task_organizer_tasks",
        export_title: str = DEFAULT_TITLE,
    ) -> None:
        self._blob_store = blob_store
        self._storage_key = storage_key
        self._export_title = export_title
        self._unreadable: list[Any] = []

    def get_all(self) -> list[Task]:
        """Get all stored tasks, or an empty list if they cannot be read."""
        try:
            return self._load()
        except PersistenceError as e:
            logger.error("task_store_read_failed", key=self._storage_key, error=e.message)
            return []

    def get_by_id(self, id: str) -> Task | None:
        """Get a task by ID."""
        return next((task for task in self.get_all() if task.id == id), None)

    def save(self, task: Task) -> bool:
        """Insert the task, or replace the stored task with the same ID."""
        try:
            tasks = self._load()
        except PersistenceError as e:
            logger.error("task_save_failed", task_id=task.id, error=e.message)
            return False

        for index, existing in enumerate(tasks):
            if existing.id == task.id:
                tasks[index] = task
                break
        else:
            tasks.append(task)
        return self.save_all(tasks)

    def save_all(self, tasks: Sequence[Task]) -> bool:
        """Replace the stored collection with tasks, keeping unreadable records."""
        try:
            payload = self._encode(tasks)
            self._blob_store.set(self._storage_key, payload)
        except PersistenceError as e:
            logger.error(
                "task_store_write_failed",
                key=self._storage_key,
                error_code=e.error_code.value,
                error=e.message,
            )
            return False
        except (PydanticSerializationError, ValueError, TypeError) as e:
            logger.error("task_store_encode_failed", key=self._storage_key, error=str(e))
            return False

        logger.debug("task_store_saved", key=self._storage_key, count=len(tasks))
        return True

    def delete(self, id: str) -> bool:
        """Delete a task by ID. Deleting an unknown ID succeeds without writing."""
        try:
            tasks = self._load()
        except PersistenceError as e:
            logger.error("task_delete_failed", task_id=id, error=e.message)
            return False

        remaining = [task for task in tasks if task.id != id]
        if len(remaining) == len(tasks):
            return True
        return self.save_all(remaining)

    def clear_all(self) -> bool:
        """Remove the stored collection entirely."""
        try:
            self._blob_store.remove(self._storage_key)
        except PersistenceError as e:
            logger.error("task_store_clear_failed", key=self._storage_key, error=e.message)
            return False
        self._unreadable = []
        return True

    def export_to_text(self, now: datetime | None = None) -> str:
        """Render the stored collection as a plain-text report."""
        return render_export(self.get_all(), now=now, title=self._export_title)

    def _load(self) -> list[Task]:
        """Read and decode the collection.

        Raises:
            PersistenceError: the blob store could not be read.
        """
        blob = self._blob_store.get(self._storage_key)
        self._unreadable = []
        if not blob:
            return []
        return self._decode(blob)

    def _decode(self, blob: str) -> list[Task]:
        try:
            records = _RECORD_LIST.validate_json(blob)
        except SchemaValidationError as e:
            logger.error(
                "task_store_corrupt",
                key=self._storage_key,
                error_count=e.error_count(),
            )
            return []

        tasks: list[Task] = []
        seen: set[str] = set()
        for position, record in enumerate(records):
            try:
                task = deserialize_task(record)
            except (AppException, SchemaValidationError) as e:
                logger.warning("task_record_skipped", position=position, error=str(e))
                self._unreadable.append(record)
                continue
            if task.id in seen:
                logger.warning("task_record_duplicate", position=position, task_id=task.id)
                continue
            seen.add(task.id)
            tasks.append(task)
        return tasks

    def _encode(self, tasks: Sequence[Task]) -> str:
        records: list[Any] = [serialize_task(task) for task in tasks]
        records.extend(self._unreadable)
        return _RECORD_LIST.dump_json(records).decode("utf-8")
