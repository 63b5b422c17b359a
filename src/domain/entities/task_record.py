"""Persisted record shape of a Task and the conversions to and from it."""

from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from core.exceptions import ValidationError
from domain.entities.task import (
    Task,
    TaskPriority,
    TaskStatus,
    new_task_id,
    parse_datetime,
    utc_now,
)


class TaskRecord(BaseModel):
    """One task as stored in the collection blob.

    Every field has a named default so that records written by older
    versions (no status, no timestamps, empty strings for optional fields)
    still load. Keys use the camelCase layout of the stored collection.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = Field(default_factory=new_task_id)
    title: str = ""
    description: str = ""
    deadline: datetime | None = None
    priority: TaskPriority = TaskPriority.MEDIUM
    status: TaskStatus = TaskStatus.TODO
    created_at: datetime = Field(default_factory=utc_now, alias="createdAt")
    updated_at: datetime = Field(default_factory=utc_now, alias="updatedAt")

    @field_validator("id", mode="before")
    @classmethod
    def default_id(cls, value: Any) -> str:
        if value is None or value == "":
            return new_task_id()
        return str(value)

    @field_validator("title", "description", mode="before")
    @classmethod
    def default_text(cls, value: Any) -> str:
        return "" if value is None else str(value)

    @field_validator("deadline", mode="before")
    @classmethod
    def parse_deadline(cls, value: Any) -> datetime | None:
        return parse_datetime(value)

    @field_validator("priority", mode="before")
    @classmethod
    def parse_priority(cls, value: Any) -> TaskPriority:
        return TaskPriority.parse(value)

    @field_validator("status", mode="before")
    @classmethod
    def parse_status(cls, value: Any) -> TaskStatus:
        return TaskStatus.parse(value)

    @field_validator("created_at", "updated_at", mode="before")
    @classmethod
    def parse_timestamp(cls, value: Any) -> datetime:
        parsed = parse_datetime(value)
        if parsed is None:
            return utc_now()
        # Timestamps are always written in UTC
        if parsed.tzinfo is None:
            return parsed.replace(tzinfo=UTC)
        return parsed

    @classmethod
    def from_entity(cls, task: Task) -> "TaskRecord":
        """Convert domain entity to record."""
        return cls(
            id=task.id,
            title=task.title,
            description=task.description,
            deadline=task.deadline,
            priority=task.priority,
            status=task.status,
            created_at=task.created_at,
            updated_at=task.updated_at,
        )

    def to_entity(self) -> Task:
        """Convert record to domain entity."""
        if not self.title.strip():
            raise ValidationError(f"Stored task {self.id} has an empty title")
        return Task(
            id=self.id,
            title=self.title,
            description=self.description,
            deadline=self.deadline,
            priority=self.priority,
            status=self.status,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )


def serialize_task(task: Task) -> dict[str, Any]:
    """Render a task as a JSON-ready plain record."""
    return TaskRecord.from_entity(task).model_dump(mode="json", by_alias=True)


def deserialize_task(record: Mapping[str, Any]) -> Task:
    """Build a task from a stored record, filling in defaults for missing fields.

    Raises:
        ValidationError: the record has no usable title.
        pydantic.ValidationError: the record is not a mapping.
    """
    return TaskRecord.model_validate(record).to_entity()
