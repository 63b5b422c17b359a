"""Custom exceptions and error codes."""

from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    """Standardized error codes for the task organizer."""

    # Validation errors
    VALIDATION_ERROR = "VALIDATION_ERROR"

    # Not found errors
    TASK_NOT_FOUND = "TASK_NOT_FOUND"

    # Storage errors
    PERSISTENCE_ERROR = "PERSISTENCE_ERROR"
    STORAGE_QUOTA_EXCEEDED = "STORAGE_QUOTA_EXCEEDED"


class AppException(Exception):
    """Base application exception."""

    def __init__(
        self,
        error_code: ErrorCode,
        message: str,
        details: Any | None = None,
    ) -> None:
        self.error_code = error_code
        self.message = message
        self.details = details
        super().__init__(self.message)


class ValidationError(AppException):
    """Task input was rejected before any state change."""

    def __init__(self, message: str = "Please enter a task title", field: str = "title") -> None:
        super().__init__(
            error_code=ErrorCode.VALIDATION_ERROR,
            message=message,
            details={"field": field},
        )


class TaskNotFoundError(AppException):
    """Task not found."""

    def __init__(self, task_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.TASK_NOT_FOUND,
            message=f"Task not found: {task_id}",
            details={"task_id": task_id},
        )


class PersistenceError(AppException):
    """Reading or writing durable storage failed."""

    def __init__(
        self,
        message: str = "An error occurred while saving the task",
        error_code: ErrorCode = ErrorCode.PERSISTENCE_ERROR,
        details: Any | None = None,
    ) -> None:
        super().__init__(
            error_code=error_code,
            message=message,
            details=details,
        )


class StorageQuotaExceededError(PersistenceError):
    """The serialized collection does not fit in the configured quota."""

    def __init__(self, size: int, quota: int) -> None:
        super().__init__(
            error_code=ErrorCode.STORAGE_QUOTA_EXCEEDED,
            message=f"Storage quota exceeded: {size} bytes > {quota} bytes",
            details={"size": size, "quota": quota},
        )
