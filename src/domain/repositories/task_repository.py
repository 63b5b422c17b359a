"""Task repository protocol."""

from collections.abc import Sequence
from datetime import datetime
from typing import Protocol

from domain.entities.task import Task


class ITaskRepository(Protocol):
    """Repository interface for the task collection.

    The whole collection is read and written as one unit. Storage failures
    never escape: reads degrade to an empty collection and writes report
    False.
    """

    def get_all(self) -> list[Task]:
        """Get every stored task in insertion order."""
        ...

    def get_by_id(self, id: str) -> Task | None:
        """Get a task by ID."""
        ...

    def save(self, task: Task) -> bool:
        """Insert or replace a task by ID and persist the collection."""
        ...

    def save_all(self, tasks: Sequence[Task]) -> bool:
        """Replace the entire stored collection."""
        ...

    def delete(self, id: str) -> bool:
        """Delete a task. Unknown IDs are a successful no-op."""
        ...

    def clear_all(self) -> bool:
        """Remove the stored collection."""
        ...

    def export_to_text(self, now: datetime | None = None) -> str:
        """Render a human-readable report of the stored collection."""
        ...
