"""Key-value blob store protocol."""

from typing import Protocol


class IBlobStore(Protocol):
    """Durable local storage of opaque string values under fixed keys.

    Implementations raise PersistenceError on any failure and must replace
    a value in a single step, so readers see either the old or the new blob.
    """

    def get(self, key: str) -> str | None:
        """Return the value stored under key, or None if nothing is stored."""
        ...

    def set(self, key: str, value: str) -> None:
        """Store value under key, replacing any previous value."""
        ...

    def remove(self, key: str) -> None:
        """Remove the value stored under key. Missing keys are ignored."""
        ...

    def close(self) -> None:
        """Release any resources held by the store."""
        ...
