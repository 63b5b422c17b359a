"""In-memory implementation of the key-value blob store."""

from infrastructure.quota import enforce_quota


class InMemoryBlobStore:
    """Dict-backed IBlobStore. Contents are lost when the process exits."""

    def __init__(self, max_value_bytes: int = 0, initial: dict[str, str] | None = None) -> None:
        self._values: dict[str, str] = dict(initial or {})
        self._max_value_bytes = max_value_bytes

    def get(self, key: str) -> str | None:
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        enforce_quota(value, self._max_value_bytes)
        self._values[key] = value

    def remove(self, key: str) -> None:
        self._values.pop(key, None)

    def close(self) -> None:
        pass
