"""Size limit shared by the blob store implementations."""

from core.exceptions import StorageQuotaExceededError


def enforce_quota(value: str, max_bytes: int) -> None:
    """Raise StorageQuotaExceededError if value is larger than max_bytes (0 = no limit)."""
    if max_bytes <= 0:
        return
    size = len(value.encode("utf-8"))
    if size > max_bytes:
        raise StorageQuotaExceededError(size=size, quota=max_bytes)
