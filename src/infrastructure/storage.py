"""Blob store selection from settings."""

from core.config import Settings
from domain.repositories.blob_store import IBlobStore
from infrastructure.database.session import create_storage_engine
from infrastructure.database.sqlalchemy_blob_store import SQLAlchemyBlobStore
from infrastructure.memory_blob_store import InMemoryBlobStore


def create_blob_store(settings: Settings) -> IBlobStore:
    """Build the blob store named by ``settings.storage_url``."""
    if settings.is_memory_storage:
        return InMemoryBlobStore(max_value_bytes=settings.storage_quota_bytes)

    engine = create_storage_engine(settings.storage_url, echo=settings.debug)
    return SQLAlchemyBlobStore(engine, max_value_bytes=settings.storage_quota_bytes)
