"""Pytest configuration and fixtures."""

import os
import sys
from collections.abc import Generator
from pathlib import Path

# Keep tests independent of a developer's .env and environment
os.environ["STORAGE_URL"] = "memory://"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
from sqlalchemy import Engine

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from core.config import Settings
from infrastructure.database.session import create_storage_engine
from infrastructure.database.sqlalchemy_blob_store import SQLAlchemyBlobStore
from infrastructure.memory_blob_store import InMemoryBlobStore
from infrastructure.repositories.blob_task_repo import BlobTaskRepository

STORAGE_KEY = "test_tasks"


@pytest.fixture
def settings() -> Settings:
    """Settings using in-memory storage and no .env file."""
    return Settings(_env_file=None, storage_url="memory://", storage_key=STORAGE_KEY)


@pytest.fixture
def memory_store() -> InMemoryBlobStore:
    """Create an empty in-memory blob store."""
    return InMemoryBlobStore()


@pytest.fixture
def repository(memory_store: InMemoryBlobStore) -> BlobTaskRepository:
    """Create a task repository over the in-memory store."""
    return BlobTaskRepository(memory_store, storage_key=STORAGE_KEY)


@pytest.fixture
def sqlite_engine(tmp_path: Path) -> Generator[Engine, None, None]:
    """Create a SQLite engine backed by a temporary file."""
    engine = create_storage_engine(f"sqlite:///{tmp_path / 'data' / 'tasks.db'}")
    yield engine
    engine.dispose()


@pytest.fixture
def sqlite_store(sqlite_engine: Engine) -> SQLAlchemyBlobStore:
    """Create a blob store over the temporary SQLite database."""
    return SQLAlchemyBlobStore(sqlite_engine)
