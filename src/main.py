"""Application entry point: wires settings, storage and the task service."""

from collections.abc import Iterator
from contextlib import contextmanager

import structlog

from core.config import Settings, get_settings
from core.logging import setup_logging
from domain.repositories.blob_store import IBlobStore
from domain.services.task_export import DEFAULT_TITLE
from domain.services.task_service import TaskService
from infrastructure.repositories.blob_task_repo import BlobTaskRepository
from infrastructure.storage import create_blob_store

logger = structlog.get_logger()


def create_service(blob_store: IBlobStore, settings: Settings | None = None) -> TaskService:
    """Create the task service on top of a blob store."""
    settings = settings or get_settings()
    export_title = f"Task List - {settings.app_name}" if settings.app_name else DEFAULT_TITLE
    repository = BlobTaskRepository(
        blob_store,
        storage_key=settings.storage_key,
        export_title=export_title,
    )
    return TaskService(repository, export_title=export_title)


@contextmanager
def task_session(
    settings: Settings | None = None,
    blob_store: IBlobStore | None = None,
    configure_logging: bool = True,
) -> Iterator[TaskService]:
    """Application lifespan: open storage, yield the service, flush on teardown.

    The final flush is best effort. Its failure is logged and never raised.
    A blob store passed in by the caller is left open.
    """
    settings = settings or get_settings()
    if configure_logging:
        setup_logging(settings)

    owns_store = blob_store is None
    store = blob_store if blob_store is not None else create_blob_store(settings)
    service = create_service(store, settings)
    logger.info(
        "task_session_started",
        app_name=settings.app_name,
        storage_url=settings.storage_url,
        task_count=service.list_tasks().total,
    )

    try:
        yield service
    finally:
        service.flush()
        if owns_store:
            store.close()
        logger.info("task_session_closed")
