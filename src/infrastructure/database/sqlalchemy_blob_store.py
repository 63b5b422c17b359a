"""SQLAlchemy implementation of the key-value blob store."""

from sqlalchemy import Engine, delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from core.exceptions import PersistenceError
from infrastructure.database.models import KeyValueModel
from infrastructure.database.session import create_session_factory
from infrastructure.quota import enforce_quota


class SQLAlchemyBlobStore:
    """SQLAlchemy implementation of IBlobStore.

    Every write runs in its own transaction, so the stored value is
    replaced all at once or not at all.
    """

    def __init__(
        self,
        engine: Engine,
        max_value_bytes: int = 0,
        session_factory: sessionmaker[Session] | None = None,
    ) -> None:
        self._engine = engine
        self._session_factory = session_factory or create_session_factory(engine)
        self._max_value_bytes = max_value_bytes

    def get(self, key: str) -> str | None:
        """Get the value stored under key."""
        try:
            with self._session_factory() as session:
                model = session.get(KeyValueModel, key)
                return model.value if model else None
        except SQLAlchemyError as e:
            raise PersistenceError(
                "Failed to read stored data", details={"key": key, "error": str(e)}
            ) from e

    def set(self, key: str, value: str) -> None:
        """Insert or replace the value stored under key."""
        enforce_quota(value, self._max_value_bytes)
        try:
            with self._session_factory.begin() as session:
                model = session.get(KeyValueModel, key)
                if model:
                    model.value = value
                else:
                    session.add(KeyValueModel(key=key, value=value))
        except SQLAlchemyError as e:
            raise PersistenceError(
                "Failed to write stored data", details={"key": key, "error": str(e)}
            ) from e

    def remove(self, key: str) -> None:
        """Delete the value stored under key."""
        try:
            with self._session_factory.begin() as session:
                session.execute(delete(KeyValueModel).where(KeyValueModel.key == key))
        except SQLAlchemyError as e:
            raise PersistenceError(
                "Failed to remove stored data", details={"key": key, "error": str(e)}
            ) from e

    def close(self) -> None:
        """Dispose of the engine's connection pool."""
        self._engine.dispose()
