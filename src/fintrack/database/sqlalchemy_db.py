"""SQLAlchemy-backed key-value store."""

from typing import Optional
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from fintrack.database.base import KeyValueStore
from fintrack.database.models import StorageItem, create_session_factory
from fintrack.domain.errors import StorageError


class SQLAlchemyStore(KeyValueStore):
    """SQLAlchemy-based implementation of the KeyValueStore interface."""

    def __init__(self, database_url: str):
        """Initialize SQLAlchemy store.

        Args:
            database_url: SQLAlchemy database URL (e.g., 'sqlite:///path/to.db')
        """
        self.database_url = database_url
        self._session_factory: Optional[sessionmaker[Session]] = None
        self._session: Optional[Session] = None

    @property
    def session_factory(self) -> sessionmaker[Session]:
        """Session factory, created (with tables) on first use."""
        if self._session_factory is None:
            try:
                self._session_factory = create_session_factory(self.database_url)
            except SQLAlchemyError as e:
                raise StorageError(f"Could not open store '{self.database_url}': {e}") from e
        return self._session_factory

    def _get_session(self) -> Session:
        """Get current session, creating one if needed."""
        if self._session is None:
            self._session = self.session_factory()
        return self._session

    def connect(self) -> None:
        """Connect to the store."""
        # Connection is lazy, so this is a no-op
        pass

    def disconnect(self) -> None:
        """Disconnect from the store."""
        if self._session is not None:
            self._session.close()
            self._session = None

    def initialize_schema(self) -> None:
        """Initialize store schema (create tables)."""
        # Touching the factory runs create_all
        self.session_factory

    def get_item(self, key: str) -> Optional[str]:
        """Get the value stored under key."""
        try:
            # Another process may have written the key since it was last loaded
            item = self._get_session().get(StorageItem, key, populate_existing=True)
        except SQLAlchemyError as e:
            raise StorageError(f"Could not read '{key}': {e}") from e
        return None if item is None else item.value

    def set_item(self, key: str, value: str) -> None:
        """Store value under key in a single commit."""
        session = self._get_session()
        try:
            item = session.get(StorageItem, key)
            if item is None:
                session.add(StorageItem(key=key, value=value))
            else:
                item.value = value
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            raise StorageError(f"Could not write '{key}': {e}") from e

    def remove_item(self, key: str) -> None:
        """Remove key."""
        session = self._get_session()
        try:
            item = session.get(StorageItem, key)
            if item is not None:
                session.delete(item)
                session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            raise StorageError(f"Could not remove '{key}': {e}") from e
