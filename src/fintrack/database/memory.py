"""In-memory key-value store."""

from typing import Optional

from fintrack.database.base import KeyValueStore
from fintrack.domain.errors import StorageError


class InMemoryStore(KeyValueStore):
    """Dict-backed store, used for tests and throwaway sessions.

    Setting ``fail_reads`` or ``fail_writes`` makes the corresponding
    operations raise StorageError, mimicking an unavailable backend.
    """

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self.items: dict[str, str] = dict(initial or {})
        self.fail_reads = False
        self.fail_writes = False

    def connect(self) -> None:
        pass

    def disconnect(self) -> None:
        pass

    def initialize_schema(self) -> None:
        pass

    def get_item(self, key: str) -> Optional[str]:
        if self.fail_reads:
            raise StorageError(f"Could not read '{key}': store unavailable")
        return self.items.get(key)

    def set_item(self, key: str, value: str) -> None:
        if self.fail_writes:
            raise StorageError(f"Could not write '{key}': store unavailable")
        self.items[key] = value

    def remove_item(self, key: str) -> None:
        if self.fail_writes:
            raise StorageError(f"Could not remove '{key}': store unavailable")
        self.items.pop(key, None)
