"""Storage layer for fintrack application."""

from fintrack.database.base import KeyValueStore
from fintrack.database.memory import InMemoryStore
from fintrack.database.factories import create_sqlite_store

__all__ = ["KeyValueStore", "InMemoryStore", "create_sqlite_store"]
