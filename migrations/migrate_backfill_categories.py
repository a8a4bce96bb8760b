#!/usr/bin/env python3
"""Migration script to store a category on legacy transactions.

Transactions recorded before categories existed have no ``category``
field. Reads already fill in a default without touching the stored data:
- expense transactions → "other"
- income transactions → "salary"

This migration writes those defaults back so the stored collection is
complete. Running it again changes nothing.

Usage:
    python migrations/migrate_backfill_categories.py [--db-path PATH]
"""

import sys
from pathlib import Path

# Add src to path so we can import fintrack modules
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from fintrack.database.factories import create_sqlite_store
from fintrack.database.mappers import (
    deserialize_records,
    record_needs_migration,
    record_to_transaction,
    serialize_transactions,
)
from fintrack.domain.transaction import STORAGE_KEY


def migrate_database(database_path: str | None = None) -> int:
    """Backfill missing categories in the stored collection.

    Args:
        database_path: Path to database file. If None, uses default location.

    Returns:
        Number of transactions that were updated

    Raises:
        Exception: If migration fails
    """
    store = create_sqlite_store(database_path=database_path)
    store.connect()

    try:
        store.initialize_schema()
        raw = store.get_item(STORAGE_KEY)
        if not raw:
            print("No stored transactions found; nothing to migrate")
            return 0

        records = deserialize_records(raw)
        pending = sum(1 for record in records if record_needs_migration(record))
        if pending == 0:
            print("Migration already applied: every transaction has a category")
            return 0

        print(f"Starting migration: backfilling {pending} of {len(records)} transaction(s)...")

        # Mapping each record applies the read-time defaults
        transactions = [record_to_transaction(record) for record in records]
        store.set_item(STORAGE_KEY, serialize_transactions(transactions))

        print("Migration completed successfully!")
        return pending

    except Exception as e:
        print(f"Migration failed: {e}")
        raise
    finally:
        store.disconnect()


def main():
    """Main entry point for migration script."""
    import argparse

    parser = argparse.ArgumentParser(
        description="Store default categories on transactions that have none"
    )
    parser.add_argument(
        "--db-path",
        type=str,
        help="Path to database file (overrides FINTRACK_DB_PATH environment variable)",
    )
    args = parser.parse_args()

    try:
        migrate_database(database_path=args.db_path)
        return 0
    except Exception as e:
        print(f"\nMigration failed: {e}", file=sys.stderr)
        import traceback
        traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
