"""Transaction domain service."""

import logging
from dataclasses import fields, replace
from datetime import date, datetime, timedelta, UTC
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Iterable, Optional

from fintrack.database.base import KeyValueStore
from fintrack.database.mappers import deserialize_transactions, serialize_transactions
from fintrack.domain.entities import Transaction, TransactionInput, TransactionType
from fintrack.domain.errors import (
    StorageError,
    ValidationError,
    immutable_transaction_fields,
    save_failed,
    unknown_transaction_fields,
)

logger = logging.getLogger(__name__)

STORAGE_KEY = "finance-transactions"

IMMUTABLE_FIELDS = frozenset({"id", "created_at", "updated_at"})
UPDATABLE_FIELDS = frozenset(f.name for f in fields(Transaction)) - IMMUTABLE_FIELDS


def utc_now() -> datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.now(UTC)


def format_timestamp(moment: datetime) -> str:
    """Format a datetime as an ISO-8601 UTC string with millisecond precision."""
    moment = moment.astimezone(UTC)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_timestamp(value: str) -> datetime:
    """Parse a timestamp written by format_timestamp."""
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


class TransactionService:
    """Service for reading and writing the stored transaction collection.

    Every mutation loads the whole collection, changes it in memory and
    writes it back under one key. Reads and raw writes fail soft: a failed
    read returns an empty list and a failed save_transactions returns False,
    both with a log entry. add, update and delete raise StorageError when
    their write did not take effect, so callers can tell the user.
    """

    def __init__(
        self,
        store: Optional[KeyValueStore],
        clock: Optional[Callable[[], datetime]] = None,
        storage_key: str = STORAGE_KEY,
    ):
        """Initialize transaction service.

        Args:
            store: Key-value store instance, or None when no store is available
            clock: Callable returning the current aware datetime
            storage_key: Key the serialized collection is stored under
        """
        self.store = store
        self.clock = clock or utc_now
        self.storage_key = storage_key

    def list_transactions(self) -> list[Transaction]:
        """Get all stored transactions in storage order.

        Returns:
            List of transaction entities, empty if the store is missing,
            unreadable or holds malformed data
        """
        if self.store is None:
            return []

        try:
            raw = self.store.get_item(self.storage_key)
            if not raw:
                return []
            return deserialize_transactions(raw)
        except (StorageError, ValueError, KeyError, TypeError) as e:
            logger.error("Error reading transactions: %s", e)
            return []

    def save_transactions(self, transactions: Iterable[Transaction]) -> bool:
        """Overwrite the stored collection.

        Args:
            transactions: Full collection to store

        Returns:
            True if the collection was written, False otherwise
        """
        if self.store is None:
            return False

        try:
            self.store.set_item(self.storage_key, serialize_transactions(transactions))
        except (StorageError, ValueError, TypeError, AttributeError) as e:
            logger.error("Error saving transactions: %s", e)
            return False
        return True

    def get_transaction(self, transaction_id: str) -> Optional[Transaction]:
        """Get transaction by ID.

        Args:
            transaction_id: Transaction ID

        Returns:
            Transaction entity or None if not found
        """
        for txn in self.list_transactions():
            if txn.id == transaction_id:
                return txn
        return None

    def add_transaction(self, data: TransactionInput) -> Transaction:
        """Create a transaction.

        Args:
            data: Transaction fields without id or timestamps

        Returns:
            The new transaction, with a fresh id and created_at == updated_at

        Raises:
            StorageError: If the collection could not be written
        """
        transactions = self.list_transactions()
        now = self.clock()
        timestamp = format_timestamp(now)

        transaction = Transaction(
            id=self._generate_id(now, {txn.id for txn in transactions}),
            amount=data.amount,
            date=data.date,
            description=data.description,
            type=TransactionType(data.type),
            category=data.category,
            created_at=timestamp,
            updated_at=timestamp,
        )

        transactions.append(transaction)
        if not self.save_transactions(transactions):
            raise StorageError(save_failed("add", transaction.id))
        logger.debug("Added transaction %s", transaction.id)
        return transaction

    def update_transaction(
        self, transaction_id: str, **changes: Any
    ) -> Optional[Transaction]:
        """Merge the given fields over an existing transaction.

        Args:
            transaction_id: Transaction ID to update
            **changes: Field values to replace (amount, date, description,
                type, category)

        Returns:
            The updated transaction, or None if no transaction has this ID

        Raises:
            ValidationError: If a field is unknown, may not be changed or
                has an invalid value
            StorageError: If the collection could not be written
        """
        immutable = [name for name in changes if name in IMMUTABLE_FIELDS]
        if immutable:
            raise ValidationError(immutable_transaction_fields(immutable))
        unknown = [name for name in changes if name not in UPDATABLE_FIELDS]
        if unknown:
            raise ValidationError(unknown_transaction_fields(unknown))
        changes = _normalize_changes(changes)

        transactions = self.list_transactions()
        for index, txn in enumerate(transactions):
            if txn.id == transaction_id:
                break
        else:
            return None

        updated = replace(
            txn, **changes, updated_at=self._next_timestamp(txn.updated_at)
        )
        transactions[index] = updated
        if not self.save_transactions(transactions):
            raise StorageError(save_failed("update", transaction_id))
        logger.debug("Updated transaction %s", transaction_id)
        return updated

    def delete_transaction(self, transaction_id: str) -> bool:
        """Delete a transaction.

        Args:
            transaction_id: Transaction ID to delete

        Returns:
            True if a transaction was removed, False if none had this ID

        Raises:
            StorageError: If the collection could not be written
        """
        transactions = self.list_transactions()
        remaining = [txn for txn in transactions if txn.id != transaction_id]

        if len(remaining) == len(transactions):
            return False

        if not self.save_transactions(remaining):
            raise StorageError(save_failed("delete", transaction_id))
        logger.debug("Deleted transaction %s", transaction_id)
        return True

    def _generate_id(self, now: datetime, existing_ids: set[str]) -> str:
        """Millisecond epoch id, bumped until unused in the collection."""
        candidate = int(now.timestamp() * 1000)
        while str(candidate) in existing_ids:
            candidate += 1
        return str(candidate)

    def _next_timestamp(self, previous: str) -> str:
        """Current timestamp, forced strictly past the previous one."""
        now = self.clock()
        try:
            floor = parse_timestamp(previous) + timedelta(milliseconds=1)
        except (ValueError, AttributeError):
            return format_timestamp(now)
        if floor.tzinfo is None:
            floor = floor.replace(tzinfo=UTC)
        return format_timestamp(max(now, floor))


def _normalize_changes(changes: dict[str, Any]) -> dict[str, Any]:
    """Coerce update values to the entity's field types.

    Raises:
        ValidationError: If a value cannot be converted or is out of range
    """
    normalized = dict(changes)

    if "type" in normalized:
        try:
            normalized["type"] = TransactionType(normalized["type"])
        except ValueError as e:
            raise ValidationError(str(e)) from e

    if "amount" in normalized:
        value = normalized["amount"]
        if isinstance(value, bool):
            raise ValidationError(f"Invalid amount {value!r}")
        try:
            amount = value if isinstance(value, Decimal) else Decimal(str(value))
        except InvalidOperation as e:
            raise ValidationError(f"Invalid amount {value!r}") from e
        if not amount.is_finite() or amount <= 0:
            raise ValidationError(f"Amount must be a positive number, got {value!r}")
        normalized["amount"] = amount

    if "date" in normalized:
        value = normalized["date"]
        if isinstance(value, datetime):
            value = value.date()
        elif isinstance(value, str):
            try:
                value = date.fromisoformat(value.strip())
            except ValueError as e:
                raise ValidationError(f"Invalid date {value!r}") from e
        elif not isinstance(value, date):
            raise ValidationError(f"Invalid date {value!r}")
        normalized["date"] = value

    for name in ("description", "category"):
        if name in normalized:
            value = normalized[name]
            if not isinstance(value, str) or not value.strip():
                raise ValidationError(f"Transaction {name} must not be empty")
            normalized[name] = value.strip()

    return normalized
