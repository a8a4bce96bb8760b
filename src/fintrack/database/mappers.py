"""Mapper functions to convert between stored records and domain entities.

The stored collection is a JSON array of plain objects using camelCase
field names. This layer isolates that wire shape from the domain entities.
"""

import json
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Iterable

from fintrack.domain.categories import default_category
from fintrack.domain.entities import Transaction, TransactionType


def transaction_to_record(transaction: Transaction) -> dict[str, Any]:
    """Convert a Transaction entity to its stored record."""
    return {
        "id": transaction.id,
        "amount": _amount_to_json(transaction.amount),
        "date": transaction.date.isoformat(),
        "description": transaction.description,
        "type": transaction.type.value,
        "category": transaction.category,
        "createdAt": transaction.created_at,
        "updatedAt": transaction.updated_at,
    }


def record_to_transaction(record: dict[str, Any]) -> Transaction:
    """Convert a stored record to a Transaction entity.

    Records written before categories existed have no ``category``; they
    get the default for their type. Missing ``createdAt`` becomes an empty
    string and missing ``updatedAt`` falls back to ``createdAt``. The record
    itself is left untouched.

    Raises:
        KeyError: If a required field is missing
        ValueError: If a field has an invalid value
        TypeError: If the record is not a mapping
    """
    if not isinstance(record, dict):
        raise TypeError(f"Expected a transaction object, got {type(record).__name__}")

    transaction_type = TransactionType(record["type"])
    # Early records may lack timestamps; they sort as oldest
    created_at = record.get("createdAt") or ""
    return Transaction(
        id=str(record["id"]),
        amount=_amount_from_json(record["amount"]),
        date=_date_from_json(record["date"]),
        description=record["description"],
        type=transaction_type,
        category=record.get("category") or default_category(transaction_type),
        created_at=created_at,
        updated_at=record.get("updatedAt") or created_at,
    )


def record_needs_migration(record: dict[str, Any]) -> bool:
    """Return True if the stored record lacks a category."""
    return not record.get("category")


def serialize_transactions(transactions: Iterable[Transaction]) -> str:
    """Serialize transactions to the stored JSON text."""
    return json.dumps([transaction_to_record(t) for t in transactions], ensure_ascii=False)


def deserialize_records(raw: str) -> list[dict[str, Any]]:
    """Parse the stored JSON text into raw records.

    Raises:
        ValueError: If the text is not JSON or not an array
    """
    data = json.loads(raw)
    if not isinstance(data, list):
        raise ValueError(f"Expected a JSON array of transactions, got {type(data).__name__}")
    return data


def deserialize_transactions(raw: str) -> list[Transaction]:
    """Parse the stored JSON text into Transaction entities."""
    return [record_to_transaction(record) for record in deserialize_records(raw)]


def _amount_to_json(amount: Decimal) -> int | float:
    # Whole amounts stay integers so 100 is written as 100, not 100.0
    if amount == amount.to_integral_value():
        return int(amount)
    return float(amount)


def _amount_from_json(value: Any) -> Decimal:
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        raise ValueError(f"Invalid amount {value!r}")
    # str() first so 0.1 becomes Decimal("0.1") rather than its binary expansion
    try:
        amount = Decimal(str(value))
    except InvalidOperation as e:
        raise ValueError(f"Invalid amount {value!r}") from e
    if not amount.is_finite():
        raise ValueError(f"Invalid amount {value!r}")
    return amount


def _date_from_json(value: Any) -> date:
    if not isinstance(value, str):
        raise ValueError(f"Invalid date {value!r}")
    # Tolerate full timestamps written by older clients
    return date.fromisoformat(value[:10])
