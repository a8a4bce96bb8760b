"""Tests for mapper functions between stored records and domain entities."""

import json
import pytest
from datetime import date
from decimal import Decimal

from fintrack.database.mappers import (
    deserialize_records,
    deserialize_transactions,
    record_needs_migration,
    record_to_transaction,
    serialize_transactions,
    transaction_to_record,
)
from fintrack.domain.entities import Transaction, TransactionType


def _record(**overrides):
    record = {
        "id": "1705312200000",
        "amount": 42.5,
        "date": "2024-01-15",
        "description": "Groceries",
        "type": "expense",
        "category": "food",
        "createdAt": "2024-01-15T10:30:00.000Z",
        "updatedAt": "2024-01-15T10:30:00.000Z",
    }
    record.update(overrides)
    return record


class TestTransactionToRecord:
    """Tests for transaction_to_record."""

    def test_record_shape(self, make_txn):
        txn = make_txn(id="7", amount="42.50", txn_date=date(2024, 1, 15))
        record = transaction_to_record(txn)

        assert record == {
            "id": "7",
            "amount": 42.5,
            "date": "2024-01-15",
            "description": "Test transaction",
            "type": "expense",
            "category": "food",
            "createdAt": "2024-01-15T10:30:00.000Z",
            "updatedAt": "2024-01-15T10:30:00.000Z",
        }

    def test_whole_amount_is_integer(self, make_txn):
        record = transaction_to_record(make_txn(amount="100.00"))
        assert record["amount"] == 100
        assert isinstance(record["amount"], int)


class TestRecordToTransaction:
    """Tests for record_to_transaction."""

    def test_converts_all_fields(self):
        txn = record_to_transaction(_record())

        assert isinstance(txn, Transaction)
        assert txn.id == "1705312200000"
        assert txn.amount == Decimal("42.5")
        assert txn.date == date(2024, 1, 15)
        assert txn.description == "Groceries"
        assert txn.type is TransactionType.EXPENSE
        assert txn.category == "food"
        assert txn.created_at == "2024-01-15T10:30:00.000Z"

    def test_float_amount_is_exact_decimal(self):
        txn = record_to_transaction(_record(amount=0.1))
        assert txn.amount == Decimal("0.1")

    def test_numeric_id_becomes_string(self):
        txn = record_to_transaction(_record(id=12345))
        assert txn.id == "12345"

    def test_legacy_expense_without_category_gets_other(self):
        record = _record()
        del record["category"]

        txn = record_to_transaction(record)

        assert txn.category == "other"
        # The stored record is not modified
        assert "category" not in record

    def test_legacy_income_without_category_gets_salary(self):
        record = _record(type="income", category="")
        assert record_to_transaction(record).category == "salary"

    def test_missing_timestamps_are_defaulted(self):
        record = _record()
        del record["createdAt"]
        del record["updatedAt"]

        txn = record_to_transaction(record)

        assert txn.created_at == ""
        assert txn.updated_at == ""

    def test_missing_updated_at_falls_back_to_created_at(self):
        record = _record()
        del record["updatedAt"]
        assert record_to_transaction(record).updated_at == "2024-01-15T10:30:00.000Z"

    def test_missing_field_raises(self):
        record = _record()
        del record["amount"]
        with pytest.raises(KeyError):
            record_to_transaction(record)

    def test_invalid_type_raises(self):
        with pytest.raises(ValueError):
            record_to_transaction(_record(type="transfer"))

    def test_invalid_amount_raises(self):
        with pytest.raises(ValueError):
            record_to_transaction(_record(amount="lots"))

    def test_invalid_date_raises(self):
        with pytest.raises(ValueError):
            record_to_transaction(_record(date="not a date"))

    def test_non_object_raises(self):
        with pytest.raises(TypeError):
            record_to_transaction(["not", "a", "record"])

    def test_record_needs_migration(self):
        legacy = _record()
        del legacy["category"]
        assert record_needs_migration(legacy)
        assert not record_needs_migration(_record())


class TestSerialization:
    """Tests for serializing the whole collection."""

    def test_serialize_is_json_array_in_order(self, make_txn):
        raw = serialize_transactions([make_txn(id="a"), make_txn(id="b")])
        data = json.loads(raw)

        assert [record["id"] for record in data] == ["a", "b"]

    def test_deserialize_restores_entities(self, example_transactions):
        raw = serialize_transactions(example_transactions)
        assert deserialize_transactions(raw) == example_transactions

    def test_deserialize_empty_array(self):
        assert deserialize_transactions("[]") == []

    def test_deserialize_rejects_non_array(self):
        with pytest.raises(ValueError):
            deserialize_records('{"id": "1"}')

    def test_deserialize_rejects_malformed_json(self):
        with pytest.raises(ValueError):
            deserialize_records("[{not json")
