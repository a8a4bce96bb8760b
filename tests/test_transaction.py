"""Tests for the transaction persistence service."""

import json
import logging
import pytest
from dataclasses import replace
from datetime import date, datetime, UTC
from decimal import Decimal

from fintrack.database.memory import InMemoryStore
from fintrack.domain.entities import TransactionType
from fintrack.domain.errors import StorageError, ValidationError
from fintrack.domain.transaction import (
    STORAGE_KEY,
    TransactionService,
    format_timestamp,
    parse_timestamp,
)


def _stored_records(store):
    return json.loads(store.get_item(STORAGE_KEY))


class TestTimestamps:
    """Tests for timestamp formatting."""

    def test_format_timestamp(self):
        moment = datetime(2024, 1, 15, 10, 30, 0, 123456, tzinfo=UTC)
        assert format_timestamp(moment) == "2024-01-15T10:30:00.123Z"

    def test_parse_timestamp_round_trip(self):
        moment = datetime(2024, 1, 15, 10, 30, 0, 123000, tzinfo=UTC)
        assert parse_timestamp(format_timestamp(moment)) == moment


class TestListTransactions:
    """Tests for list_transactions."""

    def test_empty_store(self, transaction_service):
        assert transaction_service.list_transactions() == []

    def test_no_store(self):
        assert TransactionService(None).list_transactions() == []

    def test_storage_order(self, transaction_service, grocery_input, salary_input):
        first = transaction_service.add_transaction(grocery_input)
        second = transaction_service.add_transaction(salary_input)

        assert [t.id for t in transaction_service.list_transactions()] == [first.id, second.id]

    def test_malformed_json_returns_empty(self, caplog):
        store = InMemoryStore({STORAGE_KEY: "[{broken"})
        service = TransactionService(store)

        with caplog.at_level(logging.ERROR):
            assert service.list_transactions() == []
        assert "Error reading transactions" in caplog.text

    def test_non_array_returns_empty(self):
        store = InMemoryStore({STORAGE_KEY: '{"id": "1"}'})
        assert TransactionService(store).list_transactions() == []

    def test_invalid_record_returns_empty(self):
        store = InMemoryStore({STORAGE_KEY: '[{"id": "1", "type": "expense"}]'})
        assert TransactionService(store).list_transactions() == []

    def test_unavailable_store_returns_empty(self, memory_store, transaction_service, grocery_input):
        transaction_service.add_transaction(grocery_input)
        memory_store.fail_reads = True

        assert transaction_service.list_transactions() == []

    def test_legacy_record_migrated_without_persisting(self):
        legacy = [
            {
                "id": "1",
                "amount": 25,
                "date": "2023-12-01",
                "description": "Old lunch",
                "type": "expense",
                "createdAt": "2023-12-01T12:00:00.000Z",
                "updatedAt": "2023-12-01T12:00:00.000Z",
            }
        ]
        store = InMemoryStore({STORAGE_KEY: json.dumps(legacy)})
        service = TransactionService(store)

        transactions = service.list_transactions()

        assert transactions[0].category == "other"
        assert "category" not in _stored_records(store)[0]

    def test_record_without_timestamps_survives_add(self, grocery_input):
        records = [
            {
                "id": "1",
                "amount": 25,
                "date": "2023-12-01",
                "description": "Lunch",
                "type": "expense",
                "category": "food",
                "createdAt": "2023-12-01T12:00:00.000Z",
                "updatedAt": "2023-12-01T12:00:00.000Z",
            },
            {
                "id": "2",
                "amount": 500,
                "date": "2023-11-30",
                "description": "Pay",
                "type": "income",
            },
        ]
        store = InMemoryStore({STORAGE_KEY: json.dumps(records)})
        service = TransactionService(store)

        assert [t.id for t in service.list_transactions()] == ["1", "2"]

        added = service.add_transaction(grocery_input)

        assert [r["id"] for r in _stored_records(store)] == ["1", "2", added.id]

    def test_custom_storage_key(self, memory_store, grocery_input):
        service = TransactionService(memory_store, storage_key="other-key")
        service.add_transaction(grocery_input)

        assert memory_store.get_item("other-key") is not None
        assert memory_store.get_item(STORAGE_KEY) is None


class TestSaveTransactions:
    """Tests for save_transactions."""

    def test_overwrites_collection(self, transaction_service, memory_store, make_txn):
        assert transaction_service.save_transactions([make_txn(id="a"), make_txn(id="b")])
        assert transaction_service.save_transactions([make_txn(id="c")])

        assert [r["id"] for r in _stored_records(memory_store)] == ["c"]

    def test_write_failure_is_soft(self, transaction_service, memory_store, make_txn, caplog):
        transaction_service.save_transactions([make_txn(id="a")])
        memory_store.fail_writes = True

        with caplog.at_level(logging.ERROR):
            assert transaction_service.save_transactions([make_txn(id="b")]) is False
        assert "Error saving transactions" in caplog.text

        memory_store.fail_writes = False
        assert [r["id"] for r in _stored_records(memory_store)] == ["a"]

    def test_unserializable_entity_is_soft(self, transaction_service, make_txn):
        broken = replace(make_txn(), date="2024-01-01")
        assert transaction_service.save_transactions([broken]) is False

    def test_no_store(self, make_txn):
        assert TransactionService(None).save_transactions([make_txn()]) is False

    def test_sqlite_round_trip(self, sqlite_transaction_service, example_transactions):
        sqlite_transaction_service.save_transactions(example_transactions)
        assert sqlite_transaction_service.list_transactions() == example_transactions


class TestAddTransaction:
    """Tests for add_transaction."""

    def test_add_assigns_id_and_timestamps(self, transaction_service, grocery_input):
        txn = transaction_service.add_transaction(grocery_input)

        assert txn.id
        assert txn.created_at == txn.updated_at == "2024-01-15T10:30:00.000Z"
        assert txn.amount == Decimal("42.50")
        assert txn.date == date(2024, 1, 20)
        assert txn.description == "Groceries"
        assert txn.type is TransactionType.EXPENSE
        assert txn.category == "food"

    def test_add_then_list_includes_record(self, transaction_service, grocery_input):
        txn = transaction_service.add_transaction(grocery_input)
        assert transaction_service.list_transactions() == [txn]

    def test_ids_are_unique_within_the_same_millisecond(self, memory_store, grocery_input):
        fixed = datetime(2024, 1, 15, 10, 30, tzinfo=UTC)
        service = TransactionService(memory_store, clock=lambda: fixed)

        ids = {service.add_transaction(grocery_input).id for _ in range(5)}

        assert len(ids) == 5

    def test_id_is_millisecond_epoch(self, transaction_service, grocery_input):
        txn = transaction_service.add_transaction(grocery_input)
        expected = int(datetime(2024, 1, 15, 10, 30, tzinfo=UTC).timestamp() * 1000)
        assert txn.id == str(expected)

    def test_add_raises_when_write_fails(self, transaction_service, memory_store, grocery_input):
        memory_store.fail_writes = True

        with pytest.raises(StorageError):
            transaction_service.add_transaction(grocery_input)

        assert memory_store.items == {}

    def test_sqlite_add(self, sqlite_transaction_service, salary_input):
        txn = sqlite_transaction_service.add_transaction(salary_input)
        assert sqlite_transaction_service.get_transaction(txn.id) == txn


class TestUpdateTransaction:
    """Tests for update_transaction."""

    def test_update_changes_only_given_fields(self, transaction_service, grocery_input):
        original = transaction_service.add_transaction(grocery_input)

        updated = transaction_service.update_transaction(original.id, amount=Decimal("99"))

        assert updated.amount == Decimal("99")
        assert updated.id == original.id
        assert updated.date == original.date
        assert updated.description == original.description
        assert updated.type == original.type
        assert updated.category == original.category
        assert updated.created_at == original.created_at
        assert updated.updated_at > original.updated_at

    def test_update_persists(self, transaction_service, grocery_input):
        original = transaction_service.add_transaction(grocery_input)
        transaction_service.update_transaction(original.id, description="Market")

        assert transaction_service.get_transaction(original.id).description == "Market"

    def test_update_missing_returns_none(self, transaction_service, grocery_input, memory_store):
        transaction_service.add_transaction(grocery_input)
        before = memory_store.get_item(STORAGE_KEY)

        assert transaction_service.update_transaction("missing", amount=Decimal("1")) is None
        assert memory_store.get_item(STORAGE_KEY) == before

    def test_updated_at_advances_when_clock_stands_still(self, memory_store, grocery_input):
        fixed = datetime(2024, 1, 15, 10, 30, tzinfo=UTC)
        service = TransactionService(memory_store, clock=lambda: fixed)
        original = service.add_transaction(grocery_input)

        first = service.update_transaction(original.id, description="One")
        second = service.update_transaction(original.id, description="Two")

        assert original.updated_at < first.updated_at < second.updated_at
        assert first.updated_at == "2024-01-15T10:30:00.001Z"

    def test_update_accepts_plain_amount(self, transaction_service, grocery_input):
        original = transaction_service.add_transaction(grocery_input)

        updated = transaction_service.update_transaction(original.id, amount=75)

        assert updated.amount == Decimal("75")
        assert transaction_service.get_transaction(original.id).amount == Decimal("75")

    def test_update_accepts_float_amount(self, transaction_service, grocery_input):
        original = transaction_service.add_transaction(grocery_input)
        updated = transaction_service.update_transaction(original.id, amount=0.1)
        assert updated.amount == Decimal("0.1")

    def test_update_accepts_iso_date_string(self, transaction_service, grocery_input):
        original = transaction_service.add_transaction(grocery_input)

        updated = transaction_service.update_transaction(original.id, date="2024-03-01")

        assert updated.date == date(2024, 3, 1)
        assert transaction_service.get_transaction(original.id).date == date(2024, 3, 1)

    def test_update_trims_description(self, transaction_service, grocery_input):
        original = transaction_service.add_transaction(grocery_input)
        updated = transaction_service.update_transaction(original.id, description="  Market ")
        assert updated.description == "Market"

    @pytest.mark.parametrize(
        "changes",
        [
            {"amount": 0},
            {"amount": -5},
            {"amount": "lots"},
            {"amount": True},
            {"date": "01/03/2024"},
            {"date": 20240301},
            {"description": "   "},
            {"category": ""},
        ],
    )
    def test_update_rejects_invalid_values(self, transaction_service, grocery_input, memory_store, changes):
        original = transaction_service.add_transaction(grocery_input)
        before = memory_store.get_item(STORAGE_KEY)

        with pytest.raises(ValidationError):
            transaction_service.update_transaction(original.id, **changes)

        assert memory_store.get_item(STORAGE_KEY) == before

    def test_update_raises_when_write_fails(self, transaction_service, memory_store, grocery_input):
        original = transaction_service.add_transaction(grocery_input)
        memory_store.fail_writes = True

        with pytest.raises(StorageError):
            transaction_service.update_transaction(original.id, amount=Decimal("1"))

        memory_store.fail_writes = False
        assert transaction_service.get_transaction(original.id) == original

    def test_update_type_accepts_string(self, transaction_service, grocery_input):
        original = transaction_service.add_transaction(grocery_input)

        updated = transaction_service.update_transaction(
            original.id, type="income", category="gift"
        )

        assert updated.type is TransactionType.INCOME
        assert updated.category == "gift"

    def test_update_rejects_invalid_type(self, transaction_service, grocery_input):
        original = transaction_service.add_transaction(grocery_input)
        with pytest.raises(ValidationError):
            transaction_service.update_transaction(original.id, type="transfer")

    @pytest.mark.parametrize("field", ["id", "created_at", "updated_at"])
    def test_update_rejects_immutable_fields(self, transaction_service, grocery_input, field):
        original = transaction_service.add_transaction(grocery_input)
        with pytest.raises(ValidationError, match="cannot be updated"):
            transaction_service.update_transaction(original.id, **{field: "x"})

    def test_update_rejects_unknown_fields(self, transaction_service, grocery_input):
        original = transaction_service.add_transaction(grocery_input)
        with pytest.raises(ValidationError, match="Unknown transaction field"):
            transaction_service.update_transaction(original.id, notes="x")


class TestDeleteTransaction:
    """Tests for delete_transaction."""

    def test_delete_removes_exactly_one(self, transaction_service, grocery_input, salary_input):
        grocery = transaction_service.add_transaction(grocery_input)
        salary = transaction_service.add_transaction(salary_input)

        assert transaction_service.delete_transaction(grocery.id) is True
        assert transaction_service.list_transactions() == [salary]

    def test_delete_missing_returns_false_and_does_not_write(
        self, transaction_service, grocery_input, memory_store
    ):
        transaction_service.add_transaction(grocery_input)
        writes = []
        memory_store.set_item = lambda key, value: writes.append(key)

        assert transaction_service.delete_transaction("missing") is False
        assert writes == []
        assert len(transaction_service.list_transactions()) == 1

    def test_delete_raises_when_write_fails(self, transaction_service, memory_store, grocery_input):
        txn = transaction_service.add_transaction(grocery_input)
        memory_store.fail_writes = True

        with pytest.raises(StorageError):
            transaction_service.delete_transaction(txn.id)

        memory_store.fail_writes = False
        assert transaction_service.list_transactions() == [txn]

    def test_get_transaction(self, transaction_service, grocery_input):
        txn = transaction_service.add_transaction(grocery_input)
        assert transaction_service.get_transaction(txn.id) == txn
        assert transaction_service.get_transaction("missing") is None
