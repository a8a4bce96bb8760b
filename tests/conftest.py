"""Shared pytest fixtures for fintrack tests."""

import tempfile
import os
from datetime import date, datetime, timedelta, UTC
from decimal import Decimal
import pytest

from fintrack.database.factories import create_sqlite_store
from fintrack.database.memory import InMemoryStore
from fintrack.domain.entities import Transaction, TransactionInput, TransactionType
from fintrack.domain.transaction import TransactionService


class FakeClock:
    """Deterministic clock that advances one second per call."""

    def __init__(self, start: datetime = datetime(2024, 1, 15, 10, 30, tzinfo=UTC)):
        self.now = start

    def __call__(self) -> datetime:
        current = self.now
        self.now = self.now + timedelta(seconds=1)
        return current


def make_transaction(
    id: str = "1",
    amount: str = "10.00",
    txn_date: date = date(2024, 1, 15),
    description: str = "Test transaction",
    type: TransactionType = TransactionType.EXPENSE,
    category: str = "food",
    created_at: str = "2024-01-15T10:30:00.000Z",
    updated_at: str | None = None,
) -> Transaction:
    """Build a Transaction entity with sensible defaults."""
    return Transaction(
        id=id,
        amount=Decimal(amount),
        date=txn_date,
        description=description,
        type=type,
        category=category,
        created_at=created_at,
        updated_at=updated_at or created_at,
    )


@pytest.fixture
def temp_db():
    """Create a temporary SQLite store for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    store = create_sqlite_store(database_path=db_path)
    # Store the path for tests that need it
    store.database_path = db_path
    store.connect()
    store.initialize_schema()

    yield store

    # Cleanup
    store.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def memory_store():
    """Create an empty in-memory store."""
    return InMemoryStore()


@pytest.fixture
def clock():
    """Create a deterministic clock."""
    return FakeClock()


@pytest.fixture
def transaction_service(memory_store, clock):
    """Create a TransactionService over an in-memory store."""
    return TransactionService(memory_store, clock=clock)


@pytest.fixture
def sqlite_transaction_service(temp_db, clock):
    """Create a TransactionService over a temporary SQLite store."""
    return TransactionService(temp_db, clock=clock)


@pytest.fixture
def grocery_input():
    """Input for a typical expense."""
    return TransactionInput(
        amount=Decimal("42.50"),
        date=date(2024, 1, 20),
        description="Groceries",
        type=TransactionType.EXPENSE,
        category="food",
    )


@pytest.fixture
def salary_input():
    """Input for a typical income."""
    return TransactionInput(
        amount=Decimal("3000"),
        date=date(2024, 1, 1),
        description="Payroll",
        type=TransactionType.INCOME,
        category="salary",
    )


@pytest.fixture
def example_transactions():
    """Income 100, food expenses 40 and 10 across January and February 2024."""
    return [
        make_transaction(
            id="1",
            amount="100",
            txn_date=date(2024, 1, 15),
            type=TransactionType.INCOME,
            category="salary",
            created_at="2024-01-15T09:00:00.000Z",
        ),
        make_transaction(
            id="2",
            amount="40",
            txn_date=date(2024, 1, 20),
            category="food",
            created_at="2024-01-20T09:00:00.000Z",
        ),
        make_transaction(
            id="3",
            amount="10",
            txn_date=date(2024, 2, 1),
            category="food",
            created_at="2024-02-01T09:00:00.000Z",
        ),
    ]


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


@pytest.fixture
def make_txn():
    """Return the Transaction builder."""
    return make_transaction
