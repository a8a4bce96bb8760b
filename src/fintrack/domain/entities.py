"""Domain model entities for fintrack.

These are pure data classes representing business concepts, independent of
how the transaction collection is serialized. Storage records are converted
to and from these entities in ``fintrack.database.mappers``.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum


class TransactionType(str, Enum):
    """Direction of a transaction. The amount itself is always positive."""

    INCOME = "income"
    EXPENSE = "expense"


@dataclass(frozen=True)
class Category:
    """Registry category with display metadata."""

    id: str
    name: str
    color: str
    icon: str


@dataclass(frozen=True)
class TransactionInput:
    """Fields supplied by the caller when creating or replacing a transaction."""

    amount: Decimal
    date: date
    description: str
    type: TransactionType
    category: str


@dataclass(frozen=True)
class Transaction:
    """Transaction domain entity.

    ``created_at`` and ``updated_at`` are ISO-8601 UTC strings with
    millisecond precision, so they order correctly as plain strings.
    """

    id: str
    amount: Decimal
    date: date
    description: str
    type: TransactionType
    category: str
    created_at: str
    updated_at: str


@dataclass(frozen=True)
class SummaryTotals:
    """Lifetime and current-month totals."""

    total_income: Decimal
    total_expenses: Decimal
    balance: Decimal
    monthly_income: Decimal
    monthly_expenses: Decimal
    monthly_net: Decimal
    transaction_count: int


@dataclass(frozen=True)
class MonthlyData:
    """Income and expense sums for one calendar month."""

    month: str
    year: int
    month_number: int
    expenses: Decimal
    income: Decimal


@dataclass(frozen=True)
class CategoryBreakdownEntry:
    """Amount and percentage share of one category within a transaction type."""

    category: Category
    amount: Decimal
    percentage: float
