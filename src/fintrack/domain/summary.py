"""Aggregations over a list of transactions.

All functions here are pure: they take the transaction list (plus an
optional reference date) and return a derived view without touching
storage, so callers can recompute them whenever the list changes.
"""

from collections import defaultdict
from datetime import date, datetime, UTC
from decimal import Decimal
from typing import Iterable, Optional, Sequence

from dateutil.relativedelta import relativedelta

from fintrack.domain.categories import FALLBACK_CATEGORY_ID, category_ids, get_categories
from fintrack.domain.entities import (
    CategoryBreakdownEntry,
    MonthlyData,
    SummaryTotals,
    Transaction,
    TransactionType,
)
from fintrack.domain.transaction import parse_timestamp

ZERO = Decimal("0")

MONTHLY_SERIES_LENGTH = 6
RECENT_TRANSACTIONS_LIMIT = 5

# Sort key for transactions whose created_at cannot be parsed
EARLIEST = datetime.min.replace(tzinfo=UTC)


def type_total(transactions: Iterable[Transaction], transaction_type: TransactionType) -> Decimal:
    """Sum the amounts of all transactions of one type."""
    return sum((t.amount for t in transactions if t.type == transaction_type), ZERO)


def in_month(transaction: Transaction, year: int, month: int) -> bool:
    """Return True if the transaction date falls in the given calendar month."""
    return transaction.date.year == year and transaction.date.month == month


def calculate_summary(
    transactions: Sequence[Transaction], today: Optional[date] = None
) -> SummaryTotals:
    """Compute lifetime totals and totals for the month containing today."""
    today = today or date.today()
    this_month = [t for t in transactions if in_month(t, today.year, today.month)]

    total_income = type_total(transactions, TransactionType.INCOME)
    total_expenses = type_total(transactions, TransactionType.EXPENSE)
    monthly_income = type_total(this_month, TransactionType.INCOME)
    monthly_expenses = type_total(this_month, TransactionType.EXPENSE)

    return SummaryTotals(
        total_income=total_income,
        total_expenses=total_expenses,
        balance=total_income - total_expenses,
        monthly_income=monthly_income,
        monthly_expenses=monthly_expenses,
        monthly_net=monthly_income - monthly_expenses,
        transaction_count=len(transactions),
    )


def month_label(month_start: date) -> str:
    """Short label for a month, e.g. 'Jan 2024'."""
    return month_start.strftime("%b %Y")


def monthly_series(
    transactions: Iterable[Transaction],
    today: Optional[date] = None,
    months: int = MONTHLY_SERIES_LENGTH,
) -> list[MonthlyData]:
    """Income and expenses for the current month and the months before it.

    Args:
        transactions: Transactions to aggregate
        today: Reference date; its month is the last point of the series
        months: Number of points in the series

    Returns:
        Exactly ``months`` points, oldest first. Months without
        transactions have zero totals.
    """
    today = today or date.today()
    totals: dict[tuple[int, int], dict[TransactionType, Decimal]] = defaultdict(
        lambda: {TransactionType.INCOME: ZERO, TransactionType.EXPENSE: ZERO}
    )
    for txn in transactions:
        totals[(txn.date.year, txn.date.month)][txn.type] += txn.amount

    current = today.replace(day=1)
    series = []
    for offset in range(months - 1, -1, -1):
        month_start = current - relativedelta(months=offset)
        month_totals = totals.get((month_start.year, month_start.month), {})
        series.append(
            MonthlyData(
                month=month_label(month_start),
                year=month_start.year,
                month_number=month_start.month,
                expenses=month_totals.get(TransactionType.EXPENSE, ZERO),
                income=month_totals.get(TransactionType.INCOME, ZERO),
            )
        )
    return series


def series_totals(series: Iterable[MonthlyData]) -> tuple[Decimal, Decimal]:
    """Return (expenses, income) summed over a monthly series."""
    expenses = ZERO
    income = ZERO
    for point in series:
        expenses += point.expenses
        income += point.income
    return expenses, income


def category_breakdown(
    transactions: Iterable[Transaction],
    transaction_type: TransactionType,
    include_zero: bool = False,
) -> list[CategoryBreakdownEntry]:
    """Per-category totals and percentage shares for one transaction type.

    Category ids not present in the registry for the type are counted
    under its ``other`` entry, so the entry amounts always add up to the
    type total.

    Args:
        transactions: Transactions to aggregate
        transaction_type: Only transactions of this type are counted
        include_zero: Keep categories with no transactions

    Returns:
        Entries sorted by amount, highest first. Equal amounts keep
        registry order.
    """
    known_ids = set(category_ids(transaction_type))
    amounts: dict[str, Decimal] = defaultdict(lambda: ZERO)
    for txn in transactions:
        if txn.type != transaction_type:
            continue
        category_id = txn.category if txn.category in known_ids else FALLBACK_CATEGORY_ID
        amounts[category_id] += txn.amount

    total = sum(amounts.values(), ZERO)

    entries = []
    for category in get_categories(transaction_type):
        amount = amounts.get(category.id, ZERO)
        if amount == 0 and not include_zero:
            continue
        percentage = float(amount / total * 100) if total > 0 else 0.0
        entries.append(
            CategoryBreakdownEntry(category=category, amount=amount, percentage=percentage)
        )

    # sorted() is stable, so ties stay in registry order
    return sorted(entries, key=lambda entry: entry.amount, reverse=True)


def created_instant(transaction: Transaction) -> datetime:
    """The transaction's created_at as an aware UTC datetime."""
    try:
        moment = parse_timestamp(transaction.created_at)
    except (ValueError, AttributeError):
        return EARLIEST
    if moment.tzinfo is None:
        return moment.replace(tzinfo=UTC)
    return moment.astimezone(UTC)


def recent_transactions(
    transactions: Iterable[Transaction], limit: int = RECENT_TRANSACTIONS_LIMIT
) -> list[Transaction]:
    """Most recently recorded transactions, newest ``created_at`` first.

    Timestamps are compared as instants, so offsets and precision do not
    affect the order. Transactions recorded at the same instant keep their
    storage order. Missing or unparseable timestamps sort last.
    """
    ordered = sorted(transactions, key=created_instant, reverse=True)
    return ordered[: max(limit, 0)]


def sort_by_date(transactions: Iterable[Transaction]) -> list[Transaction]:
    """Transactions ordered by date, latest first, ties in storage order."""
    return sorted(transactions, key=lambda t: t.date, reverse=True)


def filter_transactions(
    transactions: Iterable[Transaction],
    transaction_type: Optional[TransactionType] = None,
    category: Optional[str] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> list[Transaction]:
    """Transactions matching every given filter, in their original order.

    Date bounds are inclusive.
    """
    result = []
    for txn in transactions:
        if transaction_type is not None and txn.type != transaction_type:
            continue
        if category is not None and txn.category != category:
            continue
        if start_date is not None and txn.date < start_date:
            continue
        if end_date is not None and txn.date > end_date:
            continue
        result.append(txn)
    return result
