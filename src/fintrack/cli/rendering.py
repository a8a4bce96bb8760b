"""Text rendering for the dashboard panels.

Each ``render_*`` function takes the transaction list (and a reference
date where it matters), computes its view from ``fintrack.domain.summary``
and returns the lines to print. Nothing here reads or writes storage.
"""

from datetime import date
from decimal import Decimal
from typing import Optional, Sequence

import click

from fintrack.domain.categories import get_categories, resolve_category
from fintrack.domain.entities import CategoryBreakdownEntry, Transaction, TransactionType
from fintrack.domain.summary import (
    calculate_summary,
    category_breakdown,
    monthly_series,
    recent_transactions,
    series_totals,
    sort_by_date,
)

BAR_WIDTH = 30
RULE_WIDTH = 80

EXPENSE_COLOR = "#EF4444"
INCOME_COLOR = "#10B981"


def format_currency(amount: Decimal | float) -> str:
    """Format an amount as US dollars, e.g. $1,234.50 or -$5.00."""
    value = Decimal(str(amount))
    sign = "-" if value < 0 else ""
    return f"{sign}${abs(value):,.2f}"


def format_signed(transaction: Transaction) -> str:
    """Amount with a + for income and - for expenses."""
    sign = "+" if transaction.type == TransactionType.INCOME else "-"
    return f"{sign}{format_currency(transaction.amount)}"


def hex_to_rgb(color: str) -> tuple[int, int, int]:
    """Convert '#RRGGBB' to an RGB tuple usable by click.style."""
    color = color.lstrip("#")
    return int(color[0:2], 16), int(color[2:4], 16), int(color[4:6], 16)


def bar(fraction: float, width: int = BAR_WIDTH, color: Optional[str] = None) -> str:
    """Horizontal bar filled to fraction (0..1) of width."""
    fraction = min(max(fraction, 0.0), 1.0)
    filled = round(fraction * width)
    text = "█" * filled + "·" * (width - filled)
    if color:
        return click.style(text[:filled], fg=hex_to_rgb(color)) + text[filled:]
    return text


def type_label(transaction_type: TransactionType) -> str:
    return "Expense" if transaction_type == TransactionType.EXPENSE else "Income"


def heading(title: str) -> list[str]:
    return ["", title, "-" * RULE_WIDTH]


def render_summary_cards(transactions: Sequence[Transaction], today: Optional[date] = None) -> list[str]:
    """The four summary cards: balance, income, expenses, this month."""
    summary = calculate_summary(transactions, today)
    lines = heading("Summary")
    lines.append(f"{'Current Balance':<20} {format_currency(summary.balance):>16}")
    lines.append(f"{'Total Income':<20} {format_currency(summary.total_income):>16}")
    lines.append(f"{'Total Expenses':<20} {format_currency(summary.total_expenses):>16}")
    lines.append(f"{'This Month':<20} {format_currency(summary.monthly_net):>16}")
    lines.append(
        f"{'':<20} Income: {format_currency(summary.monthly_income)} | "
        f"Expenses: {format_currency(summary.monthly_expenses)}"
    )
    lines.append(f"{'Transactions':<20} {summary.transaction_count:>16}")
    return lines


def render_monthly_chart(transactions: Sequence[Transaction], today: Optional[date] = None) -> list[str]:
    """Bar chart of expenses and income for the last six months."""
    series = monthly_series(transactions, today)
    total_expenses, total_income = series_totals(series)
    peak = max([max(p.expenses, p.income) for p in series] + [Decimal("0")])

    lines = heading("Monthly Overview (Last 6 Months)")
    lines.append(
        f"Total Expenses: {format_currency(total_expenses)}    "
        f"Total Income: {format_currency(total_income)}"
    )
    lines.append("")
    for point in series:
        expense_fraction = float(point.expenses / peak) if peak > 0 else 0.0
        income_fraction = float(point.income / peak) if peak > 0 else 0.0
        lines.append(
            f"{point.month:<9} Expenses {bar(expense_fraction, color=EXPENSE_COLOR)} "
            f"{format_currency(point.expenses):>12}"
        )
        lines.append(
            f"{'':<9} Income   {bar(income_fraction, color=INCOME_COLOR)} "
            f"{format_currency(point.income):>12}"
        )
    return lines


def render_category_chart(
    transactions: Sequence[Transaction], transaction_type: TransactionType
) -> list[str]:
    """Share of each category within one type, largest slice first."""
    entries = category_breakdown(transactions, transaction_type)
    lines = heading(f"{type_label(transaction_type)} Categories")

    if not entries:
        lines.append(f"No {transaction_type.value} transactions to display")
        return lines

    total = sum((entry.amount for entry in entries), Decimal("0"))
    lines.append(f"Total {transaction_type.value}: {format_currency(total)}")
    lines.append("")
    for entry in entries:
        lines.append(
            f"{entry.category.name:<20} {bar(entry.percentage / 100, color=entry.category.color)} "
            f"{format_currency(entry.amount):>12} ({entry.percentage:.1f}%)"
        )
    return lines


def _breakdown_section(
    title: str, entries: list[CategoryBreakdownEntry], transaction_type: TransactionType
) -> list[str]:
    lines = [f"{title} ({len(entries)} categories)"]
    if not entries:
        lines.append(f"  No {transaction_type.value} transactions yet")
        return lines
    for entry in entries:
        lines.append(
            f"  {entry.category.icon} {entry.category.name:<20} "
            f"{format_currency(entry.amount):>12} {entry.percentage:>5.1f}%"
        )
        lines.append(f"    {bar(entry.percentage / 100, color=entry.category.color)}")
    return lines


def render_breakdown(transactions: Sequence[Transaction]) -> list[str]:
    """Category breakdown for expenses, then income."""
    lines = heading("Category Breakdown")
    lines.extend(
        _breakdown_section(
            "Expenses",
            category_breakdown(transactions, TransactionType.EXPENSE),
            TransactionType.EXPENSE,
        )
    )
    lines.append("")
    lines.extend(
        _breakdown_section(
            "Income",
            category_breakdown(transactions, TransactionType.INCOME),
            TransactionType.INCOME,
        )
    )
    return lines


def render_recent(transactions: Sequence[Transaction], limit: int = 5) -> list[str]:
    """Most recently recorded transactions."""
    recent = recent_transactions(transactions, limit)
    lines = heading("Recent Transactions")
    if not recent:
        lines.append("No transactions yet. Add your first transaction!")
        return lines
    for txn in recent:
        category = resolve_category(txn.type, txn.category)
        lines.append(
            f"{category.icon} {txn.description[:30]:<30} {category.name:<18} "
            f"{txn.created_at[:16].replace('T', ' '):<17} {format_signed(txn):>13}"
        )
    return lines


def render_transaction_list(transactions: Sequence[Transaction]) -> list[str]:
    """All given transactions, latest date first, with totals."""
    ordered = sort_by_date(transactions)
    lines = [f"Found {len(ordered)} transaction(s):", "-" * 100]
    lines.append(
        f"{'ID':<15} {'Date':<12} {'Type':<8} {'Amount':>13} {'Category':<20} {'Description':<30}"
    )
    lines.append("-" * 100)
    for txn in ordered:
        category = resolve_category(txn.type, txn.category)
        lines.append(
            f"{txn.id:<15} {txn.date.isoformat():<12} {txn.type.value:<8} "
            f"{format_signed(txn):>13} {category.name:<20} {txn.description[:30]:<30}"
        )

    expenses = sum((t.amount for t in ordered if t.type == TransactionType.EXPENSE), Decimal("0"))
    income = sum((t.amount for t in ordered if t.type == TransactionType.INCOME), Decimal("0"))
    lines.append("-" * 100)
    lines.append(
        f"{'TOTAL':<15} Expenses: {format_currency(expenses)} | "
        f"Income: {format_currency(income)} | Count: {len(ordered)}"
    )
    return lines


def render_categories(transaction_type: TransactionType) -> list[str]:
    """Registry entries for one type."""
    lines = [f"{type_label(transaction_type)} categories:"]
    for category in get_categories(transaction_type):
        lines.append(f"  {category.icon} {category.id:<16} {category.name:<20} {category.color}")
    return lines


def render_form_errors(errors: dict[str, str]) -> list[str]:
    """One line per invalid form field."""
    return [f"  {field}: {message}" for field, message in errors.items()]
