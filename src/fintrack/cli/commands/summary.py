"""Summary and chart commands."""

import click
from fintrack.cli.rendering import (
    render_breakdown,
    render_category_chart,
    render_monthly_chart,
    render_recent,
    render_summary_cards,
)
from fintrack.cli.session import session_from_context
from fintrack.domain.entities import TransactionType
from fintrack.domain.summary import RECENT_TRANSACTIONS_LIMIT


def echo_lines(lines: list[str]) -> None:
    for line in lines:
        click.echo(line)


@click.command("summary")
@click.pass_context
def summary(ctx):
    """Show balance, lifetime totals and this month's net."""
    session = session_from_context(ctx)
    echo_lines(render_summary_cards(session.transactions))


@click.command("monthly")
@click.pass_context
def monthly(ctx):
    """Show income and expenses for the last six months."""
    session = session_from_context(ctx)
    echo_lines(render_monthly_chart(session.transactions))


@click.command("chart")
@click.option(
    "--type",
    "transaction_type",
    type=click.Choice(["expense", "income"], case_sensitive=False),
    default="expense",
    show_default=True,
    help="Transaction type to chart",
)
@click.pass_context
def chart(ctx, transaction_type: str):
    """Show each category's share of expenses or income."""
    session = session_from_context(ctx)
    echo_lines(render_category_chart(session.transactions, TransactionType(transaction_type.lower())))


@click.command("breakdown")
@click.pass_context
def breakdown(ctx):
    """Show per-category totals and percentages for expenses and income."""
    session = session_from_context(ctx)
    echo_lines(render_breakdown(session.transactions))


@click.command("recent")
@click.option(
    "--limit",
    type=click.IntRange(min=1),
    default=RECENT_TRANSACTIONS_LIMIT,
    show_default=True,
    help="Number of transactions to show",
)
@click.pass_context
def recent(ctx, limit: int):
    """Show the most recently recorded transactions."""
    session = session_from_context(ctx)
    echo_lines(render_recent(session.transactions, limit))


def register_commands(cli):
    """Register summary commands with main CLI."""
    cli.add_command(summary)
    cli.add_command(monthly)
    cli.add_command(chart)
    cli.add_command(breakdown)
    cli.add_command(recent)
