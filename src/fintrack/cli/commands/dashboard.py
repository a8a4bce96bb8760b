"""Dashboard command."""

import click
from fintrack.cli.commands.summary import echo_lines
from fintrack.cli.rendering import (
    render_breakdown,
    render_category_chart,
    render_monthly_chart,
    render_recent,
    render_summary_cards,
    render_transaction_list,
)
from fintrack.cli.session import session_from_context
from fintrack.domain.entities import TransactionType


@click.command("dashboard")
@click.pass_context
def dashboard(ctx):
    """Show every panel: summary, charts, breakdown and transactions."""
    session = session_from_context(ctx)
    transactions = session.transactions

    click.echo("Personal Finance Tracker")
    echo_lines(render_summary_cards(transactions))
    echo_lines(render_monthly_chart(transactions))
    echo_lines(render_category_chart(transactions, TransactionType.EXPENSE))
    echo_lines(render_category_chart(transactions, TransactionType.INCOME))
    echo_lines(render_breakdown(transactions))
    echo_lines(render_recent(transactions))

    click.echo()
    if transactions:
        echo_lines(render_transaction_list(transactions))
    else:
        click.echo("No transactions found.")


def register_commands(cli):
    """Register dashboard command with main CLI."""
    cli.add_command(dashboard)
