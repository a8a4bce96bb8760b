"""Category commands."""

import click
from fintrack.cli.rendering import render_categories
from fintrack.domain.entities import TransactionType


@click.group()
def category_group():
    """Browse the category registry."""
    pass


@category_group.command("list")
@click.option(
    "--type",
    "transaction_type",
    type=click.Choice(["expense", "income"], case_sensitive=False),
    help="Show only the categories for one transaction type",
)
def list_categories(transaction_type: str | None):
    """List the categories available for each transaction type."""
    if transaction_type:
        types = [TransactionType(transaction_type.lower())]
    else:
        types = [TransactionType.EXPENSE, TransactionType.INCOME]

    for index, category_type in enumerate(types):
        if index:
            click.echo()
        for line in render_categories(category_type):
            click.echo(line)


def register_commands(cli):
    """Register category commands with main CLI."""
    cli.add_command(category_group, name="category")
