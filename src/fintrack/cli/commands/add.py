"""Add transaction command."""

import click
from fintrack.cli.rendering import format_currency, render_form_errors
from fintrack.cli.session import session_from_context
from fintrack.domain.categories import resolve_category
from fintrack.domain.form import TransactionForm


@click.command("add")
@click.option("--amount", required=True, help="Transaction amount, greater than zero (e.g., 123.45)")
@click.option(
    "--date",
    default="today",
    show_default=True,
    help="Transaction date (YYYY-MM-DD or relative like 'today', 'yesterday')",
)
@click.option("--description", required=True, help="Transaction description")
@click.option(
    "--type",
    "transaction_type",
    type=click.Choice(["expense", "income"], case_sensitive=False),
    default="expense",
    show_default=True,
    help="Transaction type",
)
@click.option("--category", required=True, help="Category id (see 'fintrack category list')")
@click.pass_context
def add_transaction(
    ctx,
    amount: str,
    date: str,
    description: str,
    transaction_type: str,
    category: str,
):
    """Add a transaction.

    Examples:
        fintrack add --amount 50.00 --description "Grocery store" --category food
        fintrack add --amount 3000 --type income --category salary --description "Payroll"
    """
    session = session_from_context(ctx)

    form = TransactionForm()
    # Type first: changing it clears the category
    form.set_type(transaction_type.lower())
    form.set_field("amount", amount)
    form.set_field("date", date)
    form.set_field("description", description)
    form.set_field("category", category)

    created = []
    if not form.submit(lambda data: created.append(session.add(data))):
        click.echo("Error: Invalid transaction:", err=True)
        for line in render_form_errors(form.errors):
            click.echo(line, err=True)
        ctx.exit(1)

    transaction = created[0]
    if transaction is None:
        ctx.exit(1)

    category_obj = resolve_category(transaction.type, transaction.category)
    click.echo(f"Created transaction {transaction.id}")
    click.echo(f"  Date: {transaction.date}")
    click.echo(f"  Type: {transaction.type.value}")
    click.echo(f"  Amount: {format_currency(transaction.amount)}")
    click.echo(f"  Description: {transaction.description}")
    click.echo(f"  Category: {category_obj.icon} {category_obj.name}")


def register_commands(cli):
    """Register add command with main CLI."""
    cli.add_command(add_transaction)
