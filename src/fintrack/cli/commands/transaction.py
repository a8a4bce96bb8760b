"""Transaction management commands."""

import click
from fintrack.cli.date_filters import resolve_cli_date_range
from fintrack.cli.error_handling import handle_domain_error
from fintrack.cli.rendering import render_form_errors, render_transaction_list
from fintrack.cli.session import session_from_context
from fintrack.domain.entities import TransactionType
from fintrack.domain.errors import NotFoundError, transaction_not_found
from fintrack.domain.form import TransactionForm
from fintrack.domain.summary import filter_transactions


@click.group()
def transaction_group():
    """Manage transactions."""
    pass


@transaction_group.command("list")
@click.option(
    "--type",
    "transaction_type",
    type=click.Choice(["expense", "income"], case_sensitive=False),
    help="Show only one transaction type",
)
@click.option("--category", help="Category id")
@click.option("--start-date", help="Start date (YYYY-MM-DD or relative like 'last month', 'this year')")
@click.option("--end-date", help="End date (YYYY-MM-DD or relative like 'today')")
@click.option("--this-month", is_flag=True, help="Filter to current month")
@click.option("--last-month", is_flag=True, help="Filter to previous month")
@click.option("--this-year", is_flag=True, help="Filter to current year")
@click.option("--last-year", is_flag=True, help="Filter to previous year")
@click.pass_context
def list_transactions(
    ctx,
    transaction_type: str | None,
    category: str | None,
    start_date: str | None,
    end_date: str | None,
    this_month: bool,
    last_month: bool,
    this_year: bool,
    last_year: bool,
):
    """View transactions, latest date first, with optional filters."""
    start, end = resolve_cli_date_range(
        ctx,
        start_date=start_date,
        end_date=end_date,
        period_flags={
            "this-month": this_month,
            "last-month": last_month,
            "this-year": this_year,
            "last-year": last_year,
        },
    )

    session = session_from_context(ctx)
    transactions = filter_transactions(
        session.transactions,
        transaction_type=TransactionType(transaction_type.lower()) if transaction_type else None,
        category=category,
        start_date=start,
        end_date=end,
    )

    if not transactions:
        click.echo("No transactions found.")
        return

    click.echo()
    for line in render_transaction_list(transactions):
        click.echo(line)


@transaction_group.command("update")
@click.argument("transaction_id")
@click.option("--amount", help="Transaction amount, greater than zero")
@click.option("--date", help="Transaction date (YYYY-MM-DD or relative like 'today', 'yesterday')")
@click.option("--description", help="Transaction description")
@click.option(
    "--type",
    "transaction_type",
    type=click.Choice(["expense", "income"], case_sensitive=False),
    help="Transaction type (changing it requires --category)",
)
@click.option("--category", help="Category id")
@click.pass_context
def update_transaction(
    ctx,
    transaction_id: str,
    amount: str | None,
    date: str | None,
    description: str | None,
    transaction_type: str | None,
    category: str | None,
) -> None:
    """Update a transaction.

    Unspecified fields keep their current values. Changing --type clears
    the category, so a new --category must be given with it.

    Examples:
        fintrack transaction update 1705312200000 --amount 75.00
        fintrack transaction update 1705312200000 --type income --category salary
    """
    session = session_from_context(ctx)

    existing = session.find(transaction_id)
    if existing is None:
        handle_domain_error(ctx, NotFoundError(transaction_not_found(transaction_id)))

    form = TransactionForm(transaction=existing)
    if transaction_type is not None and transaction_type.lower() != existing.type.value:
        form.set_type(transaction_type.lower())
    for name, value in (
        ("amount", amount),
        ("date", date),
        ("description", description),
        ("category", category),
    ):
        if value is not None:
            form.set_field(name, value)

    updated = []
    if not form.submit(lambda data: updated.append(session.update(transaction_id, data))):
        click.echo("Error: Invalid transaction:", err=True)
        for line in render_form_errors(form.errors):
            click.echo(line, err=True)
        ctx.exit(1)

    if updated[0] is None:
        if session.last_error is not None:
            # The session has already reported the failure
            ctx.exit(1)
        handle_domain_error(ctx, NotFoundError(transaction_not_found(transaction_id)))

    click.echo(f"Updated transaction {transaction_id}")


@transaction_group.command("delete")
@click.argument("transaction_id")
@click.option("--yes", is_flag=True, help="Delete without asking for confirmation")
@click.pass_context
def delete_transaction(ctx, transaction_id: str, yes: bool) -> None:
    """Delete a transaction.

    Examples:
        fintrack transaction delete 1705312200000
    """
    session = session_from_context(ctx)

    if session.find(transaction_id) is None:
        handle_domain_error(ctx, NotFoundError(transaction_not_found(transaction_id)))

    if not yes and not click.confirm(
        f"Are you sure you want to delete transaction {transaction_id}?"
    ):
        click.echo("Deletion cancelled.")
        return

    if not session.delete(transaction_id):
        if session.last_error is not None:
            ctx.exit(1)
        handle_domain_error(ctx, NotFoundError(transaction_not_found(transaction_id)))

    click.echo(f"Deleted transaction {transaction_id}")


def register_commands(cli: click.Group) -> None:
    """Register transaction commands with main CLI."""
    cli.add_command(transaction_group, name="transaction")
