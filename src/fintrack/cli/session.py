"""Top-level view state for the CLI."""

import logging
from typing import Callable, Optional

import click

from fintrack.domain.entities import Transaction, TransactionInput
from fintrack.domain.transaction import TransactionService

logger = logging.getLogger(__name__)

Notifier = Callable[[str, str], None]


def echo_notification(level: str, message: str) -> None:
    """Print a transient notification; errors go to stderr."""
    click.echo(message, err=level == "error")


class TrackerSession:
    """Owns the in-memory transaction list shown by every panel.

    The list is loaded once from the service. Each mutation goes through
    the service first and then patches the list in place of a re-fetch, so
    the list stays consistent with what was just written.
    """

    def __init__(self, service: TransactionService, notify: Optional[Notifier] = None):
        self.service = service
        self.notify = notify or echo_notification
        self.transactions: list[Transaction] = []
        # Error from the most recent handler call, None when it succeeded
        self.last_error: Optional[ValueError] = None
        self.load()

    def load(self) -> None:
        self.last_error = None
        try:
            self.transactions = self.service.list_transactions()
        except ValueError as e:
            logger.error("Error loading transactions: %s", e)
            self.last_error = e
            self.notify("error", "Failed to load transactions")
            self.transactions = []

    def find(self, transaction_id: str) -> Optional[Transaction]:
        for txn in self.transactions:
            if txn.id == transaction_id:
                return txn
        return None

    def add(self, data: TransactionInput) -> Optional[Transaction]:
        """Create a transaction and append it to the list."""
        self.last_error = None
        try:
            transaction = self.service.add_transaction(data)
        except ValueError as e:
            logger.error("Error adding transaction: %s", e)
            self.last_error = e
            self.notify("error", "Failed to add transaction")
            return None

        self.transactions = [*self.transactions, transaction]
        self.notify("success", "Transaction added successfully")
        return transaction

    def update(self, transaction_id: str, data: TransactionInput) -> Optional[Transaction]:
        """Replace a transaction's fields.

        Returns:
            The updated transaction, or None if it was not found or failed
        """
        self.last_error = None
        try:
            updated = self.service.update_transaction(
                transaction_id,
                amount=data.amount,
                date=data.date,
                description=data.description,
                type=data.type,
                category=data.category,
            )
        except ValueError as e:
            logger.error("Error updating transaction: %s", e)
            self.last_error = e
            self.notify("error", "Failed to update transaction")
            return None

        if updated is None:
            return None

        self.transactions = [
            updated if txn.id == transaction_id else txn for txn in self.transactions
        ]
        self.notify("success", "Transaction updated successfully")
        return updated

    def delete(self, transaction_id: str) -> bool:
        """Delete a transaction and drop it from the list."""
        self.last_error = None
        try:
            deleted = self.service.delete_transaction(transaction_id)
        except ValueError as e:
            logger.error("Error deleting transaction: %s", e)
            self.last_error = e
            self.notify("error", "Failed to delete transaction")
            return False

        if not deleted:
            return False

        self.transactions = [txn for txn in self.transactions if txn.id != transaction_id]
        self.notify("success", "Transaction deleted successfully")
        return True


def session_from_context(ctx: click.Context) -> TrackerSession:
    """Return the session for this invocation, creating it on first use."""
    if "session" not in ctx.obj:
        ctx.obj["session"] = TrackerSession(TransactionService(ctx.obj["store"]))
    return ctx.obj["session"]
