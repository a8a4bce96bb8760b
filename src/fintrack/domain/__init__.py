"""Domain layer for fintrack application."""

from fintrack.domain.transaction import TransactionService
from fintrack.domain.form import TransactionForm

__all__ = [
    "TransactionService",
    "TransactionForm",
]
