"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class StorageError(DomainError):
    """The backing key-value store could not be read or written."""


def transaction_not_found(transaction_id: str) -> str:
    """Return message for missing transaction."""
    return f"Transaction {transaction_id} not found"


def unknown_transaction_fields(fields: list[str]) -> str:
    """Return message for update fields that do not exist on a transaction."""
    return f"Unknown transaction field(s): {', '.join(sorted(fields))}"


def immutable_transaction_fields(fields: list[str]) -> str:
    """Return message for update fields that may not be changed."""
    return f"Transaction field(s) cannot be updated: {', '.join(sorted(fields))}"


def save_failed(action: str, transaction_id: str) -> str:
    """Return message for a mutation whose write did not take effect."""
    return f"Could not save transactions after {action} of {transaction_id}"
