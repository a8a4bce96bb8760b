"""Transaction form validation.

The form holds raw string input for a transaction and walks through
EDITING -> VALIDATING -> REJECTED | SUBMITTED. A submit callback only ever
receives a fully validated, normalized TransactionInput.
"""

import logging
from datetime import date
from enum import Enum
from typing import Callable, Optional

from fintrack.domain.categories import get_category
from fintrack.domain.entities import Transaction, TransactionInput, TransactionType
from fintrack.domain.errors import DomainError, ValidationError
from fintrack.utils.amount_parser import is_positive_amount, parse_amount
from fintrack.utils.date_parser import parse_date

logger = logging.getLogger(__name__)

FIELD_NAMES = ("amount", "date", "description", "category")

AMOUNT_ERROR = "Amount must be a positive number"
DATE_REQUIRED_ERROR = "Date is required"
DATE_INVALID_ERROR = "Date is invalid"
DESCRIPTION_REQUIRED_ERROR = "Description is required"
CATEGORY_REQUIRED_ERROR = "Category is required"
CATEGORY_INVALID_ERROR = "Category is invalid"


class FormState(str, Enum):
    EDITING = "editing"
    VALIDATING = "validating"
    REJECTED = "rejected"
    SUBMITTED = "submitted"


class TransactionForm:
    """Create/edit form for a single transaction.

    Without a transaction the form is in create mode and starts blank;
    with one it is in edit mode and starts prefilled from it.
    """

    def __init__(self, transaction: Optional[Transaction] = None, today: Optional[date] = None):
        self.transaction = transaction
        self.today = today or date.today()
        self.errors: dict[str, str] = {}
        self.state = FormState.EDITING
        self.reset()

    @property
    def is_edit(self) -> bool:
        return self.transaction is not None

    def reset(self) -> None:
        """Restore the initial field values for the form's mode."""
        if self.transaction is not None:
            txn = self.transaction
            self.amount = str(txn.amount)
            self.date = txn.date.isoformat()
            self.description = txn.description
            self.type = txn.type
            self.category = txn.category
        else:
            self.amount = ""
            self.date = self.today.isoformat()
            self.description = ""
            self.type = TransactionType.EXPENSE
            self.category = ""
        self.state = FormState.EDITING

    def set_field(self, name: str, value: str) -> None:
        """Set one of the text fields (amount, date, description, category)."""
        if name == "type":
            self.set_type(value)
            return
        if name not in FIELD_NAMES:
            raise ValidationError(f"Unknown form field '{name}'")
        setattr(self, name, value)
        self.state = FormState.EDITING

    def set_type(self, transaction_type: TransactionType | str) -> None:
        """Switch the transaction type; the category must then be chosen again."""
        self.type = TransactionType(transaction_type)
        self.category = ""
        self.state = FormState.EDITING

    def validate(self) -> bool:
        """Check every field and record per-field error messages.

        Returns:
            True if all fields are valid
        """
        self.state = FormState.VALIDATING
        errors: dict[str, str] = {}

        if not is_positive_amount(self.amount):
            errors["amount"] = AMOUNT_ERROR

        if not self.date:
            errors["date"] = DATE_REQUIRED_ERROR
        else:
            try:
                parse_date(self.date, today=self.today)
            except ValueError:
                errors["date"] = DATE_INVALID_ERROR

        if not self.description.strip():
            errors["description"] = DESCRIPTION_REQUIRED_ERROR

        if not self.category:
            errors["category"] = CATEGORY_REQUIRED_ERROR
        elif self._category_changed() and get_category(self.type, self.category) is None:
            errors["category"] = CATEGORY_INVALID_ERROR

        self.errors = errors
        if errors:
            self.state = FormState.REJECTED
            return False
        return True

    def _category_changed(self) -> bool:
        # A stored category outside the registry stays editable as long as
        # it is kept unchanged
        if self.transaction is None:
            return True
        return self.category != self.transaction.category or self.type != self.transaction.type

    def payload(self) -> TransactionInput:
        """Normalized values: numeric amount, parsed date, trimmed description."""
        return TransactionInput(
            amount=parse_amount(self.amount),
            date=parse_date(self.date, today=self.today),
            description=self.description.strip(),
            type=self.type,
            category=self.category,
        )

    def submit(self, on_submit: Callable[[TransactionInput], object]) -> bool:
        """Validate and hand the payload to on_submit.

        Args:
            on_submit: Called exactly once with the payload when valid

        Returns:
            True if the payload was accepted by on_submit
        """
        if not self.validate():
            return False

        try:
            on_submit(self.payload())
        except DomainError as e:
            logger.error("Error submitting transaction: %s", e)
            self.state = FormState.EDITING
            return False

        self.state = FormState.SUBMITTED
        if not self.is_edit:
            self.reset()
            # reset() puts the form back to EDITING
            self.state = FormState.SUBMITTED
        return True
