"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation
import re


def parse_amount(amount_str: str) -> Decimal:
    """Parse an amount string into a Decimal.

    Accepts plain numbers ("123.45", "-5") as well as a leading currency
    symbol and thousands separators ("$1,234.56").

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount

    Raises:
        ValueError: If the string is empty, not a number, or not finite
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    cleaned = re.sub(r"[$€£¥,\s]", "", amount_str)

    try:
        amount = Decimal(cleaned)
    except InvalidOperation:
        raise ValueError(f"Could not parse amount '{amount_str.strip()}'")

    if not amount.is_finite():
        raise ValueError(f"Amount '{amount_str.strip()}' is not a finite number")
    return amount


def is_positive_amount(amount_str: str) -> bool:
    """Return True if the string parses to an amount greater than zero."""
    try:
        return parse_amount(amount_str) > 0
    except ValueError:
        return False
