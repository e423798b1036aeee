"""Input checks performed by callers of the cart store."""
from typing import Any


class CartValidationError(ValueError):
    """Raised for malformed cart input (blank identifiers, bad quantities)."""


def validate_username(username: Any) -> str:
    """Return the trimmed username or raise if it is blank."""
    value = username.strip() if isinstance(username, str) else ""
    if not value:
        raise CartValidationError("Missing username.")
    return value


def validate_article_number(article_number: Any) -> str:
    """Return the trimmed article number or raise if it is blank."""
    value = article_number.strip() if isinstance(article_number, str) else ""
    if not value:
        raise CartValidationError("Missing article number.")
    return value


def validate_quantity(quantity: Any) -> int:
    """Return the quantity if it is a positive integer."""
    # bool is an int subclass; True is not a quantity
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise CartValidationError("Quantity must be a positive integer.")
    if quantity <= 0:
        raise CartValidationError("Quantity must be greater than 0.")
    return quantity
