"""
Currency helpers.

Prices and bid amounts are Decimal values quantized to cents. Binary floats are
only produced when a response is serialized to JSON.
"""

from decimal import Decimal, InvalidOperation
from typing import Any

from .errors import AppError, ErrorCode

CENT = Decimal("0.01")


def parse_amount(value: Any, field: str = "amount") -> Decimal:
    """
    Validate a client supplied currency amount.

    Args:
        value: Number from a decoded request (int, float or Decimal)
        field: Field name reported in the error details

    Returns:
        Positive Decimal quantized to two places

    Raises:
        AppError: If the value is not a positive number with at most two decimals

    Examples:
        >>> parse_amount(150)
        Decimal('150.00')
        >>> parse_amount(125.99)
        Decimal('125.99')
    """
    # bool is an int subclass
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        raise AppError(ErrorCode.INVALID_INPUT, f"{field} must be a number", {"field": field})

    try:
        # repr of a float is its shortest round-tripping form: 125.99 -> "125.99"
        amount = Decimal(repr(value)) if isinstance(value, float) else Decimal(value)
    except InvalidOperation:
        raise AppError(ErrorCode.INVALID_INPUT, f"{field} must be a number", {"field": field})

    if not amount.is_finite():
        raise AppError(ErrorCode.INVALID_INPUT, f"{field} must be a finite number", {"field": field})

    if amount <= 0:
        raise AppError(ErrorCode.INVALID_INPUT, f"{field} must be positive", {"field": field})

    try:
        quantized = amount.quantize(CENT)
    except InvalidOperation:
        raise AppError(ErrorCode.INVALID_INPUT, f"{field} is too large", {"field": field})
    if quantized != amount:
        raise AppError(
            ErrorCode.INVALID_INPUT,
            f"{field} must have at most 2 decimal places",
            {"field": field, "value": str(value)},
        )

    return quantized


def to_money(value: Any) -> Decimal:
    """Normalize a stored number (DynamoDB returns Decimal) to two places."""
    if isinstance(value, float):
        value = repr(value)
    return Decimal(value).quantize(CENT)


def money_to_float(amount: Decimal) -> float:
    """Convert a money value to a JSON number."""
    return float(amount.quantize(CENT))
