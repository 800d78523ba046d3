"""
Amount Handling Module

Fixed-precision Decimal helpers for monetary amounts. The ledger works in a
single currency, so amounts are plain Decimals quantized to the currency
precision. NEVER uses float for monetary values.
"""

from decimal import Context, Decimal, ROUND_HALF_UP, InvalidOperation
from typing import Optional, Union
import re

# Financial precision, kept local so importing never alters the caller's context
AMOUNT_CONTEXT = Context(prec=28, rounding=ROUND_HALF_UP)

DEFAULT_PRECISION = 2

AmountLike = Union[Decimal, int, str]

# Symbols and spacing allowed around a written amount
_DECORATION = re.compile(r'[\s$€£¥]')
_NUMBER = re.compile(r'^[+-]?[\d.,]+$')


def quantize_amount(value: Decimal, precision: int = DEFAULT_PRECISION) -> Decimal:
    """
    Round a Decimal to currency precision

    Args:
        value: Decimal to round
        precision: Number of decimal places

    Returns:
        Properly rounded Decimal

    Raises:
        InvalidOperation: If the rounded value needs more digits than the
            amount context holds
    """
    return value.quantize(
        Decimal('0.1') ** precision,
        rounding=ROUND_HALF_UP,
        context=AMOUNT_CONTEXT
    )


def fits_precision(value: Decimal, precision: int = DEFAULT_PRECISION) -> bool:
    """Check if a value can be held as an amount without losing digits"""
    try:
        quantize_amount(value, precision)
    except InvalidOperation:
        return False
    return True


def to_amount(value: AmountLike, precision: int = DEFAULT_PRECISION) -> Optional[Decimal]:
    """
    Coerce a caller-supplied amount to a quantized Decimal.

    Floats are refused outright since they cannot represent most currency
    values exactly. Returns None when the value cannot be used as an amount.
    """
    if isinstance(value, bool) or isinstance(value, float):
        return None

    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, int):
        amount = Decimal(value)
    elif isinstance(value, str):
        try:
            amount = decimal_from_string(value)
        except ValueError:
            return None
    else:
        return None

    if not amount.is_finite():
        return None

    try:
        return quantize_amount(amount, precision)
    except InvalidOperation:
        return None


def decimal_from_string(value: str) -> Decimal:
    """
    Safely convert string to Decimal, handling common formats

    Currency symbols, whitespace and thousands separators are accepted;
    anything else (exponents, letters, non-ASCII signs) is refused.

    Args:
        value: String representation of number

    Returns:
        Decimal value

    Raises:
        ValueError: If string cannot be converted to valid Decimal
    """
    if not value or not isinstance(value, str):
        raise ValueError("Value must be a non-empty string")

    clean_value = _DECORATION.sub('', value)
    if not _NUMBER.match(clean_value):
        raise ValueError(f"Cannot convert '{value}' to Decimal")

    # Handle comma as decimal separator (European format)
    if ',' in clean_value and '.' in clean_value:
        # Both comma and dot - assume comma is thousands separator
        clean_value = clean_value.replace(',', '')
    elif ',' in clean_value and clean_value.count(',') == 1:
        parts = clean_value.split(',')
        if len(parts[1]) <= 2:  # Likely decimal separator
            clean_value = clean_value.replace(',', '.')
        else:  # Likely thousands separator
            clean_value = clean_value.replace(',', '')
    elif ',' in clean_value:
        clean_value = clean_value.replace(',', '')

    try:
        return Decimal(clean_value)
    except InvalidOperation:
        raise ValueError(f"Cannot convert '{value}' to Decimal")


def format_amount(value: Decimal, precision: int = DEFAULT_PRECISION) -> str:
    """Format for display"""
    return f"{quantize_amount(value, precision):,.{precision}f}"
