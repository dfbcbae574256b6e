"""
Lenient numeric parsing for form input.

Form fields arrive as strings. Optional numeric fields that cannot be read
are coerced to zero instead of rejecting the request.
"""

import math
import re
from decimal import Decimal, ROUND_HALF_UP, localcontext
from typing import Any


_FLOAT_PREFIX = re.compile(r"^\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_INT_PREFIX = re.compile(r"^\s*[+-]?\d+")

CENT = Decimal("0.01")


def parse_float(value: Any, default: float = 0.0) -> float:
    """
    Read a float from the leading part of a value.

    "1500.50" -> 1500.5, "12abc" -> 12.0, "abc" -> default.

    Args:
        value: Raw request value (str, int, float or None)
        default: Value returned when nothing numeric can be read

    Returns:
        Parsed finite float, or default
    """
    if value is None or isinstance(value, bool):
        return default

    if isinstance(value, (int, float)):
        number = float(value)
    else:
        match = _FLOAT_PREFIX.match(str(value))
        if not match:
            return default
        number = float(match.group(0))

    if not math.isfinite(number):
        return default
    return number


def parse_int(value: Any, default: int = 0) -> int:
    """
    Read an integer from the leading part of a value.

    Fractions are truncated: "3.7" -> 3, 3.7 -> 3.

    Args:
        value: Raw request value
        default: Value returned when nothing numeric can be read

    Returns:
        Parsed integer, or default
    """
    if value is None or isinstance(value, bool):
        return default

    if isinstance(value, (int, float)):
        if not math.isfinite(value):
            return default
        return int(value)

    match = _INT_PREFIX.match(str(value))
    if not match:
        return default
    return int(match.group(0))


def parse_non_negative(value: Any) -> float:
    """Parse a monetary amount, flooring negatives and garbage at zero."""
    return max(0.0, parse_float(value))


def round_currency(amount: float) -> float:
    """
    Round a monetary amount to cents, half-up.

    Args:
        amount: Amount in dollars

    Returns:
        Amount rounded to two decimal places
    """
    value = Decimal(repr(amount))
    with localcontext() as ctx:
        # Room for every integer digit plus cents
        ctx.prec = max(28, value.adjusted() + 3)
        rounded = value.quantize(CENT, rounding=ROUND_HALF_UP)
    # Avoid reporting -0.0
    return float(rounded) + 0.0
