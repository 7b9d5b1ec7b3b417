"""Money parsing and display helpers.

Amounts arrive from the remote store as numbers, numeric strings, blanks or
nulls. The engine never rejects them: anything that does not start with a
number is read as zero, and a numeric prefix is honoured (``"12.50 CAD"``
reads as ``12.50``). Rounding happens only here, at display time.
"""

import re
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Optional, Union

MoneyLike = Union[int, float, str, Decimal, None]

ZERO = Decimal("0")
HUNDRED = Decimal("100")
CENTS = Decimal("0.01")
TENTHS = Decimal("0.1")

_NUMERIC_PREFIX = re.compile(
    r"^\s*([+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?)"
)

# Largest decimal exponent of a finite double; anything above reads as infinite
MAX_EXPONENT = 308


def _finite(result: Decimal) -> Optional[Decimal]:
    if not result.is_finite():
        return None
    if result and result.adjusted() > MAX_EXPONENT:
        return None
    return result


def parse_decimal(value: Any) -> Optional[Decimal]:
    """Read a finite number from a value, or None when there is none.

    Strings are read up to the end of their numeric prefix. Magnitudes beyond
    the range of a double are treated as infinite and rejected.

    Example:
        >>> parse_decimal("12.5abc")
        Decimal('12.5')
        >>> parse_decimal("n/a") is None
        True
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        return _finite(value)
    if isinstance(value, int):
        return _finite(Decimal(value))
    if isinstance(value, float):
        # str() avoids binary float artifacts
        return _finite(Decimal(str(value)))
    if isinstance(value, str):
        match = _NUMERIC_PREFIX.match(value)
        if not match:
            return None
        try:
            return _finite(Decimal(match.group(1)))
        except InvalidOperation:
            return None
    return None


def to_decimal(value: Any) -> Decimal:
    """Permissively convert a value to Decimal.

    Args:
        value: Number, numeric string, Decimal, or anything else.

    Returns:
        The parsed amount, or ``Decimal("0")`` when no finite number can be
        read from the value.

    Example:
        >>> to_decimal("107.25")
        Decimal('107.25')
        >>> to_decimal("abc")
        Decimal('0')
    """
    result = parse_decimal(value)
    return ZERO if result is None else result


def to_optional_decimal(value: Any) -> Optional[Decimal]:
    """Like to_decimal, but keeps "unset" (None or blank) distinguishable."""
    if value is None:
        return None
    if isinstance(value, str) and not value.strip():
        return None
    return to_decimal(value)


def quantize_cents(amount: Decimal) -> Decimal:
    """Round to cents using conventional (half-up) rounding."""
    return amount.quantize(CENTS, rounding=ROUND_HALF_UP)


def format_currency(amount: MoneyLike) -> str:
    """Format an amount as Canadian dollars.

    Example:
        >>> format_currency(Decimal("1234.5"))
        '$1,234.50'
        >>> format_currency("-20")
        '-$20.00'
    """
    value = quantize_cents(to_decimal(amount))
    sign = "-" if value < 0 else ""
    return f"{sign}${abs(value):,.2f}"


def format_percent(value: MoneyLike) -> str:
    """Format a 0-100 percentage with one decimal place.

    Example:
        >>> format_percent(Decimal("23.456"))
        '23.5%'
    """
    rounded = to_decimal(value).quantize(TENTHS, rounding=ROUND_HALF_UP)
    return f"{rounded:,.1f}%"


def refund_label(total_owed: Decimal) -> str:
    """Label for a signed tax total: negative totals are refunds."""
    return "Estimated CRA Refund" if total_owed < 0 else "Estimated CRA Owing"


__all__ = [
    "MoneyLike",
    "ZERO",
    "HUNDRED",
    "parse_decimal",
    "to_decimal",
    "to_optional_decimal",
    "quantize_cents",
    "format_currency",
    "format_percent",
    "refund_label",
]
