# PATH: core/format_money.py
"""
Safe money parsing and formatting utilities for MegaGecko.

The API delivers USD values as decimal strings. They are kept as strings in
the models and parsed to Decimal only for comparisons and display.
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP, localcontext
from typing import Union

MoneyInput = Union[str, Decimal, int, float, None]

ZERO = Decimal("0")


def parse_usd(value: MoneyInput) -> Decimal:
    """
    Parse a USD amount to Decimal.

    Missing, empty, or unparsable input is treated as zero. Never raises.

    Example:
        >>> parse_usd("5000.25")
        Decimal('5000.25')
        >>> parse_usd(None)
        Decimal('0')
        >>> parse_usd("n/a")
        Decimal('0')
    """
    if value is None or isinstance(value, bool):
        return ZERO

    try:
        if isinstance(value, Decimal):
            parsed = value
        elif isinstance(value, str):
            if not value.strip():
                return ZERO
            parsed = Decimal(value.strip())
        else:
            parsed = Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        return ZERO

    # NaN and Infinity are valid Decimals but meaningless as USD
    if not parsed.is_finite():
        return ZERO
    return parsed


def format_usd(
    value: MoneyInput,
    min_decimals: int = 0,
    max_decimals: int = 3,
) -> str:
    """
    Format a USD amount with thousands separators.

    Rounds to max_decimals (ROUND_HALF_UP), then trims trailing zeros down to
    min_decimals.

    Example:
        >>> format_usd("1234567.891")
        '1,234,567.891'
        >>> format_usd("1000")
        '1,000'
        >>> format_usd("5000", min_decimals=2, max_decimals=2)
        '5,000.00'
    """
    amount = parse_usd(value)

    with localcontext() as ctx:
        ctx.prec = 50
        quantize_str = "0." + "0" * max_decimals if max_decimals > 0 else "0"
        rounded = amount.quantize(Decimal(quantize_str), rounding=ROUND_HALF_UP)

    text = f"{rounded:,.{max_decimals}f}"

    if max_decimals > min_decimals:
        whole, _, fraction = text.partition(".")
        fraction = fraction.rstrip("0")
        if len(fraction) < min_decimals:
            fraction = fraction.ljust(min_decimals, "0")
        text = f"{whole}.{fraction}" if fraction else whole

    if text.startswith("-") and parse_usd(text.replace(",", "")) == ZERO:
        text = text[1:]
    return text


def format_usd_cents(value: MoneyInput) -> str:
    """Format with exactly two decimals, e.g. "12,345.60"."""
    return format_usd(value, min_decimals=2, max_decimals=2)


def format_price(value: MoneyInput) -> str:
    """Format a token price: at least two, at most six decimals."""
    return format_usd(value, min_decimals=2, max_decimals=6)
