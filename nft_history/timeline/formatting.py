"""
Amount, address and name formatting helpers for timeline entries.

Decimal arithmetic only; sale prices arrive as integer minor units and are
never routed through float.
"""

from __future__ import annotations

import re
from decimal import ROUND_HALF_UP, Decimal, localcontext

SALE_SIGNIFICANT_DIGITS = 5

# Abbreviated address: "0x" + 2 chars ... last 2 chars
ADDRESS_TRUNCATION_LENGTH = 2
ADDRESS_SEPARATOR = "..."

# Resolved names longer than this are cut for display
MAX_NAME_DISPLAY_LENGTH = 20
NAME_DISPLAY_KEEP = 17

# Leading integer of an amount string; anything after the digits is ignored
_LEADING_INTEGER = re.compile(r"\s*([+-]?\d+)")


def parse_minor_units(raw_amount: str | None) -> int | None:
    """
    Leading integer of a minor-unit amount string, or None when there is none.

    Reads digits up to the first non-digit: "1000" -> 1000, "1000.9" -> 1000,
    "1e3" -> 1, "abc" -> None.
    """
    if raw_amount is None:
        return None
    match = _LEADING_INTEGER.match(str(raw_amount))
    if match is None:
        return None
    return int(match.group(1))


def to_decimal_amount(minor_units: int, decimals: int) -> Decimal:
    """Convert minor units to a token amount (e.g. wei → ETH for 18 decimals)."""
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, len(str(abs(minor_units))) + 1)
        return Decimal(minor_units).scaleb(-max(0, int(decimals)))


def handle_significant_decimals(value: Decimal, significant: int = SALE_SIGNIFICANT_DIGITS) -> str:
    """
    Round to ``significant`` significant digits without dropping integer digits.

    Trailing zeros are stripped: 1.00000 → "1", 0.000123456 → "0.00012346",
    123456.7 → "123457".
    """
    if value.is_zero():
        return "0"
    exponent = value.adjusted()
    places = max(significant - exponent - 1, 0)
    with localcontext() as ctx:
        # Room for every integer digit plus the kept fraction digits
        ctx.prec = max(ctx.prec, max(exponent + 1, 0) + places + 1)
        rounded = value.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)
    text = format(rounded, "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def format_sale_amount(total_price: str | None, decimals: int) -> str | None:
    """Human sale amount for a minor-unit price, or None if the price is unusable."""
    minor_units = parse_minor_units(total_price)
    if minor_units is None:
        return None
    try:
        return handle_significant_decimals(to_decimal_amount(minor_units, decimals))
    except ArithmeticError:
        return None


def abbreviate_address(address: str, truncation_length: int = ADDRESS_TRUNCATION_LENGTH) -> str:
    """
    Fixed-length prefix/suffix form of an address.

    >>> abbreviate_address("0x1234567890abcdef1234567890abcdef12345678")
    '0x12...78'
    """
    if not address:
        return address
    head = address[: truncation_length + 2]
    tail = address[-truncation_length:]
    if len(address) <= len(head) + len(tail):
        return address
    return f"{head}{ADDRESS_SEPARATOR}{tail}"


def format_name_for_display(name: str) -> str:
    """Shorten long resolved names; short names pass through unchanged."""
    if len(name) <= MAX_NAME_DISPLAY_LENGTH:
        return name
    return f"{name[:NAME_DISPLAY_KEEP]}{ADDRESS_SEPARATOR}"


def counterparty_display_name(address: str, resolved_name: str | None) -> str:
    """Resolved name when non-empty, else the abbreviated address."""
    if resolved_name:
        return format_name_for_display(resolved_name)
    return abbreviate_address(address)
