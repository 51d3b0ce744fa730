"""Exact conversion between human decimal strings and base units.

All arithmetic is on Python integers.  Amounts with more fractional
digits than the token's decimals are rejected, never truncated.
"""

from __future__ import annotations

import re

from abmcp.core.errors import AmountPrecisionError, ValidationError

DEFAULT_DECIMALS = 18

_AMOUNT_RE = re.compile(r"^(?P<whole>[0-9]*)(?:\.(?P<fraction>[0-9]*))?$")


def _check_decimals(decimals: int) -> None:
    if isinstance(decimals, bool) or not isinstance(decimals, int):
        msg = f"Decimals must be an integer, got {decimals!r}"
        raise ValidationError(msg)
    if not 0 <= decimals <= 255:
        msg = f"Decimals must be between 0 and 255, got {decimals}"
        raise ValidationError(msg)


def parse_units(amount: str, decimals: int) -> int:
    """Convert a human-readable amount to base units.

    ``parse_units("1.5", 18) == 1_500_000_000_000_000_000``

    Raises:
        ValidationError: If ``amount`` is not a non-negative base-10
            number or ``decimals`` is out of range.
        AmountPrecisionError: If ``amount`` has more fractional digits
            than ``decimals``.
    """
    _check_decimals(decimals)
    text = amount.strip() if isinstance(amount, str) else ""
    match = _AMOUNT_RE.fullmatch(text)
    if match is None or not (match["whole"] or match["fraction"]):
        msg = f"Invalid amount {amount!r}: expected a non-negative decimal number"
        raise ValidationError(msg)

    whole = match["whole"] or "0"
    fraction = match["fraction"] or ""
    if len(fraction) > decimals:
        raise AmountPrecisionError(text, decimals)

    padded = fraction.ljust(decimals, "0")
    return int(whole) * 10**decimals + (int(padded) if padded else 0)


def format_units(value: int, decimals: int) -> str:
    """Render base units as a decimal string without trailing zeros.

    ``format_units(1_500_000_000_000_000_000, 18) == "1.5"``
    """
    _check_decimals(decimals)
    if value < 0:
        return "-" + format_units(-value, decimals)
    if decimals == 0:
        return str(value)

    whole, fraction = divmod(value, 10**decimals)
    fraction_text = str(fraction).rjust(decimals, "0").rstrip("0")
    if not fraction_text:
        return str(whole)
    return f"{whole}.{fraction_text}"
