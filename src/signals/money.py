"""Monetary string parsing."""

from __future__ import annotations

import re
from decimal import Decimal, InvalidOperation

_MULTIPLIERS: dict[str, Decimal] = {
    "": Decimal(1),
    "k": Decimal(1_000),
    "thousand": Decimal(1_000),
    "m": Decimal(1_000_000),
    "mm": Decimal(1_000_000),
    "million": Decimal(1_000_000),
    "b": Decimal(1_000_000_000),
    "bn": Decimal(1_000_000_000),
    "billion": Decimal(1_000_000_000),
}

_MONEY_PATTERN = re.compile(
    r"""
    ^\s*
    (?:usd\s*)?\$?\s*
    (?P<number>\d{1,3}(?:,\d{3})+(?:\.\d+)?|\d+(?:\.\d+)?|\.\d+)
    \s*
    (?P<unit>k|mm|m|bn|b|thousand|million|billion)?
    \s*\+?\s*
    (?:usd)?
    \s*$
    """,
    re.IGNORECASE | re.VERBOSE,
)


def parse_money(value: object) -> float | None:
    """Parse an amount like "$5M", "500K" or "$1.2B" into USD.

    Returns None for anything unparsable or not positive, so callers can
    omit the feature instead of recording a zero.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value) if value > 0 else None

    match = _MONEY_PATTERN.match(str(value))
    if match is None:
        return None

    try:
        number = Decimal(match.group("number").replace(",", ""))
    except InvalidOperation:
        return None
    amount = number * _MULTIPLIERS[(match.group("unit") or "").lower()]
    if amount <= 0:
        return None
    return float(amount)
