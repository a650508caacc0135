"""Utility helpers for formatting ticket content."""
from __future__ import annotations

import math
import re

_NON_NUMERIC = re.compile(r"[^0-9.-]")
_THOUSANDS = re.compile(r"\B(?=(\d{3})+(?!\d))")


def to_number(value) -> float:
    """Parse a price-like value, keeping only digits, dots and minus signs.

    Anything that does not survive the cleaning as a number reads as 0.
    """
    clean = _NON_NUMERIC.sub("", str(value))
    try:
        number = float(clean)
    except ValueError:
        return 0.0
    if math.isnan(number) or math.isinf(number):
        return 0.0
    return number


def _round_half_up(number: float) -> int:
    # x.5 goes up, -x.5 goes toward zero
    return int(math.floor(number + 0.5))


def to_integer(value) -> int:
    return _round_half_up(to_number(value))


def format_currency(value) -> str:
    """Format a value as pesos with '.' as thousands separator: 12345 -> $12.345."""
    number = to_integer(value)
    return "$" + _THOUSANDS.sub(".", str(number))


def format_line(left: str, right: str, width: int) -> str:
    spaces_needed = width - (len(left) + len(right))
    if spaces_needed > 0:
        return f"{left}{' ' * spaces_needed}{right}"
    return f"{left} {right}"


def add_divider(char: str = "-", width: int = 32) -> str:
    divider_char = char or "-"
    return divider_char * width
