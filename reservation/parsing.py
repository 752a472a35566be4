"""
Defensive numeric parsing for values typed into free-text form fields.

Mirrors how the booking form read its inputs: take the leading integer,
anything unparsable counts as zero.
"""

import re

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def parse_int(value, default: int = 0) -> int:
    """
    Parse the leading integer of a value.

    parse_int("12")    -> 12
    parse_int(" 7 pcs") -> 7
    parse_int("abc")   -> 0
    parse_int(3.9)     -> 3
    """
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if value != value or value in (float("inf"), float("-inf")):
            return default
        return int(value)
    match = _LEADING_INT.match(str(value))
    if not match:
        return default
    return int(match.group(1))


def parse_amount(value) -> int:
    """Parse a non-negative amount. Negative or unparsable input is 0."""
    return max(parse_int(value), 0)
