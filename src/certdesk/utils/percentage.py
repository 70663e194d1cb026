"""Marks percentage utilities."""

import math
import re
from typing import Optional

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def parse_leading_int(value: Optional[str]) -> Optional[int]:
    """Parse the integer prefix of a string.

    Handles inputs such as:
    - "85"
    - " 85 "
    - "85.5" (85)
    - "85 marks" (85)
    - "-3"

    Args:
        value: String to parse

    Returns:
        Parsed integer, or None if the string does not start with digits
    """
    if value is None:
        return None
    match = _LEADING_INT.match(str(value))
    if match is None:
        return None
    return int(match.group(1))


def get_percentage(obtained: Optional[str], total: Optional[str]) -> int:
    """Return obtained/total as a rounded whole percentage.

    Non-numeric input and a zero total both yield 0.
    """
    obtained_value = parse_leading_int(obtained)
    total_value = parse_leading_int(total)
    if obtained_value is None or total_value is None or total_value == 0:
        return 0
    # Half-up rounding, so 12.5 becomes 13 rather than banker's 12
    return math.floor(obtained_value / total_value * 100 + 0.5)


def grade_band(percentage: int) -> str:
    """Classify a percentage into a display band."""
    if percentage >= 90:
        return "excellent"
    if percentage >= 80:
        return "good"
    if percentage >= 70:
        return "average"
    return "poor"
