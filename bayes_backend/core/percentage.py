"""
Percentage Value - validation and parsing of clinician-entered percentages

Responsibilities:
- Decide whether a number is a valid percentage (0-100, not NaN)
- Decide whether raw entry text is lexically a percentage
- Parse raw entry text into a percentage or "absent"

Design principles:
- Never clamp: out-of-range values are rejected, not corrected
- Never raise for malformed text: partially typed input is simply absent
- Absent is None; formulas see it as NaN
"""

import math
import re
from typing import Optional

# At most two leading digits, optional fractional part, no sign, no exponent.
# Note "100" is rejected here even though it passes the range check.
PERCENTAGE_PATTERN = re.compile(r'^[0-9]{0,2}(\.[0-9]+)?$')


class InvalidPercentageError(ValueError):
    """Raised when a programmatic write carries a value outside [0, 100]"""


def is_percentage(value) -> bool:
    """
    Check that a value is a number in [0, 100].

    Examples:
        >>> is_percentage(42.5)
        True
        >>> is_percentage(float('nan'))
        False
        >>> is_percentage(100.01)
        False
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return not math.isnan(value) and 0 <= value <= 100


def is_percentage_string(text: str) -> bool:
    """
    Check raw entry text against the strict lexical rule.

    The empty string matches (it is what a cleared field holds), but it
    never parses to a value.
    """
    return PERCENTAGE_PATTERN.match(text) is not None


def parse_percentage(text: Optional[str]) -> Optional[float]:
    """
    Parse raw entry text into a percentage.

    Args:
        text: Raw field contents

    Returns:
        float if text is lexically valid, non-empty and in range, else None

    Examples:
        >>> parse_percentage('90')
        90.0
        >>> parse_percentage('.5')
        0.5
        >>> parse_percentage('') is None
        True
        >>> parse_percentage('-3') is None
        True
    """
    if text is None or not is_percentage_string(text) or text == '':
        return None

    value = float(text)
    return value if is_percentage(value) else None


def validate_percentage(value) -> Optional[float]:
    """
    Validate a programmatic write.

    Args:
        value: Number to store, or None to clear the input

    Returns:
        The value as float, or None

    Raises:
        InvalidPercentageError: If value is not a percentage
    """
    if value is None:
        return None
    if not is_percentage(value):
        raise InvalidPercentageError(f"Not a percentage in [0, 100]: {value!r}")
    return float(value)


def to_text(value: Optional[float]) -> str:
    """
    Textual form written into a field.

    Integral values drop the trailing '.0' so a field set to 90 reads '90'.
    """
    if value is None:
        return ''
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def read_percentage(text: Optional[str]) -> Optional[float]:
    """
    Read the percentage a field holds before any edit or write.

    Used once, to seed an input from a field's initial contents. Only the
    numeric value and its range matter, so a field created holding '100'
    starts at 100. Later reads come from accepted values, not raw text.
    """
    if not text:
        return None
    try:
        value = float(text)
    except ValueError:
        return None
    return value if is_percentage(value) else None
