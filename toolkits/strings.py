"""String helpers used when text has to become a list of items."""

import json
import re
from typing import List

DEFAULT_PATTERN = r"[\s,]+"


def is_json(text: str) -> bool:
    """Return True if text decodes as a JSON document."""
    try:
        json.loads(text)
    except (TypeError, ValueError):
        return False
    return True


def as_array(text: str, pattern: str = DEFAULT_PATTERN) -> List[str]:
    """Split text into its non-empty pieces.

    Args:
        text: The string to break up
        pattern: Regular expression matching the delimiters (whitespace and commas by default)

    Returns:
        The pieces in their original order

    Examples:
        >>> as_array("red, green  blue")
        ['red', 'green', 'blue']
        >>> as_array("a|b||c", pattern=r"\\|")
        ['a', 'b', 'c']
    """
    return [piece for piece in re.split(pattern, text) if piece]
