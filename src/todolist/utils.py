from __future__ import annotations

import re
from typing import Union

# Item references that look like this are treated as ids; the upper bound
# keeps ids within an unsigned 32-bit range.
_ID_PATTERN = re.compile(r"^\+?[0-9]+$")
MAX_ITEM_ID = 2**32 - 1


# PUBLIC_INTERFACE
def normalize(description: str) -> str:
    """Return the lookup key for a description (lowercased, otherwise untouched)."""
    return description.lower()


# PUBLIC_INTERFACE
def parse_item_ref(value: str) -> Union[int, str]:
    """
    Decide whether a user-supplied item reference is an id or a description.

    Args:
        value: Raw argument as typed by the user.

    Returns:
        The id as an int when `value` (ignoring surrounding whitespace) is an
        unsigned integer that fits in 32 bits, otherwise `value` unchanged.
    """
    candidate = value.strip()
    if _ID_PATTERN.match(candidate):
        number = int(candidate)
        if number <= MAX_ITEM_ID:
            return number
    return value
