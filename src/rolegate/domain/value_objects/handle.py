"""Role handle - machine-safe unique identifier."""

import re

HANDLE_MAX_LENGTH = 64

_HANDLE_RE = re.compile(r"^[A-Za-z][0-9A-Za-z_\-.]*[A-Za-z0-9]$")


def is_valid_handle(value: str) -> bool:
    """Check handle syntax.

    Starts with a letter, ends with a letter or digit, letters, digits,
    '_', '-' and '.' in between. Empty string is not a valid handle.
    """
    if not value or len(value) > HANDLE_MAX_LENGTH:
        return False
    return _HANDLE_RE.match(value) is not None
