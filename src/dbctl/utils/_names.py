"""Validation of names passed to administrative commands."""

import re

# Unquoted MySQL identifiers, restricted to ASCII
_DATABASE_NAME_RE = re.compile(r"[A-Za-z0-9_$]+")

MAX_DATABASE_NAME_LENGTH = 64


def is_valid_database_name(name: str) -> bool:
    """Return True if name is usable as an unquoted database name.

    Names are 1-64 ASCII letters, digits, ``_`` or ``$`` and may not consist
    of digits only.
    """
    if not 0 < len(name) <= MAX_DATABASE_NAME_LENGTH:
        return False
    if not _DATABASE_NAME_RE.fullmatch(name):
        return False
    return not name.isdigit()

