"""
Input validators: framework-agnostic, pure functions.

The DTO layer calls these from pydantic field validators, so a failed rule
surfaces as a 400 with every missing requirement listed.
"""

from __future__ import annotations

import re

USERNAME_PATTERN = re.compile(r"^[a-z0-9._]{3,30}$")
_SPECIAL_CHARS = re.compile(r'[!@#$%^&*()_+\-=\[\]{};\':"\\|,.<>\/?~`]')


def validate_password(password: str) -> tuple[bool, list[str]]:
    """Validate *password* and list the requirements it misses.

    Returns:
        ``(is_valid, missing_requirements)``
    """
    if not password:
        return False, ["Password is required"]

    missing = []
    if len(password) < 6:
        missing.append("At least 6 characters")
    if len(password) > 128:
        missing.append("Maximum 128 characters")
    if not re.search(r"[A-Z]", password):
        missing.append("At least one uppercase letter")
    if not re.search(r"[a-z]", password):
        missing.append("At least one lowercase letter")
    if not re.search(r"[0-9]", password):
        missing.append("At least one number")
    if not _SPECIAL_CHARS.search(password):
        missing.append("At least one special character")

    return not missing, missing


def validate_username(username: str) -> bool:
    """Return True if *username* is 3-30 chars of lowercase letters, digits, ``.`` or ``_``."""
    return bool(USERNAME_PATTERN.match(username))


def prefix_range(query: str) -> dict[str, str]:
    """Return a MongoDB range filter matching strings that start with *query*.

    The upper bound appends U+F8FF, the highest private-use codepoint, the
    usual "starts with" idiom for ordered document-store indexes.
    """
    return {"$gte": query, "$lte": query + "\uf8ff"}
