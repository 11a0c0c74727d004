"""
Random code generators: pure, side-effect-free functions.

OTPs use the ``secrets`` module; username suggestions only need to look
plausible, so they use the system PRNG.
"""

from __future__ import annotations

import itertools
import random
import secrets

OTP_MIN = 100000
OTP_MAX = 999999


def generate_otp_code() -> str:
    """Return a 6-digit numeric OTP drawn uniformly from 100000-999999."""
    return str(OTP_MIN + secrets.randbelow(OTP_MAX - OTP_MIN + 1))


def username_candidates(username: str, count: int = 10) -> list[str]:
    """Build alternative usernames for a taken *username*.

    Permutes the dot-separated parts of the name (``john.doe`` gives
    ``doe.john``, ``johndoe``, ``doejohn``) and appends random 3-digit
    suffixes until *count* distinct candidates exist. The original name is
    never returned.
    """
    parts = [p for p in username.split(".") if p]
    if not parts:
        parts = [username]

    candidates: list[str] = []
    seen = {username}

    def _add(candidate: str) -> None:
        if candidate and candidate not in seen:
            seen.add(candidate)
            candidates.append(candidate)

    if len(parts) > 1:
        for perm in itertools.permutations(parts):
            _add(".".join(perm))
            _add("".join(perm))

    bases = [".".join(parts), "".join(parts)]
    attempts = 0
    while len(candidates) < count and attempts < count * 10:
        attempts += 1
        base = random.choice(bases)
        _add(f"{base}{random.randint(100, 999)}")

    return candidates[:count]
