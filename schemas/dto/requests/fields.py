"""
Reusable validated field types for request DTOs.

Each type wraps a pure validator from shared.validators so a rule lives in
one place and every DTO using it reports the same message.
"""

from __future__ import annotations

from datetime import date
from typing import Annotated

from pydantic import AfterValidator, BeforeValidator, EmailStr

from shared.validators import validate_password, validate_username


def _lower(value):
    return value.strip().lower() if isinstance(value, str) else value


def _check_password(value: str) -> str:
    is_valid, missing = validate_password(value)
    if not is_valid:
        raise ValueError("Password must have: " + "; ".join(missing))
    return value


def _check_username(value: str) -> str:
    if not validate_username(value):
        raise ValueError(
            "Username must be 3-30 characters of lowercase letters, numbers, '.' or '_'"
        )
    return value


def _check_date(value: str) -> str:
    try:
        date.fromisoformat(value)
    except ValueError:
        raise ValueError("Date must be in YYYY-MM-DD format") from None
    return value


def _otp_text(value):
    # clients may send the code as a JSON number
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return value


def _check_otp(value: str) -> str:
    if len(value) != 6 or not value.isdigit():
        raise ValueError("OTP must be a 6-digit code")
    return value


Email = Annotated[EmailStr, BeforeValidator(_lower)]
Password = Annotated[str, AfterValidator(_check_password)]
Username = Annotated[str, BeforeValidator(_lower), AfterValidator(_check_username)]
DateOfBirth = Annotated[str, AfterValidator(_check_date)]
OtpCode = Annotated[str, BeforeValidator(_otp_text), AfterValidator(_check_otp)]
