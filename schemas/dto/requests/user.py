"""Request DTOs for /user endpoints."""

from __future__ import annotations

from typing import Optional

from pydantic import Field

from schemas.dto.base import CamelModel
from schemas.dto.requests.fields import DateOfBirth, Password, Username


class EditProfileForm(CamelModel):
    """Text fields of PUT /user/edit-profile; ``profilePic`` is a file.

    Empty strings mean "unchanged", as multipart clients send every input.
    """

    name: Optional[str] = Field(default=None, max_length=100)
    date_of_birth: Optional[DateOfBirth] = None
    username: Optional[Username] = None
    bio: Optional[str] = Field(default=None, max_length=500)
    password: Optional[Password] = None

    @classmethod
    def from_fields(cls, fields: dict[str, str]) -> "EditProfileForm":
        return cls.model_validate({k: v for k, v in fields.items() if v != ""})


class DeleteAccountRequest(CamelModel):
    password: str = Field(min_length=1)
