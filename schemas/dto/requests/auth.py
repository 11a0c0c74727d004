"""
Request DTOs for authentication endpoints.

RegisterStep1Request   — POST /auth/register-step1
RegisterStep2Request   — POST /auth/register-step2
ResendOtpRequest       — POST /auth/resend-otp
RegisterStep3Form      — POST /auth/register-step3 (multipart text fields)
LoginRequest           — POST /auth/login, POST /admin/login
SocialLoginRequest     — POST /auth/login-with-google, /auth/login-with-apple
RefreshTokenRequest    — POST /auth/refresh-token, POST /auth/logout
ForgotPasswordRequest  — POST /auth/forgot-password
ResetPasswordRequest   — POST /auth/reset-password
"""

from __future__ import annotations

from typing import Optional

from pydantic import AliasChoices, Field

from schemas.dto.base import CamelModel
from schemas.dto.requests.fields import (
    DateOfBirth,
    Email,
    OtpCode,
    Password,
    Username,
)


class RegisterStep1Request(CamelModel):
    name: str = Field(min_length=1, max_length=100)
    email: Email
    date_of_birth: DateOfBirth


class RegisterStep2Request(CamelModel):
    email: Email
    otp: OtpCode


class ResendOtpRequest(CamelModel):
    email: Email


class RegisterStep3Form(CamelModel):
    """Text fields of the multipart step 3 form; ``profilePic`` is a file."""

    email: Email
    password: Password
    username: Username
    bio: Optional[str] = Field(default=None, max_length=500)


class LoginRequest(CamelModel):
    """``identifier`` is an email or a username; ``email`` / ``username`` are accepted too."""

    identifier: str = Field(
        min_length=1,
        validation_alias=AliasChoices("identifier", "email", "username"),
    )
    password: str = Field(min_length=1)


class SocialLoginRequest(CamelModel):
    id_token: str = Field(min_length=1)


class RefreshTokenRequest(CamelModel):
    refresh_token: str = Field(min_length=1)


class ForgotPasswordRequest(CamelModel):
    email: Email


class ResetPasswordRequest(CamelModel):
    email: Email
    otp: OtpCode
    new_password: Password
