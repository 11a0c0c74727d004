"""
/auth routes: OTP registration, login, sessions and password reset.

Only logout needs a bearer token; everything else here is public.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Request

from config import AppSettings
from dependencies import (
    get_auth_service,
    get_current_user,
    get_registration_service,
    get_settings,
)
from routes.forms import read_multipart
from schemas.dto.requests.auth import (
    ForgotPasswordRequest,
    LoginRequest,
    RefreshTokenRequest,
    RegisterStep1Request,
    RegisterStep2Request,
    RegisterStep3Form,
    ResendOtpRequest,
    ResetPasswordRequest,
    SocialLoginRequest,
)
from schemas.dto.responses.auth import (
    AccessTokenResponse,
    AuthTokensResponse,
    UserResponse,
)
from schemas.dto.responses.common import SuccessResponse, envelope
from services.auth_service import AuthService
from services.registration_service import RegistrationService
from services.token_service import AuthContext
from shared import messages

router = APIRouter(prefix="/auth", tags=["auth"])


def _tokens_payload(user, tokens) -> AuthTokensResponse:
    return AuthTokensResponse(
        access_token=tokens.access_token,
        refresh_token=tokens.refresh_token,
        user=UserResponse.from_doc(user),
    )


@router.post("/register-step1")
async def register_step1(
    body: RegisterStep1Request,
    registration: RegistrationService = Depends(get_registration_service),
) -> SuccessResponse:
    await registration.start(body.name, body.email, body.date_of_birth)
    return envelope(messages.OTP_SENT)


@router.post("/register-step2")
async def register_step2(
    body: RegisterStep2Request,
    registration: RegistrationService = Depends(get_registration_service),
) -> SuccessResponse:
    await registration.verify(body.email, body.otp)
    return envelope(messages.EMAIL_VERIFIED)


@router.post("/resend-otp")
async def resend_otp(
    body: ResendOtpRequest,
    registration: RegistrationService = Depends(get_registration_service),
) -> SuccessResponse:
    await registration.resend(body.email)
    return envelope(messages.OTP_SENT)


@router.post("/register-step3")
async def register_step3(
    request: Request,
    settings: AppSettings = Depends(get_settings),
    registration: RegistrationService = Depends(get_registration_service),
) -> SuccessResponse:
    parsed = await read_multipart(request, settings)
    form = RegisterStep3Form.model_validate(parsed.fields)
    user, tokens = await registration.complete(form, parsed.file("profilePic"))
    return envelope(messages.USER_REGISTERED, _tokens_payload(user, tokens))


@router.get("/check-username")
async def check_username(
    username: str = Query(min_length=1),
    registration: RegistrationService = Depends(get_registration_service),
) -> SuccessResponse:
    result = await registration.check_username(username.strip().lower())
    message = messages.USERNAME_AVAILABLE if result.available else messages.USERNAME_TAKEN
    return envelope(message, result)


@router.post("/login")
async def login(
    body: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> SuccessResponse:
    user, tokens = await auth_service.login(body.identifier, body.password)
    return envelope(messages.LOGIN_SUCCESS, _tokens_payload(user, tokens))


@router.post("/login-with-google")
async def login_with_google(
    body: SocialLoginRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> SuccessResponse:
    user, tokens = await auth_service.social_sign_in("google", body.id_token)
    return envelope(messages.LOGIN_SUCCESS, _tokens_payload(user, tokens))


@router.post("/login-with-apple")
async def login_with_apple(
    body: SocialLoginRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> SuccessResponse:
    user, tokens = await auth_service.social_sign_in("apple", body.id_token)
    return envelope(messages.LOGIN_SUCCESS, _tokens_payload(user, tokens))


@router.post("/refresh-token")
async def refresh_token(
    body: RefreshTokenRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> SuccessResponse:
    access_token = await auth_service.refresh(body.refresh_token)
    return envelope(messages.TOKEN_REFRESHED, AccessTokenResponse(access_token=access_token))


@router.post("/logout")
async def logout(
    body: RefreshTokenRequest,
    auth: AuthContext = Depends(get_current_user),
    auth_service: AuthService = Depends(get_auth_service),
) -> SuccessResponse:
    await auth_service.logout(auth, body.refresh_token)
    return envelope(messages.LOGOUT_SUCCESS)


@router.post("/forgot-password")
async def forgot_password(
    body: ForgotPasswordRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> SuccessResponse:
    await auth_service.forgot_password(body.email)
    return envelope(messages.PASSWORD_RESET_EMAIL_SENT)


@router.post("/reset-password")
async def reset_password(
    body: ResetPasswordRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> SuccessResponse:
    await auth_service.reset_password(body.email, body.otp, body.new_password)
    return envelope(messages.PASSWORD_RESET_SUCCESS)
