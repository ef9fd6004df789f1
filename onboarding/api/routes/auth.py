"""
Authentication routes.

Registration, login, email and mobile verification, and bearer-protected
self-service profile endpoints.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse

from onboarding.api.dependencies import (
    get_account_service,
    get_current_account,
    get_registration_service,
)
from onboarding.api.errors import error_response
from onboarding.api.models import (
    AccountEnvelope,
    AccountResponse,
    ChangePasswordRequest,
    ErrorResponse,
    LoginRequest,
    LoginResponse,
    MessageResponse,
    RegisterRequest,
    RegisterResponse,
    SendOtpRequest,
    SendOtpResponse,
    UpdatePhoneRequest,
    UpdateProfileRequest,
    VerifyEmailResponse,
    VerifyMobileRequest,
    VerifyMobileResponse,
)
from onboarding.config.settings import Settings, get_settings
from onboarding.domain.accounts import AccountService
from onboarding.domain.exceptions import NotFoundError
from onboarding.domain.models import Account
from onboarding.domain.registration import RegistrationService

router = APIRouter(prefix="/auth", tags=["auth"])

CurrentAccount = Annotated[Account, Depends(get_current_account)]


@router.post(
    "/register",
    response_model=RegisterResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse, "description": "Validation error"},
        409: {"model": ErrorResponse, "description": "Email already registered"},
        500: {"model": ErrorResponse, "description": "Identity provider failure"},
    },
    summary="Register a new user",
    description="Create the account locally and with the identity provider, "
    "then send the email verification links.",
)
async def register(
    request_data: RegisterRequest,
    service: RegistrationService = Depends(get_registration_service),
) -> RegisterResponse:
    outcome = service.register(
        email=request_data.email,
        password=request_data.password,
        full_name=request_data.full_name,
        gender=request_data.gender,
        mobile_no=request_data.mobile_no,
        signup_type=request_data.signup_type,
    )
    return RegisterResponse(
        message="User registered successfully. Please verify your email and mobile number.",
        user=AccountResponse.model_validate(outcome.account),
        warnings=outcome.warnings,
    )


@router.post(
    "/login",
    response_model=LoginResponse,
    responses={401: {"model": ErrorResponse, "description": "Invalid credentials"}},
    summary="Log in and obtain a session token",
)
async def login(
    request_data: LoginRequest,
    service: AccountService = Depends(get_account_service),
) -> LoginResponse:
    outcome = service.login(request_data.email, request_data.password)
    return LoginResponse(
        message="Login successful",
        token=outcome.token,
        user=AccountResponse.model_validate(outcome.account),
        warnings=outcome.warnings,
    )


@router.get(
    "/verify-email",
    response_model=VerifyEmailResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Verification link expired"},
        401: {"model": ErrorResponse, "description": "Invalid verification token"},
        404: {"model": ErrorResponse, "description": "User not found"},
    },
    summary="Confirm email ownership from a verification link",
)
async def verify_email(
    user_id: int = Query(..., alias="userId"),
    token: str = Query(..., min_length=1),
    service: RegistrationService = Depends(get_registration_service),
) -> VerifyEmailResponse:
    account = service.verify_email(user_id, token)
    return VerifyEmailResponse(
        message="Email verified successfully",
        email=account.email,
        is_email_verified=account.is_email_verified,
    )


@router.post(
    "/send-otp",
    response_model=SendOtpResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Missing identifier or phone number"},
        404: {"model": ErrorResponse, "description": "User not found"},
    },
    summary="Send a 6-digit OTP to the account's mobile number",
)
async def send_otp(
    request_data: SendOtpRequest,
    service: RegistrationService = Depends(get_registration_service),
    settings: Settings = Depends(get_settings),
) -> SendOtpResponse:
    dispatch = service.send_otp(user_id=request_data.user_id, email=request_data.email)
    return SendOtpResponse(
        message="OTP sent to your mobile number",
        expires_at=dispatch.expires_at,
        custom_token=dispatch.custom_token,
        mock_otp=None if settings.is_production else dispatch.code,
        warnings=dispatch.warnings,
    )


@router.post(
    "/verify-mobile",
    response_model=VerifyMobileResponse,
    responses={400: {"model": ErrorResponse, "description": "Invalid, expired or missing OTP"}},
    summary="Verify the mobile number with an OTP",
)
async def verify_mobile(
    request_data: VerifyMobileRequest,
    service: RegistrationService = Depends(get_registration_service),
) -> VerifyMobileResponse | JSONResponse:
    try:
        account = service.verify_mobile(request_data.user_id, request_data.otp)
    except NotFoundError as exc:
        # A missing code is a client-side retry condition here, not a missing resource
        return error_response(exc, status.HTTP_400_BAD_REQUEST)
    return VerifyMobileResponse(
        message="Mobile number verified successfully",
        mobile_no=account.mobile_no,
        is_mobile_verified=account.is_mobile_verified,
    )


@router.get("/me", response_model=AccountEnvelope, summary="Get the current user profile")
async def get_me(account: CurrentAccount) -> AccountEnvelope:
    return AccountEnvelope(
        message="User profile retrieved", user=AccountResponse.model_validate(account)
    )


@router.put(
    "/me",
    response_model=AccountEnvelope,
    responses={400: {"model": ErrorResponse, "description": "No valid fields to update"}},
    summary="Update display name and gender",
)
async def update_me(
    request_data: UpdateProfileRequest,
    account: CurrentAccount,
    service: AccountService = Depends(get_account_service),
) -> AccountEnvelope:
    updated = service.update_profile(account.id, request_data.model_dump(exclude_none=True))
    return AccountEnvelope(
        message="User profile updated", user=AccountResponse.model_validate(updated)
    )


@router.put(
    "/phone",
    response_model=AccountEnvelope,
    responses={400: {"model": ErrorResponse, "description": "Invalid phone number"}},
    summary="Change the mobile number (resets mobile verification)",
)
async def update_phone(
    request_data: UpdatePhoneRequest,
    account: CurrentAccount,
    service: AccountService = Depends(get_account_service),
) -> AccountEnvelope:
    updated = service.update_phone(account.id, request_data.mobile_no)
    return AccountEnvelope(message="Phone updated", user=AccountResponse.model_validate(updated))


@router.put(
    "/password",
    response_model=MessageResponse,
    responses={400: {"model": ErrorResponse, "description": "Weak or incorrect password"}},
    summary="Change password",
)
async def change_password(
    request_data: ChangePasswordRequest,
    account: CurrentAccount,
    service: AccountService = Depends(get_account_service),
) -> MessageResponse:
    service.change_password(account.id, request_data.current_password, request_data.new_password)
    return MessageResponse(message="Password changed successfully")
