"""
API request and response models.

Pydantic models for FastAPI endpoint validation and OpenAPI schema generation.
Password strength and phone format are checked by the domain so that every
violated rule is reported together.
"""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, HttpUrl

from onboarding.domain.models import Gender, SignupType


class RegisterRequest(BaseModel):
    """Request model for user registration."""

    email: EmailStr
    password: str = Field(
        ..., description="Min 8 characters with an uppercase letter, a digit and a symbol"
    )
    full_name: str = Field(..., min_length=1, max_length=255)
    gender: Gender | None = None
    mobile_no: str = Field(..., description="Phone number with country code, e.g. +447400123456")
    signup_type: SignupType = SignupType.EMAIL


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class SendOtpRequest(BaseModel):
    """Identify the account by id or by email."""

    user_id: int | None = None
    email: EmailStr | None = None


class VerifyMobileRequest(BaseModel):
    user_id: int
    otp: str = Field(..., description="6-digit code")


class UpdateProfileRequest(BaseModel):
    full_name: str | None = Field(None, min_length=1, max_length=255)
    gender: Gender | None = None


class UpdatePhoneRequest(BaseModel):
    mobile_no: str


class ChangePasswordRequest(BaseModel):
    current_password: str
    new_password: str


class AccountResponse(BaseModel):
    """Public account fields. The password hash is never serialized."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    full_name: str
    gender: Gender | None
    mobile_no: str | None
    signup_type: SignupType
    is_email_verified: bool
    is_mobile_verified: bool
    external_id: str | None
    created_at: datetime


class RegisterResponse(BaseModel):
    message: str
    user: AccountResponse
    warnings: list[str] = []


class LoginResponse(BaseModel):
    message: str
    token: str
    user: AccountResponse
    warnings: list[str] = []


class VerifyEmailResponse(BaseModel):
    message: str
    email: str
    is_email_verified: bool


class SendOtpResponse(BaseModel):
    """`mock_otp` is only populated outside production."""

    message: str
    expires_at: datetime
    custom_token: str | None = None
    mock_otp: str | None = None
    warnings: list[str] = []


class VerifyMobileResponse(BaseModel):
    message: str
    mobile_no: str | None
    is_mobile_verified: bool


class AccountEnvelope(BaseModel):
    message: str
    user: AccountResponse


class MessageResponse(BaseModel):
    message: str


class CompanyRequest(BaseModel):
    """Request model for company registration."""

    company_name: str = Field(..., min_length=1, max_length=255)
    address: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1, max_length=100)
    state: str = Field(..., min_length=1, max_length=100)
    country: str = Field(..., min_length=1, max_length=100)
    postal_code: str = Field(..., min_length=1, max_length=20)
    industry: str = Field(..., min_length=1, max_length=100)
    website: HttpUrl | None = None
    founded_date: date | None = None
    description: str | None = None
    social_links: dict[str, HttpUrl] | None = None


class CompanyUpdateRequest(BaseModel):
    company_name: str | None = Field(None, min_length=1, max_length=255)
    address: str | None = Field(None, min_length=1)
    city: str | None = Field(None, min_length=1, max_length=100)
    state: str | None = Field(None, min_length=1, max_length=100)
    country: str | None = Field(None, min_length=1, max_length=100)
    postal_code: str | None = Field(None, min_length=1, max_length=20)
    industry: str | None = Field(None, min_length=1, max_length=100)
    website: HttpUrl | None = None
    founded_date: date | None = None
    description: str | None = None
    social_links: dict[str, HttpUrl] | None = None
    logo_url: HttpUrl | None = None
    banner_url: HttpUrl | None = None


class CompanyResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    owner_id: int
    company_name: str
    address: str
    city: str
    state: str
    country: str
    postal_code: str
    industry: str
    website: str | None = None
    founded_date: date | None = None
    description: str | None = None
    social_links: dict[str, str] | None = None
    logo_url: str | None = None
    banner_url: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class CompanyEnvelope(BaseModel):
    message: str
    company: CompanyResponse


class ErrorResponse(BaseModel):
    """Standard error response model."""

    detail: str
    errors: list[str] = []
