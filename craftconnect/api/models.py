"""
API request and response models.

Pydantic models for FastAPI endpoint validation and OpenAPI schema generation.
"""

from decimal import Decimal
from typing import Annotated

from pydantic import AfterValidator, BaseModel, EmailStr, Field

from craftconnect.domain.credentials import MAX_PASSWORD_BYTES
from craftconnect.domain.models import Account, AuthResult, Role


def _check_password_bytes(value: str) -> str:
    if len(value.encode()) > MAX_PASSWORD_BYTES:
        raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
    return value


# bcrypt rejects longer input, so the limit is in bytes rather than characters
Password = Annotated[str, AfterValidator(_check_password_bytes)]


class RegisterRequest(BaseModel):
    """Request model for professional and customer registration."""

    name: str = Field(..., min_length=1, max_length=200)
    email: EmailStr
    password: Password = Field(..., min_length=8, description="User password (min 8 characters)")


class RegisterResponse(BaseModel):
    """Response model for the professional email step."""

    message: str
    email: str


class SendOtpRequest(BaseModel):
    """Request model for OTP delivery."""

    email: EmailStr
    phone: str = Field(
        ...,
        pattern=r"^\+[1-9]\d{7,14}$",
        description="Phone number in E.164 format",
    )


class SendOtpResponse(BaseModel):
    """Response model for OTP delivery."""

    message: str
    expires_in_seconds: int


class VerifyOtpRequest(BaseModel):
    """Request model for OTP verification."""

    email: EmailStr
    otp: str = Field(
        ...,
        min_length=6,
        max_length=6,
        pattern=r"^\d{6}$",
        description="6-digit one-time code",
    )


class ServiceOfferModel(BaseModel):
    """One service offered by a professional."""

    name: str = Field(..., min_length=1)
    type: str = Field(..., min_length=1)
    rate: Decimal = Field(..., ge=0)
    description: str = ""


class CompleteProfileRequest(BaseModel):
    """Request model for professional profile completion."""

    address: str = Field(..., min_length=1)
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    services_offered: list[ServiceOfferModel] = Field(default_factory=list)


class LoginRequest(BaseModel):
    """Request model for password login."""

    email: EmailStr
    password: Password = Field(..., min_length=1)


class LocationModel(BaseModel):
    """GeoJSON-style point: coordinates are [longitude, latitude]."""

    type: str = "Point"
    coordinates: tuple[float, float]


class AccountResponse(BaseModel):
    """Public view of an account (never includes the password hash)."""

    id: str
    name: str
    email: str
    role: Role
    phone: str | None = None
    profile_completed: bool
    address: str | None = None
    location: LocationModel | None = None
    services_offered: list[str] = Field(default_factory=list)

    @classmethod
    def from_account(cls, account: Account) -> "AccountResponse":
        location = None
        if account.location is not None:
            location = LocationModel(
                coordinates=(account.location.longitude, account.location.latitude)
            )
        return cls(
            id=account.id,
            name=account.name,
            email=account.email,
            role=account.role,
            phone=account.phone,
            profile_completed=account.profile_completed,
            address=account.address,
            location=location,
            services_offered=list(account.services_offered),
        )


class AuthResponse(BaseModel):
    """Account plus bearer session token."""

    account: AccountResponse
    token: str
    token_type: str = "bearer"

    @classmethod
    def from_result(cls, result: AuthResult) -> "AuthResponse":
        return cls(account=AccountResponse.from_account(result.account), token=result.token)


class ProfileResponse(BaseModel):
    """Response model for profile completion."""

    message: str
    account: AccountResponse


class ErrorResponse(BaseModel):
    """Standard error response model."""

    detail: str
