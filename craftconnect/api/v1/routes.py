"""
API v1 routes.

Defines REST endpoints for the CraftConnect onboarding API:
- POST /v1/professionals/register - Email step of professional sign-up
- POST /v1/professionals/otp      - Send OTP to the professional's phone
- POST /v1/professionals/verify   - Verify OTP, create account, issue token
- POST /v1/professionals/profile  - Complete profile (bearer token)
- POST /v1/customers/register     - One-step customer sign-up
- POST /v1/login                  - Password login

Handlers are plain functions so that blocking repository and bcrypt work
runs in FastAPI's threadpool.
"""

from fastapi import APIRouter, Depends, HTTPException, status

from craftconnect.api.dependencies import (
    get_current_claims,
    get_login_service,
    get_registration_service,
)
from craftconnect.api.models import (
    AccountResponse,
    AuthResponse,
    CompleteProfileRequest,
    ErrorResponse,
    LoginRequest,
    ProfileResponse,
    RegisterRequest,
    RegisterResponse,
    SendOtpRequest,
    SendOtpResponse,
    VerifyOtpRequest,
)
from craftconnect.domain.exceptions import (
    AccountNotFound,
    ConflictError,
    DependencyError,
    EmailTaken,
    InvalidCredentials,
    InvalidOrExpiredOtp,
    InvalidStateError,
    NoEmailStep,
    NotifyFailed,
    OnboardingError,
    OtpAlreadyPending,
    ProfileIncomplete,
    ServiceCreationFailed,
    UnauthorizedError,
)
from craftconnect.domain.login import LoginService
from craftconnect.domain.models import Coordinates, SessionClaims, ServiceOffer
from craftconnect.domain.registration import RegistrationService

router = APIRouter(tags=["v1"])

# Exact error types first; category fallbacks below keep unknown leaves mapped.
_ERROR_MAP: dict[type[OnboardingError], tuple[int, str]] = {
    EmailTaken: (status.HTTP_409_CONFLICT, "Registration failed"),
    OtpAlreadyPending: (status.HTTP_409_CONFLICT, "OTP already sent. Please wait."),
    NoEmailStep: (status.HTTP_400_BAD_REQUEST, "Please start with email registration"),
    InvalidOrExpiredOtp: (status.HTTP_400_BAD_REQUEST, "Invalid or expired OTP"),
    AccountNotFound: (status.HTTP_404_NOT_FOUND, "Account not found"),
    InvalidCredentials: (status.HTTP_401_UNAUTHORIZED, "Invalid credentials"),
    ProfileIncomplete: (
        status.HTTP_403_FORBIDDEN,
        "Please complete your profile before logging in",
    ),
    NotifyFailed: (status.HTTP_503_SERVICE_UNAVAILABLE, "Error sending OTP"),
    ServiceCreationFailed: (status.HTTP_503_SERVICE_UNAVAILABLE, "Service creation failed"),
}

_CATEGORY_MAP: list[tuple[type[OnboardingError], tuple[int, str]]] = [
    (ConflictError, (status.HTTP_409_CONFLICT, "Registration failed")),
    (InvalidStateError, (status.HTTP_400_BAD_REQUEST, "Invalid registration state")),
    (UnauthorizedError, (status.HTTP_401_UNAUTHORIZED, "Unauthorized")),
    (DependencyError, (status.HTTP_503_SERVICE_UNAVAILABLE, "Service temporarily unavailable")),
]


def to_http_exception(exc: OnboardingError) -> HTTPException:
    """Map a domain error to the HTTP status and generic detail clients see."""
    mapped = _ERROR_MAP.get(type(exc))
    if mapped is None:
        mapped = next(
            (value for category, value in _CATEGORY_MAP if isinstance(exc, category)),
            (status.HTTP_500_INTERNAL_SERVER_ERROR, "Server error"),
        )
    status_code, detail = mapped
    headers = {"Retry-After": "1"} if isinstance(exc, DependencyError) else None
    return HTTPException(status_code=status_code, detail=detail, headers=headers)


@router.post(
    "/professionals/register",
    response_model=RegisterResponse,
    status_code=status.HTTP_202_ACCEPTED,
    responses={
        409: {"model": ErrorResponse, "description": "Email already registered"},
        422: {"description": "Validation error"},
    },
    summary="Register a professional",
    description="Submit name, email and password to begin professional sign-up. "
    "No account is created until the phone number is verified.",
)
def register_professional(
    request_data: RegisterRequest,
    service: RegistrationService = Depends(get_registration_service),
) -> RegisterResponse:
    try:
        email = service.register_professional(
            request_data.name, request_data.email, request_data.password
        )
    except OnboardingError as exc:
        raise to_http_exception(exc) from None
    return RegisterResponse(message="Proceed to phone verification", email=email)


@router.post(
    "/professionals/otp",
    response_model=SendOtpResponse,
    status_code=status.HTTP_202_ACCEPTED,
    responses={
        400: {"model": ErrorResponse, "description": "Email step not completed"},
        409: {"model": ErrorResponse, "description": "OTP already sent"},
        503: {"model": ErrorResponse, "description": "OTP delivery failed"},
    },
    summary="Send phone verification OTP",
)
def send_otp(
    request_data: SendOtpRequest,
    service: RegistrationService = Depends(get_registration_service),
) -> SendOtpResponse:
    """
    Send a 6-digit OTP to the phone number.

    A new code cannot be requested for the same phone until the previous
    one expires.
    """
    try:
        expires_in = service.send_otp(request_data.email, request_data.phone)
    except OnboardingError as exc:
        raise to_http_exception(exc) from None
    return SendOtpResponse(message="OTP sent successfully", expires_in_seconds=expires_in)


@router.post(
    "/professionals/verify",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid or expired OTP"},
    },
    summary="Verify OTP and create professional account",
)
def verify_otp(
    request_data: VerifyOtpRequest,
    service: RegistrationService = Depends(get_registration_service),
) -> AuthResponse:
    try:
        result = service.verify_otp(request_data.email, request_data.otp)
    except OnboardingError as exc:
        raise to_http_exception(exc) from None
    return AuthResponse.from_result(result)


@router.post(
    "/professionals/profile",
    response_model=ProfileResponse,
    responses={
        401: {"model": ErrorResponse, "description": "Missing or invalid session token"},
        404: {"model": ErrorResponse, "description": "Account not found"},
        503: {"model": ErrorResponse, "description": "Service creation failed"},
    },
    summary="Complete professional profile",
)
def complete_profile(
    request_data: CompleteProfileRequest,
    claims: SessionClaims = Depends(get_current_claims),
    service: RegistrationService = Depends(get_registration_service),
) -> ProfileResponse:
    """
    Attach address, location and offered services to the caller's account.

    The account is taken from the bearer session token.
    """
    offers = [
        ServiceOffer(name=s.name, type=s.type, rate=s.rate, description=s.description)
        for s in request_data.services_offered
    ]
    try:
        account = service.complete_profile(
            claims.subject_id,
            request_data.address,
            Coordinates(longitude=request_data.longitude, latitude=request_data.latitude),
            offers,
        )
    except OnboardingError as exc:
        raise to_http_exception(exc) from None
    return ProfileResponse(
        message="Profile completed", account=AccountResponse.from_account(account)
    )


@router.post(
    "/customers/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        409: {"model": ErrorResponse, "description": "Email already registered"},
        422: {"description": "Validation error"},
    },
    summary="Register a customer",
)
def register_customer(
    request_data: RegisterRequest,
    service: RegistrationService = Depends(get_registration_service),
) -> AuthResponse:
    try:
        result = service.register_customer(
            request_data.name, request_data.email, request_data.password
        )
    except OnboardingError as exc:
        raise to_http_exception(exc) from None
    return AuthResponse.from_result(result)


@router.post(
    "/login",
    response_model=AuthResponse,
    responses={
        401: {"model": ErrorResponse, "description": "Invalid credentials"},
        403: {"model": ErrorResponse, "description": "Profile not completed"},
    },
    summary="Log in with email and password",
)
def login(
    request_data: LoginRequest,
    service: LoginService = Depends(get_login_service),
) -> AuthResponse:
    """
    Exchange email and password for a session token.

    Unknown email and wrong password return the same error.
    """
    try:
        result = service.login(request_data.email, request_data.password)
    except OnboardingError as exc:
        raise to_http_exception(exc) from None
    return AuthResponse.from_result(result)
