"""
Domain layer - Pure business logic with zero framework imports.

This package contains the account onboarding state machine, the login
flow and the transient OTP and pending-registration stores. It defines
its own port interfaces for infrastructure abstraction, ensuring true
hexagonal architecture decoupling.
"""

from .credentials import BcryptPasswordHasher
from .exceptions import (
    AccountNotFound,
    ConflictError,
    DependencyError,
    EmailTaken,
    InvalidCredentials,
    InvalidOrExpiredOtp,
    InvalidSessionToken,
    InvalidStateError,
    NoEmailStep,
    NotifyFailed,
    OnboardingError,
    OtpAlreadyPending,
    PendingRegistrationNotFound,
    ProfileIncomplete,
    RegistrationPending,
    RepositoryError,
    ServiceCreationFailed,
    UnauthorizedError,
)
from .login import LoginService
from .models import (
    Account,
    AuthResult,
    Coordinates,
    NewAccount,
    OtpChallenge,
    PendingRegistration,
    Role,
    Service,
    ServiceOffer,
    SessionClaims,
)
from .otp import OtpStore
from .pending import PendingPolicy, PendingRegistrationStore
from .ports import AccountRepository, Notifier, PasswordHasher, TokenIssuer
from .registration import RegistrationService

__all__ = [
    "Account",
    "AccountNotFound",
    "AccountRepository",
    "AuthResult",
    "BcryptPasswordHasher",
    "ConflictError",
    "Coordinates",
    "DependencyError",
    "EmailTaken",
    "InvalidCredentials",
    "InvalidOrExpiredOtp",
    "InvalidSessionToken",
    "InvalidStateError",
    "LoginService",
    "NewAccount",
    "NoEmailStep",
    "Notifier",
    "NotifyFailed",
    "OnboardingError",
    "OtpAlreadyPending",
    "OtpChallenge",
    "OtpStore",
    "PasswordHasher",
    "PendingPolicy",
    "PendingRegistration",
    "PendingRegistrationNotFound",
    "PendingRegistrationStore",
    "ProfileIncomplete",
    "RegistrationPending",
    "RegistrationService",
    "RepositoryError",
    "Role",
    "Service",
    "ServiceCreationFailed",
    "ServiceOffer",
    "SessionClaims",
    "TokenIssuer",
    "UnauthorizedError",
]
