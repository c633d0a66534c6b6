"""
Domain exceptions - Semantic error types for onboarding and login.

Errors are grouped in four categories so the transport layer can map
them without knowing every leaf type:

- ConflictError: the request collides with existing state
- InvalidStateError: the flow step is missing, expired or unknown
- UnauthorizedError: credentials or session rejected
- DependencyError: a collaborator (repository, notifier) failed
"""


class OnboardingError(Exception):
    """Base class for onboarding domain errors."""

    pass


class ConflictError(OnboardingError):
    """Request conflicts with existing accounts or live challenges."""

    pass


class InvalidStateError(OnboardingError):
    """Registration step missing, expired or not found."""

    pass


class UnauthorizedError(OnboardingError):
    """Credentials, profile state or session token rejected."""

    pass


class DependencyError(OnboardingError):
    """Collaborator failure; safe for the caller to retry."""

    pass


class EmailTaken(ConflictError):
    """An account already exists for this email."""

    pass


class RegistrationPending(ConflictError):
    """A pending registration already exists and the policy rejects replacing it."""

    pass


class OtpAlreadyPending(ConflictError):
    """A live OTP challenge already exists for this phone."""

    pass


class NoEmailStep(InvalidStateError):
    """OTP requested before the email registration step."""

    pass


class InvalidOrExpiredOtp(InvalidStateError):
    """OTP missing, expired, already used or mismatched."""

    pass


class PendingRegistrationNotFound(InvalidStateError):
    """No pending registration for this email."""

    pass


class AccountNotFound(InvalidStateError):
    """No account with this id."""

    pass


class InvalidCredentials(UnauthorizedError):
    """Unknown email or wrong password (deliberately indistinguishable)."""

    pass


class ProfileIncomplete(UnauthorizedError):
    """Professional tried to log in before completing the profile."""

    pass


class InvalidSessionToken(UnauthorizedError):
    """Session token malformed, forged or expired."""

    pass


class NotifyFailed(DependencyError):
    """OTP delivery failed."""

    pass


class ServiceCreationFailed(DependencyError):
    """A service could not be created during profile completion."""

    pass


class RepositoryError(DependencyError):
    """Account repository I/O failure."""

    pass
