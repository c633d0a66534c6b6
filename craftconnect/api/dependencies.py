"""
FastAPI dependencies - Dependency injection factories.

This module wires the domain services once per application (the OTP and
pending-registration stores are process-wide state) and provides
Depends() factories for injecting them into routes.
"""

from fastapi import Depends, FastAPI, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from craftconnect.adapters.sms.console import ConsoleSmsNotifier
from craftconnect.adapters.tokens.jwt import JwtTokenIssuer
from craftconnect.config.settings import Settings
from craftconnect.domain.credentials import BcryptPasswordHasher
from craftconnect.domain.exceptions import InvalidSessionToken
from craftconnect.domain.login import LoginService
from craftconnect.domain.models import SessionClaims
from craftconnect.domain.otp import OtpStore
from craftconnect.domain.pending import PendingPolicy, PendingRegistrationStore
from craftconnect.domain.ports import AccountRepository, Notifier, TokenIssuer
from craftconnect.domain.registration import RegistrationService


def init_services(
    app: FastAPI,
    settings: Settings,
    repository: AccountRepository,
    notifier: Notifier | None = None,
) -> None:
    """
    Build the domain services and store them in app.state.

    Called once from the application lifespan (and from tests).
    """
    hasher = BcryptPasswordHasher(cost=settings.bcrypt_cost)
    tokens = JwtTokenIssuer(
        secret=settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
        issuer=settings.jwt_issuer,
        ttl_seconds=settings.token_ttl_seconds,
    )
    otp_store = OtpStore(ttl_seconds=settings.otp_ttl_seconds)
    pending_store = PendingRegistrationStore(
        repository,
        ttl_seconds=settings.pending_ttl_seconds,
        policy=PendingPolicy(settings.pending_registration_policy),
    )

    app.state.repository = repository
    app.state.token_issuer = tokens
    app.state.otp_store = otp_store
    app.state.pending_store = pending_store
    app.state.registration_service = RegistrationService(
        accounts=repository,
        notifier=notifier or ConsoleSmsNotifier(),
        otp_store=otp_store,
        pending_store=pending_store,
        hasher=hasher,
        tokens=tokens,
        sender_name=settings.sms_sender_name,
    )
    app.state.login_service = LoginService(accounts=repository, hasher=hasher, tokens=tokens)


def get_repository(request: Request) -> AccountRepository:
    """Get the account repository from app state."""
    return request.app.state.repository


def get_registration_service(request: Request) -> RegistrationService:
    """Get the registration service (singleton per app)."""
    return request.app.state.registration_service


def get_login_service(request: Request) -> LoginService:
    """Get the login service (singleton per app)."""
    return request.app.state.login_service


def get_token_issuer(request: Request) -> TokenIssuer:
    """Get the session token issuer (singleton per app)."""
    return request.app.state.token_issuer


# Bearer token security scheme for OpenAPI documentation
http_bearer = HTTPBearer()


def get_current_claims(
    credentials: HTTPAuthorizationCredentials = Depends(http_bearer),
    tokens: TokenIssuer = Depends(get_token_issuer),
) -> SessionClaims:
    """
    Verify the bearer session token and return its claims.

    FastAPI's HTTPBearer rejects a missing or non-bearer Authorization
    header before this runs.
    """
    try:
        return tokens.verify(credentials.credentials)
    except InvalidSessionToken:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired session token",
            headers={"WWW-Authenticate": "Bearer"},
        ) from None
