"""
Shared test fixtures and configuration.

This module provides pytest fixtures for:
- A controllable clock for expiry tests
- Domain services wired to the in-memory repository
- A mocked notifier that records delivered OTPs
"""

from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from unittest.mock import Mock

import pytest

from craftconnect.adapters.repository.memory import InMemoryAccountRepository
from craftconnect.adapters.tokens.jwt import JwtTokenIssuer
from craftconnect.domain.credentials import BcryptPasswordHasher
from craftconnect.domain.login import LoginService
from craftconnect.domain.otp import OtpStore
from craftconnect.domain.pending import PendingRegistrationStore
from craftconnect.domain.registration import RegistrationService

TEST_JWT_SECRET = "test-secret-key-for-session-tokens"


class FakeClock:
    """Clock returning a fixed instant until advanced."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def repository() -> InMemoryAccountRepository:
    return InMemoryAccountRepository()


@pytest.fixture
def notifier() -> Mock:
    return Mock()


@pytest.fixture
def hasher() -> BcryptPasswordHasher:
    # Minimum bcrypt cost keeps the suite fast
    return BcryptPasswordHasher(cost=4)


@pytest.fixture
def tokens() -> JwtTokenIssuer:
    return JwtTokenIssuer(secret=TEST_JWT_SECRET)


@pytest.fixture
def otp_store(clock: FakeClock) -> OtpStore:
    return OtpStore(ttl_seconds=300, clock=clock)


@pytest.fixture
def pending_store(repository: InMemoryAccountRepository, clock: FakeClock) -> PendingRegistrationStore:
    return PendingRegistrationStore(repository, ttl_seconds=3600, clock=clock)


@pytest.fixture
def service(
    repository: InMemoryAccountRepository,
    notifier: Mock,
    otp_store: OtpStore,
    pending_store: PendingRegistrationStore,
    hasher: BcryptPasswordHasher,
    tokens: JwtTokenIssuer,
) -> RegistrationService:
    return RegistrationService(
        accounts=repository,
        notifier=notifier,
        otp_store=otp_store,
        pending_store=pending_store,
        hasher=hasher,
        tokens=tokens,
    )


@pytest.fixture
def login_service(
    repository: InMemoryAccountRepository,
    hasher: BcryptPasswordHasher,
    tokens: JwtTokenIssuer,
) -> LoginService:
    return LoginService(accounts=repository, hasher=hasher, tokens=tokens)


@pytest.fixture
def delivered_otp(notifier: Mock) -> Callable[[], str]:
    """Return the code from the most recent message sent by the notifier."""

    def read() -> str:
        message = notifier.send.call_args.args[1]
        return message.rsplit(": ", 1)[1]

    return read
