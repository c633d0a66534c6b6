"""
Domain models - Accounts, services and transient registration state.

Plain dataclasses shared by the domain services and the adapters.
Durable entities (Account, Service) are assigned their ids by the
repository; transient entities (PendingRegistration, OtpChallenge) only
live inside the in-process stores.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum


def normalize_email(email: str) -> str:
    """
    Normalize email address for consistent storage and lookup.

    Applies: strip whitespace + lowercase
    """
    return email.strip().lower()


class Role(str, Enum):
    """Account kinds admitted by the marketplace."""

    PROFESSIONAL = "professional"
    CUSTOMER = "customer"


@dataclass(frozen=True)
class Coordinates:
    """Longitude/latitude pair stored with a completed profile."""

    longitude: float
    latitude: float


@dataclass
class Account:
    """Durable account record."""

    id: str
    name: str
    email: str
    password_hash: str
    role: Role
    profile_completed: bool
    phone: str | None = None
    address: str | None = None
    location: Coordinates | None = None
    services_offered: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class NewAccount:
    """Account data handed to the repository before an id exists."""

    name: str
    email: str
    password_hash: str
    role: Role
    profile_completed: bool
    phone: str | None = None


@dataclass(frozen=True)
class ServiceOffer:
    """One entry of the services list submitted at profile completion."""

    name: str
    type: str
    rate: Decimal
    description: str = ""


@dataclass(frozen=True)
class Service:
    """Durable service offered by a professional."""

    id: str
    name: str
    type: str
    rate: Decimal
    description: str
    professional_id: str


@dataclass
class PendingRegistration:
    """Professional sign-up waiting for phone verification."""

    name: str
    email: str
    password_hash: str
    created_at: datetime
    phone: str | None = None


@dataclass(frozen=True)
class OtpChallenge:
    """Outstanding one-time code for a phone number."""

    phone: str
    code: str
    expires_at: datetime

    def is_live(self, now: datetime) -> bool:
        return now <= self.expires_at


@dataclass(frozen=True)
class SessionClaims:
    """Subject and role asserted by a session token."""

    subject_id: str
    role: Role


@dataclass(frozen=True)
class AuthResult:
    """Account plus the session token issued for it."""

    account: Account
    token: str
