"""
Port interfaces - Protocol definitions for infrastructure abstraction.

This module defines the interfaces (ports) that the domain requires
from infrastructure. Adapters implement these protocols.
"""

from collections.abc import Sequence
from typing import Protocol

from .models import Account, Coordinates, NewAccount, Role, Service, ServiceOffer, SessionClaims


class AccountRepository(Protocol):
    """Port interface for durable accounts and services."""

    def find_by_email(self, email: str) -> Account | None:
        """
        Look up an account by normalized email.

        Raises:
            RepositoryError: On storage failure
        """
        ...

    def find_by_id(self, account_id: str) -> Account | None:
        """Look up an account by id, None if absent."""
        ...

    def create_account(self, account: NewAccount) -> Account:
        """
        Persist a new account and return it with its assigned id.

        The storage enforces email uniqueness as a backstop to the
        domain-level check.

        Raises:
            EmailTaken: If an account with this email already exists
            RepositoryError: On storage failure
        """
        ...

    def create_service(self, professional_id: str, offer: ServiceOffer) -> Service:
        """
        Persist one service owned by professional_id.

        Raises:
            RepositoryError: On storage failure
        """
        ...

    def delete_services(self, service_ids: Sequence[str]) -> None:
        """Delete services by id; unknown ids are ignored."""
        ...

    def complete_profile(
        self,
        account_id: str,
        address: str,
        location: Coordinates,
        service_ids: Sequence[str],
    ) -> Account | None:
        """
        Attach address, location and services and mark the profile complete.

        Last write wins. Returns the updated account, None if absent.

        Raises:
            RepositoryError: On storage failure
        """
        ...

    def ping(self) -> None:
        """Raise RepositoryError if the storage is unreachable."""
        ...


class Notifier(Protocol):
    """Port interface for OTP delivery."""

    def send(self, phone: str, message: str) -> None:
        """
        Deliver message to phone. Fire-and-forget, no delivery receipt.

        Any exception is treated as a delivery failure.
        """
        ...


class PasswordHasher(Protocol):
    """Port interface for one-way password hashing."""

    def hash(self, password: str) -> str: ...

    def verify(self, password: str, password_hash: str | None) -> bool:
        """Constant-cost comparison; None hash always fails."""
        ...


class TokenIssuer(Protocol):
    """Port interface for session tokens."""

    def issue(self, subject_id: str, role: Role) -> str: ...

    def verify(self, token: str) -> SessionClaims:
        """
        Decode and validate a session token.

        Raises:
            InvalidSessionToken: If the token is forged, malformed or expired
        """
        ...
