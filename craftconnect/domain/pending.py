"""
Pending-registration store - Professional sign-ups awaiting verification.

Registrations live here, keyed by normalized email, from the email step
until the OTP is verified and the account is persisted. Nothing in this
store survives a restart. Entries older than the configured lifetime are
treated as absent and removed by evict_expired().
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import timedelta
from enum import Enum

from .exceptions import (
    EmailTaken,
    NoEmailStep,
    PendingRegistrationNotFound,
    RegistrationPending,
)
from .locks import KeyedLock
from .models import PendingRegistration
from .otp import Clock, utc_now
from .ports import AccountRepository

logger = logging.getLogger(__name__)


class PendingPolicy(str, Enum):
    """What begin() does when a live pending registration already exists."""

    REPLACE = "replace"
    REJECT = "reject"


class PendingRegistrationStore:
    """In-process pending registrations keyed by email."""

    def __init__(
        self,
        accounts: AccountRepository,
        ttl_seconds: int = 3600,
        policy: PendingPolicy = PendingPolicy.REPLACE,
        clock: Clock = utc_now,
    ) -> None:
        self._accounts = accounts
        self._ttl = timedelta(seconds=ttl_seconds)
        self._policy = policy
        self._clock = clock
        self._pending: dict[str, PendingRegistration] = {}
        self._locks = KeyedLock()

    @contextmanager
    def locked(self, email: str) -> Iterator[None]:
        """Hold the email's lock across several store calls."""
        with self._locks.hold(email):
            yield

    def begin(self, email: str, name: str, password_hash: str) -> PendingRegistration:
        """
        Start (or restart) a pending registration for email.

        Raises:
            EmailTaken: If an account already exists for email
            RegistrationPending: If one is pending and the policy is REJECT
        """
        if self._accounts.find_by_email(email) is not None:
            raise EmailTaken(email)

        with self._locks.hold(email):
            existing = self._live(email)
            if existing is not None:
                if self._policy is PendingPolicy.REJECT:
                    raise RegistrationPending(email)
                logger.info("Replacing pending registration for %s", email)

            pending = PendingRegistration(
                name=name,
                email=email,
                password_hash=password_hash,
                created_at=self._clock(),
            )
            self._pending[email] = pending
            return pending

    def get(self, email: str) -> PendingRegistration | None:
        with self._locks.hold(email):
            return self._live(email)

    def bind_phone(self, email: str, phone: str) -> PendingRegistration:
        """
        Attach phone to the pending registration.

        Raises:
            NoEmailStep: If no pending registration exists for email
        """
        with self._locks.hold(email):
            pending = self._live(email)
            if pending is None:
                raise NoEmailStep(email)
            pending.phone = phone
            return pending

    def take(self, email: str) -> PendingRegistration:
        """
        Remove and return the pending registration.

        Raises:
            PendingRegistrationNotFound: If nothing is pending for email
        """
        with self._locks.hold(email):
            pending = self._live(email)
            if pending is None:
                raise PendingRegistrationNotFound(email)
            del self._pending[email]
            return pending

    def restore(self, pending: PendingRegistration) -> None:
        """Put back a taken registration unless a newer one has started."""
        with self._locks.hold(pending.email):
            self._pending.setdefault(pending.email, pending)

    def evict_expired(self) -> int:
        """Remove registrations older than the lifetime, returning the count."""
        evicted = 0
        for email in list(self._pending):
            with self._locks.hold(email):
                pending = self._pending.get(email)
                if pending is not None and self._expired(pending):
                    del self._pending[email]
                    evicted += 1
        if evicted:
            logger.debug("Evicted %d stale pending registration(s)", evicted)
        return evicted

    def _live(self, email: str) -> PendingRegistration | None:
        pending = self._pending.get(email)
        if pending is None:
            return None
        if self._expired(pending):
            del self._pending[email]
            return None
        return pending

    def _expired(self, pending: PendingRegistration) -> bool:
        return self._clock() > pending.created_at + self._ttl

    def __len__(self) -> int:
        return len(self._pending)
