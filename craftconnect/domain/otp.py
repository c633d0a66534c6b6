"""
OTP generator and store - One-time codes proving control of a phone.

Each phone number has at most one live challenge. Asking for a new code
while one is live is rejected instead of replacing it, so a code that is
already on its way to the phone stays valid. Expiry is checked on every
read and expired challenges are also removed by evict_expired(), which
the application runs periodically.
"""

import logging
import secrets
from collections.abc import Callable
from datetime import datetime, timedelta, timezone

from .exceptions import InvalidOrExpiredOtp, OtpAlreadyPending
from .locks import KeyedLock
from .models import OtpChallenge

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]

OTP_MIN = 100000
OTP_MAX = 999999


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def generate_code() -> str:
    """
    Generate a 6-digit code in [100000, 999999].

    Uses the secrets module for cryptographic randomness. The range never
    yields a leading zero but the code is still handled as a string.
    """
    return str(OTP_MIN + secrets.randbelow(OTP_MAX - OTP_MIN + 1))


def canonical_code(code: str | int) -> str:
    """Canonical string form of a submitted code (int or str)."""
    return str(code).strip()


class OtpStore:
    """In-process OTP challenges keyed by phone number."""

    def __init__(self, ttl_seconds: int = 300, clock: Clock = utc_now) -> None:
        self._ttl = timedelta(seconds=ttl_seconds)
        self._clock = clock
        self._challenges: dict[str, OtpChallenge] = {}
        self._locks = KeyedLock()

    @property
    def ttl_seconds(self) -> int:
        return int(self._ttl.total_seconds())

    def issue(self, phone: str) -> OtpChallenge:
        """
        Create and store a new challenge for phone.

        Raises:
            OtpAlreadyPending: If a live challenge exists for phone
        """
        with self._locks.hold(phone):
            now = self._clock()
            current = self._challenges.get(phone)
            if current is not None and current.is_live(now):
                raise OtpAlreadyPending(phone)

            challenge = OtpChallenge(phone=phone, code=generate_code(), expires_at=now + self._ttl)
            self._challenges[phone] = challenge
            return challenge

    def verify(self, phone: str, submitted_code: str | int) -> None:
        """
        Check submitted_code against the live challenge and consume it.

        Raises:
            InvalidOrExpiredOtp: If there is no challenge, it expired,
                or the code does not match
        """
        with self._locks.hold(phone):
            challenge = self._challenges.get(phone)
            if challenge is None:
                raise InvalidOrExpiredOtp(phone)

            if not challenge.is_live(self._clock()):
                del self._challenges[phone]
                raise InvalidOrExpiredOtp(phone)

            submitted = canonical_code(submitted_code)
            if not secrets.compare_digest(challenge.code.encode(), submitted.encode()):
                raise InvalidOrExpiredOtp(phone)

            del self._challenges[phone]

    def evict_expired(self) -> int:
        """Remove expired challenges, returning how many were dropped."""
        evicted = 0
        for phone in list(self._challenges):
            with self._locks.hold(phone):
                challenge = self._challenges.get(phone)
                if challenge is not None and not challenge.is_live(self._clock()):
                    del self._challenges[phone]
                    evicted += 1
        if evicted:
            logger.debug("Evicted %d expired OTP challenge(s)", evicted)
        return evicted

    def __len__(self) -> int:
        return len(self._challenges)
