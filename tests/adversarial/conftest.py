"""
Shared fixtures for adversarial tests.

Provides helpers that drive a registration up to the point an attacker
would race on it.
"""

from collections.abc import Callable

import pytest

from craftconnect.domain.registration import RegistrationService

# Module-level marker for all adversarial tests
pytestmark = pytest.mark.adversarial


@pytest.fixture
def otp_sent(service: RegistrationService, delivered_otp: Callable[[], str]) -> Callable[..., str]:
    """Register a professional and send the OTP, returning the delivered code."""

    def prepare(email: str = "race@example.com", phone: str = "+15551234567") -> str:
        service.register_professional("Racer", email, "pw123")
        service.send_otp(email, phone)
        return delivered_otp()

    return prepare
