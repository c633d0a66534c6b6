"""
Console SMS notifier adapter - Implements Notifier protocol.

This module provides a console-based implementation of the domain's
notifier port, logging OTP messages instead of sending real SMS.
"""

import logging

logger = logging.getLogger(__name__)


class ConsoleSmsNotifier:
    """
    Implements Notifier protocol via console logging.

    Uses structural subtyping - no explicit inheritance from Protocol.
    For demo/development purposes - prints OTP messages to stdout.
    """

    def send(self, phone: str, message: str) -> None:
        """
        Log the message to console (simulates SMS delivery).

        In production, this would be replaced with an SMS gateway adapter.
        The message is logged at INFO level to be visible in docker-compose logs.

        Args:
            phone: Recipient phone number (E.164)
            message: Message body containing the OTP
        """
        logger.info("[SMS] Phone: %s Message: %s", phone, message)
