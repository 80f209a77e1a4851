"""
Console email sender adapter - Implements EmailSender protocol.

This module provides a console-based implementation of the domain's
email sender port, logging verification links for development use.
"""

import logging

from src.domain.ports import VerificationEmail

logger = logging.getLogger(__name__)


class ConsoleEmailSender:
    """
    Implements EmailSender protocol via console logging.

    Uses structural subtyping - no explicit inheritance from Protocol.
    For demo/development purposes - prints verification messages to stdout.
    """

    def send(self, message: VerificationEmail) -> None:
        """
        Log the verification message (simulates email delivery).

        The message is logged at INFO level to be visible in docker-compose logs.

        Args:
            message: Verification email built by the domain layer
        """
        logger.info(
            "[VERIFICATION] To: %s Subject: %s Body: %s",
            message.to,
            message.subject,
            message.html,
        )
