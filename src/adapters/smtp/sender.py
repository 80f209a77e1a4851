"""
SMTP email sender adapter - Implements EmailSender protocol.

Delivers verification messages through an SMTP relay using the
standard library client. Transport failures are translated into the
domain's DeliveryError so the registration policy can act on them.
"""

import logging
import smtplib
from email.message import EmailMessage

from src.domain.exceptions import DeliveryError
from src.domain.ports import VerificationEmail

logger = logging.getLogger(__name__)


class SmtpEmailSender:
    """
    Implements EmailSender protocol via SMTP.

    A new connection is opened per message; the sender holds no
    connection state between calls.
    """

    def __init__(
        self,
        host: str,
        port: int,
        sender: str,
        username: str = "",
        password: str = "",
        use_tls: bool = True,
        timeout: float = 10.0,
    ) -> None:
        self._host = host
        self._port = port
        self._sender = sender
        self._username = username
        self._password = password
        self._use_tls = use_tls
        self._timeout = timeout

    def send(self, message: VerificationEmail) -> None:
        """
        Send the verification message as an HTML email.

        Raises:
            DeliveryError: If the relay is unreachable or rejects the message
        """
        email = EmailMessage()
        email["From"] = self._sender
        email["To"] = message.to
        email["Subject"] = message.subject
        email.set_content(message.html, subtype="html")

        try:
            with smtplib.SMTP(self._host, self._port, timeout=self._timeout) as client:
                if self._use_tls:
                    client.starttls()
                if self._username:
                    client.login(self._username, self._password)
                client.send_message(email)
        except (smtplib.SMTPException, OSError) as e:
            logger.error("SMTP delivery to %s:%s failed: %s", self._host, self._port, e)
            raise DeliveryError() from e
