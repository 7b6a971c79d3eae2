"""
SMTP delivery for account verification mail.

The relay host and credentials are read from the instance information row at send
time (administrators can edit them), while the port, TLS mode and timeout come
from process settings.
"""

from __future__ import annotations

import logging
from email.message import EmailMessage

import aiosmtplib

logger = logging.getLogger(__name__)


class Mailer:
    """Thin aiosmtplib wrapper returning a delivery flag instead of raising."""

    def __init__(self, *, port: int, use_tls: bool, timeout_seconds: float) -> None:
        self.port = port
        self.use_tls = use_tls
        self.timeout_seconds = timeout_seconds

    @staticmethod
    def build_message(*, sender: str, receiver: str, subject: str, body: str) -> EmailMessage:
        message = EmailMessage()
        message["From"] = sender
        message["To"] = receiver
        message["Subject"] = subject
        message.set_content(body, charset="utf-8")
        return message

    async def send(
        self,
        *,
        server: str,
        username: str,
        password: str,
        receiver: str,
        subject: str,
        body: str,
    ) -> bool:
        message = self.build_message(sender=username, receiver=receiver, subject=subject, body=body)
        try:
            errors, response = await aiosmtplib.send(
                message,
                hostname=server,
                port=self.port,
                username=username,
                password=password,
                start_tls=self.use_tls,
                timeout=self.timeout_seconds,
            )
        except (aiosmtplib.SMTPException, OSError):
            logger.exception("SMTP delivery to %s via %s failed", receiver, server)
            return False

        if errors:
            details = "; ".join(f"{address}: {error}" for address, error in errors.items())
            logger.error("SMTP partial send failure to %s: %s", receiver, details)
            return False

        logger.info("Verification mail sent to %s (%s)", receiver, response)
        return True
