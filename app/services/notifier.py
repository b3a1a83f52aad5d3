# /app/services/notifier.py

"""
Delivery of one-time passcodes.

A notifier makes exactly one delivery attempt and raises `NotifierError` when
it fails. Retrying is up to whoever calls the OTP endpoints again.

`SmtpNotifier` sends through any SMTP relay (for Gmail, an app password).
`LoggingNotifier` writes the code to the log and is what a deployment without
`SMTP_HOST` gets, which is convenient for local development.
"""

import logging
import smtplib
from email.message import EmailMessage
from typing import Optional

from app.core.config import Settings

logger = logging.getLogger(__name__)

OTP_SUBJECT = "Your OTP for Registration / Password Change"


class NotifierError(Exception):
    """Raised when a passcode could not be handed to the delivery channel."""


class Notifier:
    def deliver(self, email: str, code: str) -> None:
        raise NotImplementedError


def render_otp_body(code: str, expire_minutes: int) -> str:
    return f"Your OTP is {code}. It will expire in {expire_minutes} minutes."


class SmtpNotifier(Notifier):
    def __init__(self, host: str, port: int, user: Optional[str], password: Optional[str], sender: Optional[str], expire_minutes: int = 5, timeout: float = 10.0):
        self.host = host
        self.port = port
        self.user = user
        self.password = password
        self.sender = sender or user
        self.expire_minutes = expire_minutes
        self.timeout = timeout

    def deliver(self, email: str, code: str) -> None:
        msg = EmailMessage()
        msg["Subject"] = OTP_SUBJECT
        msg["From"] = f'"Teacher Rating System" <{self.sender}>'
        msg["To"] = email
        msg.set_content(render_otp_body(code, self.expire_minutes))
        try:
            with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as server:
                server.starttls()
                if self.user and self.password:
                    server.login(self.user, self.password)
                server.send_message(msg)
        except (smtplib.SMTPException, OSError) as e:
            logger.error("Failed to send OTP email to %s: %s", email, e)
            raise NotifierError("Failed to send OTP") from e
        logger.info("OTP email sent to %s", email)


class LoggingNotifier(Notifier):
    def __init__(self, expire_minutes: int = 5):
        self.expire_minutes = expire_minutes

    def deliver(self, email: str, code: str) -> None:
        logger.warning("SMTP not configured; OTP for %s: %s", email, render_otp_body(code, self.expire_minutes))


def build_notifier(settings: Settings) -> Notifier:
    if settings.smtp_host:
        return SmtpNotifier(
            host=settings.smtp_host,
            port=settings.smtp_port,
            user=settings.smtp_user,
            password=settings.smtp_pass,
            sender=settings.smtp_from,
            expire_minutes=settings.otp_expire_minutes,
        )
    return LoggingNotifier(expire_minutes=settings.otp_expire_minutes)
