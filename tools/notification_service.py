"""
Notification Service Tool
Delivers rendered alerts by email over SMTP
"""

import asyncio
import logging
import smtplib
from email.message import EmailMessage
from email.utils import formataddr, make_msgid
from typing import Optional
from dataclasses import dataclass
from datetime import datetime

from config import settings


logger = logging.getLogger(__name__)


@dataclass
class EmailMessageRequest:
    """A single outbound message"""
    to: str
    subject: str
    text: str
    html: Optional[str] = None
    from_email: Optional[str] = None


@dataclass
class NotificationResult:
    """Result of sending a notification"""
    success: bool
    recipient: str
    message_id: Optional[str] = None
    delivered_at: Optional[datetime] = None
    error: Optional[str] = None


class NotificationService:
    """
    Email delivery for caretaker alerts.

    When MAIL_HOST is not configured messages are written to the log and
    reported as delivered, so local runs exercise the full job.
    """

    def __init__(
        self,
        host: Optional[str] = None,
        port: Optional[int] = None,
        username: Optional[str] = None,
        password: Optional[str] = None,
        use_tls: Optional[bool] = None,
        timeout: Optional[int] = None
    ):
        self.host = host if host is not None else settings.MAIL_HOST
        self.port = port or settings.MAIL_PORT
        self.username = username if username is not None else settings.MAIL_USER
        self.password = password if password is not None else settings.MAIL_PASSWORD
        self.use_tls = settings.MAIL_USE_TLS if use_tls is None else use_tls
        self.timeout = timeout or settings.MAIL_TIMEOUT_SECONDS

    @property
    def email_enabled(self) -> bool:
        return bool(self.host)

    @property
    def default_sender(self) -> str:
        address = self.username or f"alerts@{self.host or 'localhost'}"
        return formataddr((settings.MAIL_FROM_NAME, address))

    async def send_email(self, request: EmailMessageRequest) -> NotificationResult:
        """
        Send one email

        Args:
            request: Recipient, subject and bodies

        Returns:
            NotificationResult; delivery errors are reported, not raised
        """
        if not self.email_enabled:
            logger.info(f"[EMAIL] To: {request.to} | Subject: {request.subject}")
            logger.debug(f"[EMAIL] Body:\n{request.text}")
            return NotificationResult(
                success=True,
                recipient=request.to,
                message_id=f"logged_{datetime.utcnow().timestamp()}",
                delivered_at=datetime.utcnow()
            )

        message = self._build_message(request)

        try:
            await asyncio.to_thread(self._deliver, message)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Email send error to {request.to}: {e}")
            return NotificationResult(
                success=False,
                recipient=request.to,
                error=str(e)
            )

        logger.info(f"Email sent to {request.to}: {request.subject}")
        return NotificationResult(
            success=True,
            recipient=request.to,
            message_id=message["Message-ID"],
            delivered_at=datetime.utcnow()
        )

    def _build_message(self, request: EmailMessageRequest) -> EmailMessage:
        message = EmailMessage()
        message["From"] = request.from_email or self.default_sender
        message["To"] = request.to
        message["Subject"] = request.subject
        message["Message-ID"] = make_msgid(domain=self.host)
        message.set_content(request.text)
        if request.html:
            message.add_alternative(request.html, subtype="html")
        return message

    def _deliver(self, message: EmailMessage) -> None:
        with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as smtp:
            if self.use_tls:
                smtp.starttls()
            if self.username and self.password:
                smtp.login(self.username, self.password)
            smtp.send_message(message)


# Singleton instance
notification_service = NotificationService()
