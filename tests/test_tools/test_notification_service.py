"""
Tests for Notification Service
==============================

SMTP delivery is patched; nothing leaves the process.
"""

import smtplib
import pytest
from unittest.mock import patch

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

from tools.notification_service import EmailMessageRequest, NotificationService


@pytest.fixture
def request_message():
    return EmailMessageRequest(
        to="carer@example.com",
        subject="Missed Medication Alert",
        text="plain body",
        html="<p>html body</p>"
    )


@pytest.fixture
def smtp_service():
    return NotificationService(
        host="smtp.example.com",
        port=2525,
        username="alerts@example.com",
        password="secret",
        use_tls=True,
        timeout=5
    )


class TestLogOnlyMode:

    @pytest.mark.unit
    def test_email_disabled_without_host(self):
        assert NotificationService(host="").email_enabled is False

    @pytest.mark.asyncio
    async def test_send_logs_and_succeeds(self, request_message):
        service = NotificationService(host="")

        with patch("smtplib.SMTP") as mock_smtp:
            result = await service.send_email(request_message)

        assert result.success is True
        assert result.recipient == "carer@example.com"
        mock_smtp.assert_not_called()


class TestSmtpDelivery:

    @pytest.mark.asyncio
    async def test_send_success(self, smtp_service, request_message):
        with patch("smtplib.SMTP") as mock_smtp:
            result = await smtp_service.send_email(request_message)

        assert result.success is True
        assert result.message_id
        mock_smtp.assert_called_once_with("smtp.example.com", 2525, timeout=5)

        smtp = mock_smtp.return_value.__enter__.return_value
        smtp.starttls.assert_called_once()
        smtp.login.assert_called_once_with("alerts@example.com", "secret")

        sent = smtp.send_message.call_args[0][0]
        assert sent["To"] == "carer@example.com"
        assert sent["Subject"] == "Missed Medication Alert"
        assert sent.is_multipart()

    @pytest.mark.asyncio
    async def test_send_failure_is_reported(self, smtp_service, request_message):
        with patch("smtplib.SMTP") as mock_smtp:
            mock_smtp.return_value.__enter__.return_value.send_message.side_effect = \
                smtplib.SMTPRecipientsRefused({"carer@example.com": (550, b"no such user")})
            result = await smtp_service.send_email(request_message)

        assert result.success is False
        assert result.error

    @pytest.mark.asyncio
    async def test_connection_error_is_reported(self, smtp_service, request_message):
        with patch("smtplib.SMTP", side_effect=ConnectionRefusedError("refused")):
            result = await smtp_service.send_email(request_message)

        assert result.success is False
        assert "refused" in result.error

    @pytest.mark.unit
    def test_no_tls_no_login(self, request_message):
        service = NotificationService(host="localhost", port=25, username="", password="", use_tls=False)
        message = service._build_message(request_message)

        with patch("smtplib.SMTP") as mock_smtp:
            service._deliver(message)

        smtp = mock_smtp.return_value.__enter__.return_value
        smtp.starttls.assert_not_called()
        smtp.login.assert_not_called()
        smtp.send_message.assert_called_once_with(message)
