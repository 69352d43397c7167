"""Unit tests for the SMTP EmailService notifier."""

import smtplib
from unittest.mock import MagicMock, patch

import pytest
from pydantic import SecretStr

from authgate_config.settings import Settings
from authgate_identity import EmailService, NotificationConfigError, NotificationError
from authgate_identity.infrastructure.email import (
    PASSWORD_RESET_TEMPLATE,
    SIGNUP_TEMPLATE,
)

SMTP_PATH = "authgate_identity.infrastructure.email.email_service.smtplib.SMTP"


def _settings(**overrides) -> Settings:
    values = {
        "jwt_secret_key": SecretStr("test-secret"),
        "smtp_enabled": True,
        "smtp_host": "smtp.example.com",
        "smtp_port": 587,
        "smtp_user": "mailer",
        "smtp_password": SecretStr("smtp-pass"),
        "smtp_from_email": "noreply@example.com",
        "smtp_starttls": True,
    }
    values.update(overrides)
    return Settings(**values)


class TestEmailServiceRender:
    def setup_method(self):
        self.service = EmailService(_settings())

    def test_signup_template_contains_token(self):
        text, html = self.service.render(
            SIGNUP_TEMPLATE,
            {"token": "Ab3dE9", "username": "alice"},
        )

        assert "Ab3dE9" in text
        assert "Ab3dE9" in html
        assert "alice" in text

    def test_reset_template_contains_token(self):
        text, html = self.service.render(PASSWORD_RESET_TEMPLATE, {"token": "Zz9Yy8"})

        assert "Zz9Yy8" in text
        assert "Zz9Yy8" in html

    def test_unknown_template(self):
        with pytest.raises(NotificationConfigError, match="Unknown email template"):
            self.service.render("missing.html", {"token": "x"})

    def test_missing_variable(self):
        with pytest.raises(NotificationConfigError, match="token"):
            self.service.render(PASSWORD_RESET_TEMPLATE, {})


class TestEmailServiceSend:
    async def test_sends_via_starttls(self):
        service = EmailService(_settings())

        with patch(SMTP_PATH) as smtp_cls:
            server = smtp_cls.return_value.__enter__.return_value
            await service.send(
                "alice@x.com",
                "Email Verification",
                SIGNUP_TEMPLATE,
                {"token": "Ab3dE9"},
            )

        smtp_cls.assert_called_once_with("smtp.example.com", 587, timeout=10.0)
        server.starttls.assert_called_once()
        server.login.assert_called_once_with("mailer", "smtp-pass")
        message = server.send_message.call_args.args[0]
        assert message["To"] == "alice@x.com"
        assert message["Subject"] == "Email Verification"

    async def test_disabled_smtp_is_a_successful_noop(self):
        service = EmailService(_settings(smtp_enabled=False))

        with patch(SMTP_PATH) as smtp_cls:
            await service.send(
                "alice@x.com",
                "Password Reset",
                PASSWORD_RESET_TEMPLATE,
                {"token": "Zz9Yy8"},
            )

        smtp_cls.assert_not_called()

    async def test_smtp_failure_becomes_notification_error(self):
        service = EmailService(_settings())
        server = MagicMock()
        server.send_message.side_effect = smtplib.SMTPServerDisconnected("gone")

        with patch(SMTP_PATH) as smtp_cls:
            smtp_cls.return_value.__enter__.return_value = server
            with pytest.raises(NotificationError):
                await service.send(
                    "alice@x.com",
                    "Password Reset",
                    PASSWORD_RESET_TEMPLATE,
                    {"token": "Zz9Yy8"},
                )

    async def test_connection_refused_becomes_notification_error(self):
        service = EmailService(_settings())

        with patch(SMTP_PATH, side_effect=ConnectionRefusedError("refused")):
            with pytest.raises(NotificationError):
                await service.send(
                    "alice@x.com",
                    "Password Reset",
                    PASSWORD_RESET_TEMPLATE,
                    {"token": "Zz9Yy8"},
                )

    async def test_missing_host(self):
        service = EmailService(_settings(smtp_host=""))

        with pytest.raises(NotificationConfigError, match="host"):
            await service.send(
                "alice@x.com",
                "Password Reset",
                PASSWORD_RESET_TEMPLATE,
                {"token": "Zz9Yy8"},
            )
