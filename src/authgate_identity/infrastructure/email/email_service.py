import asyncio
import logging
import smtplib
import ssl
from collections.abc import Mapping
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from authgate_config.settings import Settings
from authgate_identity.exceptions import NotificationConfigError, NotificationError

logger = logging.getLogger(__name__)

SIGNUP_TEMPLATE = "user-signup.html"
PASSWORD_RESET_TEMPLATE = "password-reset.html"

SIGNUP_TEXT = """Hello {username},

Thanks for signing up. Use the code below to verify your email address:

{token}

If you didn't create an account, you can safely ignore this email.

-- {app_name}
"""

SIGNUP_HTML = """
<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
</head>
<body style="font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif; background-color: #f9fafb; margin: 0; padding: 20px;">
    <div style="max-width: 600px; margin: 0 auto; background-color: #ffffff; border-radius: 8px; padding: 40px;">
        <h2 style="color: #111827; margin-top: 0;">Verify your email</h2>
        <p style="color: #374151; line-height: 1.6;">Hello {username}, thanks for signing up.</p>
        <p style="color: #374151; line-height: 1.6;">Your verification code is:</p>
        <p style="margin: 30px 0; text-align: center; font-size: 28px; font-weight: 600; letter-spacing: 4px; color: #111827;">{token}</p>
        <p style="color: #9ca3af; font-size: 13px;">If you didn't create an account, you can safely ignore this email.</p>
    </div>
</body>
</html>
"""

PASSWORD_RESET_TEXT = """Hello,

You requested a password reset for your {app_name} account.

Use the code below together with your username to choose a new password:

{token}

If you didn't request this, you can safely ignore this email.

-- {app_name}
"""

PASSWORD_RESET_HTML = """
<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
</head>
<body style="font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif; background-color: #f9fafb; margin: 0; padding: 20px;">
    <div style="max-width: 600px; margin: 0 auto; background-color: #ffffff; border-radius: 8px; padding: 40px;">
        <h2 style="color: #111827; margin-top: 0;">Password Reset Request</h2>
        <p style="color: #374151; line-height: 1.6;">You requested a password reset for your {app_name} account.</p>
        <p style="color: #374151; line-height: 1.6;">Your reset code is:</p>
        <p style="margin: 30px 0; text-align: center; font-size: 28px; font-weight: 600; letter-spacing: 4px; color: #111827;">{token}</p>
        <p style="color: #9ca3af; font-size: 13px;">If you didn't request this, you can safely ignore this email.</p>
    </div>
</body>
</html>
"""

# template name -> (plain text body, html body)
TEMPLATES: dict[str, tuple[str, str]] = {
    SIGNUP_TEMPLATE: (SIGNUP_TEXT, SIGNUP_HTML),
    PASSWORD_RESET_TEMPLATE: (PASSWORD_RESET_TEXT, PASSWORD_RESET_HTML),
}


class EmailService:
    """SMTP notifier.

    Delivery is blocking ``smtplib`` work and runs in a worker thread.
    """

    def __init__(self, settings: Settings):
        self._settings = settings

    async def send(
        self,
        recipient_email: str,
        subject: str,
        template_name: str,
        variables: Mapping[str, str],
    ) -> None:
        text_body, html_body = self.render(template_name, variables)
        message = self._create_message(
            to_email=recipient_email,
            subject=subject,
            text_body=text_body,
            html_body=html_body,
        )
        await asyncio.to_thread(self._send_email, recipient_email, message)

    def render(
        self,
        template_name: str,
        variables: Mapping[str, str],
    ) -> tuple[str, str]:
        try:
            text_template, html_template = TEMPLATES[template_name]
        except KeyError as e:
            msg = f"Unknown email template: {template_name}"
            raise NotificationConfigError(
                msg,
                details={"template": template_name},
            ) from e

        context = {"app_name": self._settings.app_name, "username": "", **variables}
        try:
            return text_template.format(**context), html_template.format(**context)
        except KeyError as e:
            msg = f"Missing template variable: {e.args[0]}"
            raise NotificationConfigError(
                msg,
                details={"template": template_name},
            ) from e

    def _create_message(
        self,
        to_email: str,
        subject: str,
        text_body: str,
        html_body: str | None = None,
    ) -> MIMEMultipart:
        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = f"{self._settings.smtp_from_name} <{self._settings.smtp_from_email}>"
        msg["To"] = to_email

        msg.attach(MIMEText(text_body, "plain"))
        if html_body:
            msg.attach(MIMEText(html_body, "html"))

        return msg

    def _send_email(self, to_email: str, message: MIMEMultipart) -> None:
        if not self._settings.smtp_enabled:
            logger.warning(
                "SMTP disabled, email '%s' not sent to %s",
                message["Subject"],
                to_email,
            )
            return

        if not self._settings.smtp_host:
            logger.error("SMTP host not configured")
            msg = "SMTP host not configured"
            raise NotificationConfigError(msg)

        smtp_password = (
            self._settings.smtp_password.get_secret_value()
            if self._settings.smtp_password
            else ""
        )
        timeout = self._settings.notifier_timeout_seconds

        try:
            if self._settings.smtp_use_tls and not self._settings.smtp_starttls:
                # Implicit TLS (port 465)
                context = ssl.create_default_context()
                with smtplib.SMTP_SSL(
                    self._settings.smtp_host,
                    self._settings.smtp_port,
                    context=context,
                    timeout=timeout,
                ) as server:
                    if self._settings.smtp_user:
                        server.login(self._settings.smtp_user, smtp_password)
                    server.send_message(message)
            else:
                # STARTTLS (port 587) or plain
                with smtplib.SMTP(
                    self._settings.smtp_host,
                    self._settings.smtp_port,
                    timeout=timeout,
                ) as server:
                    if self._settings.smtp_starttls:
                        context = ssl.create_default_context()
                        server.starttls(context=context)
                    if self._settings.smtp_user:
                        server.login(self._settings.smtp_user, smtp_password)
                    server.send_message(message)

            logger.info("Email sent to %s", to_email)

        except (smtplib.SMTPException, OSError) as e:
            logger.error("Failed to send email to %s: %s", to_email, e)
            raise NotificationError(
                "Error sending notification",
                details={"recipient": to_email},
            ) from e
