from authgate_identity.infrastructure.email.email_service import (
    PASSWORD_RESET_TEMPLATE,
    SIGNUP_TEMPLATE,
    EmailService,
)
from authgate_identity.infrastructure.email.notifier import Notifier

__all__ = [
    "PASSWORD_RESET_TEMPLATE",
    "SIGNUP_TEMPLATE",
    "EmailService",
    "Notifier",
]
