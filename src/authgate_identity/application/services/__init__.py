from authgate_identity.application.services.account_lifecycle_service import (
    PASSWORD_RESET_SUBJECT,
    SIGNUP_SUBJECT,
    AccountLifecycleService,
)

__all__ = [
    "PASSWORD_RESET_SUBJECT",
    "SIGNUP_SUBJECT",
    "AccountLifecycleService",
]
