from authgate.presentation.api.schemas.auth import (
    MessageResponse,
    ResetPasswordRequest,
    SendResetRequest,
    SessionResponse,
    SigninRequest,
    SignupRequest,
)

__all__ = [
    "MessageResponse",
    "ResetPasswordRequest",
    "SendResetRequest",
    "SessionResponse",
    "SigninRequest",
    "SignupRequest",
]
