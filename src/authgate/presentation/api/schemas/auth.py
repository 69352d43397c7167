"""Authentication schemas for request/response models.

Request fields default to empty strings: presence and format checks
belong to the lifecycle controller, which answers them with typed
errors instead of a generic validation response.
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class SignupRequest(BaseModel):
    """Request schema for account registration."""

    username: str = Field(default="", max_length=150)
    email: str = Field(default="", max_length=255)
    password: str = Field(default="", max_length=1024)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "username": "alice",
                "email": "alice@example.com",
                "password": "securepassword123",
            },
        },
    )


class SigninRequest(BaseModel):
    """Request schema for signin."""

    email: str = Field(default="", max_length=255)
    password: str = Field(default="", max_length=1024)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "email": "alice@example.com",
                "password": "securepassword123",
            },
        },
    )


class SendResetRequest(BaseModel):
    """Request schema for requesting a password reset."""

    email: str = Field(default="", max_length=255)


class ResetPasswordRequest(BaseModel):
    """Request schema for completing a password reset.

    The reset token itself travels as the ``token`` query parameter.
    """

    username: str = Field(default="", max_length=150)
    email: str = Field(default="", max_length=255)
    password: str = Field(default="", max_length=1024)


class SessionResponse(BaseModel):
    """Session expiry information. The tokens travel as cookies."""

    identity_id: UUID
    access_token_expires_at: datetime
    refresh_token_expires_at: datetime


class MessageResponse(BaseModel):
    """Generic message response."""

    message: str
