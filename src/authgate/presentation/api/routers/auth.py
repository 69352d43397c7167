"""Authentication router: signup, signin, logout, verification and reset."""

from typing import Annotated

from fastapi import APIRouter, Query, Request, Response, status

from authgate.presentation.api.dependencies import LifecycleService, SettingsDep
from authgate.presentation.api.exception_handlers import auth_error_response
from authgate.presentation.api.schemas.auth import (
    MessageResponse,
    ResetPasswordRequest,
    SendResetRequest,
    SessionResponse,
    SigninRequest,
    SignupRequest,
)
from authgate_auth.schemas import SessionPair
from authgate_config.settings import Settings
from authgate_identity import CreatedButNotNotifiedError

router = APIRouter()

ACCESS_TOKEN_COOKIE = "access_token"  # NOQA: S105
REFRESH_TOKEN_COOKIE = "refresh_token"  # NOQA: S105

TokenQuery = Annotated[str | None, Query()]


def _set_session_cookies(
    response: Response,
    sessions: SessionPair,
    settings: Settings,
) -> None:
    """Set both session tokens as HttpOnly cookies.

    Cookie expiry equals token expiry, so the already-expired tokens
    issued at logout make the browser drop the cookies.
    """
    for key, session in (
        (ACCESS_TOKEN_COOKIE, sessions.access),
        (REFRESH_TOKEN_COOKIE, sessions.refresh),
    ):
        response.set_cookie(
            key=key,
            value=session.token,
            expires=session.expires_at,
            httponly=True,
            secure=settings.api_cookie_secure,
            samesite=settings.api_cookie_samesite,
            path="/",
            domain=settings.api_cookie_domain,
        )


@router.post(
    "/signup",
    status_code=status.HTTP_201_CREATED,
    summary="Register a new account",
    responses={
        201: {"description": "Account created, verification email sent"},
        400: {"description": "Missing field or invalid email"},
        409: {"description": "Username or email already registered"},
        500: {"description": "Internal failure (account may exist without email)"},
    },
)
async def signup(
    request: Request,
    response: Response,
    lifecycle: LifecycleService,
    settings: SettingsDep,
    body: SignupRequest = SignupRequest(),
) -> SessionResponse:
    try:
        created = await lifecycle.signup(body.username, body.email, body.password)
    except CreatedButNotNotifiedError as e:
        error_response = auth_error_response(request, e)
        _set_session_cookies(error_response, e.sessions, settings)
        return error_response  # type: ignore[return-value]

    _set_session_cookies(response, created.sessions, settings)
    return SessionResponse(
        identity_id=created.identity_id,
        access_token_expires_at=created.sessions.access.expires_at,
        refresh_token_expires_at=created.sessions.refresh.expires_at,
    )


@router.post(
    "/signin",
    summary="Sign in with email and password",
    responses={
        200: {"description": "Signed in, session cookies set"},
        401: {"description": "Incorrect password"},
        404: {"description": "Email not associated with an account"},
    },
)
async def signin(
    response: Response,
    lifecycle: LifecycleService,
    settings: SettingsDep,
    body: SigninRequest = SigninRequest(),
) -> SessionResponse:
    authenticated = await lifecycle.signin(body.email, body.password)
    _set_session_cookies(response, authenticated.sessions, settings)
    return SessionResponse(
        identity_id=authenticated.identity_id,
        access_token_expires_at=authenticated.sessions.access.expires_at,
        refresh_token_expires_at=authenticated.sessions.refresh.expires_at,
    )


@router.post("/logout", summary="Log out")
async def logout(
    response: Response,
    lifecycle: LifecycleService,
    settings: SettingsDep,
) -> MessageResponse:
    logged_out = await lifecycle.logout()
    _set_session_cookies(response, logged_out.sessions, settings)
    return MessageResponse(message="Logged out")


@router.post(
    "/verify",
    summary="Verify an email address",
    responses={
        400: {"description": "Token parameter missing"},
        404: {"description": "Invalid token"},
    },
)
async def verify(
    lifecycle: LifecycleService,
    token: TokenQuery = None,
) -> MessageResponse:
    await lifecycle.verify(token)
    return MessageResponse(message="Email verified")


@router.post(
    "/sendreset",
    summary="Request a password reset email",
    responses={
        200: {"description": "Reset requested (sent if the email has an account)"},
        400: {"description": "Invalid email address"},
    },
)
async def send_reset(
    lifecycle: LifecycleService,
    body: SendResetRequest = SendResetRequest(),
) -> MessageResponse:
    await lifecycle.request_reset(body.email)
    return MessageResponse(
        message="If this email is registered, a reset code has been sent",
    )


@router.post(
    "/resetpw",
    summary="Reset the password with a reset token",
    responses={
        400: {"description": "Missing field or token"},
        404: {"description": "Username and token pair does not exist"},
    },
)
async def reset_password(
    lifecycle: LifecycleService,
    body: ResetPasswordRequest = ResetPasswordRequest(),
    token: TokenQuery = None,
) -> MessageResponse:
    await lifecycle.complete_reset(body.username, body.email, body.password, token)
    return MessageResponse(message="Password has been reset")
