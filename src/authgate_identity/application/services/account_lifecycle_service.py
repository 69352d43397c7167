"""Account lifecycle controller.

Orchestrates signup, signin, logout, email verification and the two
password reset steps over the identity store, the password verifier,
the token generator, the session issuer and the notifier.

Each operation either completes fully or fails with a typed error
before its first store mutation, with one exception: signup stores the
identity before notifying, and a notification failure after that point
surfaces as ``CreatedButNotNotifiedError``.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from datetime import datetime
from typing import TypeVar

from authgate_auth.exceptions import (
    HashingError,
    InvalidCredentialsError,
    InvalidTokenError,
    TokenCollisionError,
)
from authgate_auth.services import (
    PasswordHashingService,
    SessionIssuer,
    TokenGenerator,
    token_digest,
)
from authgate_auth.time import utc_now
from authgate_identity.application.outcomes import (
    Authenticated,
    Created,
    LoggedOut,
    PasswordChanged,
    ResetRequested,
    Verified,
)
from authgate_identity.application.policy import LifecyclePolicy
from authgate_identity.application.retry import with_retries
from authgate_identity.domain.identity import (
    Email,
    Identity,
    IdentityStore,
    normalize_email,
)
from authgate_identity.exceptions import (
    CreatedButNotNotifiedError,
    EmailTakenError,
    IdentityNotFoundError,
    InvalidEmailError,
    InvalidResetPairError,
    MissingFieldError,
    MissingTokenError,
    NotificationError,
    StorageError,
    UsernameTakenError,
)
from authgate_identity.infrastructure.email import (
    PASSWORD_RESET_TEMPLATE,
    SIGNUP_TEMPLATE,
    Notifier,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

SIGNUP_SUBJECT = "Email Verification"
PASSWORD_RESET_SUBJECT = "Password Reset"


class AccountLifecycleService:
    """State machine over identities.

    Examples
    --------
    >>> service = AccountLifecycleService(store, hasher, tokens, issuer, notifier)
    >>> created = await service.signup("alice", "alice@x.com", "pw1")
    >>> authenticated = await service.signin("alice@x.com", "pw1")
    """

    def __init__(  # noqa: PLR0913
        self,
        identity_store: IdentityStore,
        password_service: PasswordHashingService,
        token_generator: TokenGenerator,
        session_issuer: SessionIssuer,
        notifier: Notifier,
        policy: LifecyclePolicy | None = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._store = identity_store
        self._password_service = password_service
        self._token_generator = token_generator
        self._session_issuer = session_issuer
        self._notifier = notifier
        self._policy = policy or LifecyclePolicy()
        self._clock = clock

    async def signup(self, username: str, email: str, password: str) -> Created:
        """Register a new identity and send its verification token.

        Raises
        ------
        MissingFieldError
            If username, email or password is empty
        InvalidEmailError
            If the email is malformed
        UsernameTakenError
            If the username is already registered
        EmailTakenError
            If the email is already registered
        HashingError
            If the password cannot be hashed
        StorageError
            If the store fails, times out, or no unique token was found
        CreatedButNotNotifiedError
            If the identity was stored but the notification failed
        """
        self._require(username=username, email=email, password=password)
        address = Email(email)

        if await self._call_store(
            "exists_by_username",
            self._store.exists_by_username(username),
        ):
            logger.warning("Signup rejected, username taken: %s", username)
            raise UsernameTakenError(username)

        if await self._call_store(
            "exists_by_email",
            self._store.exists_by_email(address.value),
        ):
            logger.warning("Signup rejected, email taken: %s", address.value)
            raise EmailTakenError(address.value)

        password_hash = self._hash_password(password)
        verification_token = await self._generate_verification_token()

        identity = Identity.create(
            username=username,
            email=address,
            password_hash=password_hash,
            verification_token=token_digest(verification_token),
        )
        await self._call_store("insert", self._store.insert(identity))
        logger.info("Identity created: %s (%s)", identity.id, username)

        sessions = self._session_issuer.issue_pair(identity.id)

        try:
            await self._notify(
                identity.email,
                SIGNUP_SUBJECT,
                SIGNUP_TEMPLATE,
                {"token": verification_token, "username": username},
            )
        except NotificationError as e:
            logger.error(
                "Identity %s created but verification email failed: %s",
                identity.id,
                e.message,
            )
            raise CreatedButNotNotifiedError(identity.id, sessions) from e

        return Created(identity_id=identity.id, sessions=sessions)

    async def signin(self, email: str, password: str) -> Authenticated:
        """Authenticate by email and password.

        Raises
        ------
        MissingFieldError
            If email or password is empty
        IdentityNotFoundError
            If no identity has this email
        InvalidCredentialsError
            If the password does not match
        StorageError
            If the store fails or times out
        """
        self._require(email=email, password=password)
        normalized = normalize_email(email)

        identity = await self._call_store(
            "find_by_email",
            self._store.find_by_email(normalized),
        )
        if identity is None:
            logger.warning("Signin for unknown email: %s", normalized)
            raise IdentityNotFoundError(normalized)

        if not self._password_service.verify(password, identity.password_hash):
            logger.warning("Signin rejected, incorrect password: %s", identity.id)
            raise InvalidCredentialsError

        sessions = self._session_issuer.issue_pair(identity.id)
        logger.info("Identity signed in: %s", identity.id)
        return Authenticated(identity_id=identity.id, sessions=sessions)

    async def logout(self) -> LoggedOut:
        """Hand out already-expired replacement sessions."""
        return LoggedOut(sessions=self._session_issuer.invalidate_pair())

    async def verify(self, token: str | None) -> Verified:
        """Mark the identity holding this verification token as verified.

        Raises
        ------
        MissingTokenError
            If no token was given
        InvalidTokenError
            If no identity holds the token
        StorageError
            If the store fails or times out
        """
        if not token:
            raise MissingTokenError

        digest = token_digest(token)
        identity = await self._call_store(
            "find_by_verification_token",
            self._store.find_by_verification_token(digest),
        )
        if identity is None:
            logger.warning("Verification with unknown token")
            raise InvalidTokenError("Invalid token")

        if not await self._call_store("set_verified", self._store.set_verified(digest)):
            logger.warning("Verification token consumed concurrently: %s", identity.id)
            raise InvalidTokenError("Invalid token")

        logger.info("Identity verified: %s", identity.id)
        return Verified(identity_id=identity.id)

    async def request_reset(self, email: str | None) -> ResetRequested:
        """Store a fresh reset token and send it to ``email``.

        The outcome is the same whether or not an account uses the email.

        Raises
        ------
        InvalidEmailError
            If the email is empty or malformed
        StorageError
            If the store fails or times out
        NotificationError
            If the reset email could not be delivered
        """
        if not email or not email.strip():
            raise InvalidEmailError
        address = Email(email)

        reset_token = self._token_generator.generate(self._policy.reset_token_size)
        expires_at = self._clock() + self._policy.reset_token_ttl

        matched = await self._call_store(
            "set_reset_token",
            self._store.set_reset_token(
                address.value,
                token_digest(reset_token),
                expires_at,
            ),
        )
        if not matched:
            logger.debug("Password reset requested for unknown email: %s", address.value)
            return ResetRequested(email=address.value)

        await self._notify(
            address.value,
            PASSWORD_RESET_SUBJECT,
            PASSWORD_RESET_TEMPLATE,
            {"token": reset_token},
        )
        logger.info("Password reset requested: %s", address.value)
        return ResetRequested(email=address.value)

    async def complete_reset(
        self,
        username: str,
        email: str,
        password: str,
        token: str | None,
    ) -> PasswordChanged:
        """Replace the password using a reset token.

        Raises
        ------
        MissingFieldError
            If username, email or password is empty
        MissingTokenError
            If no token was given
        InvalidResetPairError
            If the username does not hold this unexpired token, or the
            email belongs to another identity
        HashingError
            If the password cannot be hashed
        StorageError
            If the store fails or times out
        """
        self._require(username=username, email=email, password=password)
        if not token:
            raise MissingTokenError

        digest = token_digest(token)
        now = self._clock()

        if not await self._call_store(
            "exists_by_username_and_reset_token",
            self._store.exists_by_username_and_reset_token(username, digest, now),
        ):
            logger.warning("Password reset rejected, bad pair for: %s", username)
            raise InvalidResetPairError(username)

        password_hash = self._hash_password(password)

        updated = await self._call_store(
            "update_password",
            self._store.update_password(
                normalize_email(email),
                password_hash,
                username=username,
                reset_token_digest=digest,
                now=now,
            ),
        )
        if not updated:
            # Token was valid for the username; burn it anyway
            await self._call_store(
                "clear_reset_token",
                self._store.clear_reset_token(username, digest),
            )
            logger.warning("Password reset rejected, email mismatch for: %s", username)
            raise InvalidResetPairError(username)

        logger.info("Password reset completed for: %s", username)
        return PasswordChanged(username=username)

    def _require(self, **fields: str | None) -> None:
        for name, value in fields.items():
            if not value or not value.strip():
                raise MissingFieldError(name)

    def _hash_password(self, password: str) -> str:
        password_hash = self._password_service.hash(password)
        if not self._password_service.verify(password, password_hash):
            msg = "Password hash does not verify"
            raise HashingError(msg)
        return password_hash

    async def _generate_verification_token(self) -> str:
        async def is_taken(digest: str) -> bool:
            return await self._call_store(
                "exists_by_verification_token",
                self._store.exists_by_verification_token(digest),
            )

        try:
            return await self._token_generator.generate_unique(
                self._policy.verify_token_size,
                is_taken,
                max_attempts=self._policy.token_generation_max_attempts,
            )
        except TokenCollisionError as e:
            logger.error("Could not generate a unique verification token: %s", e.details)
            msg = "Could not generate a unique verification token"
            raise StorageError(msg, details=e.details) from e

    async def _call_store(self, operation: str, call: Awaitable[T]) -> T:
        try:
            return await asyncio.wait_for(call, timeout=self._policy.store_timeout)
        except TimeoutError as e:
            logger.error("Identity store %s timed out", operation)
            raise StorageError(
                "Identity store timed out",
                details={"operation": operation, "timeout": self._policy.store_timeout},
            ) from e

    async def _notify(
        self,
        recipient_email: str,
        subject: str,
        template_name: str,
        variables: dict[str, str],
    ) -> None:
        async def attempt() -> None:
            try:
                await asyncio.wait_for(
                    self._notifier.send(recipient_email, subject, template_name, variables),
                    timeout=self._policy.notifier_timeout,
                )
            except TimeoutError as e:
                raise NotificationError(
                    "Notification timed out",
                    details={"timeout": self._policy.notifier_timeout},
                ) from e

        await with_retries(attempt, self._policy.notifier_retry)
