"""End-to-end lifecycle flows over the SQLite identity store."""

import pytest

from authgate_auth import (
    InvalidCredentialsError,
    InvalidTokenError,
    JWTClaimsSigner,
    PasswordHashingService,
    SessionIssuer,
    SessionPurpose,
    TokenGenerator,
)
from authgate_identity import (
    AccountLifecycleService,
    Authenticated,
    Created,
    CreatedButNotNotifiedError,
    EmailTakenError,
    InvalidResetPairError,
    LifecyclePolicy,
    PasswordChanged,
    ResetRequested,
    RetryPolicy,
    UsernameTakenError,
    Verified,
)
from authgate_identity.infrastructure.persistence.sqlalchemy import (
    IdentityStoreSQLAlchemy,
)
from tests.shared.fixtures.notifier import FailingNotifier, RecordingNotifier

ISSUER = "authgate"
NO_DELAY = RetryPolicy(max_retries=2, retry_base_delay_ms=0, retry_max_delay_ms=0)


def _build(session, notifier) -> tuple[AccountLifecycleService, SessionIssuer]:
    issuer = SessionIssuer(JWTClaimsSigner("flow-secret", ISSUER), issuer=ISSUER)
    service = AccountLifecycleService(
        identity_store=IdentityStoreSQLAlchemy(session),
        password_service=PasswordHashingService(rounds=4),
        token_generator=TokenGenerator(),
        session_issuer=issuer,
        notifier=notifier,
        policy=LifecyclePolicy(notifier_retry=NO_DELAY),
    )
    return service, issuer


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def lifecycle(db_session, notifier):
    return _build(db_session, notifier)


class TestAliceScenario:
    async def test_full_lifecycle(self, lifecycle, notifier):
        service, _ = lifecycle

        created = await service.signup("alice", "alice@x.com", "pw1")
        assert isinstance(created, Created)

        assert isinstance(await service.signin("alice@x.com", "pw1"), Authenticated)
        with pytest.raises(InvalidCredentialsError):
            await service.signin("alice@x.com", "wrong")

        assert await service.request_reset("alice@x.com") == ResetRequested(
            email="alice@x.com",
        )
        reset_token = notifier.last_token()

        changed = await service.complete_reset("alice", "alice@x.com", "pw2", reset_token)
        assert changed == PasswordChanged(username="alice")

        with pytest.raises(InvalidCredentialsError):
            await service.signin("alice@x.com", "pw1")
        authenticated = await service.signin("alice@x.com", "pw2")
        assert authenticated.identity_id == created.identity_id


class TestSignupFlow:
    async def test_signup_sessions_are_valid(self, lifecycle):
        service, issuer = lifecycle

        created = await service.signup("alice", "alice@x.com", "pw1")

        access = issuer.verify_session(created.sessions.access.token, SessionPurpose.ACCESS)
        refresh = issuer.verify_session(
            created.sessions.refresh.token,
            SessionPurpose.REFRESH,
        )
        assert access.user_id == created.identity_id
        assert refresh.user_id == created.identity_id

    async def test_duplicates_rejected(self, lifecycle):
        service, _ = lifecycle
        await service.signup("alice", "alice@x.com", "pw1")

        with pytest.raises(UsernameTakenError):
            await service.signup("alice", "other@x.com", "pw1")
        with pytest.raises(EmailTakenError):
            await service.signup("bob", "ALICE@x.com", "pw1")

    async def test_notification_failure_keeps_identity(self, db_session):
        service, _ = _build(db_session, FailingNotifier())

        with pytest.raises(CreatedButNotNotifiedError) as exc_info:
            await service.signup("alice", "alice@x.com", "pw1")

        authenticated = await service.signin("alice@x.com", "pw1")
        assert authenticated.identity_id == exc_info.value.identity_id


class TestVerifyFlow:
    async def test_verify_once(self, lifecycle, notifier, db_session):
        service, _ = lifecycle
        created = await service.signup("alice", "alice@x.com", "pw1")
        token = notifier.last_token()

        assert await service.verify(token) == Verified(identity_id=created.identity_id)

        store = IdentityStoreSQLAlchemy(db_session)
        assert (await store.find_by_email("alice@x.com")).verified is True

        with pytest.raises(InvalidTokenError):
            await service.verify(token)

    async def test_unknown_token(self, lifecycle):
        service, _ = lifecycle
        await service.signup("alice", "alice@x.com", "pw1")

        with pytest.raises(InvalidTokenError):
            await service.verify("zzzzzz")

    async def test_verification_token_is_not_a_reset_token(self, lifecycle, notifier):
        service, _ = lifecycle
        await service.signup("alice", "alice@x.com", "pw1")
        verification_token = notifier.last_token()

        with pytest.raises(InvalidResetPairError):
            await service.complete_reset(
                "alice",
                "alice@x.com",
                "pw2",
                verification_token,
            )


class TestResetFlow:
    async def test_reset_token_is_single_use(self, lifecycle, notifier):
        service, _ = lifecycle
        await service.signup("alice", "alice@x.com", "pw1")
        await service.request_reset("alice@x.com")
        token = notifier.last_token()

        await service.complete_reset("alice", "alice@x.com", "pw2", token)

        with pytest.raises(InvalidResetPairError):
            await service.complete_reset("alice", "alice@x.com", "pw3", token)
        assert isinstance(await service.signin("alice@x.com", "pw2"), Authenticated)

    async def test_latest_reset_token_wins(self, lifecycle, notifier):
        service, _ = lifecycle
        await service.signup("alice", "alice@x.com", "pw1")
        await service.request_reset("alice@x.com")
        first = notifier.last_token()
        await service.request_reset("alice@x.com")
        second = notifier.last_token()

        with pytest.raises(InvalidResetPairError):
            await service.complete_reset("alice", "alice@x.com", "pw2", first)
        await service.complete_reset("alice", "alice@x.com", "pw2", second)

    async def test_reset_cannot_touch_another_identity(self, lifecycle, notifier):
        """Alice's reset token used with Bob's email changes nothing."""
        service, _ = lifecycle
        await service.signup("alice", "alice@x.com", "pw-a")
        await service.signup("bob", "bob@x.com", "pw-b")
        await service.request_reset("alice@x.com")
        token = notifier.last_token()

        with pytest.raises(InvalidResetPairError):
            await service.complete_reset("alice", "bob@x.com", "hijack", token)

        assert isinstance(await service.signin("bob@x.com", "pw-b"), Authenticated)
        assert isinstance(await service.signin("alice@x.com", "pw-a"), Authenticated)
        # the token was burned by the failed attempt
        with pytest.raises(InvalidResetPairError):
            await service.complete_reset("alice", "alice@x.com", "pw2", token)

    async def test_unknown_email_is_indistinguishable(self, lifecycle, notifier):
        service, _ = lifecycle
        await service.signup("alice", "alice@x.com", "pw1")
        sent_before = len(notifier.sent)

        result = await service.request_reset("ghost@x.com")

        assert result == ResetRequested(email="ghost@x.com")
        assert len(notifier.sent) == sent_before


class TestLogoutFlow:
    async def test_logout_tokens_are_expired(self, lifecycle):
        service, issuer = lifecycle

        logged_out = await service.logout()

        with pytest.raises(InvalidTokenError):
            issuer.verify_session(logged_out.sessions.access.token, SessionPurpose.ACCESS)
        with pytest.raises(InvalidTokenError):
            issuer.verify_session(
                logged_out.sessions.refresh.token,
                SessionPurpose.REFRESH,
            )
