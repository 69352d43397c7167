"""Tunables of the account lifecycle."""

from dataclasses import dataclass, field
from datetime import timedelta

from authgate_config.settings import Settings
from authgate_identity.application.retry import RetryPolicy


@dataclass(frozen=True)
class LifecyclePolicy:
    verify_token_size: int = 6
    reset_token_size: int = 6
    reset_token_ttl: timedelta = timedelta(minutes=60)
    token_generation_max_attempts: int = 5
    store_timeout: float = 5.0
    notifier_timeout: float = 10.0
    notifier_retry: RetryPolicy = field(default_factory=RetryPolicy)

    @classmethod
    def from_settings(cls, settings: Settings) -> "LifecyclePolicy":
        return cls(
            verify_token_size=settings.verify_token_size,
            reset_token_size=settings.reset_token_size,
            reset_token_ttl=timedelta(minutes=settings.reset_token_expire_minutes),
            token_generation_max_attempts=settings.token_generation_max_attempts,
            store_timeout=settings.store_timeout_seconds,
            notifier_timeout=settings.notifier_timeout_seconds,
            notifier_retry=RetryPolicy(
                max_retries=settings.notifier_max_retries,
                retry_base_delay_ms=settings.notifier_retry_base_delay_ms,
                retry_max_delay_ms=settings.notifier_retry_max_delay_ms,
            ),
        )
