"""Exponential backoff with jitter for transient collaborator failures."""

import asyncio
import logging
import random
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TypeVar

from authgate_identity.exceptions import NotificationConfigError, NotificationError

__all__ = ["RetryPolicy", "with_retries"]

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class RetryPolicy:
    max_retries: int = 2
    retry_base_delay_ms: int = 200
    retry_max_delay_ms: int = 2000


async def with_retries(
    func: Callable[[], Awaitable[T]],
    policy: RetryPolicy,
    retryable_errors: tuple[type[Exception], ...] = (NotificationError,),
    permanent_errors: tuple[type[Exception], ...] = (NotificationConfigError,),
) -> T:
    """Execute function with exponential backoff retry.

    Parameters
    ----------
    func
        Async function to execute (no arguments)
    policy
        Retry count and delay bounds
    retryable_errors
        Error types that trigger another attempt
    permanent_errors
        Subtypes of the retryable errors that are raised immediately

    Returns
    -------
    Result from the first successful execution

    Raises
    ------
    Exception
        The last retryable error once all attempts are exhausted
    """
    last_error: Exception | None = None

    for attempt in range(policy.max_retries + 1):
        try:
            return await func()
        except permanent_errors:
            raise
        except retryable_errors as e:
            last_error = e

            if attempt == policy.max_retries:
                break

            base_delay = policy.retry_base_delay_ms * (2**attempt)
            jitter = random.uniform(0, base_delay * 0.1)
            delay = min(base_delay + jitter, policy.retry_max_delay_ms) / 1000

            logger.warning(
                "Attempt %d/%d failed: %s. Retrying in %.2fs",
                attempt + 1,
                policy.max_retries + 1,
                e,
                delay,
            )

            await asyncio.sleep(delay)

    if last_error is not None:
        raise last_error
    raise RuntimeError("Retry loop exited without error or result")
