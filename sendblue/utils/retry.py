"""
Retry utility with exponential backoff for handling transient failures.

``Sendblue.call`` makes exactly one attempt; callers that want
resilience against rate limits (429) or Sendblue outages (5xx) wrap
their calls explicitly::

    await with_retry(lambda: client.call("get", "/accounts/contacts"))
"""

from __future__ import annotations

import asyncio
import random
from collections.abc import Mapping
from typing import Awaitable, Callable, TypeVar

import aiohttp

from sendblue import errors as sendblue_errors
from sendblue.utils import errors, logger

log = logger.create_logger("Retry")

T = TypeVar("T")


def _status_of(error: BaseException) -> int | None:
    """Return the HTTP status carried by *error*, if any."""
    for attr in ("status_code", "status"):
        status = getattr(error, attr, None)
        if isinstance(status, int):
            return status
    return None


def _is_rate_limit_error(error: BaseException) -> bool:
    """Check if the error is a rate limit (429) error."""
    if _status_of(error) == 429:
        return True
    return "rate limit" in str(error).lower()


def _is_retryable_error(error: BaseException) -> bool:
    """Check if the error is retryable (rate limit, server or connection error)."""
    if _is_rate_limit_error(error):
        return True
    status = _status_of(error)
    if status is not None and 500 <= status < 600:
        return True
    return isinstance(error, (aiohttp.ClientConnectionError, ConnectionError, TimeoutError))


def _get_retry_after_ms(error: BaseException) -> int | None:
    """Try to extract retry-after information from the error."""
    if isinstance(error, sendblue_errors.SendblueError):
        retry_after = error.cause.retry_after
        return retry_after * 1000 if retry_after is not None else None
    headers = getattr(error, "headers", None)
    if not isinstance(headers, Mapping):
        return None
    retry_after = headers.get("retry-after") or headers.get("Retry-After")
    if not retry_after:
        return None
    try:
        return int(retry_after) * 1000
    except (ValueError, TypeError):
        return None


async def with_retry(
    fn: Callable[[], Awaitable[T]],
    *,
    max_retries: int = 3,
    initial_delay_ms: int = 1000,
    max_delay_ms: int = 30000,
    backoff_multiplier: float = 2.0,
    context: str | None = None,
) -> T:
    """
    Execute an async function with automatic retry on transient failures.
    Uses exponential backoff with jitter; a ``retry-after`` header on the
    error takes precedence over the computed delay.
    """
    delay = initial_delay_ms

    for attempt in range(max_retries + 1):
        try:
            return await fn()
        except Exception as error:
            if not _is_retryable_error(error):
                raise

            if attempt >= max_retries:
                log.warn(
                    "All retry attempts exhausted",
                    {
                        "context": context,
                        "attempts": attempt + 1,
                        "error": errors.get_error_message(error),
                    },
                )
                raise

            retry_after_ms = _get_retry_after_ms(error)
            actual_delay = retry_after_ms if retry_after_ms is not None else delay

            jitter = actual_delay * 0.2 * (random.random() * 2 - 1)
            delay_with_jitter = max(0, min(round(actual_delay + jitter), max_delay_ms))

            log.warn(
                "Retrying after transient error",
                {
                    "context": context,
                    "attempt": attempt + 1,
                    "maxRetries": max_retries,
                    "delayMs": delay_with_jitter,
                    "isRateLimit": _is_rate_limit_error(error),
                    "error": errors.get_error_message(error)[:100],
                },
            )

            await asyncio.sleep(delay_with_jitter / 1000)
            delay = min(int(delay * backoff_multiplier), max_delay_ms)

    raise AssertionError("unreachable")
