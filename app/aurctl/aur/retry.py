"""Retry policy for HTTP requests.

Wraps a single request attempt with bounded exponential backoff. The
policy knows nothing about what the request does.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

import httpx

logger = logging.getLogger(__name__)

RETRYABLE_STATUSES: frozenset[int] = frozenset(
    {
        httpx.codes.REQUEST_TIMEOUT,  # 408
        httpx.codes.TOO_MANY_REQUESTS,  # 429
        httpx.codes.INTERNAL_SERVER_ERROR,  # 500
        httpx.codes.BAD_GATEWAY,  # 502
        httpx.codes.SERVICE_UNAVAILABLE,  # 503
        httpx.codes.GATEWAY_TIMEOUT,  # 504
    }
)


@dataclass(frozen=True, slots=True)
class RetryConfig:
    """Retry configuration for HTTP requests.

    Attributes:
        max_retries: Retries after the first attempt.
        initial_backoff: Delay before the first retry, in seconds.
        max_backoff: Upper bound for any single delay, in seconds.
        backoff_multiplier: Factor applied to the delay after each retry.
    """

    max_retries: int = 3
    initial_backoff: float = 0.5
    max_backoff: float = 10.0
    backoff_multiplier: float = 2.0


def is_retryable_status(status_code: int) -> bool:
    """Check if an HTTP status code is worth retrying."""
    return status_code in RETRYABLE_STATUSES


def backoff_delays(config: RetryConfig) -> list[float]:
    """Return the delay before each retry, in order.

    Delay i is ``min(initial_backoff * backoff_multiplier**i, max_backoff)``.
    """
    delays: list[float] = []
    delay = config.initial_backoff
    for _ in range(config.max_retries):
        delays.append(min(delay, config.max_backoff))
        delay = min(delay * config.backoff_multiplier, config.max_backoff)
    return delays


async def retry_request(
    operation: Callable[[], Awaitable[httpx.Response]],
    config: RetryConfig | None = None,
    *,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> httpx.Response:
    """Run ``operation`` with exponential backoff on transient failures.

    A response with a retryable status is retried while attempts remain;
    once they are exhausted the last response is returned. Any other
    status is returned immediately. Transport errors are retried and
    re-raised when attempts run out.

    Args:
        operation: Performs exactly one request attempt.
        config: Retry settings. Defaults to RetryConfig().
        sleep: Awaitable sleep function (injectable for tests).

    Returns:
        The final HTTP response.

    Raises:
        httpx.TransportError: If every attempt failed at the transport level.
    """
    config = config or RetryConfig()
    delays = backoff_delays(config)
    attempts = config.max_retries + 1

    for attempt in range(1, attempts + 1):
        logger.debug("Attempt %d/%d", attempt, attempts)
        try:
            response = await operation()
        except httpx.TransportError as e:
            if attempt >= attempts:
                raise
            delay = delays[attempt - 1]
            logger.warning(
                "Network error on attempt %d: %s. Retrying in %.1fs...", attempt, e, delay
            )
            await sleep(delay)
            continue

        if not is_retryable_status(response.status_code) or attempt >= attempts:
            return response

        delay = delays[attempt - 1]
        logger.warning(
            "Received retryable status %d on attempt %d, retrying in %.1fs...",
            response.status_code,
            attempt,
            delay,
        )
        await sleep(delay)

    # Unreachable: the final attempt always returns or raises.
    msg = "retry loop exited without a result"
    raise RuntimeError(msg)
