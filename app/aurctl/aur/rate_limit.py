"""Rate limiting for AUR RPC requests.

The AUR asks clients not to hammer the RPC endpoint. RateLimiter bounds
the number of in-flight requests and spaces successive grants by a
minimum delay across every caller in the process.
"""

import asyncio
import time
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager


class RateLimiter:
    """Bound concurrent requests and enforce a minimum delay between them.

    Steady-state throughput is at most ``max_concurrent / min_delay``.

    Example:
        >>> limiter = RateLimiter(max_concurrent=10, delay_ms=100)
        >>> async with limiter.acquire():
        ...     await client.get(url)
    """

    def __init__(
        self,
        max_concurrent: int = 10,
        delay_ms: int = 100,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the limiter.

        Args:
            max_concurrent: Maximum number of permits held at once.
            delay_ms: Minimum milliseconds between two grants.
            clock: Monotonic clock in seconds (injectable for tests).
        """
        if max_concurrent < 1:
            msg = f"max_concurrent must be at least 1, got {max_concurrent}"
            raise ValueError(msg)
        self._max_concurrent = max_concurrent
        self._min_delay = delay_ms / 1000
        self._clock = clock
        self._semaphore: asyncio.Semaphore | None = None
        self._lock: asyncio.Lock | None = None
        self._last_grant: float | None = None

    @property
    def max_concurrent(self) -> int:
        return self._max_concurrent

    @property
    def min_delay(self) -> float:
        """Minimum delay between grants in seconds."""
        return self._min_delay

    def _primitives(self) -> tuple[asyncio.Semaphore, asyncio.Lock]:
        # Created lazily so the limiter binds to the running event loop.
        if self._semaphore is None or self._lock is None:
            self._semaphore = asyncio.Semaphore(self._max_concurrent)
            self._lock = asyncio.Lock()
        return self._semaphore, self._lock

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[None]:
        """Wait for a concurrency slot and the inter-request delay.

        Leaving the context frees the slot; the delay timer is not reset.
        """
        semaphore, lock = self._primitives()
        async with semaphore:
            async with lock:
                if self._last_grant is not None:
                    wait = self._min_delay - (self._clock() - self._last_grant)
                    if wait > 0:
                        await asyncio.sleep(wait)
                self._last_grant = self._clock()
            yield
