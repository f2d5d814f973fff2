"""
In-memory response cache with bounded exponential-backoff retry.

Entries expire after a fixed TTL and are only refreshed by a successful fetch.
A failed refresh leaves the previous entry untouched.
"""

import asyncio
import time
from typing import Any, Awaitable, Callable, Optional, TypeVar

from loguru import logger

from data.errors import DataFetchFailure
from data.models import CacheEntry

T = TypeVar("T")

DEFAULT_TTL_SECONDS = 30.0
DEFAULT_MAX_RETRIES = 3
DEFAULT_INITIAL_DELAY = 1.0


class RetryingCache:
    """
    Cache-or-fetch wrapper around async data operations.

    Features:
    - TTL expiry checked on read (no background sweeping)
    - Up to ``max_retries + 1`` attempts with delays of
      ``initial_delay * 2**attempt`` between them
    - Concurrent misses on the same key share one in-flight fetch
    - Hit/miss tracking
    """

    def __init__(
        self,
        ttl: float = DEFAULT_TTL_SECONDS,
        max_retries: int = DEFAULT_MAX_RETRIES,
        initial_delay: float = DEFAULT_INITIAL_DELAY,
        coalesce: bool = True,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        """
        Initialize the cache.

        Args:
            ttl: Seconds a stored payload is served without refetching
            max_retries: Retries after the first attempt
            initial_delay: Delay in seconds before the first retry
            coalesce: Share one in-flight fetch between concurrent callers of a key
            clock: Monotonic time source
            sleep: Async sleep used for backoff
        """
        self.ttl = ttl
        self.max_retries = max_retries
        self.initial_delay = initial_delay
        self.coalesce = coalesce
        self._clock = clock
        self._sleep = sleep

        self._entries: dict[str, CacheEntry] = {}
        self._in_flight: dict[str, asyncio.Future] = {}

        # Track cache statistics
        self.hits = 0
        self.misses = 0

    @classmethod
    def from_settings(cls, settings: Any) -> "RetryingCache":
        """Build a cache from a ``config.settings.Settings`` instance."""
        return cls(
            ttl=settings.CACHE_TTL_SECONDS,
            max_retries=settings.MAX_RETRIES,
            initial_delay=settings.INITIAL_RETRY_DELAY,
        )

    async def resolve(self, key: str, operation: Callable[[], Awaitable[T]]) -> T:
        """
        Return the cached payload for ``key`` or fetch it with retry.

        Args:
            key: Request key, one per logical upstream request
            operation: Zero-argument coroutine function performing the fetch

        Returns:
            Cached or freshly fetched payload

        Raises:
            DataFetchFailure: If every attempt failed
        """
        entry = self._entries.get(key)
        if entry is not None and self._clock() - entry.stored_at < self.ttl:
            self.hits += 1
            logger.debug(f"Cache hit: {key}")
            return entry.payload

        if not self.coalesce:
            self.misses += 1
            logger.debug(f"Cache miss: {key}")
            return await self._fetch_with_retry(key, operation)

        pending = self._in_flight.get(key)
        if pending is None:
            self.misses += 1
            logger.debug(f"Cache miss: {key}")
            pending = asyncio.ensure_future(self._run_shared(key, operation))
            self._in_flight[key] = pending
        else:
            logger.debug(f"Joining in-flight fetch: {key}")

        # A cancelled caller must not cancel the fetch other callers wait on
        return await asyncio.shield(pending)

    async def _run_shared(self, key: str, operation: Callable[[], Awaitable[T]]) -> T:
        try:
            return await self._fetch_with_retry(key, operation)
        finally:
            self._in_flight.pop(key, None)

    async def _fetch_with_retry(self, key: str, operation: Callable[[], Awaitable[T]]) -> T:
        attempts = self.max_retries + 1
        last_error: Optional[Exception] = None

        for attempt in range(attempts):
            try:
                payload = await operation()
            except Exception as e:
                last_error = e

                if attempt < self.max_retries:
                    delay = self.retry_delay(attempt)
                    logger.warning(
                        f"Attempt {attempt + 1}/{attempts} for {key} failed: {e}. "
                        f"Retrying in {delay:.1f}s..."
                    )
                    await self._sleep(delay)
                continue

            self._entries[key] = CacheEntry(key=key, payload=payload, stored_at=self._clock())
            return payload

        message = f"Failed after {self.max_retries} retries: {last_error}"
        logger.error(f"{key}: {message}")
        raise DataFetchFailure(message, attempts=attempts, last_error=last_error) from last_error

    def retry_delay(self, attempt: int) -> float:
        """Backoff delay in seconds after the given zero-based failed attempt."""
        return self.initial_delay * (2 ** attempt)

    def peek(self, key: str) -> Optional[CacheEntry]:
        """Stored entry for ``key`` regardless of age, without counting a hit."""
        return self._entries.get(key)

    def put(self, key: str, payload: Any) -> None:
        """
        Store a payload directly.

        Args:
            key: Cache key
            payload: Value to cache
        """
        self._entries[key] = CacheEntry(key=key, payload=payload, stored_at=self._clock())

    def invalidate(self, key: str) -> None:
        """
        Drop the stored entry for ``key``.

        Args:
            key: Cache key to invalidate
        """
        if self._entries.pop(key, None) is not None:
            logger.debug(f"Invalidated cache: {key}")

    def clear_all(self) -> None:
        """Clear all cached entries."""
        count = len(self._entries)
        self._entries.clear()
        logger.info(f"Cleared {count} cached entries")

    def get_stats(self) -> dict[str, int | float]:
        """
        Get cache statistics.

        Returns:
            Dictionary with hit rate, counts and in-flight fetches
        """
        total = self.hits + self.misses
        hit_rate = self.hits / total if total > 0 else 0.0

        return {
            "hits": self.hits,
            "misses": self.misses,
            "total": total,
            "hit_rate": hit_rate,
            "entries": len(self._entries),
            "in_flight": len(self._in_flight),
        }
