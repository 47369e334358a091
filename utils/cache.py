"""Lightweight in-memory caches for the fiscal data tools.

Provides:
- TTLCache: thread-safe cache with time-to-live expiry and a size bound
- SingleFlightCache: TTLCache front-end that lets concurrent callers for the
  same key share one in-flight load
"""

import threading
import time
from typing import Any, Callable


class TTLCache:
    """Thread-safe in-memory cache with time-to-live (TTL) expiry.

    Entries expire after ``ttl_seconds`` seconds. A maximum of ``maxsize``
    entries are retained; when the cache is full the entry expiring soonest
    is evicted.

    Usage::

        cache = TTLCache(maxsize=16, ttl_seconds=300)
        cache.set(("pkg", 1), "csv text")
        value = cache.get(("pkg", 1))  # returns value or None if expired/missing
    """

    def __init__(self, maxsize: int = 128, ttl_seconds: float = 300.0) -> None:
        """Initialise the cache.

        Args:
            maxsize: Maximum number of entries to store (default 128).
            ttl_seconds: Seconds before a cached entry expires (default 300).
        """
        self._maxsize = maxsize
        self._ttl = ttl_seconds
        # Maps key -> (value, expires_at)
        self._store: dict[Any, tuple[Any, float]] = {}
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0

    def get(self, key: Any) -> Any | None:
        """Return cached value for *key*, or ``None`` if absent or expired."""
        with self._lock:
            entry = self._store.get(key)
            if entry is None:
                self._misses += 1
                return None
            value, expires_at = entry
            if time.monotonic() > expires_at:
                del self._store[key]
                self._misses += 1
                return None
            self._hits += 1
            return value

    def set(self, key: Any, value: Any) -> None:
        """Store *value* under *key* with the configured TTL.

        If the cache is full, the entry with the earliest expiry is evicted
        before inserting the new one. A cache with ``maxsize <= 0`` stores
        nothing.
        """
        if self._maxsize <= 0:
            return
        expires_at = time.monotonic() + self._ttl
        with self._lock:
            if key not in self._store and len(self._store) >= self._maxsize:
                oldest_key = min(self._store, key=lambda k: self._store[k][1])
                del self._store[oldest_key]
            self._store[key] = (value, expires_at)

    def clear(self) -> None:
        """Remove all entries from the cache."""
        with self._lock:
            self._store.clear()
            self._hits = 0
            self._misses = 0

    def stats(self) -> dict[str, int]:
        """Return cache statistics.

        Returns:
            Dict with keys ``hits``, ``misses``, and ``size``.
        """
        with self._lock:
            # Purge expired entries before reporting size
            now = time.monotonic()
            expired = [k for k, (_, exp) in self._store.items() if now > exp]
            for k in expired:
                del self._store[k]
            return {
                "hits": self._hits,
                "misses": self._misses,
                "size": len(self._store),
            }


class _Flight:
    """One in-flight load shared by every caller waiting on the same key."""

    __slots__ = ("done", "value", "error")

    def __init__(self) -> None:
        self.done = threading.Event()
        self.value: Any = None
        self.error: BaseException | None = None


class SingleFlightCache:
    """Cache loads by key so concurrent callers share one fetch.

    The first caller for a missing key runs the loader; callers arriving
    while that load is in flight block until it finishes and receive the
    same value or exception.  Successful values are kept in a TTLCache;
    failures are never cached.  With ``ttl_seconds <= 0`` or ``maxsize <= 0``
    nothing is kept and only in-flight sharing remains.
    """

    def __init__(self, maxsize: int = 16, ttl_seconds: float = 300.0) -> None:
        self._cache = TTLCache(maxsize=maxsize, ttl_seconds=ttl_seconds)
        self._enabled = ttl_seconds > 0 and maxsize > 0
        self._lock = threading.Lock()
        self._flights: dict[Any, _Flight] = {}

    def get_or_load(self, key: Any, loader: Callable[[], Any]) -> Any:
        """Return the cached value for *key*, loading it once if needed."""
        if self._enabled:
            cached = self._cache.get(key)
            if cached is not None:
                return cached

        with self._lock:
            flight = self._flights.get(key)
            leader = flight is None
            if leader:
                flight = _Flight()
                self._flights[key] = flight

        if not leader:
            flight.done.wait()
            if flight.error is not None:
                raise flight.error
            return flight.value

        try:
            flight.value = loader()
            if self._enabled:
                self._cache.set(key, flight.value)
        except BaseException as exc:
            flight.error = exc
            raise
        finally:
            with self._lock:
                self._flights.pop(key, None)
            flight.done.set()
        return flight.value

    def clear(self) -> None:
        self._cache.clear()

    def stats(self) -> dict[str, int]:
        stats = self._cache.stats()
        with self._lock:
            stats["in_flight"] = len(self._flights)
        return stats
