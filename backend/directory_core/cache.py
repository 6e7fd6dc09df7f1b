"""Read-through cache: in-memory (single process) and Redis backends."""
import json
import logging
import threading
import time
from collections.abc import Callable
from datetime import timedelta
from typing import Any, TypeVar

import redis

from utils.config import CACHE_BACKEND, REDIS_URL

LOG = logging.getLogger(__name__)

T = TypeVar("T")

_MISS = object()


class Cache:
    """
    Key/value cache with per-entry TTL. Subclasses implement storage; values
    must be JSON-compatible so every backend can hold the same payloads.
    """

    backend_name = "base"

    def get(self, key: str, default: Any = None) -> Any:
        raise NotImplementedError

    def set(self, key: str, value: Any, ttl: timedelta) -> None:
        raise NotImplementedError

    def forget(self, key: str) -> bool:
        raise NotImplementedError

    def has(self, key: str) -> bool:
        raise NotImplementedError

    def forget_prefix(self, prefix: str) -> int:
        raise NotImplementedError

    def get_or_compute(self, key: str, ttl: timedelta, compute: Callable[[], T]) -> T:
        """
        Return the cached value for key; on miss run compute once, store the
        result, and return it. Concurrent misses on the same key may each
        compute (no stampede protection).
        """
        cached = self.get(key, _MISS)
        if cached is not _MISS:
            LOG.debug("Cache hit: %s", key)
            return cached
        LOG.debug("Cache miss: %s", key)
        value = compute()
        self.set(key, value, ttl)
        return value


class InMemoryCache(Cache):
    """Process-local cache. clock is injectable so tests can move time forward."""

    backend_name = "memory"

    def __init__(self, clock: Callable[[], float] = time.monotonic, sweep_interval: float = 60.0):
        self._clock = clock
        self._entries: dict[str, tuple[float, Any]] = {}
        self._lock = threading.Lock()
        self._sweep_interval = sweep_interval
        self._next_sweep = clock() + sweep_interval

    def get(self, key: str, default: Any = None) -> Any:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return default
            expires_at, value = entry
            if expires_at <= self._clock():
                del self._entries[key]
                return default
            return value

    def set(self, key: str, value: Any, ttl: timedelta) -> None:
        with self._lock:
            now = self._clock()
            if now >= self._next_sweep:
                self._sweep(now)
            self._entries[key] = (now + ttl.total_seconds(), value)

    def _sweep(self, now: float) -> None:
        """Drop expired entries. Called from set() at most once per sweep_interval."""
        expired = [k for k, (expires_at, _) in self._entries.items() if expires_at <= now]
        for k in expired:
            del self._entries[k]
        self._next_sweep = now + self._sweep_interval
        if expired:
            LOG.debug("Cache sweep removed %d expired entries", len(expired))

    def __len__(self) -> int:
        """Stored entries, including expired ones not yet swept."""
        return len(self._entries)

    def forget(self, key: str) -> bool:
        with self._lock:
            return self._entries.pop(key, None) is not None

    def has(self, key: str) -> bool:
        return self.get(key, _MISS) is not _MISS

    def forget_prefix(self, prefix: str) -> int:
        with self._lock:
            keys = [k for k in self._entries if k.startswith(prefix)]
            for k in keys:
                del self._entries[k]
        return len(keys)

    def clear(self) -> None:
        """Drop every entry (tests)."""
        with self._lock:
            self._entries.clear()


class RedisCache(Cache):
    """Redis-backed cache; values are stored as JSON strings with SETEX."""

    backend_name = "redis"

    def __init__(self, client: redis.Redis):
        self._redis = client

    @classmethod
    def from_url(cls, url: str) -> "RedisCache":
        return cls(redis.Redis.from_url(url, decode_responses=True))

    def get(self, key: str, default: Any = None) -> Any:
        raw = self._redis.get(key)
        if raw is None:
            return default
        return json.loads(raw)

    def set(self, key: str, value: Any, ttl: timedelta) -> None:
        # SETEX rejects 0; sub-second TTLs round up to one second.
        seconds = max(1, int(ttl.total_seconds()))
        self._redis.setex(key, seconds, json.dumps(value))

    def forget(self, key: str) -> bool:
        return bool(self._redis.delete(key))

    def has(self, key: str) -> bool:
        return bool(self._redis.exists(key))

    def forget_prefix(self, prefix: str) -> int:
        keys = list(self._redis.scan_iter(match=f"{prefix}*"))
        if not keys:
            return 0
        return int(self._redis.delete(*keys))


def build_cache(backend: str = CACHE_BACKEND, redis_url: str = REDIS_URL) -> Cache:
    """Create the cache selected by configuration ("memory" or "redis")."""
    if backend == "redis":
        LOG.info("Using Redis cache backend")
        return RedisCache.from_url(redis_url)
    if backend != "memory":
        raise ValueError(f"Unknown cache backend '{backend}' (expected 'memory' or 'redis')")
    LOG.info("Using in-memory cache backend")
    return InMemoryCache()
