"""In-memory TTL cache for finished TLDR payloads."""

import asyncio
import json
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from ..utils.logging import get_logger
from .config import config

logger = get_logger("cache_manager")

KEY_PREFIX = "tldr:"


@dataclass(frozen=True)
class CacheEntry:
    """A cached payload and its expiry on the cache clock."""
    key: str
    payload: Any
    expires_at: float

    def is_expired(self, now: float) -> bool:
        return now >= self.expires_at


class ResponseCache:
    """
    Thread-safe TTL cache keyed by (identifier, language, model).

    Expired entries are dropped lazily on ``get`` and in bulk by ``sweep``.
    The periodic sweep task is started and stopped by the owner.
    """

    def __init__(
        self,
        default_ttl: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic
    ):
        self.default_ttl = default_ttl if default_ttl is not None else config.cache.ttl_seconds
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}
        self._lock = threading.Lock()
        self._sweep_task: Optional[asyncio.Task] = None
        self._hits = 0
        self._misses = 0

    @staticmethod
    def key(identifier: str, language: str, model: str) -> str:
        """Build the cache key; the JSON encoding keeps distinct triples distinct."""
        return KEY_PREFIX + json.dumps([identifier, language, model], separators=(",", ":"))

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self._misses += 1
                return None
            if entry.is_expired(self._clock()):
                del self._entries[key]
                self._misses += 1
                return None
            self._hits += 1

        logger.debug(f"Cache hit for {key}")
        return entry.payload

    def set(self, key: str, payload: Any, ttl_seconds: Optional[float] = None) -> None:
        ttl = self.default_ttl if ttl_seconds is None else ttl_seconds
        entry = CacheEntry(key=key, payload=payload, expires_at=self._clock() + ttl)
        with self._lock:
            self._entries[key] = entry
        logger.debug(f"Cached {key} for {ttl}s")

    def delete(self, key: str) -> bool:
        with self._lock:
            return self._entries.pop(key, None) is not None

    def clear(self) -> int:
        with self._lock:
            count = len(self._entries)
            self._entries.clear()
        logger.info(f"Cleared {count} cache entries")
        return count

    def sweep(self) -> int:
        """Remove every expired entry and return how many were removed."""
        now = self._clock()
        with self._lock:
            expired_keys = [key for key, entry in self._entries.items() if entry.is_expired(now)]
            for key in expired_keys:
                del self._entries[key]

        if expired_keys:
            logger.info(f"Cleaned {len(expired_keys)} expired cache entries")
        return len(expired_keys)

    def stats(self) -> Dict[str, Any]:
        with self._lock:
            size = len(self._entries)
        total = self._hits + self._misses
        return {
            "entries": size,
            "hits": self._hits,
            "misses": self._misses,
            "hit_rate": self._hits / total if total else 0.0,
            "default_ttl": self.default_ttl,
            "sweeping": self.is_sweeping,
        }

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    # Periodic sweep

    @property
    def is_sweeping(self) -> bool:
        return self._sweep_task is not None and not self._sweep_task.done()

    def start_periodic_sweep(self, interval: Optional[float] = None) -> asyncio.Task:
        """Start the sweep loop on the running event loop. Idempotent."""
        if self.is_sweeping:
            return self._sweep_task
        interval = interval or config.cache.sweep_interval_seconds
        self._sweep_task = asyncio.create_task(self._periodic_sweep(interval))
        return self._sweep_task

    async def stop_periodic_sweep(self) -> None:
        task, self._sweep_task = self._sweep_task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    async def _periodic_sweep(self, interval: float) -> None:
        while True:
            await asyncio.sleep(interval)
            try:
                self.sweep()
            except Exception as e:
                logger.error(f"Error in periodic sweep: {str(e)}")
