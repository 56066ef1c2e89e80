"""
In-memory TTL cache for rarely-changing registry data (templates, form configurations)

Entries are keyed by (namespace, id). Writers must invalidate explicitly; the TTL only
bounds how stale an entry can get when a write happens in another process.
"""
import threading
import time
from typing import Any, Callable, Dict, Optional, Tuple

from .logger import get_logger

logger = get_logger(__name__)

_MISSING = object()


class TTLCache:
    """Thread-safe TTL cache with LRU eviction once max_entries is reached"""
    
    def __init__(
        self,
        ttl_seconds: float = 300,
        max_entries: int = 100,
        clock: Callable[[], float] = time.monotonic
    ):
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self._clock = clock
        self._lock = threading.Lock()
        # (namespace, id) -> {"value": Any, "expires_at": float, "last_accessed": float}
        self._items: Dict[Tuple[str, str], Dict[str, Any]] = {}
        self.hits = 0
        self.misses = 0
    
    def get(self, namespace: str, key: str, default: Any = None) -> Any:
        with self._lock:
            item = self._items.get((namespace, key))
            now = self._clock()
            if item is None:
                self.misses += 1
                return default
            if item["expires_at"] <= now:
                del self._items[(namespace, key)]
                self.misses += 1
                return default
            item["last_accessed"] = now
            self.hits += 1
            return item["value"]
    
    def set(self, namespace: str, key: str, value: Any) -> None:
        with self._lock:
            now = self._clock()
            if (namespace, key) not in self._items and len(self._items) >= self.max_entries:
                self._evict_unlocked()
            self._items[(namespace, key)] = {
                "value": value,
                "expires_at": now + self.ttl_seconds,
                "last_accessed": now,
            }
    
    def get_or_load(self, namespace: str, key: str, loader: Callable[[], Any]) -> Any:
        """
        Return the cached value or call loader and cache its result.
        
        None results are cached too, so a missing document does not cost a
        round-trip on every call. Loader exceptions propagate and are not cached.
        """
        value = self.get(namespace, key, _MISSING)
        if value is not _MISSING:
            return value
        value = loader()
        self.set(namespace, key, value)
        return value
    
    def invalidate(self, namespace: str, key: str) -> None:
        with self._lock:
            self._items.pop((namespace, key), None)
    
    def invalidate_namespace(self, namespace: str) -> None:
        with self._lock:
            for cache_key in [k for k in self._items if k[0] == namespace]:
                del self._items[cache_key]
    
    def clear(self) -> None:
        with self._lock:
            self._items.clear()
    
    def stats(self) -> Dict[str, Any]:
        with self._lock:
            total = self.hits + self.misses
            return {
                "size": len(self._items),
                "max_entries": self.max_entries,
                "hits": self.hits,
                "misses": self.misses,
                "hit_rate": round(self.hits / total, 3) if total else 0.0,
            }
    
    def _evict_unlocked(self) -> None:
        now = self._clock()
        expired = [k for k, item in self._items.items() if item["expires_at"] <= now]
        for cache_key in expired:
            del self._items[cache_key]
        if len(self._items) >= self.max_entries:
            oldest = min(self._items, key=lambda k: self._items[k]["last_accessed"])
            del self._items[oldest]
            logger.debug(f"Evicted cache entry {oldest[0]}:{oldest[1]}")
