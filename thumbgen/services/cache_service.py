"""In-memory TTL cache for channel patterns and dictionaries."""
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, Optional


class TTLCache:
    """
    Simple in-memory cache whose entries expire a fixed time after creation.

    Expired entries are treated as absent but are not purged; the next
    ``set`` for the key replaces them wholesale. The clock is injectable
    so tests can move time forward.
    """

    def __init__(
        self,
        ttl_hours: float = 24,
        clock: Optional[Callable[[], datetime]] = None,
        namespace: str = "pattern"
    ):
        self._cache: Dict[str, Dict[str, Any]] = {}
        self.ttl = timedelta(hours=ttl_hours)
        self.clock = clock or datetime.now
        self.namespace = namespace
        self.hits = 0
        self.misses = 0

    def _make_key(self, key: str) -> str:
        """Generate cache key from a channel id."""
        return f"{self.namespace}:{key}"

    def _is_fresh(self, item: Dict[str, Any]) -> bool:
        return self.clock() - item['created_at'] < self.ttl

    def get(self, key: str) -> Optional[Any]:
        """Get a cached value, or None if missing or expired."""
        item = self._cache.get(self._make_key(key))

        if item is None or not self._is_fresh(item):
            self.misses += 1
            return None

        self.hits += 1
        return item['value']

    def set(self, key: str, value: Any) -> None:
        """Cache a value, replacing any previous entry."""
        self._cache[self._make_key(key)] = {
            'value': value,
            'created_at': self.clock()
        }

    def exists(self, key: str) -> bool:
        """Check if a fresh entry exists without touching hit counters."""
        item = self._cache.get(self._make_key(key))
        return item is not None and self._is_fresh(item)

    def clear(self) -> None:
        """Clear all cache."""
        self._cache.clear()

    def get_stats(self) -> Dict[str, Any]:
        """Get cache stats."""
        fresh = sum(1 for item in self._cache.values() if self._is_fresh(item))
        return {
            "total_items": len(self._cache),
            "fresh_items": fresh,
            "hits": self.hits,
            "misses": self.misses
        }
