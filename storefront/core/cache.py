import threading
from datetime import datetime, timedelta
from typing import Any, Hashable, NamedTuple, Optional

from cachetools import TLRUCache


class _Entry(NamedTuple):
    value: Any
    expires_at: Optional[datetime]


class TTLCache:
    """Bounded in-process cache whose entries expire against a clock.

    ``put`` accepts an explicit ``expires_at`` so callers can cut an entry
    short of the default TTL when they know the value changes sooner.
    A TTL of zero or less disables the cache entirely.
    """

    def __init__(self, ttl_seconds: float, clock, maxsize: int = 1024) -> None:
        self.ttl = timedelta(seconds=max(0.0, ttl_seconds))
        self.clock = clock
        self._items = TLRUCache(
            maxsize=maxsize, ttu=self._time_to_use, timer=clock.now
        )
        self._lock = threading.Lock()

    def _time_to_use(self, key: Hashable, entry: _Entry, now: datetime):
        deadline = now + self.ttl
        if entry.expires_at is not None and entry.expires_at < deadline:
            return entry.expires_at
        return deadline

    @property
    def enabled(self) -> bool:
        return self.ttl > timedelta(0)

    def get(self, key: Hashable) -> Optional[Any]:
        if not self.enabled:
            return None
        with self._lock:
            entry = self._items.get(key)
        return entry.value if entry is not None else None

    def put(
        self, key: Hashable, value: Any, expires_at: Optional[datetime] = None
    ) -> None:
        if not self.enabled:
            return
        with self._lock:
            self._items[key] = _Entry(value, expires_at)

    def delete(self, key: Hashable) -> None:
        with self._lock:
            self._items.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._items.clear()

    def __len__(self) -> int:
        with self._lock:
            self._items.expire()
            return len(self._items)
