"""Process-local TTL cache for search results.

Entries expire a fixed time after they are written; reads never refresh
them and there is no size bound. Each get/set holds a lock, so one cache
can be shared by threads. The clock is injectable for tests.
"""

import threading
import time
from collections.abc import Callable
from typing import Any

from loguru import logger

from .models import DEFAULT_CACHE_TTL

log = logger.bind(stage="cache")


class TTLCache:
    """Fixed-TTL key/value store.

    Attributes:
        ttl: Default lifetime of an entry in seconds
    """

    def __init__(
        self,
        ttl: float = DEFAULT_CACHE_TTL,
        timer: Callable[[], float] = time.monotonic,
    ) -> None:
        self.ttl = ttl
        self._timer = timer
        self._data: dict[str, tuple[float, Any]] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Any | None:
        """Return the stored value, or None if missing or expired."""
        with self._lock:
            entry = self._data.get(key)
            if entry is None:
                return None
            expires_at, value = entry
            if self._timer() >= expires_at:
                del self._data[key]
                log.debug(f"Cache expired: {key!r}")
                return None
            return value

    def set(self, key: str, value: Any, ttl: float | None = None) -> None:
        """Store value under key for ttl seconds (defaults to self.ttl)."""
        lifetime = self.ttl if ttl is None else ttl
        with self._lock:
            if lifetime <= 0:
                self._data.pop(key, None)
                return
            self._data[key] = (self._timer() + lifetime, value)

    def clear(self) -> None:
        with self._lock:
            self._data.clear()

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None

    def __len__(self) -> int:
        with self._lock:
            now = self._timer()
            return sum(1 for expires_at, _ in self._data.values() if now < expires_at)
