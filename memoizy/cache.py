import math
import threading
from collections.abc import Awaitable, Hashable
from datetime import datetime, timedelta
from typing import Any, Protocol, runtime_checkable


class UnsupportedOperationError(NotImplementedError):
    """Raised when a cache lacks an optional capability such as `clear`."""


@runtime_checkable
class GenericCache(Protocol):
    """What a memoized function needs from its cache.

    `has` may return an awaitable, in which case every call of the memoized
    function becomes awaitable. `clear` is optional and is looked up at call
    time with `supports_clear`.
    """

    def has(self, key: Hashable) -> bool | Awaitable[bool]: ...

    def get(self, key: Hashable) -> Any: ...

    def set(self, key: Hashable, value: Any) -> None: ...

    def delete(self, key: Hashable) -> bool: ...


@runtime_checkable
class CacheWithTimer(Protocol):
    """A cache that enforces expiration itself.

    Used with `cache_handles_expiration=True`: `set` receives the lifetime
    of the entry in milliseconds as its third argument.
    """

    def has(self, key: Hashable) -> bool | Awaitable[bool]: ...

    def get(self, key: Hashable) -> Any: ...

    def set(self, key: Hashable, value: Any, max_age: float) -> None: ...

    def delete(self, key: Hashable) -> bool: ...


def supports_clear(cache) -> bool:
    return callable(getattr(cache, "clear", None))


class MemoryCache:
    """Default in-memory cache, one entry per key. Safe to use from several threads."""

    def __init__(self):
        self.store = {}
        self._lock = threading.RLock()

    def __len__(self):
        with self._lock:
            return sum(1 for key in list(self.store) if self.has(key))

    def has(self, key) -> bool:
        with self._lock:
            entry = self.store.get(key)
            if entry is None:
                return False
            if entry["expires"] is None or entry["expires"] > datetime.now():
                return True
            del self.store[key]
            return False

    def get(self, key):
        with self._lock:
            if self.has(key):
                return self.store[key]["value"]
            return None

    def set(self, key, value, max_age: float | None = None):
        expires = (
            datetime.now() + timedelta(milliseconds=max_age)
            if max_age and 0 < max_age < math.inf
            else None
        )
        with self._lock:
            self.store[key] = {"value": value, "expires": expires}
            self._cleanup_expired()

    def delete(self, key) -> bool:
        with self._lock:
            present = self.has(key)
            self.store.pop(key, None)
            return present

    def clear(self):
        with self._lock:
            self.store.clear()

    def _cleanup_expired(self):
        now = datetime.now()
        expired_keys = [
            key
            for key, entry in self.store.items()
            if entry["expires"] is not None and entry["expires"] <= now
        ]
        for key in expired_keys:
            del self.store[key]
