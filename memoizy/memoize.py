import inspect
import math
from datetime import timedelta
from functools import wraps

from loguru import logger

from memoizy.cache import MemoryCache, UnsupportedOperationError, supports_clear
from memoizy.keys import default_cache_key
from memoizy.timers import scheduler


def normalize_max_age(max_age) -> float | None:
    """Return the lifetime in milliseconds, or None when entries never expire."""
    if max_age is None:
        return None
    if isinstance(max_age, timedelta):
        max_age = max_age.total_seconds() * 1000
    if isinstance(max_age, bool) or not isinstance(max_age, (int, float)):
        raise TypeError(f"max_age must be a number of milliseconds, got {max_age!r}")
    if 0 < max_age < math.inf:
        return max_age
    return None


def schedule(delay: float, callback, *args):
    """Run `callback(*args)` once, `delay` milliseconds from now. Not cancelled by anything here."""
    return scheduler.call_later(delay, callback, *args)


async def _resolved(value):
    return value


class Memoize:
    """
    Decorator caching a function's results by its arguments.

    Options:
    - cache: factory returning a fresh cache (see memoizy.cache.GenericCache)
    - max_age: milliseconds (or a timedelta) to keep a result; None, <= 0 or inf keep it forever
    - cache_key: builds the key from the call arguments
    - value_accept: `(error, value) -> bool`, decides whether a result gets stored
    - cache_handles_expiration: pass max_age to `cache.set` instead of scheduling deletion here

    Every decorated function gets its own cache from the factory.

    Expiration managed here runs `cache.delete` on a shared background
    thread, so the cache must tolerate calls from another thread.

    For awaitable results the storage decision runs after the result
    settles; if `value_accept` (or the store) raises there, the result is
    simply not cached and the failure only shows up in the log, which stays
    silent until the application calls `logger.enable("memoizy")`.
    """

    def __init__(
        self,
        *,
        cache=None,
        max_age=None,
        cache_key=None,
        value_accept=None,
        cache_handles_expiration: bool = False,
    ):
        cache = cache or MemoryCache
        cache_key = cache_key or default_cache_key
        for name, option in (("cache", cache), ("cache_key", cache_key)):
            if not callable(option):
                raise TypeError(f"{name} must be callable, got {option!r}")
        if value_accept is not None and not callable(value_accept):
            raise TypeError(f"value_accept must be callable, got {value_accept!r}")
        self.cache_factory = cache
        self.max_age = normalize_max_age(max_age)
        self.cache_key = cache_key
        self.value_accept = value_accept
        self.cache_handles_expiration = bool(cache_handles_expiration)

    def __call__(self, func):
        cache = self.cache_factory()
        eventual = inspect.iscoroutinefunction(func)
        name = getattr(func, "__qualname__", repr(func))

        def compute(key, args, kwargs):
            nonlocal eventual
            logger.debug(f"{name}: cache miss for {key}")
            value = func(*args, **kwargs)
            if inspect.isawaitable(value):
                eventual = True
                return self._observe(cache, key, value)
            if self.value_accept is None or self.value_accept(None, value):
                self._store(cache, key, value)
            return value

        async def after_existence_check(exists, key, args, kwargs):
            if await exists:
                return cache.get(key)
            value = compute(key, args, kwargs)
            if inspect.isawaitable(value):
                return await value
            return value

        @wraps(func)
        def memoizer(*args, **kwargs):
            key = self.cache_key(*args, **kwargs)
            exists = cache.has(key)
            if inspect.isawaitable(exists):
                return after_existence_check(exists, key, args, kwargs)
            if exists:
                value = cache.get(key)
                return _resolved(value) if eventual else value
            return compute(key, args, kwargs)

        def delete(*args, **kwargs):
            return cache.delete(self.cache_key(*args, **kwargs))

        def clear():
            if not supports_clear(cache):
                raise UnsupportedOperationError(
                    f"{type(cache).__name__} doesn't support clear"
                )
            logger.debug(f"{name}: clearing cache")
            cache.clear()

        memoizer.delete = delete
        memoizer.clear = clear
        memoizer.cache = cache
        return memoizer

    async def _observe(self, cache, key, awaitable):
        # cancellation is a BaseException and skips the storage decision
        try:
            value = await awaitable
        except Exception as err:
            if self.value_accept is not None:
                self._store_if_accepted(cache, key, err, None)
            raise
        self._store_if_accepted(cache, key, None, value)
        return value

    def _store_if_accepted(self, cache, key, err, value):
        try:
            if self.value_accept is None or self.value_accept(err, value):
                self._store(cache, key, value)
        except Exception:
            logger.exception(f"storing result for {key} failed, not cached")

    def _store(self, cache, key, value):
        if self.max_age is None:
            cache.set(key, value)
        elif self.cache_handles_expiration:
            cache.set(key, value, self.max_age)
        else:
            schedule(self.max_age, cache.delete, key)
            cache.set(key, value)
        logger.debug(f"stored {key}")


def memoize(fn, **options):
    """
    Return the memoized version of `fn`.

        def add(a, b):
            return a + b

        mem_add = memoize(add, max_age=1000)
        mem_add(4, 5)
        mem_add.delete(4, 5)
        mem_add.clear()

    See Memoize for the options.
    """
    return Memoize(**options)(fn)
