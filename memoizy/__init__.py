from loguru import logger

from memoizy.cache import (
    CacheWithTimer,
    GenericCache,
    MemoryCache,
    UnsupportedOperationError,
    supports_clear,
)
from memoizy.fp import fp
from memoizy.keys import ZERO_ARITY_KEY, default_cache_key
from memoizy.memoize import Memoize, memoize

# applications opt in with logger.enable("memoizy")
logger.disable("memoizy")

__all__ = [
    "CacheWithTimer",
    "GenericCache",
    "Memoize",
    "MemoryCache",
    "UnsupportedOperationError",
    "ZERO_ARITY_KEY",
    "default_cache_key",
    "fp",
    "memoize",
    "supports_clear",
]
