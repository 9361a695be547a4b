from collections.abc import Mapping

from memoizy.memoize import Memoize


def fp(options: Mapping | None = None, fn=None):
    """
    Options-first form of memoize, for composing.

    fp(options) returns a reusable decorator, fp(options, fn) the memoized function:

        cached_for_a_minute = fp({"max_age": 60_000})
        get_user = cached_for_a_minute(fetch_user)
    """
    memoizer = Memoize(**(options or {}))
    if fn is None:
        return memoizer
    return memoizer(fn)
