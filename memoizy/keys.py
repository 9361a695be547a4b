import json

ZERO_ARITY_KEY = "__0aritykey__"


def _encode_default(obj):
    if isinstance(obj, (set, frozenset)):
        return sorted(obj, key=repr)
    return repr(obj)


def default_cache_key(*args, **kwargs) -> str:
    """
    Build a cache key from call arguments.

    - no arguments at all map to ZERO_ARITY_KEY, so every such call shares one entry
    - positional-only calls are encoded as a compact JSON array, keeping argument order
    - calls with keyword arguments are encoded as {"args": [...], "kwargs": {...}} with
      names sorted, so keyword order does not matter and the two shapes never overlap
    - sets become sorted arrays, anything else JSON cannot encode goes through repr()

    The encoding keeps types apart ("1" and 1 differ) but not every distinction:
    tuples and lists encode the same. Pass a custom `cache_key` when that matters.
    """
    if not args and not kwargs:
        return ZERO_ARITY_KEY
    if kwargs:
        payload = {"args": list(args), "kwargs": dict(sorted(kwargs.items()))}
    else:
        payload = list(args)
    try:
        return json.dumps(
            payload, separators=(",", ":"), ensure_ascii=False, default=_encode_default
        )
    except (TypeError, ValueError):
        # dict keys json refuses (tuples), or circular references
        return repr(payload)
