import pytest
from memoizy import Memoize, fp


@pytest.fixture
def calls():
    return {"count": 0}


@pytest.fixture
def square(calls):
    def square(x):
        calls["count"] += 1
        return x * x

    return square


def test_fp_with_options_and_function(square, calls):
    mem = fp({"max_age": 1000}, square)
    assert mem(3) == 9
    assert mem(3) == 9
    assert calls["count"] == 1
    assert mem.delete(3) is True


def test_fp_with_options_only_returns_decorator(square, calls):
    memoizer = fp({"value_accept": lambda err, value: value > 10})
    assert isinstance(memoizer, Memoize)
    mem = memoizer(square)
    mem(2)
    mem(2)
    assert calls["count"] == 2
    mem(4)
    mem(4)
    assert calls["count"] == 3


def test_fp_decorator_is_reusable(square):
    memoizer = fp({})
    first = memoizer(square)
    second = memoizer(square)
    first(1)
    assert first.cache.has("[1]")
    assert not second.cache.has("[1]")


def test_fp_without_options(square, calls):
    mem = fp(None, square)
    mem(5)
    mem(5)
    assert calls["count"] == 1


def test_fp_rejects_unknown_options():
    with pytest.raises(TypeError):
        fp({"maxAge": 10})
