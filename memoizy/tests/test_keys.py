from memoizy.keys import ZERO_ARITY_KEY, default_cache_key


def test_zero_arity_key():
    assert default_cache_key() == ZERO_ARITY_KEY == "__0aritykey__"


def test_same_arguments_same_key():
    assert default_cache_key(1, "a") == default_cache_key(1, "a")


def test_keys_are_type_sensitive():
    assert default_cache_key(1, "a") != default_cache_key("1", "a")
    assert default_cache_key(None) != default_cache_key("null")


def test_keys_preserve_argument_order():
    assert default_cache_key(1, 2) == "[1,2]"
    assert default_cache_key(2, 1) == "[2,1]"


def test_nested_structures():
    key = default_cache_key({"b": [1, {"c": True}], "a": None})
    assert key == '[{"b":[1,{"c":true}],"a":null}]'


def test_keyword_order_does_not_matter():
    assert default_cache_key(1, x=1, y=2) == default_cache_key(1, y=2, x=1)
    assert default_cache_key(1, x=1) != default_cache_key(1, 1)


def test_unserializable_values_use_repr():
    class Point:
        def __repr__(self):
            return "Point()"

    assert default_cache_key(Point()) == '["Point()"]'


def test_unserializable_dict_keys_use_repr():
    assert default_cache_key({(1, 2): "a"}) == "[{(1, 2): 'a'}]"


def test_keyword_calls_never_collide_with_positional_calls():
    assert default_cache_key(1, a=2) != default_cache_key([1], {"a": 2})
    assert default_cache_key(1, a=2) == '{"args":[1],"kwargs":{"a":2}}'
    assert default_cache_key({"args": [1], "kwargs": {"a": 2}}) != default_cache_key(
        1, a=2
    )


def test_sets_encode_as_sorted_arrays():
    assert default_cache_key({"b", "a", "c"}) == '[["a","b","c"]]'
    assert default_cache_key(frozenset({2, 1})) == "[[1,2]]"


def test_circular_structures_use_repr():
    loop = [1]
    loop.append(loop)
    assert default_cache_key(loop) == "[[1, [...]]]"
