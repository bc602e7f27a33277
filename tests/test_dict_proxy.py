import math
from collections import OrderedDict, defaultdict
from unittest.mock import Mock

import pytest

from watchful import DeleteEvent, ListenerWarning, SetEvent, observable
from watchful.dict_proxy import DictProxy


def test_reads_pass_through():
    data = {"foo": 1, "bar": [1, 2]}
    handle = observable(data)

    assert isinstance(handle, DictProxy)
    assert handle["foo"] == 1
    assert handle["bar"] is data["bar"]
    assert handle.get("baz", 3) == 3
    assert "foo" in handle
    assert len(handle) == 2
    assert list(handle) == ["foo", "bar"]
    assert list(handle.items()) == list(data.items())
    assert repr(handle) == repr(data)
    assert handle == {"foo": 1, "bar": [1, 2]}
    assert handle == observable(dict(data))
    assert handle | {"baz": 3} == {"foo": 1, "bar": [1, 2], "baz": 3}
    assert {"baz": 3} | handle == {"baz": 3, "foo": 1, "bar": [1, 2]}

    with pytest.raises(KeyError):
        handle["baz"]


def test_set_emits_unkeyed_and_keyed():
    handle = observable({"foo": 1})
    on_set, on_set_foo, on_set_bar = Mock(), Mock(), Mock()
    handle.on("set", on_set)
    handle.on("set:foo", on_set_foo)
    handle.on("set:bar", on_set_bar)

    handle["foo"] = 2

    on_set.assert_called_once_with(SetEvent("foo", 2, 1))
    on_set_foo.assert_called_once_with(SetEvent("foo", 2, 1))
    on_set_bar.assert_not_called()
    assert on_set.call_args.args[0] is on_set_foo.call_args.args[0]


def test_set_mutates_target_in_place():
    data = {}
    handle = observable(data)
    handle["foo"] = "bar"
    assert data == {"foo": "bar"}


def test_set_new_key(record):
    handle, emitted = record({})
    handle["foo"] = None

    assert emitted == [
        ("set", SetEvent("foo", None, None)),
        ("set:foo", SetEvent("foo", None, None)),
    ]


def test_set_same_value(record):
    marker = object()
    handle, emitted = record(
        {"num": 1, "text": "abc", "nan": math.nan, "obj": marker}
    )

    handle["num"] = 1
    handle["text"] = "".join(["a", "b", "c"])
    handle["nan"] = float("nan")
    handle["obj"] = marker

    assert emitted == []


def test_set_distinguishes_signed_zero_and_types(record, names):
    handle, emitted = record({"zero": 0.0, "one": 1})

    handle["zero"] = -0.0
    handle["one"] = True

    assert names(emitted) == ["set", "set:zero", "set", "set:one"]


def test_set_equal_but_distinct_objects(record, names):
    handle, emitted = record({"items": [1, 2]})
    handle["items"] = [1, 2]
    assert names(emitted) == ["set", "set:items"]


def test_set_twice_emits_once(record, names):
    handle, emitted = record({})
    handle["foo"] = 5
    handle["foo"] = 5
    assert names(emitted) == ["set", "set:foo"]


def test_augmented_assignment(record):
    handle, emitted = record({"count": 0})
    handle["count"] += 1
    assert emitted[0] == ("set", SetEvent("count", 1, 0))


def test_setdefault(record):
    handle, emitted = record({"foo": 1})

    assert handle.setdefault("foo", 2) == 1
    assert emitted == []

    assert handle.setdefault("bar", 2) == 2
    assert emitted == [
        ("set", SetEvent("bar", 2, None)),
        ("set:bar", SetEvent("bar", 2, None)),
    ]


def test_update(record):
    handle, emitted = record({"foo": 1, "bar": 2})
    handle.update({"foo": 1, "bar": 3}, baz=4)

    assert emitted == [
        ("set", SetEvent("bar", 3, 2)),
        ("set:bar", SetEvent("bar", 3, 2)),
        ("set", SetEvent("baz", 4, None)),
        ("set:baz", SetEvent("baz", 4, None)),
    ]


def test_inplace_or_returns_handle(record):
    handle, emitted = record({"foo": 1})
    original = handle
    handle |= {"foo": 2}

    assert handle is original
    assert emitted[0] == ("set", SetEvent("foo", 2, 1))


def test_delete(record):
    handle, emitted = record({"foo": 1, "bar": 2})
    del handle["foo"]

    assert emitted == [
        ("delete", DeleteEvent("foo", 1)),
        ("delete:foo", DeleteEvent("foo", 1)),
    ]
    assert handle == {"bar": 2}


def test_delete_missing_key(record):
    handle, emitted = record({})

    with pytest.raises(KeyError):
        del handle["foo"]
    assert handle.pop("foo", None) is None

    assert emitted == []


def test_pop(record):
    handle, emitted = record({"foo": 1})
    assert handle.pop("foo") == 1
    assert emitted == [
        ("delete", DeleteEvent("foo", 1)),
        ("delete:foo", DeleteEvent("foo", 1)),
    ]


def test_popitem(record):
    handle, emitted = record({"foo": 1, "bar": 2})
    assert handle.popitem() == ("bar", 2)
    assert emitted == [
        ("delete", DeleteEvent("bar", 2)),
        ("delete:bar", DeleteEvent("bar", 2)),
    ]


def test_clear(record, names):
    handle, emitted = record({"foo": 1, "bar": 2})
    handle.clear()

    assert names(emitted) == ["delete", "delete:foo", "delete", "delete:bar"]
    assert not handle


def test_dict_subclasses():
    ordered = observable(OrderedDict(a=1, b=2))
    listener = Mock()
    ordered.on("set", listener)
    ordered.move_to_end("a")
    assert list(ordered) == ["b", "a"]
    ordered["c"] = 3
    listener.assert_called_once_with(SetEvent("c", 3, None))

    counts = observable(defaultdict(int))
    counts.on("set", listener)
    counts["x"] += 1
    # the read inserts the default before the write replaces it
    assert [call.args[0] for call in listener.call_args_list[1:]] == [
        SetEvent("x", 0, None),
        SetEvent("x", 1, 0),
    ]


def test_listener_errors_do_not_propagate():
    handle = observable({})
    after = Mock()
    handle.on("set", Mock(side_effect=RuntimeError("listener failed")))
    handle.on("set", after)

    with pytest.warns(ListenerWarning):
        handle["foo"] = 1

    assert handle["foo"] == 1
    after.assert_called_once_with(SetEvent("foo", 1, None))


def test_nested_values_are_not_observed(record):
    handle, emitted = record({"nested": {"a": 1}})
    handle["nested"]["a"] = 2
    assert emitted == []


def test_update_failing_halfway(record):
    data = {"foo": 1}
    handle, emitted = record(data)

    with pytest.raises(ValueError):
        handle.update([("bar", 2), ("baz",)])

    assert data == {"foo": 1, "bar": 2}
    assert emitted == [
        ("set", SetEvent("bar", 2, None)),
        ("set:bar", SetEvent("bar", 2, None)),
    ]


def test_read_missing_key(record):
    handle, emitted = record({})

    with pytest.raises(KeyError):
        handle["foo"]

    assert emitted == []

    counts, emitted = record(defaultdict(list))
    assert counts["foo"] == []
    assert emitted == [
        ("set", SetEvent("foo", [], None)),
        ("set:foo", SetEvent("foo", [], None)),
    ]

    counts["foo"]
    assert len(emitted) == 2
