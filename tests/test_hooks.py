"""Tests for the resolution chain."""

from nsautoload.hooks import AutoloadStack
from nsautoload.hooks import get_default_stack


def _callback(result, calls, name):
    def callback(symbol):
        calls.append((name, symbol))
        return result

    return callback


class TestAutoloadStack:
    def test_append_and_prepend(self):
        stack = AutoloadStack()
        first = _callback(False, [], "first")
        second = _callback(False, [], "second")
        front = _callback(False, [], "front")

        stack.register(first)
        stack.register(second)
        stack.register(front, prepend=True)

        assert stack.callbacks == (front, first, second)
        assert len(stack) == 3

    def test_register_twice_keeps_position(self):
        stack = AutoloadStack()
        a = _callback(False, [], "a")
        b = _callback(False, [], "b")
        stack.register(a)
        stack.register(b)
        stack.register(a, prepend=True)

        assert stack.callbacks == (a, b)

    def test_load_stops_at_first_success(self):
        calls = []
        stack = AutoloadStack()
        stack.register(_callback(False, calls, "miss"))
        stack.register(_callback(True, calls, "hit"))
        stack.register(_callback(True, calls, "never"))

        assert stack.load("App\\User") is True
        assert calls == [("miss", "App\\User"), ("hit", "App\\User")]

    def test_load_without_success(self):
        calls = []
        stack = AutoloadStack()
        stack.register(_callback(False, calls, "a"))
        stack.register(_callback(False, calls, "b"))

        assert stack.load("App\\User") is False
        assert [name for name, _ in calls] == ["a", "b"]

    def test_empty_stack_loads_nothing(self):
        assert AutoloadStack().load("App\\User") is False

    def test_unregister(self):
        stack = AutoloadStack()
        callback = _callback(True, [], "a")
        stack.register(callback)

        assert stack.unregister(callback) is True
        assert stack.unregister(callback) is False
        assert stack.load("App\\User") is False


def test_default_stack_is_shared():
    assert get_default_stack() is get_default_stack()
