""" Unit tests for function wrappers. """

import threading
import traceback

import pytest

from underbar.exception import CompositeExceptionHandler, ExceptionEater, ExceptionLogger
from underbar.functional import DeferredCaller, memoize, once


class _Counter:
    """ Callable that counts its invocations and returns the new count (times a factor, if an argument is given). """
    def __init__(self) -> None:
        self.calls = 0
    def __call__(self, n=None):
        self.calls += 1
        return self.calls if n is None else n * 2


def test_once() -> None:
    f = _Counter()
    w = once(f)
    results = [w(), w(), w()]
    # The underlying function runs once; every call sees its first result.
    assert f.calls == 1
    assert results == [1, 1, 1]


def test_once_returns_cached_object() -> None:
    w = once(lambda: [])
    assert w() is w()


def test_once_independent_wrappers() -> None:
    """ Two wrappers around the same function each get their own flag. """
    f = _Counter()
    w1 = once(f)
    w2 = once(f)
    assert w1() == 1
    assert w2() == 2
    assert w1() == 1
    assert f.calls == 2


def test_once_forwards_first_arguments() -> None:
    w = once(lambda a, b=0: a + b)
    assert w(1, b=2) == 3
    assert w(100, b=100) == 3


def test_once_failure() -> None:
    """ A failing first call leaves the wrapper fired; the same exception comes back without another call. """
    calls = []
    def fail():
        calls.append(1)
        raise KeyError("boom")
    w = once(fail)
    with pytest.raises(KeyError) as first:
        w()
    with pytest.raises(KeyError) as second:
        w()
    assert first.value is second.value
    assert len(calls) == 1


def test_once_failure_traceback_is_stable() -> None:
    """ Re-raising the cached exception must not keep growing its traceback. """
    def fail():
        raise KeyError("boom")
    w = once(fail)
    depths = []
    for _ in range(5):
        with pytest.raises(KeyError) as exc_info:
            w()
        depths.append(len(traceback.extract_tb(exc_info.value.__traceback__)))
    # Later calls add at most the current wrapper frame on top of the first call's traceback.
    assert len(set(depths[1:])) == 1
    assert depths[-1] <= depths[0] + 1


def test_once_interrupt_rearms() -> None:
    """ An interrupt during the first call is not cached; the next call runs the function again. """
    calls = []
    def interrupted_once():
        calls.append(1)
        if len(calls) == 1:
            raise KeyboardInterrupt
        return "done"
    w = once(interrupted_once)
    with pytest.raises(KeyboardInterrupt):
        w()
    assert w() == "done"
    assert w() == "done"
    assert len(calls) == 2


def test_once_reentry() -> None:
    def recurse():
        return w()
    w = once(recurse)
    with pytest.raises(RuntimeError):
        w()


def test_once_threads() -> None:
    """ Callers racing the first call must all wait for it and get its result. """
    f = _Counter()
    entered = threading.Event()
    release = threading.Event()
    def slow():
        entered.set()
        release.wait(5)
        return f()
    w = once(slow)
    results = []
    threads = [threading.Thread(target=lambda: results.append(w())) for _ in range(8)]
    for t in threads:
        t.start()
    assert entered.wait(5)
    release.set()
    for t in threads:
        t.join(5)
    assert f.calls == 1
    assert results == [1] * 8


def test_memoize() -> None:
    f = _Counter()
    m = memoize(f)
    assert m(3) == 6
    assert m(3) == 6
    assert m(4) == 8
    assert f.calls == 2


def test_memoize_keys_isolated() -> None:
    m = memoize(lambda n: [n])
    three = m(3)
    four = m(4)
    assert three == [3] and four == [4]
    assert m(3) is three
    assert m(4) is four


def test_memoize_independent_tables() -> None:
    f = _Counter()
    m1 = memoize(f)
    m2 = memoize(f)
    m1(5)
    m2(5)
    assert f.calls == 2


def test_memoize_falsy_results_are_cached() -> None:
    calls = []
    def nothing(n):
        calls.append(n)
        return None
    m = memoize(nothing)
    assert m("x") is None
    assert m("x") is None
    assert calls == ["x"]


def test_memoize_equal_keys_share_entry() -> None:
    """ Keys that compare equal under dict rules (1, 1.0, True) hit the same entry. """
    m = memoize(lambda n: type(n).__name__)
    assert m(1) == "int"
    assert m(True) == "int"
    assert m(1.0) == "int"
    assert m(2.5) == "float"


def test_memoize_recursive() -> None:
    calls = []
    @memoize
    def fib(n):
        calls.append(n)
        return n if n < 2 else fib(n - 1) + fib(n - 2)
    assert fib(60) == 1548008755920
    assert sorted(calls) == list(range(61))
    assert fib.__name__ == "fib"


def test_memoize_errors() -> None:
    """ Exceptions from the function pass through and nothing is cached. Unhashable keys fail fast. """
    attempts = []
    def flaky(n):
        attempts.append(n)
        if len(attempts) == 1:
            raise ValueError(n)
        return n
    m = memoize(flaky)
    with pytest.raises(ValueError):
        m(1)
    assert m(1) == 1
    assert attempts == [1, 1]
    with pytest.raises(TypeError):
        m([1, 2])


@pytest.mark.parametrize("combinator", [once, memoize])
def test_not_callable(combinator) -> None:
    with pytest.raises(TypeError):
        combinator(42)


def test_delay() -> None:
    done = threading.Event()
    received = []
    def record(*args, **kwargs):
        received.append((args, kwargs))
        done.set()
    timer = DeferredCaller()(record, 10, "a", "b", c=3)
    assert done.wait(5)
    timer.join(5)
    assert received == [(("a", "b"), {"c": 3})]


def test_delay_cancel() -> None:
    called = []
    timer = DeferredCaller()(called.append, 60000, 1)
    timer.cancel()
    timer.join(5)
    assert not timer.is_alive()
    assert called == []


def test_delay_bad_args() -> None:
    caller = DeferredCaller()
    with pytest.raises(ValueError):
        caller(print, -1)
    with pytest.raises(TypeError):
        caller("print", 0)


def test_delay_failure_logged() -> None:
    """ A deferred failure is logged with its traceback and then considered handled. """
    messages = []
    handler = CompositeExceptionHandler(ExceptionLogger(messages.append), ExceptionEater())
    def fail():
        raise ZeroDivisionError("deferred")
    timer = DeferredCaller(handler)(fail, 0)
    timer.join(5)
    assert len(messages) == 1
    assert "ZeroDivisionError: deferred" in messages[0]
