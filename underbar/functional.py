""" Utility module for function wrappers that change calling semantics.

    once and memoize return closures that privately own their state (a fired flag or a memo table).
    Nothing outside the returned wrapper can reach that state, so two wrappers around the same function
    never share it. Each wrapper guards its state with its own reentrant lock, which makes it safe to call
    from several threads: the first caller computes while the others wait for its outcome.

    delay runs a function later on a timer thread. An exception raised there has no caller to go back to,
    so it is given to an exception handler, which by default writes the traceback to the library log. """

import functools
import sys
from threading import RLock, Timer
from typing import Any, Callable, Dict, Hashable, Optional

from .config import Settings
from .exception import CompositeExceptionHandler, ExceptionEater, ExceptionHandler, ExceptionLogger
from .log import open_logger

__all__ = ["once", "memoize", "delay", "DeferredCaller", "configure"]

# States of a once() wrapper.
_ARMED = "armed"      # func has not been called.
_RUNNING = "running"  # The first call is in progress.
_FIRED = "fired"      # func returned; its result is cached.
_FAILED = "failed"    # func raised; its exception is cached.


def _check_callable(func:Any, combinator:str) -> None:
    if not callable(func):
        raise TypeError(f"{combinator}() requires a callable, got {type(func).__name__}.")


def once(func:Callable) -> Callable:
    """ Return a wrapper that calls <func> on its first invocation only. Arguments of that first call are forwarded.
        Every later call returns the first result without calling <func>, ignoring its arguments.
        If the first call raised an Exception, later calls raise the same exception object again with its original
        traceback. A BaseException that is not an Exception (KeyboardInterrupt, SystemExit) re-arms the wrapper. """
    _check_callable(func, "once")
    lock = RLock()
    state = _ARMED
    outcome = None
    failure_tb = None  # Traceback of a failed first call. Re-raising would otherwise keep extending it.

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        nonlocal state, outcome, failure_tb
        with lock:
            if state is _ARMED:
                state = _RUNNING
                try:
                    outcome = func(*args, **kwargs)
                except Exception as e:
                    outcome = e
                    failure_tb = e.__traceback__
                    state = _FAILED
                    raise
                except BaseException:
                    state = _ARMED
                    raise
                state = _FIRED
            elif state is _RUNNING:
                # Only the thread holding the lock can get here, so this is a recursive call from func itself.
                raise RuntimeError(f"{func!r} called its own once() wrapper before returning.")
            if state is _FAILED:
                raise outcome.with_traceback(failure_tb)
            return outcome

    return wrapper


def memoize(func:Callable[[Hashable], Any]) -> Callable[[Hashable], Any]:
    """ Return a single-argument wrapper that caches the result of <func> for each distinct argument.
        Arguments must be hashable; anything else raises TypeError. The cache is unbounded and never evicts,
        so memory use grows with the number of distinct arguments. That is for the caller to bound.
        Keys are matched by dict equality, so equal keys of different types (1, 1.0 and True) share one entry.
        Exceptions from <func> propagate and leave nothing cached. """
    _check_callable(func, "memoize")
    lock = RLock()
    memo:Dict[Hashable, Any] = {}

    @functools.wraps(func)
    def wrapper(key):
        with lock:
            try:
                return memo[key]
            except KeyError:
                pass
            # The lock is reentrant, so func may recurse through this wrapper (e.g. a memoized fibonacci).
            result = memo[key] = func(key)
            return result

    return wrapper


class DeferredCaller:
    """ Schedules calls on timer threads and routes their failures to an exception handler. """

    def __init__(self, exc_handler:Optional[ExceptionHandler]=None, *, daemon=True) -> None:
        self._exc_handler = exc_handler  # Receives failures. Unhandled ones (or all of them with None) are re-raised.
        self._daemon = daemon            # If True, pending timers do not keep the interpreter alive.

    @classmethod
    def from_settings(cls, settings:Settings) -> "DeferredCaller":
        """ Log failures to the configured streams, then consider them handled. """
        logger = open_logger(*settings["log_files"], to_stderr=settings["log_stderr"],
                             time_fmt=settings["time_fmt"], repeat_mark=settings["repeat_mark"])
        handler = CompositeExceptionHandler(ExceptionLogger(logger.log, max_frames=settings["max_frames"]),
                                            ExceptionEater())
        return cls(handler, daemon=settings["delay_daemon"])

    def _run(self, func:Callable, args:tuple, kwargs:dict) -> None:
        try:
            func(*args, **kwargs)
        except Exception:
            if self._exc_handler is None or not self._exc_handler(*sys.exc_info()):
                raise

    def __call__(self, func:Callable, wait:float, *args, **kwargs) -> Timer:
        """ Call func(*args, **kwargs) after <wait> milliseconds. Return the started timer, which may be cancelled. """
        _check_callable(func, "delay")
        if wait < 0:
            raise ValueError(f"Delay must not be negative, got {wait} ms.")
        timer = Timer(wait / 1000, self._run, (func, args, kwargs))
        timer.daemon = self._daemon
        timer.start()
        return timer


_default_caller = DeferredCaller.from_settings(Settings())


def configure(settings:Settings) -> None:
    """ Replace the caller behind delay() with one built from <settings>. Timers already started are unaffected. """
    global _default_caller
    _default_caller = DeferredCaller.from_settings(settings)


def delay(func:Callable, wait:float, *args, **kwargs) -> Timer:
    """ Call func(*args, **kwargs) after <wait> milliseconds, e.g. delay(f, 500, 'a', 'b') calls f('a', 'b'). """
    return _default_caller(func, wait, *args, **kwargs)
