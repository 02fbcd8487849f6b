""" Exception handlers for failures raised away from their caller, such as inside a deferred call. """

from traceback import format_exception
from types import TracebackType
from typing import Any, Callable, List, Optional, Type

ExcType = Optional[Type[BaseException]]
ExcValue = Optional[BaseException]
ExcTraceback = Optional[TracebackType]


class ExceptionHandler:
    """ Abstract exception handler with the same signature as __exit__.
        Returns True if the exception was handled. """

    def __call__(self, exc_type:ExcType, exc_value:ExcValue, exc_tb:ExcTraceback) -> bool:
        raise NotImplementedError


class ExceptionEater(ExceptionHandler):
    """ GULP. """

    def __call__(self, *_) -> bool:
        return True


class ExceptionLogger(ExceptionHandler):
    """ Writes exception tracebacks to a string logger. """

    def __init__(self, logger:Callable[[str], Any], *, max_frames=20) -> None:
        self._logger = logger          # String logger callable. Its return value is ignored.
        self._max_frames = max_frames  # Maximum number of stack frames to write.

    def __call__(self, exc_type:ExcType, exc_value:ExcValue, exc_tb:ExcTraceback) -> bool:
        """ Log the traceback. This does *not* count as handling the exception. """
        tb_lines = format_exception(exc_type, exc_value, exc_tb, limit=self._max_frames)
        self._logger("".join(tb_lines))
        return False


class CompositeExceptionHandler(ExceptionHandler):
    """ Delegates to child handlers in order of addition. """

    def __init__(self, *handlers:ExceptionHandler) -> None:
        self._handlers:List[ExceptionHandler] = [*handlers]

    def add(self, handler:ExceptionHandler) -> None:
        self._handlers.append(handler)

    def __call__(self, exc_type:ExcType, exc_value:ExcValue, exc_tb:ExcTraceback) -> bool:
        """ Call each handler in turn until one (if any) returns True. """
        for handle_exception in self._handlers:
            if handle_exception(exc_type, exc_value, exc_tb):
                return True
        return False
