""" Module for the library's stream logger. Used to report failures that have no caller left to receive them. """

import sys
from threading import Lock
from time import strftime
from typing import List, Optional, TextIO


class StreamLogger:
    """ Writes messages to pre-opened text streams. One lock guards every write. """

    def __init__(self, *streams:TextIO, time_fmt:Optional[str]="[%b %d %Y %H:%M:%S]: ",
                 repeat_mark:Optional[str]="*") -> None:
        self._streams = list(streams)    # Writable text streams. Order is the write order.
        self._time_fmt = time_fmt        # time.strftime prefix. None means no timestamps.
        self._repeat_mark = repeat_mark  # Stand-in for an exact repeat of the last message. None disables.
        self._last_message = None        # Most recent message that was not a repeat.
        self._lock = Lock()

    def add_stream(self, stream:TextIO) -> None:
        with self._lock:
            self._streams.append(stream)

    def _format(self, message:str) -> str:
        if self._repeat_mark is not None:
            if message == self._last_message:
                message = self._repeat_mark
            else:
                self._last_message = message
        if self._time_fmt is not None:
            message = strftime(self._time_fmt) + message
        return message + '\n'

    def log(self, message:str) -> None:
        """ Write <message> to every stream with a trailing newline.
            A stream that fails is skipped; the others still get the message. """
        with self._lock:
            entry = self._format(message)
            for stream in self._streams:
                try:
                    stream.write(entry)
                    stream.flush()
                except (OSError, ValueError):
                    # Closed or broken stream.
                    continue


def open_logger(*filenames:str, encoding='utf-8', to_stdout=False, to_stderr=False, **kwargs) -> StreamLogger:
    """ Open a logger that appends to text files and/or prints to system streams.
        Log files stay open for the life of the process. """
    streams:List[TextIO] = [open(f, 'a', encoding=encoding) for f in filenames]
    if to_stdout:
        streams.append(sys.stdout)
    if to_stderr:
        streams.append(sys.stderr)
    return StreamLogger(*streams, **kwargs)
