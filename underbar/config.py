""" Module for read-only library settings stored in the .cfg file format. """

import ast
import copy
from configparser import ConfigParser
from typing import Any, Dict

ConfigDict = Dict[str, Any]
NestedConfigDict = Dict[str, ConfigDict]


def eval_str(s:str) -> Any:
    """ Try to evaluate a string as a Python literal. This fixes crap like bool('False') = True.
        Strings that read as names will throw an error, in which case they are left as-is. """
    try:
        return ast.literal_eval(s)
    except (SyntaxError, ValueError):
        return s


class ConfigIO:
    """ Reads CFG files and converts their contents to Python values. Settings are never written back. """

    def __init__(self, *, from_str=eval_str, encoding='utf-8') -> None:
        self._from_str = from_str  # Converts input strings to values.
        self._encoding = encoding

    def read(self, filename:str) -> NestedConfigDict:
        """ Read a CFG file into a nested mapping of section -> name -> value. """
        parser = ConfigParser(interpolation=None)
        with open(filename, 'r', encoding=self._encoding) as fp:
            parser.read_file(fp)
        return {sect: {name: self._from_str(s) for name, s in parser[sect].items()}
                for sect in parser.sections()}


class SimpleConfigDict(ConfigDict):
    """ Configuration dict corresponding to one section of a CFG file. """

    def __init__(self, filename:str=None, sect="general", *, io:ConfigIO=None) -> None:
        super().__init__()
        self._filename = filename    # CFG file path. With None, reads always fail.
        self._sect = sect            # Name of our CFG file section.
        self._io = io or ConfigIO()

    def read(self) -> bool:
        """ Try to read options from the CFG file. Return True if successful. """
        if self._filename is None:
            return False
        try:
            cfg = self._io.read(self._filename)
        except OSError:
            return False
        self.update(cfg.get(self._sect, ()))
        return True


class Settings(SimpleConfigDict):
    """ The [underbar] section. Starts out filled with defaults; a successful read overrides them key by key. """

    DEFAULTS = {"log_files":    [],
                "log_stderr":   True,
                "time_fmt":     "[%b %d %Y %H:%M:%S]: ",
                "repeat_mark":  "*",
                "max_frames":   20,
                "delay_daemon": True}

    def __init__(self, filename:str=None, **kwargs) -> None:
        super().__init__(filename, "underbar", **kwargs)
        # Copied so that mutable defaults are never shared between instances.
        self.update(copy.deepcopy(self.DEFAULTS))

    @classmethod
    def from_file(cls, filename:str) -> "Settings":
        """ Load settings from <filename>. A missing or unreadable file leaves the defaults. """
        self = cls(filename)
        self.read()
        return self
