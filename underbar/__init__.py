""" Package for generic collection and function-combinator primitives that could be useful in many applications.
    They are sorted into modules based on operation type, but are all accessible from the top-level package.
    Importing * from here shadows the builtins filter, map and zip. """

from .arrays import *
from .functional import *
from .iteration import *
from .objects import *
