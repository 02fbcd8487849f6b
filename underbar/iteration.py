""" Utility module for iteration over collections. A collection is a sequence or a mapping.
    Several names here (filter, map, reduce) shadow builtins; nothing in this module uses the builtin versions. """

import operator
import random
from collections.abc import Mapping
from typing import Any, Callable, Iterable, List, Optional

__all__ = ["first", "last", "each", "index_of", "filter", "reject", "map", "pluck", "invoke",
           "reduce", "contains", "every", "some", "sort_by", "shuffle"]

_MISSING = object()  # Stands in for an omitted argument where None is a legitimate value.


def _values(collection) -> Iterable:
    """ Mappings iterate over their values; anything else iterates as-is. """
    return collection.values() if isinstance(collection, Mapping) else collection


def first(array, n:int=None):
    """ Return the first element of <array>, or None if it is empty.
        With <n>, return a new list of the first <n> elements instead. """
    if n is None:
        return array[0] if array else None
    return list(array[:n])


def last(array, n:int=None):
    """ Like first, but from the end. If <n> is larger than the array, the whole array is returned. """
    if n is None:
        return array[-1] if array else None
    # array[-0:] would be the whole array, so slice from an absolute index.
    start = max(len(array) - n, 0)
    return list(array[start:])


def each(collection, iterator:Callable) -> None:
    """ Call iterator(value, key, collection) for each item. Sequence keys are indices. """
    items = collection.items() if isinstance(collection, Mapping) else enumerate(collection)
    for key, value in items:
        iterator(value, key, collection)


def index_of(array, target) -> int:
    """ Return the index of the first element equal to <target>, or -1 if there is none. """
    for i, item in enumerate(array):
        if item == target:
            return i
    return -1


def filter(collection, predicate:Callable[[Any], Any]) -> list:
    """ Return a new list of the elements that pass <predicate>. """
    return [item for item in _values(collection) if predicate(item)]


def reject(collection, predicate:Callable[[Any], Any]) -> list:
    """ Return a new list of the elements that fail <predicate>. """
    return [item for item in _values(collection) if not predicate(item)]


def map(collection, iterator:Callable[[Any], Any]) -> list:
    return [iterator(item) for item in _values(collection)]


def pluck(collection, name:str) -> list:
    """ Return the value of key or attribute <name> from each element that has one. Others are skipped. """
    values = []
    for item in _values(collection):
        if isinstance(item, Mapping):
            if name in item:
                values.append(item[name])
        elif hasattr(item, name):
            values.append(getattr(item, name))
    return values


def invoke(collection, method, *args) -> list:
    """ Call <method> on each element with <args> and return the results.
        <method> may be a function taking the element first, or the name of a method to look up on each element. """
    if callable(method):
        return [method(item, *args) for item in _values(collection)]
    call = operator.methodcaller(method, *args)
    return [call(item) for item in _values(collection)]


def reduce(collection:Iterable, iterator:Callable[[Any, Any], Any], initial:Any=_MISSING) -> Any:
    """ Fold <collection> left to right into one value, calling iterator(accumulator, element) for each element.
        If <initial> is omitted, the accumulator starts at 0. An explicit falsy <initial> is used as given.
        This is a loop rather than a recursion on the tail, so stack depth does not grow with the input. """
    accumulator = 0 if initial is _MISSING else initial
    for item in collection:
        accumulator = iterator(accumulator, item)
    return accumulator


def contains(collection, target) -> bool:
    """ Return True if any element equals <target>. Mappings are tested by value, not key. """
    for item in _values(collection):
        if item == target:
            return True
    return False


def every(collection, predicate:Optional[Callable[[Any], Any]]=None) -> bool:
    """ Return True if all elements pass <predicate> (default: truthiness). True for an empty collection. """
    test = predicate or bool
    for item in _values(collection):
        if not test(item):
            return False
    return True


def some(collection, predicate:Optional[Callable[[Any], Any]]=None) -> bool:
    """ Return True if any element passes <predicate> (default: truthiness). False for an empty collection. """
    test = predicate or bool
    for item in _values(collection):
        if test(item):
            return True
    return False


def _key_getter(name:str) -> Callable[[Any], Any]:
    def get(item):
        if isinstance(item, Mapping):
            return item[name]
        return getattr(item, name)
    return get


def sort_by(collection, criterion) -> list:
    """ Return a new list of the values sorted by <criterion>. The sort is stable.
        <criterion> is a key function, or a string naming a key (for mappings) or attribute (for other objects). """
    key = _key_getter(criterion) if isinstance(criterion, str) else criterion
    return sorted(_values(collection), key=key)


def shuffle(array, rng:random.Random=None) -> List[Any]:
    """ Return a shuffled copy of <array>. The original is left alone. """
    shuffled = list(array)
    (rng or random).shuffle(shuffled)
    return shuffled
