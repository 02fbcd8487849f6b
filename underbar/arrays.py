""" Utility module for array-shape transforms: zipping, flattening and set-like operations on lists.
    Element comparison uses ==, so unhashable elements work everywhere (at quadratic cost). """

from collections.abc import Sequence
from itertools import zip_longest
from typing import Any, Iterator, List, Tuple

__all__ = ["ABSENT", "uniq", "zip", "flatten", "intersection", "difference"]


class _Absent:
    """ Marker for a position with no element. There is exactly one instance. """

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "ABSENT"

    def __reduce__(self):
        return "ABSENT"


ABSENT = _Absent()

# Sequences that are treated as single values rather than containers.
_LEAF_TYPES = (str, bytes, bytearray)


def _is_branch(obj:object) -> bool:
    return isinstance(obj, Sequence) and not isinstance(obj, _LEAF_TYPES)


def _unique(items) -> list:
    """ Return the first occurrence of each item in order. Hashable items take a fast path. """
    seen_hashable = set()
    seen_other = []
    result = []
    for item in items:
        try:
            if item in seen_hashable:
                continue
            seen_hashable.add(item)
        except TypeError:
            if item in seen_other:
                continue
            seen_other.append(item)
        result.append(item)
    return result


def uniq(array) -> list:
    """ Return a duplicate-free copy of <array>, keeping the first occurrence of each value. """
    return _unique(array)


def zip(*sequences, fill:Any=ABSENT) -> List[Tuple]:
    """ Zip sequences together by index. Row i contains element i of each sequence in argument order.
        The result is as long as the *longest* sequence; shorter ones are padded with <fill>. """
    return list(zip_longest(*sequences, fillvalue=fill))


def flatten(nested) -> list:
    """ Collapse an arbitrarily nested sequence into a flat list of its leaves in depth-first order.
        A non-sequence (or a string) is a leaf; on its own it flattens to a one-element list.
        An explicit stack of iterators replaces recursion, so nesting depth is not limited by the call stack.
        A sequence that contains itself raises ValueError instead of looping forever. """
    if not _is_branch(nested):
        return [nested]
    result = []
    stack:List[Iterator] = [iter(nested)]
    path = [id(nested)]  # ids of the sequences currently being walked, outermost first.
    open_ids = {id(nested)}
    while stack:
        for item in stack[-1]:
            if _is_branch(item):
                item_id = id(item)
                if item_id in open_ids:
                    raise ValueError(f"Cannot flatten a sequence that contains itself: {type(item).__name__} "
                                     f"at depth {len(path)}.")
                stack.append(iter(item))
                path.append(item_id)
                open_ids.add(item_id)
                break
            result.append(item)
        else:
            # The innermost iterator is exhausted; resume its parent.
            stack.pop()
            open_ids.discard(path.pop())
    return result


def intersection(*arrays) -> list:
    """ Return the unique values of the first array that are present in every other array. """
    if not arrays:
        return []
    head, *others = arrays
    return [item for item in _unique(head) if all(item in other for other in others)]


def difference(array, *others) -> list:
    """ Return the elements of <array> present in none of <others>. Order and duplicates are kept. """
    return [item for item in array if not any(item in other for other in others)]
