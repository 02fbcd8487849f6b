""" Utility module for shallow merges of mappings. Both functions mutate and return their first argument. """

from typing import Mapping, MutableMapping

__all__ = ["extend", "defaults"]


def extend(obj:MutableMapping, *sources:Mapping) -> MutableMapping:
    """ Copy every key from each source into <obj> in order. Later sources overwrite earlier ones. """
    for source in sources:
        obj.update(source)
    return obj


def defaults(obj:MutableMapping, *sources:Mapping) -> MutableMapping:
    """ Like extend, but never overwrite a key that is already in <obj>. """
    for source in sources:
        for k, v in source.items():
            obj.setdefault(k, v)
    return obj
