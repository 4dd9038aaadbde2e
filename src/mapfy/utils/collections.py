"""Collection utility functions."""

from functools import reduce
from typing import Callable, Iterable, TypeVar

_K = TypeVar("_K")
_V = TypeVar("_V")


def group_pairs(pairs: Iterable[tuple[_K, _V]]) -> dict[_K, list[_V]]:
    """Group (key, value) pairs into a dict of lists by key.

    Example:
        >>> group_pairs([("a", 1), ("b", 2), ("a", 3)])
        {'a': [1, 3], 'b': [2]}
    """

    def accumulate(groups: dict[_K, list[_V]], pair: tuple[_K, _V]) -> dict[_K, list[_V]]:
        key, value = pair
        groups.setdefault(key, []).append(value)
        return groups

    return reduce(accumulate, pairs, {})


def index_first(items: Iterable[_V], key: Callable[[_V], _K]) -> dict[_K, _V]:
    """Index items by key, keeping the first item seen for each key.

    Example:
        >>> index_first(["Code", "code", "name"], str.casefold)
        {'code': 'Code', 'name': 'name'}
    """
    result: dict[_K, _V] = {}
    for item in items:
        result.setdefault(key(item), item)
    return result
