from collections import deque
from collections.abc import Sequence
from typing import Any, Generic, TypeVar

import pytest

from mapfy.utils.types.params import element_type


@pytest.mark.parametrize(
    ("tp", "expected"),
    [
        (list[int], int),
        (set[str], str),
        (frozenset[bytes], bytes),
        (deque[float], float),
        (tuple[str, ...], str),
        (tuple[int, int], int),
        (tuple[int, str], Any),
        (Sequence[int], int),
        (list, Any),
        (tuple, Any),
    ],
)
def test_element_type(tp, expected) -> None:
    assert element_type(tp) == expected


def test_element_type_of_generic_subclass() -> None:
    T = TypeVar("T")

    class Batch(list[T], Generic[T]):
        pass

    class IntBatch(Batch[int]):
        pass

    class NestedBatch(IntBatch):
        pass

    assert element_type(IntBatch) is int
    assert element_type(NestedBatch) is int
    assert element_type(Batch[str]) is str
    assert element_type(Batch) is Any
