from collections.abc import Sequence
from typing import Any, Optional, Protocol

import pytest
from sqlalchemy.orm import Mapped

from mapfy.utils.types.equivalence import is_assignable


class Animal:
    pass


class Dog(Animal):
    pass


class Named(Protocol):
    name: str


@pytest.mark.parametrize(
    ("source_tp", "target_tp"),
    [
        (int, int),
        (int, Any),
        (Any, Any),
        (str, object),
        (bool, int),
        (Dog, Animal),
        (Dog, Animal | None),
        (int, Optional[int]),
        (int | None, int | str | None),
        (list[int], list[int]),
        (Mapped[int], int),
        (list, Sequence),
    ],
)
def test_assignable(source_tp, target_tp):
    assert is_assignable(source_tp, target_tp)


@pytest.mark.parametrize(
    ("source_tp", "target_tp"),
    [
        (int, str),
        (int, float),
        (Any, int),
        (Animal, Dog),
        (int | None, int),
        (int | str, int | None),
        (list[int], list[str]),
        (list[Dog], list[Animal]),
        (list[int], list),
        (Dog, Named),
    ],
)
def test_not_assignable(source_tp, target_tp):
    assert not is_assignable(source_tp, target_tp)
