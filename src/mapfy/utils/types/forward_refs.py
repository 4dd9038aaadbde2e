"""Utilities for resolving forward references in member annotations."""

from __future__ import annotations

from types import UnionType
from typing import Annotated, Any, ForwardRef, Literal, Union, get_args, get_origin

from typing_extensions import evaluate_forward_ref


def evaluate_annotation(annotation: Any, owner: type) -> Any:
    """Evaluate a member annotation declared on ``owner``, including nested forward refs.

    String annotations (from ``from __future__ import annotations`` or quoted
    names) are evaluated in the owner's module namespace. Qualifiers such as
    ``ClassVar`` and ``Final`` are allowed at the top level.

    Args:
        annotation: The raw annotation, as found in ``__annotations__``.
        owner: The class that declared the annotation.

    Returns:
        The annotation with all forward references resolved to actual types.

    Raises:
        NameError: If a referenced name is not defined in the owner's namespace.

    Example::

        class Library:
            books: list["Book"]


        class Book:
            pass


        evaluate_annotation(Library.__annotations__["books"], Library)  # list[Book]
    """
    if isinstance(annotation, str):
        annotation = ForwardRef(annotation, is_argument=False, is_class=True)
    if isinstance(annotation, ForwardRef):
        annotation = evaluate_forward_ref(annotation, owner=owner)
    return evaluate_forward_refs(annotation, owner)


def evaluate_forward_refs(tp: Any, owner: type) -> Any:
    """Recursively resolve forward references nested inside a parameterised type."""
    if isinstance(tp, str):
        return evaluate_forward_ref(ForwardRef(tp), owner=owner)

    if isinstance(tp, ForwardRef):
        return evaluate_forward_ref(tp, owner=owner)

    origin = get_origin(tp)
    args = get_args(tp)

    if origin is None or origin is Literal or not args:
        return tp

    if origin is Annotated:
        inner, *metadata = args
        return Annotated[evaluate_forward_refs(inner, owner), *metadata]

    evaluated_args = tuple(evaluate_forward_refs(arg, owner) for arg in args)
    if all(new is old for new, old in zip(evaluated_args, args, strict=True)):
        return tp

    # `UnionType` can't be subscripted - we need to use `Union` instead
    if origin is UnionType:
        origin = Union
    return origin[evaluated_args]
