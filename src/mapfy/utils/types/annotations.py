import typing
from dataclasses import dataclass
from types import NoneType, UnionType
from typing import Any, ClassVar, Final, Required, NotRequired, Self, Union, get_args, get_origin

from sqlalchemy.orm import Mapped

#: Wrappers that qualify a member declaration without changing its value type
DEFAULT_QUALIFIERS = (Mapped, Required, NotRequired, ClassVar, Final)


@dataclass(frozen=True, kw_only=True, slots=True)
class TypeAnnotation:
    """A member annotation split into its value type, qualifiers and metadata.

    ``Annotated[Mapped[int], "doc"]`` becomes ``tp=int``, ``qualifiers=(Mapped,)``
    and ``metadata=("doc",)``. Bare ``ClassVar`` and ``Final`` qualify ``Any``.
    """

    tp: Any
    qualifiers: tuple[Any, ...]
    metadata: tuple[Any, ...]

    @classmethod
    def create(
        cls,
        annotation: Any,
        known_qualifiers: tuple[Any, ...] = DEFAULT_QUALIFIERS,
    ) -> Self:
        tp, qualifiers, metadata = cls._walk_tp(annotation, known_qualifiers)
        return cls(tp=tp, qualifiers=qualifiers, metadata=metadata)

    @classmethod
    def _walk_tp(
        cls,
        annotation: Any,
        known_qualifiers: tuple[Any, ...],
    ) -> tuple[Any, tuple[Any, ...], tuple[Any, ...]]:
        origin = get_origin(annotation)
        args = get_args(annotation)

        match origin, args:
            case typing.Annotated, (inner, *metadata):
                tp, inner_qualifiers, inner_metadata = cls._walk_tp(inner, known_qualifiers)
                return tp, inner_qualifiers, (*inner_metadata, *metadata)
            case qualifier, (inner,) if qualifier in known_qualifiers:
                tp, inner_qualifiers, inner_metadata = cls._walk_tp(inner, known_qualifiers)
                return tp, (qualifier, *inner_qualifiers), inner_metadata
            case None, () if annotation in known_qualifiers:
                return Any, (annotation,), ()
            case _:
                return annotation, (), ()

    def has_qualifier(self, qualifier: Any) -> bool:
        return any(it is qualifier for it in self.qualifiers)


def unwrap(tp: Any) -> Any:
    """Unwrap a type annotation, removing qualifiers like Mapped, Final, and Annotated.

    Args:
        tp: The type annotation to unwrap.

    Returns:
        The inner type with all wrappers removed.
    """
    return TypeAnnotation.create(tp).tp


def is_union(tp: Any) -> bool:
    """Check if a type annotation represents a union (``Union[X, Y]`` or ``X | Y``)."""
    origin = get_origin(unwrap(tp))
    return origin is Union or origin is UnionType


def union_members(tp: Any) -> tuple[Any, ...]:
    """Return the de-duplicated members of a union, or ``(tp,)`` for anything else."""
    stripped = unwrap(tp)
    if not is_union(stripped):
        return (stripped,)
    return tuple(dict.fromkeys(get_args(stripped)))


def strip_optional(tp: Any) -> Any:
    """Remove ``None`` from a union, collapsing ``X | None`` to ``X``.

    Unions with more than one non-None member are returned unchanged apart
    from the dropped ``None``.
    """
    if not is_union(tp):
        return unwrap(tp)
    members = tuple(it for it in union_members(tp) if it is not NoneType)
    match members:
        case ():
            return NoneType
        case (single,):
            return single
        case _:
            return Union[members]


def is_class(tp: Any) -> bool:
    """Check if ``tp`` is a plain class, not a parameterised generic like ``list[int]``."""
    return isinstance(tp, type) and get_origin(tp) is None
