"""Discovery of the readable and writable members of a class.

A member is anything mapfy can read from a source instance or write to a
destination instance. Several kinds of class declare members differently, and
this module gives them one shape, :class:`MemberDescriptor`:

- annotated class attributes (plain classes, dataclasses, attrs classes)
- pydantic model fields and computed fields
- ``property`` objects (readable with a getter, writable with a setter)
- SQLAlchemy mapped attributes (columns, relationships, composites), including
  classically mapped ones that carry no annotation

Members are reported in declaration order, base classes first.
"""

import dataclasses
from collections.abc import Iterable
from dataclasses import dataclass
from functools import cache
from logging import getLogger
from typing import Any, ClassVar, Final, Literal

from pydantic import BaseModel
from typing_extensions import Format, get_annotations

from mapfy.utils.collections import index_first
from mapfy.utils.sa_fields import sa_mapped_attribute_types
from mapfy.utils.types.annotations import TypeAnnotation
from mapfy.utils.types.forward_refs import evaluate_annotation

logger = getLogger(__name__)

MemberKind = Literal["field", "property"]

#: Top-level modules whose classes contribute no members of their own
_FRAMEWORK_MODULES = frozenset(
    {
        "builtins",
        "typing",
        "typing_extensions",
        "abc",
        "collections",
        "enum",
        "pydantic",
        "sqlalchemy",
    }
)


@dataclass(frozen=True, slots=True)
class MemberDescriptor:
    """A name, a value type and access capabilities for one member.

    Attributes:
        name: The attribute name.
        tp: The member's value type with wrappers such as ``Mapped[]`` removed.
        kind: ``"field"`` for declared attributes, ``"property"`` for descriptors.
        readable: True if the member can be read from an instance.
        writable: True if the member can be assigned on an instance.
    """

    name: str
    tp: Any
    kind: MemberKind
    readable: bool = True
    writable: bool = True


def _is_framework_class(klass: type) -> bool:
    return klass.__module__.partition(".")[0] in _FRAMEWORK_MODULES


def _is_pydantic_model(tp: type) -> bool:
    return isinstance(tp, type) and issubclass(tp, BaseModel)


def _is_frozen(tp: type) -> bool:
    if (params := getattr(tp, "__dataclass_params__", None)) is not None and params.frozen:
        return True
    if _is_pydantic_model(tp) and tp.model_config.get("frozen", False):
        return True
    # attrs installs this __setattr__ on frozen classes
    return getattr(tp.__setattr__, "__name__", None) == "_frozen_setattrs"


def _is_init_var(tp: Any) -> bool:
    return tp is dataclasses.InitVar or isinstance(tp, dataclasses.InitVar)


def _dataclass_pseudo_fields(klass: type) -> set[str]:
    """Names of a dataclass's InitVar and ClassVar pseudo-fields."""
    if not dataclasses.is_dataclass(klass):
        return set()
    return set(klass.__dataclass_fields__) - {it.name for it in dataclasses.fields(klass)}


def _evaluate(annotation: Any, owner: type, name: str) -> TypeAnnotation:
    try:
        evaluated = evaluate_annotation(annotation, owner)
    except (NameError, TypeError, AttributeError, SyntaxError) as exc:
        logger.debug(
            "Could not evaluate annotation of %s.%s (%s); treating as Any",
            owner.__name__,
            name,
            exc,
        )
        evaluated = Any
    return TypeAnnotation.create(evaluated)


def _annotated_members(klass: type, frozen: bool) -> Iterable[MemberDescriptor]:
    annotations = get_annotations(klass, format=Format.FORWARDREF)
    pseudo_fields = _dataclass_pseudo_fields(klass)
    for name, annotation in annotations.items():
        if name.startswith("_") or name in pseudo_fields:
            continue
        parsed = _evaluate(annotation, klass, name)
        if parsed.has_qualifier(ClassVar) or _is_init_var(parsed.tp):
            continue
        writable = not (frozen or parsed.has_qualifier(Final))
        yield MemberDescriptor(name, parsed.tp, "field", readable=True, writable=writable)


def _property_members(klass: type) -> Iterable[MemberDescriptor]:
    for name, attr in vars(klass).items():
        if name.startswith("_") or not isinstance(attr, property):
            continue
        tp: Any = Any
        if attr.fget is not None:
            returns = get_annotations(attr.fget, format=Format.FORWARDREF).get("return")
            if returns is not None:
                tp = _evaluate(returns, klass, name).tp
        yield MemberDescriptor(
            name,
            tp,
            "property",
            readable=attr.fget is not None,
            writable=attr.fset is not None,
        )


def _pydantic_members(tp: type[BaseModel], frozen: bool) -> Iterable[MemberDescriptor]:
    for name, info in tp.model_fields.items():
        if name.startswith("_"):
            continue
        yield MemberDescriptor(
            name,
            TypeAnnotation.create(info.annotation).tp,
            "field",
            writable=not (frozen or bool(info.frozen)),
        )
    for name, info in tp.model_computed_fields.items():
        yield MemberDescriptor(name, info.return_type, "property", writable=False)


@cache
def describe_members(tp: type) -> tuple[MemberDescriptor, ...]:
    """Describe every public member of ``tp``, readable or writable.

    Results are cached per class; classes are not expected to change shape
    after they are first mapped.

    Args:
        tp: The class to inspect.

    Returns:
        The class's members in declaration order, base classes first. A
        member redeclared by a subclass keeps its original position and takes
        the subclass's declaration.
    """
    frozen = _is_frozen(tp)
    pydantic = _is_pydantic_model(tp)
    members: dict[str, MemberDescriptor] = {}

    if pydantic:
        members.update((it.name, it) for it in _pydantic_members(tp, frozen))

    for klass in reversed(tp.__mro__):
        if _is_framework_class(klass):
            continue
        if not pydantic:
            members.update((it.name, it) for it in _annotated_members(klass, frozen))
        members.update((it.name, it) for it in _property_members(klass))

    for name, attr_tp in sa_mapped_attribute_types(tp).items():
        if name not in members and not name.startswith("_"):
            members[name] = MemberDescriptor(name, attr_tp, "field")

    return tuple(members.values())


def settable_members(tp: type) -> tuple[MemberDescriptor, ...]:
    """Members of ``tp`` that can be assigned on an instance."""
    return tuple(it for it in describe_members(tp) if it.writable)


def readable_members(tp: type) -> tuple[MemberDescriptor, ...]:
    """Members of ``tp`` that can be read from an instance."""
    return tuple(it for it in describe_members(tp) if it.readable)


def name_key(name: str, case_insensitive: bool) -> str:
    return name.casefold() if case_insensitive else name


def index_by_name(
    members: Iterable[MemberDescriptor], case_insensitive: bool
) -> dict[str, MemberDescriptor]:
    """Index members by name under the given comparison; the first of colliding names wins."""
    return index_first(members, lambda it: name_key(it.name, case_insensitive))


def match_by_name(
    name: str, candidates: Iterable[MemberDescriptor], case_insensitive: bool
) -> MemberDescriptor | None:
    """Find the candidate whose name equals ``name``.

    Comparison is ordinal, or by ``str.casefold`` when ``case_insensitive``.

    Examples:
        >>> code = MemberDescriptor("Code", str, "field")
        >>> match_by_name("code", [code], case_insensitive=True).name
        'Code'
        >>> match_by_name("code", [code], case_insensitive=False) is None
        True
    """
    return index_by_name(candidates, case_insensitive).get(name_key(name, case_insensitive))
