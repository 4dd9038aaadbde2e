"""Converter for union types (Union[X, Y], X | Y and Optional[X]).

Optional members are the common case: ``None`` is stripped from both sides,
and when a single member remains on each side the inner converter is wrapped
so that None passes through untouched.

General unions are handled by trying converters based on the runtime value's
type. Converters are grouped by their source origin type and selected using
the value's MRO for efficient lookup.

Example:
    Converting ``int | str`` to ``float | None``:
    - For an int value: only tries int -> float
    - For a str value: only tries str -> float
    - For a bool value: finds int in MRO, tries int -> float
"""

from collections.abc import Sequence
from types import NoneType
from typing import Any, get_origin

from mapfy.conversion.exceptions import ConversionError, UnconvertibleValueError, ValueParseError
from mapfy.conversion.noop import NoOpConverter
from mapfy.conversion.registry import Converter, ConverterFactory, ConverterRegistry
from mapfy.utils.collections import group_pairs
from mapfy.utils.types.annotations import is_union, union_members, unwrap


class _IncompatibleUnion(Exception):
    """Raised internally when union members cannot all be converted."""


def _get_source_origin(source_tp: Any) -> Any:
    """Get the origin type for grouping converters (e.g., list for list[int])."""
    stripped = unwrap(source_tp)
    return get_origin(stripped) or stripped


def _non_none_members(tp: Any) -> list[Any]:
    return [it for it in union_members(tp) if it is not NoneType]


class OptionalConverter(Converter[Any, Any]):
    """Converter that lets None through and delegates everything else.

    Attributes:
        _inner: Converter for the non-None member.
    """

    def __init__(self, inner: Converter[Any, Any]) -> None:
        self._inner = inner

    def matches(self, source_tp: Any, target_tp: Any) -> bool:
        return is_union(source_tp) or is_union(target_tp)

    def convert(self, source: Any) -> Any:
        if source is None:
            return None
        return self._inner.convert(source)


class UnionConverter(Converter[Any, Any]):
    """Converter that handles union types using MRO-based lookup.

    Converters are grouped by their source origin type. At runtime, the
    value's type MRO is used to find applicable converters, avoiding
    unnecessary attempts with incompatible converters.

    Attributes:
        _target_tp: The target union type (for error messages).
        _converters_by_origin: Converters grouped by source origin type.
        _any_converters: Converters with Any as source (tried for all values).
    """

    def __init__(
        self,
        target_tp: Any,
        converters_by_origin: dict[type, list[Converter[Any, Any]]],
        any_converters: list[Converter[Any, Any]],
    ) -> None:
        self._target_tp = target_tp
        self._converters_by_origin = converters_by_origin
        self._any_converters = any_converters

    def matches(self, source_tp: Any, target_tp: Any) -> bool:
        return is_union(source_tp) or is_union(target_tp)

    def convert(self, source: Any) -> Any:
        if source is None:
            return None

        candidates = [
            conv
            for origin in type(source).__mro__
            for conv in self._converters_by_origin.get(origin, [])
        ] + self._any_converters

        parse_error: ValueParseError | None = None
        for converter in candidates:
            try:
                return converter.convert(source)
            except ValueParseError as exc:
                parse_error = parse_error or exc
            except ConversionError:
                continue

        # Parse failures stay fatal once no other member accepts the value
        if parse_error is not None:
            raise parse_error
        raise UnconvertibleValueError(source, self._target_tp)


class UnionConverterFactory(ConverterFactory[Any, Any]):
    """Factory that creates converters for union type transformations.

    This factory matches when either source or target is a union type.
    ``None`` members are dropped from both sides before resolving, since
    None values are never converted.
    """

    def matches(self, source_tp: Any, target_tp: Any) -> bool:
        return is_union(source_tp) or is_union(target_tp)

    def converter(
        self, source_tp: Any, target_tp: Any, registry: ConverterRegistry
    ) -> Converter[Any, Any] | None:
        source_members = _non_none_members(source_tp)
        target_members = _non_none_members(target_tp)

        if not source_members or not target_members:
            return None

        # Optional fast path: a single member on each side
        if len(source_members) == 1 and len(target_members) == 1:
            inner = registry.resolve(source_members[0], target_members[0])
            return OptionalConverter(inner) if inner is not None else None

        try:
            origin_converters = [
                self._resolve_member(sm, target_members, registry) for sm in source_members
            ]
        except _IncompatibleUnion:
            return None

        def noop_first(conv: Converter[Any, Any]) -> int:
            return 0 if isinstance(conv, NoOpConverter) else 1

        any_converters = sorted(
            [conv for origin, conv in origin_converters if origin is Any or origin is object],
            key=noop_first,
        )

        converters_by_origin = group_pairs(
            (origin, conv)
            for origin, conv in origin_converters
            if origin is not Any and origin is not object
        )
        for convs in converters_by_origin.values():
            convs.sort(key=noop_first)

        return UnionConverter(unwrap(target_tp), converters_by_origin, any_converters)

    def _resolve_member(
        self,
        source_member: Any,
        target_members: Sequence[Any],
        registry: ConverterRegistry,
    ) -> tuple[Any, Converter[Any, Any]]:
        """Resolve a source member to (origin, converter). Raises _IncompatibleUnion on failure."""
        conv = self._best_converter(source_member, target_members, registry)
        if conv is None:
            raise _IncompatibleUnion()
        return (_get_source_origin(source_member), conv)

    def _best_converter(
        self, source_tp: Any, target_tps: Sequence[Any], registry: ConverterRegistry
    ) -> Converter[Any, Any] | None:
        converters = [
            converter
            for target_tp in target_tps
            if (converter := registry.resolve(source_tp, target_tp)) is not None
        ]
        if (
            noop_converter := next((it for it in converters if isinstance(it, NoOpConverter)), None)
        ) is not None:
            return noop_converter
        return next(iter(converters), None)
