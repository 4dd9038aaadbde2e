"""Mapping plans: the ordered steps that populate a destination instance.

A plan is pure data, built once per type map when the configuration is
sealed. Both execution strategies consume the same plan; they differ only in
how they carry the steps out.

For each settable destination member, in declaration order:

1. An ignored member gets no step.
2. A member with a custom resolver gets a CUSTOM step.
3. Otherwise a readable source member is matched by name. Without a match
   the member gets no step.
4. The step kind is DIRECT when the source type is assignable to the member
   type, COLLECTION when both are sequences, NESTED when a type map is
   registered for the pair, and CONVERT otherwise.
"""

from __future__ import annotations

import inspect
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from logging import getLogger
from typing import TYPE_CHECKING, Any

from mapfy.conversion.registry import ConverterRegistry
from mapfy.conversion.sequences import is_sequence_type, materializer
from mapfy.mapping.exceptions import MappingConfigurationError
from mapfy.mapping.members import (
    MemberDescriptor,
    index_by_name,
    name_key,
    readable_members,
    settable_members,
)
from mapfy.mapping.overrides import MemberOverride
from mapfy.mapping.type_pair import TypePair, type_name
from mapfy.utils.types.annotations import is_class, strip_optional, unwrap
from mapfy.utils.types.equivalence import is_assignable

if TYPE_CHECKING:
    from mapfy.mapping.registry import TypeMapRegistry
    from mapfy.mapping.type_map import TypeMap

logger = getLogger(__name__)


class StepKind(Enum):
    DIRECT = "direct"
    COLLECTION = "collection"
    NESTED = "nested"
    CONVERT = "convert"
    CUSTOM = "custom"


@dataclass(frozen=True, slots=True)
class MappingStep:
    """One instruction of a mapping plan.

    Attributes:
        kind: How the value is carried over.
        destination: The member being populated.
        source: The matched source member; None for CUSTOM steps.
        resolver: The custom resolver; only set for CUSTOM steps.
        result_tp: The declared result type of the custom resolver.
    """

    kind: StepKind
    destination: MemberDescriptor
    source: MemberDescriptor | None = None
    resolver: Callable[[Any], Any] | None = None
    result_tp: Any = Any

    @property
    def source_tp(self) -> Any:
        """The declared type of the value this step reads."""
        return self.source.tp if self.source is not None else self.result_tp

    def read(self, source: Any) -> Any:
        """Read this step's value from a source instance.

        A source member that was declared but never assigned reads as None.
        """
        if self.resolver is not None:
            return self.resolver(source)
        if self.source is not None:
            return getattr(source, self.source.name, None)
        return None


@dataclass(frozen=True, slots=True)
class MappingPlan:
    pair: TypePair
    construct: Callable[[], Any]
    steps: tuple[MappingStep, ...]


_VARIADIC = (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)


def parameterless_constructor(tp: Any) -> Callable[[], Any]:
    """Return a callable that creates an empty instance of ``tp``.

    Raises:
        MappingConfigurationError: If ``tp`` is abstract, a protocol, or its
            constructor has required parameters.
    """
    if not is_class(tp):
        raise MappingConfigurationError(f"Destination {tp!r} is not a class")
    if inspect.isabstract(tp) or getattr(tp, "_is_protocol", False):
        raise MappingConfigurationError(
            f"Destination {type_name(tp)} is abstract and cannot be instantiated.\n"
            "Hint: map to a concrete class"
        )
    try:
        signature = inspect.signature(tp)
    except (ValueError, TypeError):
        # No introspectable signature; assume the class can be called bare
        return tp

    required = [
        name
        for name, param in signature.parameters.items()
        if param.default is inspect.Parameter.empty and param.kind not in _VARIADIC
    ]
    if required:
        raise MappingConfigurationError(
            f"Destination {type_name(tp)} cannot be constructed without arguments: "
            f"required parameters {', '.join(required)}.\n"
            f"Hint: give {', '.join(required)} a default value"
        )
    return tp


def _custom_step(
    member: MemberDescriptor,
    resolver: Callable[[Any], Any],
    result_tp: Any,
    pair: TypePair,
    converters: ConverterRegistry,
) -> MappingStep:
    if (
        unwrap(result_tp) is not Any
        and not is_assignable(result_tp, member.tp)
        and converters.resolve(result_tp, member.tp) is None
    ):
        raise MappingConfigurationError(
            f"Custom resolver for {type_name(pair.destination)}.{member.name} ({pair}) "
            f"returns {type_name(result_tp)}, which cannot be converted to "
            f"{type_name(member.tp)}.\n"
            f"Hint: return a {type_name(member.tp)} from the resolver, or register a "
            f"map for ({type_name(result_tp)}, {type_name(member.tp)})"
        )
    return MappingStep(
        StepKind.CUSTOM,
        member,
        resolver=resolver,
        result_tp=result_tp,
    )


def _classify(
    source: MemberDescriptor,
    destination: MemberDescriptor,
    type_maps: TypeMapRegistry,
) -> StepKind:
    if is_assignable(source.tp, destination.tp):
        return StepKind.DIRECT

    source_tp = strip_optional(source.tp)
    destination_tp = strip_optional(destination.tp)
    if is_sequence_type(source_tp) and is_sequence_type(destination_tp):
        if materializer(destination_tp) is None:
            logger.warning(
                "No way to build %s for member %s; it will be left unpopulated",
                type_name(destination_tp),
                destination.name,
            )
        return StepKind.COLLECTION
    if type_maps.find_for_type(source_tp, destination_tp) is not None:
        return StepKind.NESTED
    return StepKind.CONVERT


def _check_overrides(type_map: TypeMap[Any, Any], settable: tuple[MemberDescriptor, ...]) -> None:
    names = {it.name for it in settable}
    unknown = [it.member for it in type_map.overrides if it.member not in names]
    if unknown:
        raise MappingConfigurationError(
            f"Overrides for {type_map.pair} name unknown destination members: "
            f"{', '.join(unknown)}"
        )


def build_plan(
    type_map: TypeMap[Any, Any],
    converters: ConverterRegistry,
    type_maps: TypeMapRegistry,
) -> MappingPlan:
    """Build the mapping plan for a type map.

    Args:
        type_map: The type map to plan; supplies the pair, overrides and case policy.
        converters: Registry used to check custom resolver results.
        type_maps: Registry used to recognise nested maps.

    Raises:
        MappingConfigurationError: If the destination cannot be constructed,
            an override names an unknown member, or a custom resolver's result
            cannot be converted to its member's type.
    """
    pair = type_map.pair
    construct = parameterless_constructor(pair.destination)
    settable = settable_members(pair.destination)
    _check_overrides(type_map, settable)
    source_index = index_by_name(readable_members(pair.source), type_map.case_insensitive)

    steps: list[MappingStep] = []
    for member in settable:
        match type_map.overrides.get(member.name):
            case MemberOverride(ignored=True):
                logger.debug("%s: %s is ignored", pair, member.name)
                continue
            case MemberOverride(resolver=resolver, result_tp=result_tp) if resolver is not None:
                steps.append(_custom_step(member, resolver, result_tp, pair, converters))
                continue

        source = source_index.get(name_key(member.name, type_map.case_insensitive))
        if source is None:
            logger.debug("%s: no source member for %s", pair, member.name)
            continue

        kind = _classify(source, member, type_maps)
        logger.debug("%s: %s <- %s (%s)", pair, member.name, source.name, kind.value)
        steps.append(MappingStep(kind, member, source=source))

    return MappingPlan(pair, construct, tuple(steps))
