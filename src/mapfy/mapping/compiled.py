"""The compiled execution strategy: one composed function per type map.

Every plan step is turned into an assignment once, when the configuration is
sealed. Converters are resolved from the declared member types at that point
and captured by the assignment, so a call does no type dispatch at all. The
assignments are then composed into a single ``(source) -> destination``
function.

Nested compiled maps are captured by reference to their own function, which
is why compiling a map may compile the maps it depends on first.
"""

import re
from collections.abc import Callable
from logging import getLogger
from typing import Any

from mapfy.conversion.exceptions import UnconvertibleValueError
from mapfy.conversion.noop import NoOpConverter
from mapfy.conversion.registry import Converter, ConverterRegistry
from mapfy.mapping.converters import TypeMapConverter
from mapfy.mapping.plan import MappingPlan, MappingStep, StepKind
from mapfy.mapping.type_pair import TypePair, type_name

logger = getLogger(__name__)

#: Populates one destination member from a source instance
Assignment = Callable[[Any, Any], None]


def function_name(pair: TypePair) -> str:
    """Name of the compiled function, e.g. ``map_Order_to_OrderDto``."""
    raw = f"map_{type_name(pair.source)}_to_{type_name(pair.destination)}"
    return re.sub(r"\W", "_", raw)


def _bound_function(converter: Converter[Any, Any]) -> Callable[[Any], Any]:
    if isinstance(converter, TypeMapConverter):
        return converter.function
    return converter.convert


def _copy(step: MappingStep) -> Assignment:
    read = step.read
    name = step.destination.name

    def assign(source: Any, destination: Any) -> None:
        setattr(destination, name, read(source))

    return assign


def _none_only(step: MappingStep) -> Assignment:
    read = step.read
    name = step.destination.name

    def assign(source: Any, destination: Any) -> None:
        if read(source) is None:
            setattr(destination, name, None)

    return assign


def _converted(step: MappingStep, convert: Callable[[Any], Any], pair: TypePair) -> Assignment:
    read = step.read
    name = step.destination.name

    def assign(source: Any, destination: Any) -> None:
        value = read(source)
        if value is None:
            setattr(destination, name, None)
            return
        try:
            converted = convert(value)
        except UnconvertibleValueError as exc:
            logger.debug("%s: leaving %s unpopulated: %s", pair, name, exc)
            return
        setattr(destination, name, converted)

    return assign


def _assignment(step: MappingStep, converters: ConverterRegistry, pair: TypePair) -> Assignment:
    if step.kind is StepKind.DIRECT:
        return _copy(step)

    converter = converters.resolve(step.source_tp, step.destination.tp)
    match converter:
        case None:
            logger.debug(
                "No conversion from %s to %s for %s; only None values are carried over",
                type_name(step.source_tp),
                type_name(step.destination.tp),
                step.destination.name,
            )
            return _none_only(step)
        case NoOpConverter():
            return _copy(step)
        case _:
            return _converted(step, _bound_function(converter), pair)


def compile_plan(plan: MappingPlan, converters: ConverterRegistry) -> Callable[[Any], Any]:
    """Compose the mapping function for a plan.

    Args:
        plan: The plan to compile.
        converters: Registry used to resolve each step's converter from the
            declared member types.

    Returns:
        The ``(source) -> destination`` function.
    """
    construct = plan.construct
    assignments = tuple(_assignment(step, converters, plan.pair) for step in plan.steps)

    def mapping_function(source: Any) -> Any:
        destination = construct()
        for assign in assignments:
            assign(source, destination)
        return destination

    name = function_name(plan.pair)
    mapping_function.__name__ = mapping_function.__qualname__ = name
    logger.debug("Compiled %s with %d assignments", name, len(assignments))
    return mapping_function
