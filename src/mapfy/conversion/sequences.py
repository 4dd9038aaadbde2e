"""Converter for sequence and collection types.

This module projects the elements of a source collection through an element
converter and materializes the result into the destination container type.
Elements resolve through the converter registry, so an element may be copied
as-is (assignable), mapped through a registered type map, or converted.

Recognized source types are any iterable except text, bytes and mappings.
Destination containers are materialized, in order of preference, as:
    - tuple (the array-like immutable sequence)
    - list, for ``list`` and any abstract type a list satisfies (Sequence, Iterable, ...)
    - set / frozenset, and ``set`` for abstract set types (AbstractSet, MutableSet)
    - any other concrete iterable class constructible from a single iterable

Example:
    Converting list[Order] to tuple[OrderDto, ...] maps each Order through its
    type map and collects the results into a tuple.
"""

import inspect
from collections.abc import Callable, Iterable, Mapping, Set
from logging import getLogger
from typing import Any, get_origin

from mapfy.conversion.registry import Converter, ConverterFactory, ConverterRegistry
from mapfy.utils.types.annotations import unwrap
from mapfy.utils.types.params import element_type

logger = getLogger(__name__)

#: Iterable types that are never treated as element sequences
NON_SEQUENCE_TYPES = (str, bytes, bytearray, memoryview, Mapping)

Materializer = Callable[[Iterable[Any]], Any]


def _origin(tp: Any) -> Any:
    stripped = unwrap(tp)
    return get_origin(stripped) or stripped


def is_sequence_type(tp: Any) -> bool:
    """Check if a type annotation is a recognized element sequence.

    Examples:
        >>> is_sequence_type(list[int]), is_sequence_type(tuple), is_sequence_type(str)
        (True, True, False)
    """
    origin = _origin(tp)
    return (
        isinstance(origin, type)
        and issubclass(origin, Iterable)
        and not issubclass(origin, NON_SEQUENCE_TYPES)
    )


def _accepts_single_iterable(container: type) -> bool:
    try:
        inspect.signature(container).bind(())
    except TypeError:
        return False
    except ValueError:
        # No introspectable signature (e.g. some builtins); assume the usual
        # ``Container(iterable)`` constructor.
        return True
    return True


def materializer(tp: Any) -> Materializer | None:
    """Find how to build a destination container of type ``tp`` from its elements.

    Args:
        tp: The destination collection type.

    Returns:
        A callable taking an iterable of elements and returning the container,
        or None if no materialization strategy exists for this type.
    """
    origin = _origin(tp)
    if not is_sequence_type(origin):
        return None

    if origin is tuple:
        return tuple
    if origin is list or (inspect.isabstract(origin) and issubclass(list, origin)):
        return list
    if origin is set or origin is frozenset:
        return origin
    if inspect.isabstract(origin) and issubclass(set, origin) and issubclass(origin, Set):
        return set
    if not inspect.isabstract(origin) and _accepts_single_iterable(origin):
        return origin
    return None


class SequenceConverter(Converter[Iterable[Any], Any]):
    """Converter that transforms collection contents by converting each element.

    None elements are kept as None.

    Attributes:
        _materialize: Builds the destination container from converted elements.
        _inner: Converter for transforming individual elements.
    """

    def __init__(self, materialize: Materializer, inner: Converter[Any, Any]) -> None:
        self._materialize = materialize
        self._inner = inner

    def matches(self, source_tp: Any, target_tp: Any) -> bool:
        return is_sequence_type(source_tp) and is_sequence_type(target_tp)

    def convert(self, source: Iterable[Any]) -> Any:
        return self._materialize(
            None if it is None else self._inner.convert(it) for it in source
        )


class SequenceConverterFactory(ConverterFactory[Iterable[Any], Any]):
    """Factory that creates converters for collection-to-collection transformations.

    This factory matches when both source and target are recognized sequence
    types. It resolves a converter for the element type, allowing nested type
    conversions, and a materializer for the destination container.
    """

    def matches(self, source_tp: Any, target_tp: Any) -> bool:
        return is_sequence_type(source_tp) and is_sequence_type(target_tp)

    def converter(
        self,
        source_tp: Any,
        target_tp: Any,
        registry: ConverterRegistry,
    ) -> Converter[Any, Any] | None:
        materialize = materializer(target_tp)
        if materialize is None:
            logger.debug("No materialization strategy for collection type %s", target_tp)
            return None

        source_elem = element_type(unwrap(source_tp))
        target_elem = element_type(unwrap(target_tp))

        inner_converter = registry.resolve(source_elem, target_elem)
        return (
            SequenceConverter(materialize, inner_converter)
            if inner_converter is not None
            else None
        )
