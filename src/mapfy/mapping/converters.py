"""Bridge between registered type maps and the converter registry.

Registering a type map for (Order, OrderDto) makes OrderDto a valid
conversion target for Order values everywhere a converter is resolved: as a
member value, as a collection element, or inside an optional.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from mapfy.conversion import STRUCTURAL_CONVERTERS, VALUE_CONVERTERS
from mapfy.conversion.registry import (
    Converter,
    ConverterFactory,
    ConverterRegistry,
    ConverterRegistryEntry,
)
from mapfy.utils.types.annotations import unwrap

if TYPE_CHECKING:
    from mapfy.mapping.registry import TypeMapRegistry
    from mapfy.mapping.type_map import TypeMap


class TypeMapConverter(Converter[Any, Any]):
    """Converter that maps a value through a registered type map.

    Attributes:
        type_map: The nested type map.
    """

    def __init__(self, type_map: TypeMap[Any, Any]) -> None:
        self.type_map = type_map

    def matches(self, source_tp: Any, target_tp: Any) -> bool:
        return unwrap(target_tp) == self.type_map.pair.destination

    def convert(self, source: Any) -> Any:
        return self.type_map.map(source)

    @property
    def function(self) -> Callable[[Any], Any]:
        """The nested map's own execution function, captured by compiled maps."""
        if self.type_map.is_built:
            return self.type_map.function
        return self.type_map.map

    def __repr__(self) -> str:
        return f"TypeMapConverter({self.type_map.pair})"


class TypeMapConverterFactory(ConverterFactory[Any, Any]):
    """Factory that resolves registered type maps as converters.

    The exact pair is preferred; otherwise the first registered map (in
    registration order) whose destination matches and whose source type is a
    base of the requested source type is used.

    Compiled maps are built on demand so their function can be captured by
    reference. Reflective maps are only referenced, never built here, which
    lets a compiled map depend on a reflective map that depends back on it.
    """

    def __init__(self, type_maps: TypeMapRegistry) -> None:
        self._type_maps = type_maps

    def matches(self, source_tp: Any, target_tp: Any) -> bool:
        return self._type_maps.find_for_type(unwrap(source_tp), unwrap(target_tp)) is not None

    def converter(
        self, source_tp: Any, target_tp: Any, registry: ConverterRegistry
    ) -> Converter[Any, Any] | None:
        nested = self._type_maps.find_for_type(unwrap(source_tp), unwrap(target_tp))
        if nested is None:
            return None
        if nested.is_compiled:
            nested.build(registry, self._type_maps)
        return TypeMapConverter(nested)


def mapping_converter_registry(
    type_maps: TypeMapRegistry, *extra: ConverterRegistryEntry
) -> ConverterRegistry:
    """Build the converter registry used while building and executing type maps.

    Caller-supplied converters come first, then the structural converters,
    then the registered type maps, then value conversions.
    """
    return ConverterRegistry(
        *extra,
        *STRUCTURAL_CONVERTERS,
        TypeMapConverterFactory(type_maps),
        *VALUE_CONVERTERS,
    )
