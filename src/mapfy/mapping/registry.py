from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from logging import getLogger
from typing import TYPE_CHECKING, Any, Generator

from mapfy.conversion.registry import ConverterRegistry, ConverterRegistryEntry
from mapfy.mapping.converters import mapping_converter_registry
from mapfy.mapping.exceptions import CyclicMappingError, MappingConfigurationError
from mapfy.mapping.type_pair import TypePair
from mapfy.utils.types.equivalence import is_assignable

if TYPE_CHECKING:
    from mapfy.mapping.type_map import TypeMap

logger = getLogger(__name__)


class TypeMapRegistry:
    """All type maps of one configuration, keyed by TypePair.

    The registry is populated while configuring, then sealed. Sealing builds
    every map, after which the registry is read-only and safe to share
    between threads.

    Attributes:
        _type_maps: Registered maps, in registration order.
        _building: Pairs whose compiled function is currently being built,
            outermost first.
    """

    def __init__(self) -> None:
        self._type_maps: dict[TypePair, TypeMap[Any, Any]] = {}
        self._building: list[TypePair] = []
        self._converters: ConverterRegistry | None = None

    @property
    def is_sealed(self) -> bool:
        return self._converters is not None

    @property
    def converters(self) -> ConverterRegistry:
        if self._converters is None:
            raise RuntimeError("Type map registry has not been sealed")
        return self._converters

    def register(self, type_map: TypeMap[Any, Any]) -> None:
        """Register a type map; a later map for the same pair replaces the earlier one."""
        if self.is_sealed:
            raise MappingConfigurationError(
                f"Cannot register {type_map.pair} after the configuration was sealed.\n"
                "Hint: declare every type map before calling seal()"
            )
        if type_map.pair in self._type_maps:
            logger.debug("Replacing previously registered type map for %s", type_map.pair)
            # Re-insert so iteration follows the latest registration
            del self._type_maps[type_map.pair]
        self._type_maps[type_map.pair] = type_map

    def lookup(self, pair: TypePair) -> TypeMap[Any, Any] | None:
        return self._type_maps.get(pair)

    def lookup_types(self, source: Any, destination: Any) -> TypeMap[Any, Any] | None:
        return self._type_maps.get(TypePair(source, destination))

    def find_for_type(self, source: Any, destination: Any) -> TypeMap[Any, Any] | None:
        """Find the map for a declared source type.

        Returns the exact pair if registered, otherwise the first map in
        registration order whose destination is ``destination`` and whose
        source type is assignable from ``source``.
        """
        if (exact := self.lookup_types(source, destination)) is not None:
            return exact
        return next(
            (
                it
                for it in self._type_maps.values()
                if it.pair.destination == destination and is_assignable(source, it.pair.source)
            ),
            None,
        )

    def find_assignable(self, source: Any, destination: Any) -> TypeMap[Any, Any] | None:
        """Find the first map, in registration order, that accepts the instance ``source``.

        A map accepts the instance when its destination is ``destination`` and
        ``isinstance(source, map_source)`` holds, which covers subclasses, ABCs
        and runtime-checkable protocols. Source types ``isinstance`` cannot
        check (plain protocols, parameterised generics) never match.
        """
        for type_map in self._type_maps.values():
            if type_map.pair.destination != destination:
                continue
            try:
                if isinstance(source, type_map.pair.source):
                    return type_map
            except TypeError:
                continue
        return None

    @contextmanager
    def building(self, pair: TypePair) -> Generator[None]:
        """Track ``pair`` as being compiled for the duration of the block.

        Raises:
            CyclicMappingError: If ``pair`` is already being compiled further up
                the dependency chain.
        """
        if pair in self._building:
            start = self._building.index(pair)
            raise CyclicMappingError([*self._building[start:], pair])
        self._building.append(pair)
        try:
            yield
        finally:
            self._building.pop()

    def seal(self, *extra_converters: ConverterRegistryEntry) -> ConverterRegistry:
        """Freeze the registry and build every registered type map.

        Reflective maps are built first, since they never depend on other maps
        being built; compiled maps are built afterwards, building the compiled
        maps they depend on as needed. Sealing twice is a no-op.

        Args:
            extra_converters: Converters tried before the default ones.

        Returns:
            The converter registry the maps were built with.
        """
        if self._converters is not None:
            return self._converters

        converters = mapping_converter_registry(self, *extra_converters)
        logger.debug("Sealing %d type maps", len(self._type_maps))

        ordered = sorted(self._type_maps.values(), key=lambda it: it.is_compiled)
        for type_map in ordered:
            type_map.build(converters, self)

        self._converters = converters
        return converters

    def __iter__(self) -> Iterator[TypeMap[Any, Any]]:
        return iter(self._type_maps.values())

    def __len__(self) -> int:
        return len(self._type_maps)

    def __contains__(self, pair: object) -> bool:
        return pair in self._type_maps
