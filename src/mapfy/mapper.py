from collections.abc import Iterable
from typing import Any, TypeVar

from mapfy.mapping.exceptions import MappingNotFoundError
from mapfy.mapping.registry import TypeMapRegistry
from mapfy.mapping.type_map import TypeMap

_S = TypeVar("_S")
_D = TypeVar("_D")


class Mapper:
    """Maps source instances to destination types through sealed type maps.

    A Mapper is created by ``MapperConfiguration.seal()``. It holds no mutable
    state, so one instance can be shared by any number of threads.

    Example::

        mapper = configuration.seal()
        dto = mapper.map(order, OrderDto)
        dtos = mapper.map_each(orders, OrderDto)
    """

    def __init__(self, type_maps: TypeMapRegistry) -> None:
        self._type_maps = type_maps

    @property
    def type_maps(self) -> TypeMapRegistry:
        return self._type_maps

    def find_type_map(
        self, source_type: type[_S], destination_type: type[_D]
    ) -> TypeMap[_S, _D] | None:
        """Return the map registered for exactly this pair, if any."""
        return self._type_maps.lookup_types(source_type, destination_type)

    def _resolve(
        self, source: Any, destination_type: Any, source_type: Any | None
    ) -> TypeMap[Any, Any]:
        if source_type is not None:
            type_map = self._type_maps.lookup_types(source_type, destination_type)
            if type_map is None:
                raise MappingNotFoundError(source_type, destination_type)
            return type_map

        type_map = self._type_maps.lookup_types(type(source), destination_type)
        if type_map is None:
            type_map = self._type_maps.find_assignable(source, destination_type)
        if type_map is None:
            raise MappingNotFoundError(type(source), destination_type)
        return type_map

    def map(
        self,
        source: Any,
        destination_type: type[_D],
        *,
        source_type: type[Any] | None = None,
    ) -> _D | None:
        """Map ``source`` to a new instance of ``destination_type``.

        With ``source_type`` the map registered for exactly that pair is used.
        Otherwise the map is chosen by the runtime type of ``source``: the
        exact pair if registered, else the first map (in registration order)
        to ``destination_type`` whose source type ``source`` is an instance of.

        Returns:
            The new destination instance, or None if ``source`` is None.

        Raises:
            MappingNotFoundError: If no registered map applies.
            ValueParseError: If text could not be parsed into an enumeration
                member or identifier.
        """
        if source is None:
            return None
        return self._resolve(source, destination_type, source_type).map(source)

    def map_each(
        self,
        sources: Iterable[Any],
        destination_type: type[_D],
        *,
        source_type: type[Any] | None = None,
    ) -> list[_D | None]:
        """Map every element of ``sources``, preserving order."""
        return [self.map(it, destination_type, source_type=source_type) for it in sources]
