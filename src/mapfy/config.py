"""Fluent configuration of type maps.

Example::

    def configure(config: MapperConfiguration) -> None:
        (
            config.declare(Customer, CustomerDto)
            .for_member("full_name", map_from(lambda c: f"{c.first_name} {c.last_name}"))
            .for_member("province", map_from("state"))
            .for_member("internal_notes", ignore())
        )
        config.declare(Order, OrderDto).strategy(Strategy.REFLECTIVE)


    mapper = MapperConfiguration(configure).seal()
    dto = mapper.map(order, OrderDto)
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from operator import attrgetter
from typing import Any, Generic, TypeVar, get_type_hints

from mapfy.conversion.registry import ConverterRegistryEntry
from mapfy.mapper import Mapper
from mapfy.mapping.exceptions import MappingConfigurationError
from mapfy.mapping.members import match_by_name, readable_members, settable_members
from mapfy.mapping.registry import TypeMapRegistry
from mapfy.mapping.type_map import Strategy, TypeMap
from mapfy.mapping.type_pair import type_name

_S = TypeVar("_S")
_D = TypeVar("_D")


@dataclass(frozen=True, slots=True)
class Ignore:
    """Member option: leave the destination member at its default."""


@dataclass(frozen=True, slots=True)
class MapFrom:
    """Member option: populate the destination member from a resolver.

    Attributes:
        resolver: A single-argument callable over the source instance, or the
            name of a readable source member.
        result_type: Declared type of the resolver result. Defaults to the
            callable's return annotation, or the named source member's type.
    """

    resolver: Callable[[Any], Any] | str
    result_type: Any = None


MemberOption = Ignore | MapFrom


def ignore() -> Ignore:
    return Ignore()


def map_from(resolver: Callable[[Any], Any] | str, result_type: Any = None) -> MapFrom:
    return MapFrom(resolver, result_type)


def _return_type(fn: Callable[[Any], Any]) -> Any:
    try:
        return get_type_hints(fn).get("return", Any)
    except (NameError, TypeError, AttributeError):
        return Any


class TypeMapBuilder(Generic[_S, _D]):
    """Configures one declared type map. Every method returns the builder."""

    def __init__(self, configuration: MapperConfiguration, type_map: TypeMap[_S, _D]) -> None:
        self._configuration = configuration
        self.type_map = type_map

    def strategy(self, strategy: Strategy) -> TypeMapBuilder[_S, _D]:
        self.type_map.strategy = strategy
        return self

    def case_insensitive(self, value: bool = True) -> TypeMapBuilder[_S, _D]:
        self.type_map.case_insensitive = value
        return self

    def for_member(self, name: str, option: MemberOption) -> TypeMapBuilder[_S, _D]:
        """Override how one destination member is populated.

        Args:
            name: The destination member, matched under the map's case policy.
            option: ``ignore()`` or ``map_from(...)``. A later override for the
                same member replaces an earlier one.

        Raises:
            MappingConfigurationError: If ``name`` is not a settable member of
                the destination, or ``map_from`` names an unknown source member.
        """
        pair = self.type_map.pair
        case_insensitive = self.type_map.case_insensitive
        member = match_by_name(name, settable_members(pair.destination), case_insensitive)
        if member is None:
            raise MappingConfigurationError(
                f"{type_name(pair.destination)} has no settable member {name!r} ({pair}).\n"
                "Hint: members must be public and writable"
            )

        match option:
            case Ignore():
                self.type_map.overrides.set_ignored(member.name)
            case MapFrom(resolver=str() as source_name):
                source = match_by_name(
                    source_name, readable_members(pair.source), case_insensitive
                )
                if source is None:
                    raise MappingConfigurationError(
                        f"{type_name(pair.source)} has no readable member {source_name!r} "
                        f"to map {member.name} from ({pair})"
                    )
                result_tp = option.result_type if option.result_type is not None else source.tp
                self.type_map.overrides.set_custom(member.name, attrgetter(source.name), result_tp)
            case MapFrom(resolver=resolver) if callable(resolver):
                result_tp = (
                    option.result_type if option.result_type is not None else _return_type(resolver)
                )
                self.type_map.overrides.set_custom(member.name, resolver, result_tp)
            case _:
                raise MappingConfigurationError(f"Unsupported member option {option!r}")
        return self

    def seal(self) -> Mapper:
        """Seal the whole configuration this map belongs to."""
        return self._configuration.seal()


class MapperConfiguration:
    """Collects type map declarations and seals them into a Mapper.

    Args:
        configure: Optional callback invoked with the new configuration.
        converters: Converters or converter factories tried before the
            default ones, for conversions mapfy does not provide.
    """

    def __init__(
        self,
        configure: Callable[[MapperConfiguration], None] | None = None,
        *,
        converters: Iterable[ConverterRegistryEntry] = (),
    ) -> None:
        self._builders: list[TypeMapBuilder[Any, Any]] = []
        self._converters = tuple(converters)
        self._mapper: Mapper | None = None
        if configure is not None:
            configure(self)

    def declare(self, source: type[_S], destination: type[_D]) -> TypeMapBuilder[_S, _D]:
        """Declare a (source, destination) type map with default options.

        Declaring the same pair again replaces the earlier declaration.
        """
        if self._mapper is not None:
            raise MappingConfigurationError(
                f"Cannot declare {type_name(source)} -> {type_name(destination)} "
                "after the configuration was sealed.\n"
                "Hint: declare every type map before calling seal()"
            )
        builder = TypeMapBuilder(self, TypeMap(source, destination))
        self._builders.append(builder)
        return builder

    def seal(self) -> Mapper:
        """Build every declared type map and return the Mapper.

        Sealing again returns the same Mapper.

        Raises:
            MappingConfigurationError: If any type map cannot be built.
        """
        if self._mapper is not None:
            return self._mapper

        type_maps = TypeMapRegistry()
        for builder in self._builders:
            type_maps.register(builder.type_map)
        type_maps.seal(*self._converters)
        self._mapper = Mapper(type_maps)
        return self._mapper
