"""Exceptions raised while configuring type maps and looking them up.

Unlike per-value conversion failures, these errors are never swallowed: they
always propagate to the caller of ``seal()`` or ``map()``.
"""

from collections.abc import Sequence
from typing import Any

from mapfy.exceptions import MapfyError
from mapfy.mapping.type_pair import TypePair, type_name


class MappingConfigurationError(MapfyError):
    """Raised when a configuration cannot be turned into working type maps.

    Typical causes are a destination type without a parameterless
    constructor, a custom resolver whose result cannot be converted to its
    destination member, an unknown destination member name, or registering
    a type map after the configuration was sealed.
    """


class CyclicMappingError(MappingConfigurationError):
    """Raised when compiling a type map requires compiling itself again.

    Attributes:
        chain: The type pairs being compiled, outermost first, ending with the
            pair that closed the cycle.
    """

    def __init__(self, chain: Sequence[TypePair]) -> None:
        self.chain = tuple(chain)
        path = " => ".join(f"({it})" for it in self.chain)
        super().__init__(
            f"Cyclic type map dependency while compiling: {path}\n"
            "Hint: use Strategy.REFLECTIVE for at least one map in the cycle"
        )


class MappingNotFoundError(MapfyError):
    """Raised when no type map is registered for a requested pair.

    Attributes:
        source_type: The source type that was requested.
        destination_type: The destination type that was requested.
    """

    def __init__(self, source_type: Any, destination_type: Any) -> None:
        self.source_type = source_type
        self.destination_type = destination_type
        super().__init__(
            f"No map registered for {type_name(source_type)} -> {type_name(destination_type)}.\n"
            f"Hint: declare it with configuration.declare("
            f"{type_name(source_type)}, {type_name(destination_type)})"
        )


class MapperNotConfiguredError(MapfyError):
    """Raised when the default mapper is read before one has been set."""

    def __init__(self) -> None:
        super().__init__(
            "No default mapper has been configured.\n"
            "Hint: call mapfy.set_default_mapper(configuration.seal()) at startup"
        )
