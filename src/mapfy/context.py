"""A process-wide default Mapper, for code that cannot be handed one.

Passing a Mapper explicitly is preferred. The default slot is meant to be set
once at startup; replacing it while other threads are mapping is not safe.
"""

from typing import Any, TypeVar

from mapfy.mapper import Mapper
from mapfy.mapping.exceptions import MapperNotConfiguredError

_D = TypeVar("_D")

_default_mapper: Mapper | None = None


def set_default_mapper(mapper: Mapper | None) -> None:
    """Set (or, with None, clear) the default Mapper. The last call wins."""
    global _default_mapper
    _default_mapper = mapper


def get_default_mapper() -> Mapper:
    if _default_mapper is None:
        raise MapperNotConfiguredError()
    return _default_mapper


def as_mapped(source: Any, destination_type: type[_D], mapper: Mapper | None = None) -> _D | None:
    """Map ``source`` to ``destination_type`` by its runtime type.

    Uses ``mapper`` when given, otherwise the default Mapper.

    Raises:
        MapperNotConfiguredError: If no mapper is given and no default is set.
    """
    if mapper is None:
        mapper = get_default_mapper()
    return mapper.map(source, destination_type)
