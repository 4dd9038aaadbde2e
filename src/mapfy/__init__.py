from mapfy.config import (
    Ignore,
    MapFrom,
    MapperConfiguration,
    TypeMapBuilder,
    ignore,
    map_from,
)
from mapfy.context import as_mapped, get_default_mapper, set_default_mapper
from mapfy.conversion.exceptions import ConversionError, UnconvertibleValueError, ValueParseError
from mapfy.conversion.function import FunctionConverter
from mapfy.exceptions import MapfyError
from mapfy.mapper import Mapper
from mapfy.mapping.exceptions import (
    CyclicMappingError,
    MapperNotConfiguredError,
    MappingConfigurationError,
    MappingNotFoundError,
)
from mapfy.mapping.type_map import Strategy, TypeMap
from mapfy._version import __version__

__all__ = [
    "MapperConfiguration",
    "TypeMapBuilder",
    "Mapper",
    "TypeMap",
    "Strategy",
    "Ignore",
    "MapFrom",
    "ignore",
    "map_from",
    "FunctionConverter",
    "set_default_mapper",
    "get_default_mapper",
    "as_mapped",
    "MapfyError",
    "ConversionError",
    "ValueParseError",
    "UnconvertibleValueError",
    "MappingConfigurationError",
    "CyclicMappingError",
    "MappingNotFoundError",
    "MapperNotConfiguredError",
    "__version__",
]
