from mapfy.conversion.enums import EnumConverterFactory
from mapfy.conversion.identifiers import UUIDConverterFactory
from mapfy.conversion.noop import NoOpConverterFactory
from mapfy.conversion.registry import ConverterRegistry
from mapfy.conversion.runtime import RuntimeConverterFactory
from mapfy.conversion.scalars import ScalarConverterFactory
from mapfy.conversion.sequences import SequenceConverterFactory
from mapfy.conversion.unions import UnionConverterFactory

#: Factories that decide how a value is carried over; tried before any type map
STRUCTURAL_CONVERTERS = (
    NoOpConverterFactory(),
    RuntimeConverterFactory(),
    UnionConverterFactory(),
    SequenceConverterFactory(),
)

#: Factories that change a value's type; tried after type maps
VALUE_CONVERTERS = (
    EnumConverterFactory(),
    UUIDConverterFactory(),
    ScalarConverterFactory(),
)

default_registry = ConverterRegistry(*STRUCTURAL_CONVERTERS, *VALUE_CONVERTERS)
