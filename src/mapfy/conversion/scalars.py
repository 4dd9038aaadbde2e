"""Generic numeric and textual conversions.

These are the last resort of the converter registry. A scalar conversion that
fails at runtime raises UnconvertibleValueError, which the execution
strategies treat as non-fatal: the destination member keeps its default.

Supported conversions:
    - int -> float, Decimal
    - float -> int (integral values only), Decimal
    - Decimal -> int (integral values only), float
    - str -> int, float, Decimal, bool ("true"/"false"), date, datetime, time
    - Enum -> its value type (int, float, Decimal, bytes)
    - anything that is not a collection -> str (enumerations convert to their name)

Lookups walk the source type's MRO, so ``bool -> float`` uses ``int -> float``.
"""

from collections.abc import Callable, Mapping
from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from typing import Any

from mapfy.conversion.exceptions import UnconvertibleValueError
from mapfy.conversion.function import FunctionConverter
from mapfy.conversion.registry import Converter, ConverterFactory, ConverterRegistry
from mapfy.conversion.sequences import is_sequence_type
from mapfy.utils.types.annotations import is_class, unwrap


def _integral(value: float | Decimal) -> int:
    result = int(value)
    if result != value:
        raise ValueError(f"{value!r} has a fractional part")
    return result


def _parse_bool(text: str) -> bool:
    match text.strip().casefold():
        case "true":
            return True
        case "false":
            return False
        case _:
            raise ValueError(f"{text!r} is neither 'true' nor 'false'")


def _float_to_decimal(value: float) -> Decimal:
    return Decimal(repr(value))


def _enum_name(value: Enum) -> str:
    return value.name


#: Conversions keyed by (source class, target class); sources are matched along the MRO
SCALAR_CONVERSIONS: dict[tuple[type, type], Callable[[Any], Any]] = {
    (int, float): float,
    (int, Decimal): Decimal,
    (float, int): _integral,
    (float, Decimal): _float_to_decimal,
    (Decimal, int): _integral,
    (Decimal, float): float,
    (str, int): int,
    (str, float): float,
    (str, Decimal): Decimal,
    (str, bool): _parse_bool,
    (str, date): date.fromisoformat,
    (str, datetime): datetime.fromisoformat,
    (str, time): time.fromisoformat,
}

#: Value types an enumeration member may be converted to
ENUM_VALUE_TARGETS: tuple[type, ...] = (int, float, Decimal, bytes)


class ScalarConverter(FunctionConverter):
    """A FunctionConverter whose failures are non-fatal.

    Errors raised by the wrapped function (ValueError, TypeError and
    arithmetic errors such as ``decimal.InvalidOperation``) are re-raised as
    UnconvertibleValueError.
    """

    def convert(self, source: Any) -> Any:
        try:
            return super().convert(source)
        except (ValueError, TypeError, ArithmeticError) as exc:
            raise UnconvertibleValueError(source, self._target_tp) from exc


def _enum_value(target_tp: type) -> Callable[[Enum], Any]:
    def convert(value: Enum) -> Any:
        if not isinstance(value.value, target_tp):
            raise TypeError(f"{value!r} does not have a {target_tp.__name__} value")
        return value.value

    return convert


def _is_collection(tp: type) -> bool:
    return is_sequence_type(tp) or issubclass(tp, Mapping)


def scalar_conversion(source_tp: Any, target_tp: Any) -> Callable[[Any], Any] | None:
    """Find the conversion function for a scalar type pair, if there is one.

    Examples:
        >>> scalar_conversion(str, int)
        <class 'int'>
        >>> scalar_conversion(list, str) is None
        True
    """
    source_tp = unwrap(source_tp)
    target_tp = unwrap(target_tp)
    if not (is_class(source_tp) and is_class(target_tp)):
        return None

    if issubclass(source_tp, Enum):
        if target_tp is str:
            return _enum_name
        if target_tp in ENUM_VALUE_TARGETS:
            return _enum_value(target_tp)
        return None

    for base in source_tp.__mro__:
        if (fn := SCALAR_CONVERSIONS.get((base, target_tp))) is not None:
            return fn

    if target_tp is str and not _is_collection(source_tp):
        return str
    return None


class ScalarConverterFactory(ConverterFactory[Any, Any]):
    """Factory that creates ScalarConverters for the conversions listed above."""

    def matches(self, source_tp: Any, target_tp: Any) -> bool:
        return scalar_conversion(source_tp, target_tp) is not None

    def converter(
        self, source_tp: Any, target_tp: Any, registry: ConverterRegistry
    ) -> Converter[Any, Any] | None:
        fn = scalar_conversion(source_tp, target_tp)
        if fn is None:
            return None
        return ScalarConverter(fn, unwrap(source_tp), unwrap(target_tp))
