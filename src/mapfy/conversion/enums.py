"""Converter for parsing text into enumeration members.

Text is matched against member names first and member values second, so both
``"ACTIVE"`` and ``"active"`` resolve for ``Status.ACTIVE = "active"``. Text that
matches neither is a parse failure, which is fatal for the mapping call.
"""

from enum import Enum
from typing import Any

from mapfy.conversion.exceptions import ValueParseError
from mapfy.conversion.registry import Converter, ConverterFactory, ConverterRegistry
from mapfy.utils.types.annotations import is_class, unwrap


def _is_text(tp: Any) -> bool:
    return is_class(tp) and issubclass(tp, str)


def _is_enum(tp: Any) -> bool:
    return is_class(tp) and issubclass(tp, Enum)


class EnumConverter(Converter[str, Enum]):
    """Converter that parses a string into a member of ``enum_tp``.

    Attributes:
        _enum_tp: The enumeration class to parse into.
    """

    def __init__(self, enum_tp: type[Enum]) -> None:
        self._enum_tp = enum_tp

    def matches(self, source_tp: Any, target_tp: Any) -> bool:
        return _is_text(unwrap(source_tp)) and unwrap(target_tp) is self._enum_tp

    def convert(self, source: str) -> Enum:
        if (member := self._enum_tp.__members__.get(source)) is not None:
            return member
        try:
            return self._enum_tp(source)
        except ValueError as exc:
            names = ", ".join(self._enum_tp.__members__)
            raise ValueParseError(
                source,
                self._enum_tp,
                f"{source!r} is not a member of {self._enum_tp.__name__}. "
                f"Hint: expected one of: {names}",
            ) from exc


class EnumConverterFactory(ConverterFactory[str, Enum]):
    """Factory that creates EnumConverters for text-to-enumeration pairs."""

    def matches(self, source_tp: Any, target_tp: Any) -> bool:
        return _is_text(unwrap(source_tp)) and _is_enum(unwrap(target_tp))

    def converter(
        self, source_tp: Any, target_tp: Any, registry: ConverterRegistry
    ) -> Converter[str, Enum] | None:
        return EnumConverter(unwrap(target_tp))
