"""Converter for parsing text into identifier types."""

from typing import Any
from uuid import UUID

from mapfy.conversion.exceptions import ValueParseError
from mapfy.conversion.registry import Converter, ConverterFactory, ConverterRegistry
from mapfy.utils.types.annotations import is_class, unwrap


class UUIDConverter(Converter[str, UUID]):
    """Converter that parses canonical or hex UUID text.

    Malformed text raises ValueParseError, so it fails the mapping call.
    """

    def matches(self, source_tp: Any, target_tp: Any) -> bool:
        source_tp = unwrap(source_tp)
        return is_class(source_tp) and issubclass(source_tp, str) and (
            unwrap(target_tp) is UUID
        )

    def convert(self, source: str) -> UUID:
        try:
            return UUID(source)
        except ValueError as exc:
            raise ValueParseError(source, UUID, f"{source!r} is not a valid UUID") from exc


class UUIDConverterFactory(ConverterFactory[str, UUID]):
    def matches(self, source_tp: Any, target_tp: Any) -> bool:
        return UUIDConverter().matches(source_tp, target_tp)

    def converter(
        self, source_tp: Any, target_tp: Any, registry: ConverterRegistry
    ) -> Converter[str, UUID] | None:
        return UUIDConverter()
