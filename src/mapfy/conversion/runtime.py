"""Converter for values whose source type is only known at runtime.

Source types are unknown when a member is declared as ``Any``, when a
sequence is unparameterised (``list`` rather than ``list[Order]``), and when
a custom resolver has no return annotation. In those cases the converter is
resolved from the value's own type each time a value is converted.
"""

from typing import Any

from mapfy.conversion.exceptions import UnconvertibleValueError
from mapfy.conversion.registry import Converter, ConverterFactory, ConverterRegistry
from mapfy.utils.types.annotations import unwrap


class RuntimeConverter(Converter[Any, Any]):
    """Converter that dispatches on ``type(value)`` for every conversion.

    Attributes:
        _target_tp: The type values are converted to.
        _registry: The registry consulted for each value's runtime type.
    """

    def __init__(self, target_tp: Any, registry: ConverterRegistry) -> None:
        self._target_tp = target_tp
        self._registry = registry

    def matches(self, source_tp: Any, target_tp: Any) -> bool:
        return unwrap(source_tp) is Any

    def convert(self, source: Any) -> Any:
        if source is None:
            return None
        converter = self._registry.resolve(type(source), self._target_tp)
        if converter is None:
            raise UnconvertibleValueError(source, self._target_tp)
        return converter.convert(source)


class RuntimeConverterFactory(ConverterFactory[Any, Any]):
    """Factory that defers conversion of ``Any``-typed sources to runtime.

    Registered after the no-op factory, so ``Any -> Any`` stays a no-op.
    """

    def matches(self, source_tp: Any, target_tp: Any) -> bool:
        return unwrap(source_tp) is Any and unwrap(target_tp) is not Any

    def converter(
        self, source_tp: Any, target_tp: Any, registry: ConverterRegistry
    ) -> Converter[Any, Any] | None:
        return RuntimeConverter(unwrap(target_tp), registry)
