"""No-operation converter for assignable types.

This module provides the converter that passes values through unchanged when
the source type is directly assignable to the target type (e.g., str -> str,
bool -> int, Customer -> Customer | None). It is registered first in every
registry as the fast path for the common case where no conversion is needed.
"""

from typing import Any

from mapfy.conversion.registry import Converter, ConverterFactory, ConverterRegistry
from mapfy.utils.types.annotations import unwrap
from mapfy.utils.types.equivalence import is_assignable


class NoOpConverter(Converter[Any, Any]):
    """Converter that passes values through unchanged.

    Attributes:
        _target_tp: The target type annotation, kept for diagnostics.
    """

    def __init__(self, target_tp: Any):
        self._target_tp = target_tp

    def matches(self, source_tp: Any, target_tp: Any) -> bool:
        return is_assignable(source_tp, target_tp)

    def convert(self, source: Any) -> Any:
        return source

    def __repr__(self) -> str:
        return f"NoOpConverter({self._target_tp!r})"


class NoOpConverterFactory(ConverterFactory[Any, Any]):
    """Factory that creates NoOpConverters for assignable type pairs."""

    def matches(self, source_tp: Any, target_tp: Any) -> bool:
        return is_assignable(source_tp, target_tp)

    def converter(
        self, source_tp: Any, target_tp: Any, registry: ConverterRegistry
    ) -> Converter[Any, Any] | None:
        return NoOpConverter(unwrap(target_tp))
