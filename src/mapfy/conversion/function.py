"""Function-based converter for custom value transformations.

This module provides a converter that wraps a plain function to perform a
conversion. Scalar conversions are built on it, and callers can register their
own conversions by adding a FunctionConverter to a mapper configuration.

Example::

    converter = FunctionConverter(lambda td: td.total_seconds(), timedelta, float)
    converter.convert(timedelta(minutes=5))  # Returns 300.0
"""

from collections.abc import Callable
from typing import Any

from mapfy.conversion.registry import Converter
from mapfy.utils.types.annotations import unwrap


class FunctionConverter(Converter[Any, Any]):
    """Converter that applies a function to transform values.

    When constructed with ``source_tp`` and ``target_tp`` the converter only
    matches that exact pair; without them it matches any pair and type
    checking is the responsibility of the wrapped function.

    Attributes:
        _fn: The conversion function to apply.
        _source_tp: The source type this converter is restricted to, if any.
        _target_tp: The target type this converter is restricted to, if any.
    """

    def __init__(
        self,
        fn: Callable[[Any], Any],
        source_tp: Any = None,
        target_tp: Any = None,
    ):
        self._fn = fn
        self._source_tp = source_tp
        self._target_tp = target_tp

    def matches(self, source_tp: Any, target_tp: Any) -> bool:
        return (self._source_tp is None or unwrap(source_tp) == self._source_tp) and (
            self._target_tp is None or unwrap(target_tp) == self._target_tp
        )

    def convert(self, source: Any) -> Any:
        return self._fn(source)
