"""Exceptions for the value conversion system.

This module defines exceptions raised while converting a single member value
from its source type to the destination member's type. The two concrete
exceptions encode the conversion policy:

- ``ValueParseError`` is fatal: parsing text into an enumeration member or an
  identifier failed, and the error propagates out of the mapping call.
- ``UnconvertibleValueError`` is non-fatal: a generic numeric/textual
  conversion failed, and the execution strategies leave the destination member
  at its default value instead of aborting the whole mapping.
"""

from typing import Any

from mapfy.exceptions import MapfyError


class ConversionError(MapfyError):
    """Base exception for value conversion failures.

    It provides context about the source value, source type, and target type
    to help diagnose the issue.

    Attributes:
        source: The value that failed to convert.
        source_type: The type of the source value.
        target_type: The type we attempted to convert to.
        message: Human-readable description of the failure.
    """

    def __init__(
        self,
        message: str,
        *,
        source: Any = None,
        source_type: type | None = None,
        target_type: Any = None,
    ) -> None:
        self.source = source
        self.source_type = source_type or (type(source) if source is not None else None)
        self.target_type = target_type
        self.message = message
        super().__init__(message)

    def __str__(self) -> str:
        return self.message


class ValueParseError(ConversionError):
    """Raised when text cannot be parsed into an enumeration member or identifier.

    This error is fatal for the mapping call that triggered it.
    """

    def __init__(
        self,
        source: Any,
        target_type: Any,
        message: str | None = None,
    ) -> None:
        if message is None:
            message = f"Cannot parse {source!r} as {getattr(target_type, '__name__', target_type)}"
        super().__init__(
            message,
            source=source,
            target_type=target_type,
        )


class UnconvertibleValueError(ConversionError):
    """Raised when a value has no usable conversion to the target type.

    Execution strategies catch this error and leave the destination member
    unpopulated.
    """

    def __init__(
        self,
        source: Any,
        target_type: Any,
        message: str | None = None,
    ) -> None:
        if message is None:
            message = (
                f"Cannot convert {type(source).__name__} to {target_type} (value: {source!r})"
            )
        super().__init__(
            message,
            source=source,
            target_type=target_type,
        )
