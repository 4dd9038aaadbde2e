from dataclasses import dataclass
from typing import Any


def type_name(tp: Any) -> str:
    """Short, readable name for a type, for messages and function names."""
    return getattr(tp, "__name__", None) or repr(tp)


@dataclass(frozen=True, slots=True)
class TypePair:
    """The (source type, destination type) key of a registered type map."""

    source: Any
    destination: Any

    def __str__(self) -> str:
        return f"{type_name(self.source)} -> {type_name(self.destination)}"
