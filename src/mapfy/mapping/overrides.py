"""Per-member overrides attached to a type map during configuration."""

from collections.abc import Callable, Iterator
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class MemberOverride:
    """Override for a single destination member.

    An override is either *ignored* (the member is never populated) or
    *custom* (the member is populated from ``resolver(source)``).

    Attributes:
        member: The destination member name.
        ignored: True if the member must be left at its default.
        resolver: Single-argument callable over the source instance.
        result_tp: Declared type of the resolver result; Any when unknown.
    """

    member: str
    ignored: bool = False
    resolver: Callable[[Any], Any] | None = None
    result_tp: Any = Any


class MemberOverrideTable:
    """Overrides keyed by canonical destination member name.

    Each member holds at most one override and the last write wins, so
    ``set_custom`` after ``set_ignored`` for the same member replaces it.
    """

    def __init__(self) -> None:
        self._overrides: dict[str, MemberOverride] = {}

    def set_ignored(self, member: str) -> None:
        self._overrides[member] = MemberOverride(member, ignored=True)

    def set_custom(
        self, member: str, resolver: Callable[[Any], Any], result_tp: Any = Any
    ) -> None:
        self._overrides[member] = MemberOverride(member, resolver=resolver, result_tp=result_tp)

    def get(self, member: str) -> MemberOverride | None:
        return self._overrides.get(member)

    def __iter__(self) -> Iterator[MemberOverride]:
        return iter(self._overrides.values())

    def __len__(self) -> int:
        return len(self._overrides)
