from __future__ import annotations

from collections.abc import Callable
from enum import Enum
from logging import getLogger
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from mapfy.conversion.registry import ConverterRegistry
from mapfy.mapping.compiled import compile_plan
from mapfy.mapping.overrides import MemberOverrideTable
from mapfy.mapping.plan import MappingPlan, build_plan
from mapfy.mapping.reflective import ReflectiveExecutor
from mapfy.mapping.type_pair import TypePair

if TYPE_CHECKING:
    from mapfy.mapping.registry import TypeMapRegistry

logger = getLogger(__name__)

_S = TypeVar("_S")
_D = TypeVar("_D")


class Strategy(Enum):
    """How a type map carries out its mapping plan."""

    #: Interpret the plan on every call, resolving converters from runtime types
    REFLECTIVE = "reflective"
    #: Compose one function per type map when the configuration is sealed
    COMPILED = "compiled"


class TypeMap(Generic[_S, _D]):
    """The configuration and execution artifact for one (source, destination) pair.

    A type map is created and configured before sealing, built exactly once
    while sealing, and read-only afterwards.

    Attributes:
        pair: The (source, destination) key.
        strategy: The execution strategy.
        case_insensitive: Whether member names are matched ignoring case.
        overrides: Per-member overrides.
    """

    def __init__(
        self,
        source: type[_S],
        destination: type[_D],
        *,
        strategy: Strategy = Strategy.COMPILED,
        case_insensitive: bool = True,
    ) -> None:
        self.pair = TypePair(source, destination)
        self.strategy = strategy
        self.case_insensitive = case_insensitive
        self.overrides = MemberOverrideTable()
        self._plan: MappingPlan | None = None
        self._function: Callable[[_S], _D] | None = None

    @property
    def is_compiled(self) -> bool:
        return self.strategy is Strategy.COMPILED

    @property
    def is_built(self) -> bool:
        return self._function is not None

    @property
    def plan(self) -> MappingPlan:
        if self._plan is None:
            raise RuntimeError(f"Type map for {self.pair} has not been built")
        return self._plan

    @property
    def function(self) -> Callable[[_S], _D]:
        """The execution function; does not accept None."""
        if self._function is None:
            raise RuntimeError(f"Type map for {self.pair} has not been built")
        return self._function

    def build(self, converters: ConverterRegistry, type_maps: TypeMapRegistry) -> None:
        """Build the plan and execution function. Building twice is a no-op.

        Raises:
            MappingConfigurationError: If the plan cannot be built.
            CyclicMappingError: If compiling this map requires compiling it again.
        """
        if self._function is not None:
            return

        if self.is_compiled:
            with type_maps.building(self.pair):
                plan = build_plan(self, converters, type_maps)
                function = compile_plan(plan, converters)
        else:
            plan = build_plan(self, converters, type_maps)
            function = ReflectiveExecutor(plan, converters)

        self._plan = plan
        self._function = function
        logger.debug(
            "Built %s map for %s with %d steps", self.strategy.value, self.pair, len(plan.steps)
        )

    def map(self, source: _S | None) -> _D | None:
        if source is None:
            return None
        return self.function(source)

    def __repr__(self) -> str:
        return f"TypeMap({self.pair}, strategy={self.strategy.value})"
