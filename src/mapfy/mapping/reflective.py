"""The reflective execution strategy: a mapping plan interpreter."""

from logging import getLogger
from typing import Any

from mapfy.conversion.exceptions import UnconvertibleValueError
from mapfy.conversion.registry import ConverterRegistry
from mapfy.mapping.plan import MappingPlan, StepKind

logger = getLogger(__name__)


class ReflectiveExecutor:
    """Carry out a mapping plan step by step on every call.

    Values are read and written with ``getattr``/``setattr``, and converters
    are resolved from each value's runtime type, so nothing but the plan is
    prepared ahead of time.
    """

    def __init__(self, plan: MappingPlan, converters: ConverterRegistry) -> None:
        self._plan = plan
        self._converters = converters

    def __call__(self, source: Any) -> Any:
        destination = self._plan.construct()
        for step in self._plan.steps:
            value = step.read(source)
            name = step.destination.name
            if value is None or step.kind is StepKind.DIRECT:
                setattr(destination, name, value)
                continue

            converter = self._converters.resolve(type(value), step.destination.tp)
            if converter is None:
                logger.debug(
                    "%s: no conversion from %s for %s; leaving it unpopulated",
                    self._plan.pair,
                    type(value).__name__,
                    name,
                )
                continue
            try:
                converted = converter.convert(value)
            except UnconvertibleValueError as exc:
                logger.debug("%s: leaving %s unpopulated: %s", self._plan.pair, name, exc)
                continue
            setattr(destination, name, converted)
        return destination
