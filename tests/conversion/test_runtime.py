from tests.conversion.conftest import SourceItem, TargetItem

from typing import Any

import pytest

from mapfy.conversion.exceptions import UnconvertibleValueError
from mapfy.conversion.noop import NoOpConverter
from mapfy.conversion.registry import ConverterRegistry
from mapfy.conversion.runtime import RuntimeConverter, RuntimeConverterFactory


def test_runtime_factory_matches_only_unknown_sources():
    factory = RuntimeConverterFactory()
    assert factory.matches(Any, int)
    assert not factory.matches(Any, Any)
    assert not factory.matches(int, float)


def test_any_to_any_is_noop(registry: ConverterRegistry):
    assert isinstance(registry.resolve(Any, Any), NoOpConverter)


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (3, 3.0),
        ("1.5", 1.5),
        (2.0, 2.0),
    ],
)
def test_runtime_converter_dispatches_on_value_type(registry: ConverterRegistry, value, expected):
    conv = registry.resolve(Any, float)
    assert isinstance(conv, RuntimeConverter)
    assert conv.convert(value) == expected


def test_runtime_converter_uses_custom_converters(registry: ConverterRegistry):
    conv = registry.resolve(Any, TargetItem)
    assert conv is not None
    assert conv.convert(SourceItem(5)) == TargetItem(10)


def test_runtime_converter_raises_when_nothing_applies(registry: ConverterRegistry):
    conv = registry.resolve(Any, TargetItem)
    assert conv is not None
    with pytest.raises(UnconvertibleValueError):
        conv.convert(object())
