from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from uuid import UUID

import pytest

from mapfy.config import MapperConfiguration
from mapfy.conversion.exceptions import ValueParseError
from mapfy.mapper import Mapper
from mapfy.mapping.type_map import Strategy
from tests.models import (
    AddressDto,
    Customer,
    CustomerDto,
    Order,
    OrderDto,
    OrderLine,
    OrderLineDto,
    Readings,
    ReadingsDto,
    Status,
    sample_order,
)


def test_order_graph(order_mapper: Mapper):
    assert order_mapper.map(sample_order(), OrderDto) == OrderDto(
        id=UUID("12345678-1234-5678-1234-567812345678"),
        status=Status.SHIPPED,
        customer=CustomerDto("Ada", AddressDto("12 St James's Square", "London")),
        lines=(
            OrderLineDto("A-1", 2.0, Decimal("9.5")),
            OrderLineDto("B-2", 1.0, Decimal("20.0")),
        ),
        tags=frozenset({"gift", "priority"}),
        placed_on=date(2024, 3, 1),
        weight=0.0,
    )


def test_enum_text_matches_value_too(order_mapper: Mapper):
    order = Order(id="12345678123456781234567812345678", status="pending")
    result = order_mapper.map(order, OrderDto)
    assert result is not None
    assert result.status is Status.PENDING


def test_missing_nested_values_stay_none(order_mapper: Mapper):
    order = Order(id="12345678123456781234567812345678", customer=Customer("Ada"))
    result = order_mapper.map(order, OrderDto)
    assert result is not None
    assert result.customer == CustomerDto("Ada", None)
    assert result.lines == ()
    assert result.tags == frozenset()
    assert result.placed_on is None


def test_none_collection_elements_are_kept(order_mapper: Mapper):
    order = Order(id="12345678123456781234567812345678", lines=[None, OrderLine("A-1", 1, 1.0)])
    result = order_mapper.map(order, OrderDto)
    assert result is not None
    assert result.lines == (None, OrderLineDto("A-1", 1.0, Decimal("1.0")))


@pytest.mark.parametrize(
    ("order", "match"),
    [
        (Order(id="not-a-uuid"), "'not-a-uuid' is not a valid UUID"),
        (
            Order(id="12345678123456781234567812345678", status="LOST"),
            "Hint: expected one of: PENDING, SHIPPED",
        ),
    ],
)
def test_parse_failures_abort_the_call(order_mapper: Mapper, order: Order, match: str):
    with pytest.raises(ValueParseError, match=match):
        order_mapper.map(order, OrderDto)


@pytest.mark.parametrize(
    ("values", "expected"),
    [
        (["1.5", "2"], (1.5, 2.0)),
        (["1.5", "lots"], ()),
        ([], ()),
    ],
)
def test_one_bad_element_leaves_collection_unpopulated(
    strategy: Strategy, values: list[str], expected: tuple[float, ...]
):
    mapper = MapperConfiguration(
        lambda config: config.declare(Readings, ReadingsDto).strategy(strategy)
    ).seal()
    assert mapper.map(Readings(values), ReadingsDto) == ReadingsDto(expected)


def test_identity_map_reproduces_mapped_values(order_mapper: Mapper, strategy: Strategy):
    mapped = order_mapper.map(sample_order(), OrderDto)
    identity = MapperConfiguration(
        lambda config: config.declare(OrderDto, OrderDto).strategy(strategy)
    ).seal()

    copy = identity.map(mapped, OrderDto)
    assert copy == mapped
    assert copy is not mapped


class Badge:
    code: int
    email: str
    phone: str

    def __init__(self, code: int, email: str) -> None:
        self.code = code
        self.email = email


@dataclass
class BadgeDto:
    code: int | None = None
    email: str | None = None
    phone: str | None = "unknown"


def test_unassigned_source_members_read_as_none(strategy: Strategy):
    mapper = MapperConfiguration(
        lambda config: config.declare(Badge, BadgeDto).strategy(strategy)
    ).seal()

    assert mapper.map(Badge(7, "ada@example.com"), BadgeDto) == BadgeDto(
        7, "ada@example.com", None
    )


@dataclass
class Paint:
    color: str = ""


@dataclass
class PaintDto:
    color: Status | int | None = None


def test_parse_failures_are_fatal_inside_unions(strategy: Strategy):
    mapper = MapperConfiguration(
        lambda config: config.declare(Paint, PaintDto).strategy(strategy)
    ).seal()

    assert mapper.map(Paint("shipped"), PaintDto) == PaintDto(Status.SHIPPED)
    with pytest.raises(ValueParseError, match="LOST"):
        mapper.map(Paint("LOST"), PaintDto)
