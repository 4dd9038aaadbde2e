from functools import partial

import pytest

from mapfy.config import MapperConfiguration
from mapfy.mapper import Mapper
from mapfy.mapping.registry import TypeMapRegistry
from mapfy.mapping.type_map import Strategy, TypeMap
from tests.models import (
    Address,
    AddressDto,
    Customer,
    CustomerDto,
    Order,
    OrderDto,
    OrderLine,
    OrderLineDto,
)

ORDER_PAIRS = [
    (Address, AddressDto),
    (Customer, CustomerDto),
    (OrderLine, OrderLineDto),
    (Order, OrderDto),
]


def configure_orders(config: MapperConfiguration, strategy: Strategy) -> None:
    for source, destination in ORDER_PAIRS:
        config.declare(source, destination).strategy(strategy)


@pytest.fixture
def order_mapper(strategy: Strategy) -> Mapper:
    return MapperConfiguration(partial(configure_orders, strategy=strategy)).seal()


@pytest.fixture
def order_type_maps(strategy: Strategy) -> TypeMapRegistry:
    """A sealed registry holding the order maps, for tests below the Mapper facade."""
    type_maps = TypeMapRegistry()
    for source, destination in ORDER_PAIRS:
        type_maps.register(TypeMap(source, destination, strategy=strategy))
    type_maps.seal()
    return type_maps
