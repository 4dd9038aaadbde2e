from mapfy.mapping.plan import build_plan
from mapfy.mapping.reflective import ReflectiveExecutor
from mapfy.mapping.registry import TypeMapRegistry
from mapfy.mapping.type_map import Strategy, TypeMap
from tests.models import (
    Address,
    AddressDto,
    Animal,
    AnimalDto,
    Dog,
    Holder,
    HolderDto,
)


def _holder_maps(holder_strategy: Strategy) -> TypeMapRegistry:
    type_maps = TypeMapRegistry()
    dogs = TypeMap(Dog, AnimalDto)
    dogs.overrides.set_custom("name", lambda dog: f"dog:{dog.name}", str)
    type_maps.register(TypeMap(Animal, AnimalDto))
    type_maps.register(dogs)
    type_maps.register(TypeMap(Address, AddressDto))
    type_maps.register(TypeMap(Holder, HolderDto, strategy=holder_strategy))
    type_maps.seal()
    return type_maps


def _map_holder(type_maps: TypeMapRegistry, holder: Holder) -> HolderDto:
    type_map = type_maps.lookup_types(Holder, HolderDto)
    assert type_map is not None
    result = type_map.map(holder)
    assert result is not None
    return result


def test_executor_runs_plan_directly():
    type_maps = TypeMapRegistry()
    type_map = TypeMap(Address, AddressDto, strategy=Strategy.REFLECTIVE)
    type_maps.register(type_map)
    converters = type_maps.seal()

    executor = ReflectiveExecutor(build_plan(type_map, converters, type_maps), converters)
    assert executor(Address("1 Main St", "Springfield")) == AddressDto("1 Main St", "Springfield")


def test_nested_map_is_chosen_by_runtime_type():
    type_maps = _holder_maps(Strategy.REFLECTIVE)
    assert _map_holder(type_maps, Holder(pet=Dog("rex"))).pet == AnimalDto("dog:rex")
    assert _map_holder(type_maps, Holder(pet=Animal("tom"))).pet == AnimalDto("tom")


def test_compiled_nested_map_is_chosen_by_declared_type():
    type_maps = _holder_maps(Strategy.COMPILED)
    assert _map_holder(type_maps, Holder(pet=Dog("rex"))).pet == AnimalDto("rex")


def test_untyped_member_is_converted_by_value(strategy: Strategy):
    type_maps = _holder_maps(strategy)
    result = _map_holder(type_maps, Holder(anything=Address("1 Main St", "Springfield")))
    assert result.anything == AddressDto("1 Main St", "Springfield")


def test_untyped_member_without_conversion_is_left_unpopulated(strategy: Strategy):
    type_maps = _holder_maps(strategy)
    assert _map_holder(type_maps, Holder(anything="somewhere")).anything is None


def test_none_values_are_assigned(strategy: Strategy):
    type_maps = _holder_maps(strategy)
    assert _map_holder(type_maps, Holder()) == HolderDto(pet=None, anything=None)
