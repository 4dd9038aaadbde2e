import pytest

from mapfy.config import MapperConfiguration
from mapfy.mapping.exceptions import CyclicMappingError
from mapfy.mapping.type_map import Strategy
from mapfy.mapping.type_pair import TypePair
from tests.models import Child, ChildDto, Node, NodeDto, Parent, ParentDto


def test_self_referencing_compiled_map_is_rejected():
    config = MapperConfiguration(lambda config: config.declare(Node, NodeDto))

    with pytest.raises(CyclicMappingError) as exc_info:
        config.seal()

    pair = TypePair(Node, NodeDto)
    assert exc_info.value.chain == (pair, pair)
    assert "(Node -> NodeDto) => (Node -> NodeDto)" in str(exc_info.value)


def test_failed_seal_can_be_retried_and_fails_again():
    config = MapperConfiguration(lambda config: config.declare(Node, NodeDto))
    with pytest.raises(CyclicMappingError):
        config.seal()
    with pytest.raises(CyclicMappingError):
        config.seal()


def test_self_referencing_reflective_map():
    mapper = MapperConfiguration(
        lambda config: config.declare(Node, NodeDto).strategy(Strategy.REFLECTIVE)
    ).seal()
    tree = Node("root", [Node("left"), Node("right", [Node("leaf")])])

    assert mapper.map(tree, NodeDto) == NodeDto(
        "root", [NodeDto("left"), NodeDto("right", [NodeDto("leaf")])]
    )


def test_mutually_dependent_compiled_maps_are_rejected():
    def configure(config: MapperConfiguration) -> None:
        config.declare(Parent, ParentDto)
        config.declare(Child, ChildDto)

    with pytest.raises(CyclicMappingError) as exc_info:
        MapperConfiguration(configure).seal()

    parent, child = TypePair(Parent, ParentDto), TypePair(Child, ChildDto)
    assert exc_info.value.chain == (parent, child, parent)


@pytest.mark.parametrize(
    ("parent_strategy", "child_strategy"),
    [
        (Strategy.COMPILED, Strategy.REFLECTIVE),
        (Strategy.REFLECTIVE, Strategy.COMPILED),
        (Strategy.REFLECTIVE, Strategy.REFLECTIVE),
    ],
)
def test_one_reflective_map_breaks_the_cycle(
    parent_strategy: Strategy, child_strategy: Strategy
):
    def configure(config: MapperConfiguration) -> None:
        config.declare(Parent, ParentDto).strategy(parent_strategy)
        config.declare(Child, ChildDto).strategy(child_strategy)

    mapper = MapperConfiguration(configure).seal()
    source = Parent("p", Child("c", Parent("q")))

    assert mapper.map(source, ParentDto) == ParentDto("p", ChildDto("c", ParentDto("q", None)))
    assert mapper.map(source.child, ChildDto) == ChildDto("c", ParentDto("q", None))
