import pytest

from mapfy.context import set_default_mapper
from mapfy.mapping.type_map import Strategy


@pytest.fixture(params=list(Strategy), ids=lambda it: it.value)
def strategy(request: pytest.FixtureRequest) -> Strategy:
    """Run the test once per execution strategy."""
    return request.param


@pytest.fixture
def clean_default_mapper():
    set_default_mapper(None)
    yield
    set_default_mapper(None)
