from logging import getLogger
from typing import Any

from sqlalchemy import inspect
from sqlalchemy.orm import ColumnProperty, CompositeProperty, Mapper, RelationshipProperty

logger = getLogger(__name__)


def _column_type(prop: ColumnProperty[Any]) -> Any:
    try:
        return prop.columns[0].type.python_type
    except (NotImplementedError, IndexError):
        return Any


def _relationship_type(prop: RelationshipProperty[Any]) -> Any:
    entity_class = prop.entity.class_
    if not prop.uselist:
        return entity_class
    collection_class = prop.collection_class
    if isinstance(collection_class, type) and issubclass(collection_class, set):
        return set[entity_class]
    return list[entity_class]


def sa_mapped_attribute_types(tp: type) -> dict[str, Any]:
    """Return the value type of every attribute mapped by SQLAlchemy on ``tp``.

    Covers classically mapped columns that carry no ``Mapped[]`` annotation.
    Columns resolve to their column type's ``python_type``, relationships to
    the related class (wrapped in the collection type for one-to-many), and
    composites to the composite class.

    Args:
        tp: Any class. Classes not mapped by SQLAlchemy yield an empty dict.

    Returns:
        A dict of attribute name to value type, in mapper order.
    """
    mapper = inspect(tp, raiseerr=False)
    if not isinstance(mapper, Mapper):
        return {}

    result: dict[str, Any] = {}
    for name, prop in mapper.attrs.items():
        match prop:
            case ColumnProperty():
                result[name] = _column_type(prop)
            case RelationshipProperty():
                result[name] = _relationship_type(prop)
            case CompositeProperty():
                result[name] = prop.composite_class
            case _:
                logger.debug(
                    "Unsupported SQLAlchemy property type %s for %s.%s; treating as Any",
                    type(prop).__name__,
                    tp.__name__,
                    name,
                )
                result[name] = Any
    return result
