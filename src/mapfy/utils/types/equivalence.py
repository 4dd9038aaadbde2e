from typing import Any, get_origin

from mapfy.utils.types.annotations import is_union, union_members, unwrap


def _is_subclass(source_tp: Any, target_tp: Any) -> bool:
    if not (isinstance(source_tp, type) and isinstance(target_tp, type)):
        return False
    try:
        return issubclass(source_tp, target_tp)
    except TypeError:
        # Protocols with data members refuse issubclass()
        return False


def is_assignable(source_tp: Any, target_tp: Any) -> bool:
    """Check if a value declared as ``source_tp`` can be stored as ``target_tp`` unchanged.

    Types are assignable if:
    - Target is Any or object (accepts anything)
    - They are equal after stripping wrappers (including parameterised types)
    - Every member of the source union is assignable to some member of the target union
    - Both are plain classes and source is a subclass of target

    Note: Any -> T is NOT assignable because we cannot prove Any is T; a runtime
    conversion is needed instead. Parameterised types are only assignable when equal,
    so ``list[Order]`` is never assignable to ``list[OrderDto]``.
    """
    source_tp = unwrap(source_tp)
    target_tp = unwrap(target_tp)

    if target_tp is Any or target_tp is object:
        return True

    if source_tp is Any:
        return False

    if source_tp == target_tp:
        return True

    if is_union(target_tp):
        target_members = union_members(target_tp)
        return all(
            any(is_assignable(source_member, it) for it in target_members)
            for source_member in union_members(source_tp)
        )

    if is_union(source_tp):
        return False

    if get_origin(source_tp) is not None or get_origin(target_tp) is not None:
        return False

    return _is_subclass(source_tp, target_tp)
