from collections import deque
from typing import Any, TypeVar, get_args, get_origin

#: Concrete iterable classes whose element type can be read from their generic bases
_CONCRETE_ITERABLES: tuple[type, ...] = (list, set, frozenset, deque)


def _type_params_for_base(tp: Any, base: type) -> tuple[Any, ...] | None:
    """Type parameters ``tp`` supplies to ``base``, following generic bases.

    Returns None when ``tp`` does not derive from ``base``.
    """
    origin = get_origin(tp) or tp
    args = get_args(tp) or ()

    if origin is base:
        return args

    params = getattr(origin, "__parameters__", ())
    substitutions = dict(zip(params, args, strict=True)) if args else {}

    for orig_base in getattr(origin, "__orig_bases__", ()):
        base_origin = get_origin(orig_base) or orig_base
        base_args = get_args(orig_base)
        resolved_base_args = tuple(substitutions.get(arg, arg) for arg in base_args)
        resolved_base = base_origin[resolved_base_args] if resolved_base_args else base_origin
        base_resolution = _type_params_for_base(resolved_base, base)
        if base_resolution is not None:
            return base_resolution

    return None


def element_type(tp: Any) -> Any:
    """Extract the element type from an iterable type annotation.

    Homogeneous tuples (``tuple[int, ...]``) yield their single element type.
    Unparameterised types, heterogeneous tuples and unbound type variables
    yield ``Any``, meaning the element type is only known at runtime.

    Examples:
        >>> element_type(list[int])
        <class 'int'>
        >>> element_type(tuple[str, ...])
        <class 'str'>
        >>> element_type(list)
        typing.Any

        >>> from typing import Generic, TypeVar
        >>> T = TypeVar("T")
        >>> class MyList(list[T], Generic[T]): ...
        >>> class IntList(MyList[int]): ...
        >>> element_type(IntList)
        <class 'int'>
    """
    origin = get_origin(tp) or tp
    args = get_args(tp)

    if origin is tuple:
        match args:
            case (elem, rest) if rest is Ellipsis:
                result = elem
            case (first, *others) if all(it == first for it in others):
                result = first
            case _:
                result = Any
    elif isinstance(origin, type) and issubclass(origin, _CONCRETE_ITERABLES):
        base = next(it for it in _CONCRETE_ITERABLES if issubclass(origin, it))
        params = _type_params_for_base(tp, base)
        result = params[0] if params else Any
    else:
        result = args[0] if args else Any

    return Any if isinstance(result, TypeVar) else result
