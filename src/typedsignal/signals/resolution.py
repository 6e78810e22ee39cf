"""Binding method names to handlers and checking values against a signature."""

from __future__ import annotations

import inspect
from inspect import Parameter
from types import NoneType, UnionType
from typing import (
    TYPE_CHECKING,
    Annotated,
    Any,
    Literal,
    TypeVar,
    Union,
    get_args,
    get_origin,
    get_type_hints,
)

from typedsignal.signals.exceptions import (
    MethodInaccessibleError,
    MethodNotFoundError,
    ParameterMismatchError,
)


if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Sequence


_MISSING = object()
_POSITIONAL = {Parameter.POSITIONAL_ONLY, Parameter.POSITIONAL_OR_KEYWORD}


def normalize_parameter_types(parameter_types: Iterable[Any]) -> tuple[Any, ...]:
    """Return the signature as a tuple, with ``None`` spelled as ``NoneType``."""
    return tuple(NoneType if tp is None else tp for tp in parameter_types)


def type_name(tp: Any) -> str:
    if tp is NoneType:
        return "None"
    if get_origin(tp) is None and isinstance(tp, type):
        return tp.__qualname__
    return repr(tp)


def format_parameter_types(parameter_types: Sequence[Any]) -> str:
    """Render a signature for messages, e.g. ``[str, int]``."""
    return "[" + ", ".join(type_name(tp) for tp in parameter_types) + "]"


def is_public(name: str) -> bool:
    """Whether a method name is part of its class's public interface."""
    if name.startswith("__") and name.endswith("__"):
        return True
    return not name.startswith("_")


def _is_method_like(attr: Any) -> bool:
    if isinstance(attr, staticmethod | classmethod):
        return True
    return inspect.isroutine(attr)


def _find_mangled(cls: type, name: str) -> Any:
    """Look up a private ``__name`` under its mangled form along the MRO."""
    if not name.startswith("__") or name.endswith("__"):
        return _MISSING
    for klass in cls.__mro__:
        mangled = f"_{klass.__name__.lstrip('_')}{name}"
        attr = inspect.getattr_static(klass, mangled, _MISSING)
        if attr is not _MISSING:
            return attr
    return _MISSING


def resolve_method(
    receiver: Any,
    method_name: str,
    parameter_types: Sequence[Any],
    *,
    strict: bool = False,
) -> Callable[..., Any]:
    """Bind ``method_name`` on ``receiver`` to a handler accepting the signature.

    The lookup happens on the receiver's class. Failures are checked in order:
    the name must exist, then be public, then accept exactly the signature.

    Args:
        receiver: Object the handler is bound to.
        method_name: Name of the method on the receiver's class.
        parameter_types: Types the handler must accept, in order.
        strict: Treat unannotated parameters as a mismatch.

    Returns:
        The bound method.

    Raises:
        MethodNotFoundError: The class has no method with that name.
        MethodInaccessibleError: The method is not public.
        ParameterMismatchError: The method's parameters don't match the signature.
    """
    cls = type(receiver)
    context = {
        "receiver_type": cls,
        "method_name": method_name,
        "parameter_types": tuple(parameter_types),
    }
    attr = inspect.getattr_static(cls, method_name, _MISSING)
    if attr is _MISSING:
        attr = _find_mangled(cls, method_name)
    if attr is _MISSING or not _is_method_like(attr):
        msg = f"The method {method_name!r} doesn't exist in class {cls.__qualname__!r}"
        raise MethodNotFoundError(msg, **context)

    if not is_public(method_name):
        msg = f"You don't have access to the method {method_name!r} in class {cls.__qualname__!r}"
        raise MethodInaccessibleError(msg, **context)

    method = getattr(receiver, method_name)
    problem = _signature_problem(method, parameter_types, strict=strict)
    if problem is not None:
        msg = (
            f"The method {method_name!r} in class {cls.__qualname__!r} doesn't have "
            f"the required parameters : {format_parameter_types(parameter_types)} ({problem})"
        )
        raise ParameterMismatchError(msg, **context)
    return method


def _signature_problem(
    method: Callable[..., Any],
    parameter_types: Sequence[Any],
    *,
    strict: bool,
) -> str | None:
    """Describe why ``method`` can't take the signature, or return None if it can."""
    try:
        sig = inspect.signature(method)
    except (TypeError, ValueError):
        return "signature cannot be inspected"

    positional: list[Parameter] = []
    for param in sig.parameters.values():
        if param.kind in _POSITIONAL:
            if param.default is not Parameter.empty:
                return f"parameter {param.name!r} has a default value"
            positional.append(param)
        elif param.kind is Parameter.VAR_POSITIONAL:
            return f"accepts *{param.name}"
        elif param.kind is Parameter.KEYWORD_ONLY and param.default is Parameter.empty:
            return f"requires keyword-only parameter {param.name!r}"

    if len(positional) != len(parameter_types):
        return f"takes {len(positional)} positional parameters, expected {len(parameter_types)}"

    try:
        hints = get_type_hints(getattr(method, "__func__", method), include_extras=True)
    except NameError as e:
        return f"annotations cannot be resolved: {e}"
    except TypeError:
        # callable objects without annotations of their own
        hints = {}

    for index, (param, expected) in enumerate(zip(positional, parameter_types, strict=True)):
        hint = hints.get(param.name, _MISSING)
        if hint is _MISSING:
            if strict:
                return f"parameter {param.name!r} is not annotated"
            continue
        if hint is Any or hint == expected:
            continue
        return (
            f"parameter {index} {param.name!r} is {type_name(hint)}, "
            f"expected {type_name(expected)}"
        )
    return None


def is_instance(value: Any, tp: Any) -> bool:
    """Runtime ``isinstance`` check that understands common typing constructs.

    Parametrised generics are checked against their origin only. Types that
    can't be checked at runtime accept any value.
    """
    if tp is Any or tp is object:
        return True
    if tp is None or tp is NoneType:
        return value is None
    if isinstance(tp, TypeVar):
        return tp.__bound__ is None or is_instance(value, tp.__bound__)
    supertype = getattr(tp, "__supertype__", None)
    if supertype is not None:
        return is_instance(value, supertype)

    origin = get_origin(tp)
    if origin is Union or origin is UnionType:
        return any(is_instance(value, arg) for arg in get_args(tp))
    if origin is Literal:
        return any(type(value) is type(arg) and value == arg for arg in get_args(tp))
    if origin is Annotated:
        return is_instance(value, get_args(tp)[0])
    if origin is not None:
        tp = origin

    try:
        return isinstance(value, tp)
    except TypeError:
        # not runtime checkable (e.g. a plain Protocol)
        return True


def check_arguments(args: Sequence[Any], parameter_types: Sequence[Any], label: str) -> None:
    """Raise ParameterMismatchError if ``args`` don't fit the signature."""
    if len(args) != len(parameter_types):
        msg = (
            f"{label} expects {len(parameter_types)} arguments "
            f"{format_parameter_types(parameter_types)}, got {len(args)}"
        )
        raise ParameterMismatchError(msg, parameter_types=tuple(parameter_types))

    for index, (value, expected) in enumerate(zip(args, parameter_types, strict=True)):
        if not is_instance(value, expected):
            msg = (
                f"{label} argument {index} must be {type_name(expected)}, "
                f"got {type(value).__qualname__}"
            )
            raise ParameterMismatchError(msg, parameter_types=tuple(parameter_types))
