"""
The `@mock` decorator, which turns functions and the methods of classes into
mockable functions. It's important that this module can be imported from
application code without importing any testing libraries.
"""

from __future__ import annotations

import inspect
from functools import wraps
from typing import Any, Callable, ParamSpec, TypeVar, overload

from mockem.config import mocking_enabled
from mockem.controls import attach_controls, identity_attribute
from mockem.registry import FunctionIdentity
from mockem.scope import current_registry
from mockem.utils import NotMockableError, raising, resolved


T = TypeVar('T')
P = ParamSpec('P')
C = TypeVar('C', bound=type)


def is_mockable(fn: object) -> bool:
    return isinstance(getattr(fn, identity_attribute, None), FunctionIdentity)


def _wrap_function(fn: Callable[P, T]) -> Callable[P, T]:
    if is_mockable(fn):
        return fn

    identity = FunctionIdentity.of(fn)

    # The real body is looked up through `__wrapped__` on every call so that
    # tests can still replace it with monkeypatch.
    if inspect.iscoroutinefunction(fn):
        # The registry is consulted when the function is called, not when the
        # returned awaitable is first awaited.
        @wraps(fn)
        def wrapped_fn(*args: P.args, **kwargs: P.kwargs) -> Any:
            try:
                result = current_registry().consume(identity, args, kwargs)
            except Exception as e:
                return raising(e)

            if result is None:
                return wrapped_fn.__wrapped__(*args, **kwargs)  # type: ignore

            return resolved(result.value)

        inspect.markcoroutinefunction(wrapped_fn)
    else:
        @wraps(fn)
        def wrapped_fn(*args: P.args, **kwargs: P.kwargs) -> Any:
            result = current_registry().consume(identity, args, kwargs)

            if result is None:
                return wrapped_fn.__wrapped__(*args, **kwargs)  # type: ignore

            return result.value

    setattr(wrapped_fn, identity_attribute, identity)
    attach_controls(wrapped_fn)

    return wrapped_fn


def _wrap_class(cls: C) -> C:
    for name, value in list(vars(cls).items()):
        # Dunder methods are part of the object protocol and stay as they are.
        if name.startswith('__') and name.endswith('__'):
            continue

        if isinstance(value, (staticmethod, classmethod)):
            setattr(cls, name, type(value)(_wrap_function(value.__func__)))
        elif inspect.isfunction(value):
            setattr(cls, name, _wrap_function(value))

    return cls


@overload
def mock(target: C) -> C: ...


@overload
def mock(target: Callable[P, T]) -> Callable[P, T]: ...


def mock(target: Any) -> Any:
    """
    Decorator for functions that allows them to be mocked, even after they've
    been imported with a `from` import.

    When applied to a class, each function defined in the class body becomes
    mockable on its own. Nothing is changed when mocking is disabled.
    """
    if not mocking_enabled():
        return target

    if inspect.isclass(target):
        return _wrap_class(target)

    if isinstance(target, (staticmethod, classmethod)):
        return type(target)(_wrap_function(target.__func__))

    if callable(target):
        return _wrap_function(target)

    raise NotMockableError(f'Cannot mock {target!r}, which is not callable.')
