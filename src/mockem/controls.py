"""
Functions used by tests to prescribe substitute behaviors for mockable
functions. Each of these is also available as an attribute of the mockable
function itself, e.g. `foo.mock_once(lambda a: ...)`.
"""

from __future__ import annotations

from typing import Any, Callable

from mockem.registry import FunctionIdentity, MockEntry, Once, \
    uses_from_count
from mockem.scope import current_registry
from mockem.utils import NotMockableError


identity_attribute = '_mockem_identity'


def identity_of(fn: Callable[..., Any]) -> FunctionIdentity:
    # Bound methods forward attribute access to the underlying function.
    identity = getattr(fn, identity_attribute, None)

    if not isinstance(identity, FunctionIdentity):
        raise NotMockableError(
            f'{fn!r} is not mockable. Decorate it with @mock, and make sure '
            f'that mocking is enabled.')

    return identity


def mock_once(fn: Callable[..., Any], behavior: Callable[..., Any]) -> None:
    """
    Substitute the next call of `fn` that isn't already covered by a
    previously added mock with a call to `behavior`.
    """
    current_registry().enqueue(identity_of(fn), MockEntry(behavior, Once()))


def mock_repeat(
        fn: Callable[..., Any], count: int | None,
        behavior: Callable[..., Any]) \
        -> None:
    """
    Like `mock_once()` but substitutes the next `count` calls. When `count` is
    None, all following calls are substituted until `clear_mocks()` is called.
    """
    entry = MockEntry(behavior, uses_from_count(count))

    current_registry().enqueue(identity_of(fn), entry)


def mock_ret(fn: Callable[..., Any], value: Any) -> None:
    """
    Make the next call of `fn` return `value` instead of running its body.
    """
    mock_once(fn, lambda *args, **kwargs: value)


def mock_continue(fn: Callable[..., Any]) -> None:
    """
    Let the next call of `fn` run its real body. Used to interleave real calls
    with substituted ones.
    """
    current_registry().enqueue(identity_of(fn), MockEntry(None, Once()))


def clear_mocks(fn: Callable[..., Any]) -> None:
    current_registry().clear(identity_of(fn))


def attach_controls(fn: Callable[..., Any]) -> None:
    fn.mock_once = lambda behavior: mock_once(fn, behavior)  # type: ignore
    fn.mock_repeat = \
        lambda count, behavior: mock_repeat(fn, count, behavior)  # type: ignore
    fn.mock_ret = lambda value: mock_ret(fn, value)  # type: ignore
    fn.mock_continue = lambda: mock_continue(fn)  # type: ignore
    fn.clear_mocks = lambda: clear_mocks(fn)  # type: ignore
