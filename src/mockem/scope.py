"""
Isolation scopes for mock registries.

Each scope owns a private `MockRegistry`. The active scope is tracked in a
context variable, so it follows the execution context: threads start without
one and asyncio tasks inherit the scope of the code that created them. Code
running outside of any explicit scope uses a registry private to its thread.
"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator

from mockem.registry import MockRegistry


_current_registry: ContextVar[MockRegistry | None] = \
    ContextVar('mockem_registry', default=None)

_thread_state = threading.local()


def _thread_registry() -> MockRegistry:
    registry = getattr(_thread_state, 'registry', None)

    if registry is None:
        registry = _thread_state.registry = MockRegistry()

    return registry


def current_registry() -> MockRegistry:
    registry = _current_registry.get()

    if registry is None:
        return _thread_registry()

    return registry


@contextmanager
def mock_scope() -> Iterator[MockRegistry]:
    """
    Run the body in a fresh isolation scope. Mocks added outside of the scope
    are not visible inside it and mocks added inside of it are discarded when
    the scope ends, even when the body raises.
    """
    registry = MockRegistry()
    token = _current_registry.set(registry)

    try:
        yield registry
    finally:
        _current_registry.reset(token)

        pending = registry.pending()

        if pending:
            logging.debug(
                f'Discarding mocks at end of scope: '
                f'{", ".join(str(i) for i in pending)}')

        registry.clear_all()


def clear_all_mocks() -> None:
    """
    Remove all mocks of all functions in the current scope.
    """
    current_registry().clear_all()
