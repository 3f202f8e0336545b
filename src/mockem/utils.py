from __future__ import annotations

from typing import Any, NoReturn


class MockemError(Exception):
    pass


class ConfigError(MockemError):
    pass


class NotMockableError(MockemError, TypeError):
    pass


async def resolved(value: Any) -> Any:
    """
    An awaitable which completes immediately with the given value, without
    ever suspending.
    """
    return value


async def raising(error: BaseException) -> NoReturn:
    raise error
