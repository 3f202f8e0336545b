from __future__ import annotations

import inspect
import logging
import threading
from collections import deque
from dataclasses import dataclass
from typing import Any, Callable, Optional, Union

from typing_extensions import TypeAlias


@dataclass(frozen=True)
class FunctionIdentity:
    module: str
    qualname: str
    lineno: int = 0

    def __str__(self) -> str:
        return f'{self.module}.{self.qualname}'

    @classmethod
    def of(cls, fn: Callable[..., Any]) -> FunctionIdentity:
        """
        Return the identity of the function declared by `fn`, looking through
        wrappers created with `functools.wraps()`.
        """
        fn = inspect.unwrap(fn)
        code = getattr(fn, '__code__', None)

        return cls(
            getattr(fn, '__module__', None) or '<unknown>',
            getattr(fn, '__qualname__', None) or repr(fn),
            0 if code is None else code.co_firstlineno)


@dataclass(frozen=True)
class Once:
    pass


@dataclass(frozen=True)
class Repeat:
    count: int

    def __post_init__(self) -> None:
        if self.count < 1:
            raise ValueError(f'Repeat count must be positive, got {self.count}.')


@dataclass(frozen=True)
class Unlimited:
    pass


Uses: TypeAlias = Union[Once, Repeat, Unlimited]


def uses_from_count(count: int | None) -> Uses:
    if count is None:
        return Unlimited()

    return Repeat(count)


@dataclass
class MockEntry:
    # None marks an entry that lets the call through to the real body.
    behavior: Optional[Callable[..., Any]]
    uses: Uses
    used: bool = False

    def use(self) -> bool:
        """
        Count one use of this entry. Returns whether the entry is exhausted
        and must be removed from the queue.
        """
        self.used = True

        if isinstance(self.uses, Unlimited):
            return False

        if isinstance(self.uses, Repeat) and self.uses.count > 1:
            self.uses = Repeat(self.uses.count - 1)

            return False

        return True


@dataclass(frozen=True)
class Substituted:
    value: Any


class MockRegistry:
    """
    Queues of substitute behaviors of all mockable functions of one isolation
    scope. Queues are created on first use and consumed strictly in FIFO
    order.

    A scope's registry may be reached from several threads, e.g. through
    `asyncio.to_thread()`, so the queues are only touched while holding a
    lock. Behaviors run outside of the lock.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._queues: dict[FunctionIdentity, deque[MockEntry]] = {}

    def enqueue(self, identity: FunctionIdentity, entry: MockEntry) -> None:
        logging.debug(f'Adding mock for {identity}: {entry.uses}')

        with self._lock:
            self._queues.setdefault(identity, deque()).append(entry)

    def _take(self, identity: FunctionIdentity) -> MockEntry | None:
        with self._lock:
            queue = self._queues.get(identity)

            if not queue:
                return None

            entry = queue[0]

            # The behavior may itself add or clear mocks for this function, so
            # the queue must already be up to date when it runs.
            if entry.use():
                queue.popleft()

                if not queue:
                    del self._queues[identity]

            return entry

    def consume(
            self, identity: FunctionIdentity, args: tuple[Any, ...],
            kwargs: dict[str, Any]) \
            -> Substituted | None:
        entry = self._take(identity)

        if entry is None:
            return None

        if entry.behavior is None:
            logging.debug(f'Passing call to {identity} through to the real body')

            return None

        logging.debug(f'Substituting call to {identity}')

        return Substituted(entry.behavior(*args, **kwargs))

    def pending(self) -> dict[FunctionIdentity, int]:
        """
        Return the number of queued entries for each function that still has
        any.
        """
        with self._lock:
            return {k: len(v) for k, v in self._queues.items() if v}

    def unused(self) -> dict[FunctionIdentity, int]:
        """
        Like `pending()` but only counts entries which have never been used.
        An unlimited entry that served a call is not reported.
        """
        with self._lock:
            counts = {
                k: sum(1 for i in v if not i.used)
                for k, v in self._queues.items()}

        return {k: v for k, v in counts.items() if v}

    def clear(self, identity: FunctionIdentity) -> None:
        with self._lock:
            queue = self._queues.pop(identity, None)

        if queue:
            logging.debug(f'Cleared mocks of {identity}')

    def clear_all(self) -> None:
        with self._lock:
            self._queues.clear()
