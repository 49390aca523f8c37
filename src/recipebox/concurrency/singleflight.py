"""Single-flight registry: concurrent callers for one key share one operation."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class _Call(Generic[T]):
    def __init__(self, task: asyncio.Task[T]) -> None:
        self.task = task
        self.waiters = 0


class SingleFlight(Generic[T]):
    """Deduplicates concurrent async work keyed by a string.

    The first caller for a key starts the work; later callers await the same
    task. A caller that is cancelled stops waiting without cancelling the
    shared task, unless it was the last waiter.
    """

    def __init__(self) -> None:
        self._calls: dict[str, _Call[T]] = {}

    async def do(self, key: str, factory: Callable[[], Awaitable[T]]) -> T:
        call = self._calls.get(key)
        if call is None:
            task = asyncio.ensure_future(factory())
            call = _Call(task)
            self._calls[key] = call
            task.add_done_callback(lambda _t, k=key, c=call: self._forget(k, c))
        else:
            logger.debug("Joining in-flight call for %s", key)

        call.waiters += 1
        try:
            return await asyncio.shield(call.task)
        except asyncio.CancelledError:
            if call.waiters == 1 and not call.task.done():
                call.task.cancel()
            raise
        finally:
            call.waiters -= 1

    def in_flight(self, key: str) -> bool:
        return key in self._calls

    def __len__(self) -> int:
        return len(self._calls)

    def _forget(self, key: str, call: _Call[T]) -> None:
        if self._calls.get(key) is call:
            del self._calls[key]
