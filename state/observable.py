"""
Observable State Primitives

MutableState holds the single immutable state value a state machine
publishes; the presentation layer only ever subscribes to it. TaskScope ties
a state machine's in-flight coroutines to its lifetime so that tearing the
machine down cancels them.
"""

from __future__ import annotations

import asyncio
import dataclasses
from typing import Any, Callable, Coroutine, Generic, List, Optional, Set, TypeVar

from utils.exceptions import ScopeClosedError
from utils.logger import get_logger

logger = get_logger(__name__)

S = TypeVar("S")
R = TypeVar("R")

Subscriber = Callable[[Any], None]


class MutableState(Generic[S]):
    """A published, replace-on-write state value.

    Usage:
        state = MutableState(SessionState())
        unsubscribe = state.subscribe(render)
        state.update(is_loading=True)
    """

    def __init__(self, initial: S, name: str = "state") -> None:
        self._value = initial
        self._name = name
        self._subscribers: List[Subscriber] = []
        self._closed = False

    @property
    def value(self) -> S:
        return self._value

    @property
    def closed(self) -> bool:
        return self._closed

    def set(self, value: S) -> None:
        """Replace the value and notify subscribers if it changed.

        Writes after close() are dropped.
        """
        if self._closed:
            logger.debug(f"Dropped write to closed {self._name}")
            return
        if value == self._value:
            return
        self._value = value
        for subscriber in list(self._subscribers):
            try:
                subscriber(value)
            except Exception:
                logger.exception(f"Subscriber of {self._name} raised")

    def update(self, **changes: Any) -> None:
        """Copy the current value with the given fields replaced."""
        self.set(dataclasses.replace(self._value, **changes))

    def subscribe(self, callback: Subscriber, emit_current: bool = True) -> Callable[[], None]:
        """
        Register a subscriber.

        Args:
            callback: Called with every new value.
            emit_current: Also call it immediately with the current value.

        Returns:
            A function that removes the subscription.
        """
        self._subscribers.append(callback)
        if emit_current:
            callback(self._value)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def close(self) -> None:
        self._closed = True
        self._subscribers.clear()


def _caller_is_cancelling() -> bool:
    task = asyncio.current_task()
    return task is not None and task.cancelling() > 0


class TaskScope:
    """Lifetime scope for a state machine's coroutines."""

    def __init__(self, name: str = "scope") -> None:
        self._name = name
        self._tasks: Set[asyncio.Task] = set()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def active_count(self) -> int:
        return len(self._tasks)

    def _start(self, coro: Coroutine[Any, Any, R]) -> "asyncio.Task[R]":
        if self._closed:
            coro.close()
            raise ScopeClosedError(f"{self._name} is closed")
        task = asyncio.ensure_future(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def run(self, coro: Coroutine[Any, Any, R]) -> Optional[R]:
        """
        Run a coroutine inside the scope and wait for its result.

        Returns:
            The coroutine's result, or None if close() cancelled it.

        Raises:
            ScopeClosedError: If the scope was already closed.
        """
        task = self._start(coro)
        try:
            return await task
        except asyncio.CancelledError:
            if self._closed and not _caller_is_cancelling():
                logger.debug(f"{self._name}: operation cancelled by close()")
                return None
            raise

    async def close(self) -> None:
        """Cancel every in-flight task and wait for them to unwind."""
        self._closed = True
        if self.active_count:
            logger.debug(f"{self._name}: cancelling {self.active_count} in-flight task(s)")
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
