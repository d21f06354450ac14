"""Debounced input adapter for keystroke-rate events."""

import asyncio
import inspect
from collections.abc import Awaitable, Callable
from typing import Any

import structlog

log = structlog.stdlib.get_logger()

DEFAULT_DELAY = 0.3


class Debouncer:
    """Fires a callback once input has been quiet for ``delay`` seconds.

    Each ``execute()`` call replaces the pending one, so only the latest
    value is delivered. Coroutine callbacks run as tasks on the event loop.
    Must be used from code running inside an asyncio event loop.
    """

    def __init__(
        self,
        callback: Callable[[Any], None] | Callable[[Any], Awaitable[None]],
        delay: float = DEFAULT_DELAY,
    ) -> None:
        self.callback = callback
        self.delay = delay
        self._handle: asyncio.TimerHandle | None = None
        self._tasks: set[asyncio.Task[Any]] = set()

    @property
    def pending(self) -> bool:
        """True while a call is scheduled and has not fired yet."""
        return self._handle is not None

    def execute(self, value: Any) -> None:
        """Restart the timer with ``value`` as the value to deliver."""
        self.cancel()
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(self.delay, self._fire, value)

    def cancel(self) -> None:
        """Drop the pending call without invoking the callback."""
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _fire(self, value: Any) -> None:
        self._handle = None
        result = self.callback(value)
        if inspect.isawaitable(result):
            task = asyncio.ensure_future(result)
            # Keep a reference until the task finishes
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)
