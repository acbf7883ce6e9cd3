"""Cancellable presentation timers driven by a pluggable scheduler."""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, Protocol

logger = logging.getLogger(__name__)


class TimerHandle(Protocol):
    def cancel(self) -> None:
        """Prevent the scheduled callback from running."""


class Scheduler(Protocol):
    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        """Run ``callback`` once after ``delay`` seconds."""


class AsyncioScheduler:
    """Schedules callbacks on the running event loop."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        return asyncio.get_running_loop().call_later(delay, callback)


class PresentationTimers:
    """Tracks pending delayed callbacks so they can be abandoned on teardown.

    Callbacks scheduled here are purely presentational. Once :meth:`close` has
    been called no pending or future callback runs.
    """

    def __init__(self, scheduler: Scheduler | None = None) -> None:
        self._scheduler = scheduler if scheduler is not None else AsyncioScheduler()
        self._pending: dict[int, TimerHandle] = {}
        self._next_key = 0
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    def schedule(self, delay_ms: int, callback: Callable[[], None]) -> int | None:
        if self._closed:
            logger.debug("Ignoring timer scheduled after teardown")
            return None

        key = self._next_key
        self._next_key += 1

        def fire() -> None:
            if self._pending.pop(key, None) is None or self._closed:
                return
            callback()

        self._pending[key] = self._scheduler.call_later(delay_ms / 1000, fire)
        return key

    def cancel(self, key: int | None) -> None:
        if key is None:
            return
        handle = self._pending.pop(key, None)
        if handle is not None:
            handle.cancel()

    def close(self) -> None:
        self._closed = True
        pending = list(self._pending.values())
        self._pending.clear()
        for handle in pending:
            handle.cancel()
        if pending:
            logger.debug(f"Abandoned {len(pending)} presentation timer(s)")
