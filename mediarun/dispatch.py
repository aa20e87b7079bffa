"""
Single-threaded cooperative event dispatcher.

Readers fire when their file object becomes readable; timers fire on a fixed
interval. Every callback runs to completion before the next one starts, so
two events are never handled at the same time.

Usage:
    loop = Dispatcher()
    loop.add_reader(sys.stdin, on_input)
    loop.add_timer(0.5, monitor.poll)
    loop.run()          # returns after some callback calls loop.stop()
"""

from __future__ import annotations

import selectors
import time
from dataclasses import dataclass
from typing import Any, Callable


@dataclass
class _Timer:
    interval: float
    callback: Callable[[], None]
    due: float


class Dispatcher:
    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._selector = selectors.DefaultSelector()
        self._timers: list[_Timer] = []
        self._clock = clock
        self._stop_requested = False

    # ── Registration ──────────────────────────────────────────────────────────

    def add_reader(self, fileobj: Any, callback: Callable[[], None]) -> None:
        self._selector.register(fileobj, selectors.EVENT_READ, callback)

    def remove_reader(self, fileobj: Any) -> None:
        try:
            self._selector.unregister(fileobj)
        except (KeyError, ValueError):
            pass

    def add_timer(self, interval: float, callback: Callable[[], None]) -> None:
        self._timers.append(_Timer(interval, callback, self._clock() + interval))

    # ── Loop ──────────────────────────────────────────────────────────────────

    def stop(self) -> None:
        self._stop_requested = True

    @property
    def stopped(self) -> bool:
        return self._stop_requested

    def run(self) -> None:
        """Dispatch until stop() is called. No overall timeout."""
        self._stop_requested = False
        while not self._stop_requested:
            if not self._timers and not self._selector.get_map():
                return
            self.run_once()

    def run_once(self) -> None:
        """Wait for the next reader or timer and run its callbacks."""
        timeout = self._next_timeout()

        if self._selector.get_map():
            events = self._selector.select(timeout)
        else:
            if timeout:
                time.sleep(timeout)
            events = []

        for key, _ in events:
            key.data()
            if self._stop_requested:
                return

        now = self._clock()
        for timer in self._timers:
            if timer.due <= now:
                timer.due = now + timer.interval
                timer.callback()
                if self._stop_requested:
                    return

    def _next_timeout(self) -> float | None:
        if not self._timers:
            return None
        soonest = min(t.due for t in self._timers)
        return max(0.0, soonest - self._clock())

    def close(self) -> None:
        self._selector.close()
