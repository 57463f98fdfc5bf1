"""Scheduling primitives the timer engine consumes.

The engine never touches ``QTimer`` directly: it asks a ``Clock`` for a
repeating callback and cancels it through the returned handle.  The
production clock is ``QtClock``; tests substitute a manual clock that fires
callbacks on demand.
"""

from __future__ import annotations

from typing import Callable, Protocol

from PyQt6.QtCore import QObject, QTimer


class Clock(Protocol):
    def every(self, interval_ms: int, callback: Callable[[], None]) -> object:
        """Call *callback* every *interval_ms* until cancelled."""

    def after(self, delay_ms: int, callback: Callable[[], None]) -> object:
        """Call *callback* once after *delay_ms*."""

    def cancel(self, handle: object) -> None:
        """Cancel a registration.  Unknown or spent handles are ignored."""


class QtClock(QObject):
    """``Clock`` backed by one ``QTimer`` per registration."""

    def __init__(self, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._timers: set[QTimer] = set()

    def every(self, interval_ms: int, callback: Callable[[], None]) -> QTimer:
        return self._schedule(interval_ms, callback, single_shot=False)

    def after(self, delay_ms: int, callback: Callable[[], None]) -> QTimer:
        return self._schedule(delay_ms, callback, single_shot=True)

    def cancel(self, handle: object) -> None:
        if not isinstance(handle, QTimer) or handle not in self._timers:
            return
        handle.stop()
        self._timers.discard(handle)
        handle.deleteLater()

    @property
    def active_count(self) -> int:
        return len(self._timers)

    def _schedule(
        self, interval_ms: int, callback: Callable[[], None], *, single_shot: bool
    ) -> QTimer:
        timer = QTimer(self)
        timer.setInterval(max(0, int(interval_ms)))
        timer.setSingleShot(single_shot)
        if single_shot:
            def fire() -> None:
                self.cancel(timer)
                callback()
            timer.timeout.connect(fire)
        else:
            timer.timeout.connect(callback)
        self._timers.add(timer)
        timer.start()
        return timer
