"""Shared test helpers for PaceKeeper."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from pacekeeper.timer.engine import SequenceTimer


class SignalCollector:
    """Utility to capture pyqtSignal emissions into a list."""

    def __init__(self):
        self.items: list = []

    def slot(self, *args):
        self.items.append(args if len(args) > 1 else args[0] if args else None)

    def __call__(self, *args):
        self.slot(*args)

    def __len__(self):
        return len(self.items)

    def __getitem__(self, idx):
        return self.items[idx]

    @property
    def last(self):
        return self.items[-1] if self.items else None

    def clear(self):
        self.items.clear()


@dataclass
class _Entry:
    due: int
    interval: int | None
    callback: Callable[[], None]


class ManualClock:
    """``Clock`` whose time only moves when a test calls ``advance``."""

    def __init__(self):
        self.now = 0
        self._entries: dict[int, _Entry] = {}
        self._next_handle = 1

    def every(self, interval_ms, callback):
        return self._add(_Entry(self.now + interval_ms, interval_ms, callback))

    def after(self, delay_ms, callback):
        return self._add(_Entry(self.now + delay_ms, None, callback))

    def cancel(self, handle):
        self._entries.pop(handle, None)

    @property
    def active_count(self) -> int:
        return len(self._entries)

    def pending_callbacks(self) -> list[Callable[[], None]]:
        return [entry.callback for entry in self._entries.values()]

    def advance(self, ms: int) -> None:
        """Fire everything due up to ``now + ms``, in due order."""
        target = self.now + ms
        while True:
            due = [(e.due, h) for h, e in self._entries.items() if e.due <= target]
            if not due:
                break
            due_at, handle = min(due)
            entry = self._entries[handle]
            self.now = due_at
            if entry.interval is None:
                del self._entries[handle]
            else:
                entry.due += entry.interval
            entry.callback()
        self.now = target

    def tick(self, seconds: int = 1) -> None:
        self.advance(seconds * 1000)

    def _add(self, entry: _Entry) -> int:
        handle = self._next_handle
        self._next_handle += 1
        self._entries[handle] = entry
        return handle


class FakeTone:
    """Records ``play_tone`` calls."""

    def __init__(self):
        self.played: list[tuple[int, float]] = []

    def play_tone(self, duration_ms, frequency_hz):
        self.played.append((duration_ms, frequency_hz))


class FakeAnnouncer:
    """Records utterances; finishes them at once or on ``finish()``."""

    def __init__(self, auto_finish: bool = True):
        self.auto_finish = auto_finish
        self.spoken: list[str] = []
        self._pending: list[Callable[[], None]] = []
        self.cancelled = 0

    def speak(self, text, on_finished=None):
        self.spoken.append(text)
        if on_finished is None:
            return
        if self.auto_finish:
            on_finished()
        else:
            self._pending.append(on_finished)

    def finish(self) -> None:
        """Complete the oldest pending utterance."""
        self._pending.pop(0)()

    def finish_all(self) -> None:
        while self._pending:
            self.finish()

    @property
    def pending(self) -> int:
        return len(self._pending)

    def cancel(self):
        self.cancelled += 1
        pending, self._pending = self._pending, []
        for callback in pending:
            callback()


def event_log(timer: SequenceTimer) -> list:
    """Attach to every timer signal and record ``(kind, payload)`` tuples."""
    log: list = []
    timer.tick.connect(lambda s: log.append(("tick", s.current_index, s.remaining_seconds)))
    timer.tick_sound.connect(lambda s: log.append(("tick_sound",)))
    timer.remaining_announced.connect(lambda rs, s: log.append(("announce", rs)))
    timer.beep.connect(lambda s: log.append(("beep",)))
    timer.step_changed.connect(lambda s: log.append(("step_changed", s.current_index, s.current_loop)))
    timer.speech_requested.connect(lambda text: log.append(("speech", text)))
    timer.completed.connect(lambda s: log.append(("completed",)))
    return log
