"""Spoken announcements via QTextToSpeech.

``Speaker.speak(text, on_finished)`` queues an utterance; utterances are
spoken one at a time and *on_finished* runs when that utterance ends, fails,
or is skipped because speech is unavailable or the text is blank.
"""

from __future__ import annotations

import logging
from collections import deque
from typing import Callable, Protocol

from PyQt6.QtCore import QLocale, QObject

from ..formatting import detect_lang

logger = logging.getLogger(__name__)

Callback = Callable[[], None]


class Announcer(Protocol):
    def speak(self, text: str, on_finished: Callback | None = None) -> None: ...

    def cancel(self) -> None: ...


def _create_backend(parent: QObject) -> QObject | None:
    """A ``QTextToSpeech`` engine, or ``None`` when the platform has none."""
    try:
        from PyQt6.QtTextToSpeech import QTextToSpeech
    except ImportError as exc:
        logger.warning("Speech disabled, QtTextToSpeech is not available: %s", exc)
        return None
    engine = QTextToSpeech(parent)
    if engine.state() == QTextToSpeech.State.Error:
        logger.warning("Speech disabled: %s", engine.errorString())
        return None
    return engine


class Speaker(QObject):
    """Sequential text-to-speech queue."""

    def __init__(
        self,
        parent: QObject | None = None,
        *,
        backend: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._backend = backend
        self._backend_ready = backend is not None
        self._queue: deque[tuple[str, Callback | None]] = deque()
        self._current: tuple[str, Callback | None] | None = None
        self._rate = 0.0
        self._pitch = 0.0
        if self._backend is not None:
            self._backend.stateChanged.connect(self._on_state_changed)

    # ── public API ────────────────────────────────────────────────────

    @property
    def is_speaking(self) -> bool:
        return self._current is not None

    @property
    def pending(self) -> int:
        return len(self._queue)

    def speak(self, text: str, on_finished: Callback | None = None) -> None:
        """Queue *text*.  *on_finished* always runs exactly once."""
        text = str(text or "").strip()
        if not text or self._ensure_backend() is None:
            if on_finished is not None:
                on_finished()
            return
        self._queue.append((text, on_finished))
        if self._current is None:
            self._speak_next()

    def cancel(self) -> None:
        """Drop queued utterances and stop the current one.  Their callbacks
        still run so callers waiting on them are released."""
        pending = list(self._queue)
        self._queue.clear()
        current, self._current = self._current, None
        if current is not None and self._backend is not None:
            self._backend.stop()
        for _, callback in ([current] if current else []) + pending:
            if callback is not None:
                callback()

    # ── internal ──────────────────────────────────────────────────────

    def _ensure_backend(self) -> QObject | None:
        if not self._backend_ready:
            self._backend_ready = True
            self._backend = _create_backend(self)
            if self._backend is not None:
                self._backend.stateChanged.connect(self._on_state_changed)
        return self._backend

    def _speak_next(self) -> None:
        if not self._queue:
            self._current = None
            return
        self._current = self._queue.popleft()
        text = self._current[0]
        self._backend.setLocale(QLocale(detect_lang(text).replace("-", "_")))
        self._backend.setRate(self._rate)
        self._backend.setPitch(self._pitch)
        logger.debug("Speaking %r", text)
        self._backend.say(text)

    def _on_state_changed(self, state) -> None:
        # Ready/Error after say() means the current utterance is over.
        if self._current is None or getattr(state, "name", str(state)) not in ("Ready", "Error"):
            return
        text, callback = self._current
        finished = self._current = (text, None)
        if callback is not None:
            callback()
        # The callback may have cancelled or restarted the queue.
        if self._current is finished:
            self._speak_next()
