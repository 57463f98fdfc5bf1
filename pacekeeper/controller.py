"""Session controller: turns timer events into sound and speech.

The ``SequenceTimer`` only *requests* beeps and speech.  This controller sits
between the timer and the audio capabilities (a ``Tone`` and an
``Announcer``) and owns the flows that span several seconds:

- **Start with announcement**: "<sequence> starting", a spoken 3-2-1
  countdown with one tick per second, an introduction of the step about to
  run, then ``timer.start()``.
- **Step introduction**: on every step change the timer is held while the
  finished and upcoming steps are spoken, then resumed.  It resumes only if
  it was running before and nobody paused or reset it in the meantime.

The widgets call ``toggle()``, ``pause()`` and ``reset()`` here rather than
on the timer so those flows can be cancelled.
"""

from __future__ import annotations

import logging
from typing import Iterable

from PyQt6.QtCore import QObject, pyqtSignal

from .audio.sounds import BEEP, FINISH, TICK, Tone
from .audio.speech import Announcer
from .formatting import format_duration
from .timer.clock import Clock, QtClock
from .timer.engine import SequenceTimer
from .timer.models import Snapshot, Step

logger = logging.getLogger(__name__)

DEFAULT_COUNTDOWN = 3
COUNTDOWN_INTERVAL_MS = 1000


class SessionController(QObject):
    """Presentation-layer orchestration over one ``SequenceTimer``.

    Signals
    -------
    sequence_loaded(name: str, steps: tuple)
        A new sequence replaced the old one.
    countdown_changed(value: int)
        The pre-start countdown shows *value*; 0 when it ends or is cancelled.
    starting_changed(starting: bool)
        The start-with-announcement flow began or ended.
    announcing_changed(announcing: bool)
        A step introduction began or ended.
    """

    sequence_loaded = pyqtSignal(str, object)
    countdown_changed = pyqtSignal(int)
    starting_changed = pyqtSignal(bool)
    announcing_changed = pyqtSignal(bool)

    def __init__(
        self,
        timer: SequenceTimer,
        tone: Tone,
        announcer: Announcer,
        parent: QObject | None = None,
        *,
        clock: Clock | None = None,
    ) -> None:
        super().__init__(parent)
        self._timer = timer
        self._tone = tone
        self._announcer = announcer
        self._clock: Clock = clock if clock is not None else QtClock(self)

        # ── preferences ───────────────────────────────────────────────
        self._beep_enabled = True
        self._tick_enabled = False
        self._voice_enabled = True
        self._pause_for_announcements = True
        self._countdown_seconds = DEFAULT_COUNTDOWN

        # ── flow state ────────────────────────────────────────────────
        self._sequence_name = ""
        self._flow = 0                     # bumped to invalidate pending callbacks
        self._pending: object | None = None
        self._starting = False
        self._announcing = False
        self._resume_after_announcement = False
        self._completed = False

        timer.beep.connect(self._on_beep)
        timer.tick_sound.connect(self._on_tick_sound)
        timer.remaining_announced.connect(self._on_remaining_announced)
        timer.step_changed.connect(self._on_step_changed)
        timer.speech_requested.connect(self._on_speech_requested)
        timer.completed.connect(self._on_completed)

    # ══════════════════════════════════════════════════════════════════
    #  PROPERTIES
    # ══════════════════════════════════════════════════════════════════

    @property
    def timer(self) -> SequenceTimer:
        return self._timer

    @property
    def sequence_name(self) -> str:
        return self._sequence_name

    @property
    def is_starting(self) -> bool:
        return self._starting

    @property
    def is_announcing(self) -> bool:
        return self._announcing

    @property
    def is_active(self) -> bool:
        """True while counting down, or about to (countdown / held for an
        announcement that will resume)."""
        return (
            self._timer.is_running
            or self._starting
            or (self._announcing and self._resume_after_announcement)
        )

    @property
    def beep_enabled(self) -> bool:
        return self._beep_enabled

    @property
    def tick_enabled(self) -> bool:
        return self._tick_enabled

    @property
    def voice_enabled(self) -> bool:
        return self._voice_enabled

    @property
    def pause_for_announcements(self) -> bool:
        return self._pause_for_announcements

    def set_beep_enabled(self, enabled: bool) -> None:
        self._beep_enabled = bool(enabled)

    def set_tick_enabled(self, enabled: bool) -> None:
        self._tick_enabled = bool(enabled)

    def set_voice_enabled(self, enabled: bool) -> None:
        self._voice_enabled = bool(enabled)
        if not enabled:
            self._announcer.cancel()

    def set_pause_for_announcements(self, enabled: bool) -> None:
        self._pause_for_announcements = bool(enabled)

    def set_countdown_seconds(self, seconds: int) -> None:
        self._countdown_seconds = max(0, int(seconds))

    def set_loop_count(self, loops: int) -> None:
        self._timer.set_loop_count(loops)

    def set_auto_repeat(self, enabled: bool) -> None:
        self._timer.set_auto_repeat(enabled)

    # ══════════════════════════════════════════════════════════════════
    #  CONTROLS
    # ══════════════════════════════════════════════════════════════════

    def load_sequence(self, name: str, steps: Iterable[Step]) -> None:
        """Replace the timer's sequence, abandoning any flow in progress."""
        self._cancel_flows()
        self._announcer.cancel()
        self._completed = False
        self._sequence_name = name or ""
        self._timer.load(steps)
        logger.info("Loaded sequence %r (%d steps)", self._sequence_name, len(self._timer.steps))
        self.sequence_loaded.emit(self._sequence_name, self._timer.steps)

    def toggle(self) -> None:
        """Start/Pause button."""
        if self.is_active:
            self.pause()
        else:
            self.start_with_announcement()

    def start_with_announcement(self) -> None:
        """Announce and count in from the top; resume plainly mid-sequence."""
        if self._timer.is_running or self._starting or not self._timer.steps:
            return
        if self._announcing:
            self._resume_after_announcement = True
            return
        if self._completed:
            self._completed = False
            self._timer.reset()
        if not self._at_beginning():
            self._timer.start()
            return

        self._starting = True
        self.starting_changed.emit(True)
        flow = self._flow
        name = self._sequence_name or "Timer"
        self._say(f"{name} starting", lambda: self._count_down(flow, self._countdown_seconds))

    def pause(self) -> None:
        """User pause: also cancels a pending countdown or resume."""
        self._cancel_flows()
        self._timer.pause()

    def reset(self) -> None:
        self._cancel_flows()
        self._announcer.cancel()
        self._completed = False
        self._timer.reset()

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL: start flow
    # ══════════════════════════════════════════════════════════════════

    def _at_beginning(self) -> bool:
        step = self._timer.current_step
        return (
            self._timer.current_index == 0
            and self._timer.current_loop == 1
            and step is not None
            and self._timer.remaining == step.seconds
        )

    def _say(self, text: str, then) -> None:
        if self._voice_enabled:
            self._announcer.speak(text, then)
        else:
            then()

    def _count_down(self, flow: int, value: int) -> None:
        if flow != self._flow:
            return
        if value <= 0:
            self._introduce_first_step(flow)
            return
        self.countdown_changed.emit(value)

        def after_number() -> None:
            if flow != self._flow:
                return
            if self._beep_enabled:
                self._tone.play_tone(*TICK)
            self._pending = self._clock.after(
                COUNTDOWN_INTERVAL_MS, lambda: self._count_down(flow, value - 1),
            )

        self._say(str(value), after_number)

    def _introduce_first_step(self, flow: int) -> None:
        self.countdown_changed.emit(0)
        step = self._timer.current_step
        if step is None:
            self._finish_start(flow)
            return
        self._say(
            f"{step.name}, {format_duration(step.seconds)}",
            lambda: self._finish_start(flow),
        )

    def _finish_start(self, flow: int) -> None:
        if flow != self._flow:
            return
        self._pending = None
        self._starting = False
        self.starting_changed.emit(False)
        self._timer.start()

    def _cancel_flows(self) -> None:
        self._flow += 1
        self._resume_after_announcement = False
        if self._pending is not None:
            self._clock.cancel(self._pending)
            self._pending = None
        if self._starting:
            self._starting = False
            self.countdown_changed.emit(0)
            self.starting_changed.emit(False)

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL: timer events
    # ══════════════════════════════════════════════════════════════════

    def _on_beep(self, _snapshot: Snapshot) -> None:
        if self._beep_enabled:
            self._tone.play_tone(*BEEP)

    def _on_tick_sound(self, _snapshot: Snapshot) -> None:
        if self._tick_enabled:
            self._tone.play_tone(*TICK)

    def _on_remaining_announced(self, remaining: int, _snapshot: Snapshot) -> None:
        if self._voice_enabled:
            self._announcer.speak(format_duration(remaining))

    def _on_step_changed(self, snapshot: Snapshot) -> None:
        step = snapshot.current_step
        if (
            step is None
            or self._announcing
            or not self._voice_enabled
            or not self._pause_for_announcements
        ):
            return
        self._announcing = True
        self._resume_after_announcement = self._timer.is_running
        self._timer.pause()
        self.announcing_changed.emit(True)
        self._announcer.speak(
            step_change_text(snapshot), self._after_step_announcement,
        )

    def _after_step_announcement(self) -> None:
        self._announcing = False
        resume = self._resume_after_announcement
        self._resume_after_announcement = False
        self.announcing_changed.emit(False)
        if resume:
            self._timer.start()

    def _on_speech_requested(self, text: str) -> None:
        # Step introductions already name the step.
        if self._voice_enabled and not self._pause_for_announcements:
            self._announcer.speak(text)

    def _on_completed(self, _snapshot: Snapshot) -> None:
        self._completed = True
        if self._beep_enabled:
            for tone in FINISH:
                self._tone.play_tone(*tone)
        if self._voice_enabled:
            self._announcer.speak(f"{self._sequence_name or 'Timer'} complete")
        logger.info("Sequence %r complete", self._sequence_name)


def step_change_text(snapshot: Snapshot) -> str:
    """What to say when *snapshot*'s step has just become current."""
    step = snapshot.current_step
    if step is None:
        return ""
    upcoming = f"{step.name}, {format_duration(step.seconds)}"
    previous = snapshot.previous_step
    if previous is not None:
        return f"{previous.name} done. Next: {upcoming}"
    if snapshot.current_loop > 1:
        return f"Loop {snapshot.current_loop}. First step: {upcoming}"
    return f"First step: {upcoming}"
