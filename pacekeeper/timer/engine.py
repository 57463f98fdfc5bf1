"""Step-sequence countdown engine for PaceKeeper.

The engine walks an ordered list of ``Step`` objects one second at a time,
switching steps, looping, and completing on its own.  It never plays a sound
or speaks: it emits *requests* as Qt signals and the application decides
what to do with them.

States
------
idle       Steps loaded (possibly none), no tick subscription.
running    Tick subscription live, counting down ``remaining_seconds``.

Per-tick emission order
-----------------------
tick → tick_sound → remaining_announced? → beep? → step_changed? →
speech_requested? → completed?

Subscribers may rely on that order, e.g. to pause the timer from a
``step_changed`` slot before the spoken cue begins.
"""

from __future__ import annotations

import logging
from functools import partial
from typing import Any, Iterable

from PyQt6.QtCore import QObject, pyqtSignal

from .clock import Clock, QtClock
from .models import Snapshot, Step, coerce_loop_count, steps_from

logger = logging.getLogger(__name__)


# ── constants ─────────────────────────────────────────────────────────────

TICK_INTERVAL_MS = 1000
ANNOUNCE_EVERY = 10      # announce remaining time on multiples of this
ANNOUNCE_FINAL = 5       # ...and every second from here down


def should_announce(remaining: int) -> bool:
    """Remaining-time policy: positive multiples of 10, and the last 5 s."""
    if remaining <= 0:
        return False
    return remaining % ANNOUNCE_EVERY == 0 or remaining <= ANNOUNCE_FINAL


# ── engine ────────────────────────────────────────────────────────────────


class SequenceTimer(QObject):
    """Counts down through a sequence of steps, optionally looping.

    Signals
    -------
    tick(snapshot: Snapshot)
        Emitted on every tick, on ``start()`` and on ``reset()``.
    tick_sound(snapshot: Snapshot)
        Emitted on every tick while running.
    remaining_announced(remaining: int, snapshot: Snapshot)
        Emitted at most once per distinct remaining value per step.
    beep(snapshot: Snapshot)
        A step boundary was reached.
    step_changed(snapshot: Snapshot)
        A new step became current (advance or loop restart).
    speech_requested(text: str)
        The name of the step that just became current.
    completed(snapshot: Snapshot)
        The last loop finished; the timer has already paused.
    """

    tick = pyqtSignal(object)
    tick_sound = pyqtSignal(object)
    remaining_announced = pyqtSignal(int, object)
    beep = pyqtSignal(object)
    step_changed = pyqtSignal(object)
    speech_requested = pyqtSignal(str)
    completed = pyqtSignal(object)

    def __init__(
        self,
        steps: Iterable[Step | dict[str, Any]] = (),
        parent: QObject | None = None,
        *,
        clock: Clock | None = None,
    ) -> None:
        super().__init__(parent)
        self._clock: Clock = clock if clock is not None else QtClock(self)

        # ── sequence ──────────────────────────────────────────────────
        self._steps: tuple[Step, ...] = tuple(steps_from(steps))
        self._index: int = 0
        self._remaining: int = self._steps[0].seconds if self._steps else 0

        # ── loops ─────────────────────────────────────────────────────
        self._total_loops: int = 1
        self._current_loop: int = 1
        self._auto_repeat: bool = False

        # ── announcement de-dup ───────────────────────────────────────
        self._last_announced: int | None = None

        # ── tick subscription ─────────────────────────────────────────
        self._subscription: object | None = None
        self._generation: int = 0
        # Bumped only by reset()/load(); pause() keeps it.
        self._epoch: int = 0

    # ══════════════════════════════════════════════════════════════════
    #  PUBLIC PROPERTIES
    # ══════════════════════════════════════════════════════════════════

    @property
    def steps(self) -> tuple[Step, ...]:
        return self._steps

    @property
    def current_index(self) -> int:
        return self._index

    @property
    def current_step(self) -> Step | None:
        """The active step, or ``None`` when no steps are loaded."""
        if 0 <= self._index < len(self._steps):
            return self._steps[self._index]
        return None

    @property
    def remaining(self) -> int:
        """Seconds left in the current step."""
        return self._remaining

    @property
    def is_running(self) -> bool:
        return self._subscription is not None

    @property
    def total_loops(self) -> int:
        return self._total_loops

    @property
    def current_loop(self) -> int:
        return self._current_loop

    @property
    def auto_repeat(self) -> bool:
        return self._auto_repeat

    def snapshot(self) -> Snapshot:
        return Snapshot(
            steps=self._steps,
            current_index=self._index,
            current_step=self.current_step,
            remaining_seconds=self._remaining,
            total_loops=self._total_loops,
            current_loop=self._current_loop,
            is_running=self.is_running,
            auto_repeat=self._auto_repeat,
        )

    # ══════════════════════════════════════════════════════════════════
    #  CONTROLS
    # ══════════════════════════════════════════════════════════════════

    def load(self, steps: Iterable[Step | dict[str, Any]]) -> None:
        """Replace the sequence with a private copy and fully reset."""
        self._steps = tuple(steps_from(steps))
        logger.debug("Loaded %d step(s)", len(self._steps))
        self.reset()

    def start(self) -> None:
        """Begin (or resume) counting down.  No-op if running or empty."""
        if self.is_running or not self._steps:
            return
        if self._remaining <= 0:
            self._remaining = self._steps[self._index].seconds
        self._generation += 1
        generation = self._generation
        # Subscription is live before the first emit.
        self._subscription = self._clock.every(
            TICK_INTERVAL_MS, partial(self._on_clock, generation),
        )
        logger.debug(
            "Started at step %d (%ds left, loop %d/%d)",
            self._index, self._remaining, self._current_loop, self._total_loops,
        )
        self.tick.emit(self.snapshot())

    def pause(self) -> None:
        """Cancel the tick subscription.  Idempotent; keeps position."""
        if self._subscription is None:
            return
        handle = self._subscription
        self._subscription = None
        self._generation += 1
        self._clock.cancel(handle)
        logger.debug("Paused at step %d (%ds left)", self._index, self._remaining)

    def stop(self) -> None:
        """Alias for ``pause()``; does not rewind."""
        self.pause()

    def reset(self) -> None:
        """Pause and rewind to the first step of the first loop."""
        self.pause()
        self._epoch += 1
        self._index = 0
        self._remaining = self._steps[0].seconds if self._steps else 0
        self._current_loop = 1
        self._last_announced = None
        self.tick.emit(self.snapshot())

    def set_loop_count(self, loops: Any) -> None:
        """Set the loop target (``max(1, floor(loops))``), restart the count."""
        self._total_loops = coerce_loop_count(loops)
        self._current_loop = 1

    def set_auto_repeat(self, enabled: bool) -> None:
        """Loop forever, ignoring the loop target, while enabled."""
        self._auto_repeat = bool(enabled)

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL: tick mechanics
    # ══════════════════════════════════════════════════════════════════

    def _on_clock(self, generation: int) -> None:
        # A callback queued before pause()/reset() must not fire into the
        # new state.
        if generation != self._generation or self._subscription is None:
            return
        self._on_tick()

    def _on_tick(self) -> None:
        # Slots may reset() or load() mid-tick; stop emitting once they do.
        epoch = self._epoch
        self._remaining = max(0, self._remaining - 1)
        self.tick.emit(self.snapshot())
        if epoch != self._epoch:
            return
        self.tick_sound.emit(self.snapshot())
        if epoch != self._epoch:
            return

        if self._remaining > 0:
            self._maybe_announce(self._remaining)
            return

        self.beep.emit(self.snapshot())
        if epoch != self._epoch:
            return
        if self._index < len(self._steps) - 1:
            self._enter_step(self._index + 1)
        elif self._auto_repeat or self._current_loop < self._total_loops:
            self._current_loop += 1
            logger.debug("Starting loop %d", self._current_loop)
            self._enter_step(0)
        else:
            self.pause()
            logger.debug("Sequence completed after %d loop(s)", self._current_loop)
            self.completed.emit(self.snapshot())

    def _maybe_announce(self, remaining: int) -> None:
        if not should_announce(remaining) or self._last_announced == remaining:
            return
        self._last_announced = remaining
        self.remaining_announced.emit(remaining, self.snapshot())

    def _enter_step(self, index: int) -> None:
        epoch = self._epoch
        self._index = index
        step = self.current_step
        self._remaining = step.seconds if step is not None else 0
        self._last_announced = None
        self.step_changed.emit(self.snapshot())
        if step is not None and epoch == self._epoch:
            self.speech_requested.emit(step.name)
