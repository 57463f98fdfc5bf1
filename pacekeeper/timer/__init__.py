"""Timer package."""

from .clock import Clock, QtClock
from .engine import (
    SequenceTimer,
    TICK_INTERVAL_MS,
    ANNOUNCE_EVERY,
    ANNOUNCE_FINAL,
    should_announce,
)
from .models import Step, Snapshot, coerce_seconds, coerce_loop_count, steps_from

__all__ = [
    "Clock",
    "QtClock",
    "SequenceTimer",
    "TICK_INTERVAL_MS",
    "ANNOUNCE_EVERY",
    "ANNOUNCE_FINAL",
    "should_announce",
    "Step",
    "Snapshot",
    "coerce_seconds",
    "coerce_loop_count",
    "steps_from",
]
