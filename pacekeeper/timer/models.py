"""Value types shared by the timer engine and everything that feeds it.

``Step`` is one named, timed phase of a sequence.  ``Snapshot`` is the
read-only, point-in-time copy of timer state handed to every signal
subscriber.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Iterable


def coerce_seconds(value: Any) -> int:
    """Normalise a duration: missing/invalid → 0, fractional → floored,
    negative → 0."""
    try:
        seconds = math.floor(float(value))
    except (TypeError, ValueError, OverflowError):
        return 0
    return max(0, seconds)


def coerce_loop_count(value: Any) -> int:
    """Normalise a loop target to an integer ≥ 1 (invalid → 1)."""
    try:
        loops = math.floor(float(value))
    except (TypeError, ValueError, OverflowError):
        return 1
    return max(1, loops)


@dataclass(frozen=True)
class Step:
    """One named, timed phase of a sequence."""

    name: str
    seconds: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "name", "" if self.name is None else str(self.name))
        object.__setattr__(self, "seconds", coerce_seconds(self.seconds))

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Step:
        return cls(data.get("name"), data.get("seconds"))


def steps_from(entries: Iterable[Step | dict[str, Any]]) -> list[Step]:
    """Build a step list from ``Step`` objects or ``{name, seconds}`` dicts."""
    return [
        entry if isinstance(entry, Step) else Step.from_dict(entry)
        for entry in entries
    ]


@dataclass(frozen=True)
class Snapshot:
    """Immutable copy of timer state at the moment an event fired."""

    steps: tuple[Step, ...] = field(default_factory=tuple)
    current_index: int = 0
    current_step: Step | None = None
    remaining_seconds: int = 0
    total_loops: int = 1
    current_loop: int = 1
    is_running: bool = False
    auto_repeat: bool = False

    @property
    def previous_step(self) -> Step | None:
        """The step that ran before the current one within this loop."""
        if self.current_index <= 0 or self.current_index > len(self.steps):
            return None
        return self.steps[self.current_index - 1]

    @property
    def percent_complete(self) -> float:
        """0.0 → 1.0 progress through the current step."""
        if self.current_step is None or self.current_step.seconds <= 0:
            return 0.0
        total = self.current_step.seconds
        elapsed = total - self.remaining_seconds
        return max(0.0, min(1.0, elapsed / total))

    @property
    def total_seconds(self) -> int:
        """Length of one full pass over the sequence."""
        return sum(step.seconds for step in self.steps)
