"""UI package."""

from .timer_widget import TimerWidget
from .editor_dialog import PresetEditorDialog, StepRow
from .styles import PALETTE, build_stylesheet

__all__ = [
    "TimerWidget",
    "PresetEditorDialog",
    "StepRow",
    "PALETTE",
    "build_stylesheet",
]
