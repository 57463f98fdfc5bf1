"""Audio package: synthesised tones and spoken announcements."""

from .sounds import SoundManager, Tone, BEEP, TICK, FINISH, synthesize_tone
from .speech import Announcer, Speaker

__all__ = [
    "SoundManager",
    "Tone",
    "BEEP",
    "TICK",
    "FINISH",
    "synthesize_tone",
    "Announcer",
    "Speaker",
]
