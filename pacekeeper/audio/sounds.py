"""Tone synthesis and playback using numpy + QSoundEffect.

Every tone is a sine wave with a short fade-in/fade-out envelope, written
once as a WAV file named after its duration and pitch, then played through a
cached ``QSoundEffect``.

Preloaded cues
--------------
- ``beep``: step boundary (180 ms, 880 Hz)
- ``tick``: once per second while running (60 ms, 1200 Hz)
- ``finish``: sequence complete, two tones (220 ms at 1200 Hz and 1000 Hz)
"""

from __future__ import annotations

import io
import logging
import wave
from pathlib import Path
from typing import Protocol

import numpy as np

from PyQt6.QtCore import QObject, QUrl
from PyQt6.QtMultimedia import QSoundEffect

logger = logging.getLogger(__name__)


# ── paths ────────────────────────────────────────────────────────────────

APP_SUPPORT_DIR = Path.home() / "Library" / "Application Support" / "PaceKeeper"
SOUNDS_DIR = APP_SUPPORT_DIR / "sounds"

SAMPLE_RATE = 44100

BEEP = (180, 880.0)
TICK = (60, 1200.0)
FINISH = ((220, 1200.0), (220, 1000.0))

PRELOADED_TONES = (BEEP, TICK, *FINISH)


class Tone(Protocol):
    def play_tone(self, duration_ms: int, frequency_hz: float) -> None: ...


# ═══════════════════════════════════════════════════════════════════════════
#  WAV SYNTHESIS HELPERS
# ═══════════════════════════════════════════════════════════════════════════


def _make_envelope(length: int, attack: int, release: int) -> np.ndarray:
    """Linear fade-in over *attack* samples, fade-out over *release*."""
    env = np.ones(length, dtype=np.float64)
    a = min(attack, length)
    if a > 0:
        env[:a] = np.linspace(0.0, 1.0, a)
    r = min(release, length - a)
    if r > 0:
        env[length - r:] = np.linspace(1.0, 0.0, r)
    return env


def _sine(freq: float, duration_s: float) -> np.ndarray:
    """Pure sine wave at *freq* Hz for *duration_s* seconds."""
    t = np.linspace(0, duration_s, int(SAMPLE_RATE * duration_s), endpoint=False)
    return np.sin(2 * np.pi * freq * t)


def _to_wav_bytes(samples: np.ndarray) -> bytes:
    """Convert a float64 numpy array (-1..1) to 16-bit PCM WAV bytes."""
    samples = np.clip(samples, -1.0, 1.0)
    int_samples = (samples * 32767).astype(np.int16)

    buf = io.BytesIO()
    with wave.open(buf, "wb") as wf:
        wf.setnchannels(1)
        wf.setsampwidth(2)
        wf.setframerate(SAMPLE_RATE)
        wf.writeframes(int_samples.tobytes())
    return buf.getvalue()


def synthesize_tone(duration_ms: int, frequency_hz: float, level: float = 0.3) -> bytes:
    """A soft sine blip: 20 ms attack, release over the remainder.

    Padded with 30 ms of silence so QSoundEffect doesn't clip the tail.
    """
    duration_s = max(1, int(duration_ms)) / 1000.0
    tone = _sine(frequency_hz, duration_s) * level
    attack = min(int(SAMPLE_RATE * 0.02), len(tone) // 2)
    env = _make_envelope(len(tone), attack=attack, release=len(tone) - attack)
    padded = np.concatenate([tone * env, np.zeros(int(SAMPLE_RATE * 0.03))])
    return _to_wav_bytes(padded)


def tone_filename(duration_ms: int, frequency_hz: float) -> str:
    return f"tone_{int(duration_ms)}ms_{int(round(frequency_hz))}hz.wav"


# ═══════════════════════════════════════════════════════════════════════════
#  SOUND MANAGER
# ═══════════════════════════════════════════════════════════════════════════


class SoundManager(QObject):
    """Synthesises, caches and plays tones.

    Usage::

        mgr = SoundManager(parent=self)
        mgr.set_volume(70)
        mgr.play_tone(*BEEP)
        mgr.play_tone(250, 660)
    """

    def __init__(
        self,
        parent: QObject | None = None,
        *,
        sounds_dir: Path | None = None,
    ) -> None:
        super().__init__(parent)
        self._volume = 0.7  # 0.0–1.0
        self._sounds_dir = sounds_dir or SOUNDS_DIR
        self._effects: dict[str, QSoundEffect] = {}

        for duration_ms, frequency_hz in PRELOADED_TONES:
            self._effect_for(duration_ms, frequency_hz)

    # ── public API ────────────────────────────────────────────────────

    def set_volume(self, level: int) -> None:
        """Set volume (0-100).  Updates all loaded effects."""
        self._volume = max(0, min(level, 100)) / 100.0
        for effect in self._effects.values():
            effect.setVolume(self._volume)

    def play_tone(self, duration_ms: int, frequency_hz: float) -> None:
        """Play an arbitrary tone, synthesising it on first use."""
        effect = self._effect_for(duration_ms, frequency_hz)
        if effect is not None:
            effect.play()

    @property
    def volume(self) -> int:
        """Current volume as 0-100 integer."""
        return round(self._volume * 100)

    @property
    def sounds_dir(self) -> Path:
        return self._sounds_dir

    # ── internal ──────────────────────────────────────────────────────

    def _effect_for(self, duration_ms: int, frequency_hz: float) -> QSoundEffect | None:
        name = tone_filename(duration_ms, frequency_hz)
        effect = self._effects.get(name)
        if effect is not None:
            return effect

        path = self._sounds_dir / name
        try:
            if not path.exists():
                self._sounds_dir.mkdir(parents=True, exist_ok=True)
                path.write_bytes(synthesize_tone(duration_ms, frequency_hz))
        except OSError as exc:
            logger.warning("Cannot cache tone %s: %s", path, exc)
            return None

        effect = QSoundEffect(self)
        effect.setSource(QUrl.fromLocalFile(str(path)))
        effect.setVolume(self._volume)
        self._effects[name] = effect
        return effect
