"""Application settings with JSON persistence.

Settings are stored at:
    ~/Library/Application Support/PaceKeeper/settings.json

Usage::

    settings = load_settings()
    settings.voice_enabled = False
    save_settings(settings)
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, asdict, fields
from pathlib import Path

logger = logging.getLogger(__name__)

# Reuse the app-support directory from db.py
APP_SUPPORT_DIR = Path.home() / "Library" / "Application Support" / "PaceKeeper"
SETTINGS_PATH = APP_SUPPORT_DIR / "settings.json"


@dataclass
class Settings:
    """All user-configurable preferences."""

    # ── timer ─────────────────────────────────────────────────────────
    loop_count: int = 1
    auto_repeat: bool = False
    countdown_seconds: int = 3             # spoken 3-2-1 before the first step
    pause_for_announcements: bool = True   # hold the clock while a step is introduced

    # ── audio ─────────────────────────────────────────────────────────
    beep_enabled: bool = True
    tick_enabled: bool = False
    voice_enabled: bool = True
    sound_volume: int = 70                 # 0-100

    # ── presets ───────────────────────────────────────────────────────
    theme_id: str = ""
    preset_key: str = ""

    # ── window ────────────────────────────────────────────────────────
    window_x: int | None = None
    window_y: int | None = None
    window_width: int = 480
    window_height: int = 720

    # ── diagnostics ───────────────────────────────────────────────────
    log_level: str = "INFO"


def load_settings() -> Settings:
    """Load settings from disk, falling back to defaults."""
    try:
        if SETTINGS_PATH.exists():
            data = json.loads(SETTINGS_PATH.read_text(encoding="utf-8"))
            # Only use keys that exist in the dataclass
            valid_keys = {f.name for f in fields(Settings)}
            filtered = {k: v for k, v in data.items() if k in valid_keys}
            return Settings(**filtered)
    except (OSError, ValueError, TypeError, AttributeError) as exc:
        logger.warning("Ignoring unreadable settings file %s: %s", SETTINGS_PATH, exc)
    return Settings()


def save_settings(settings: Settings) -> None:
    """Write settings to disk as JSON."""
    APP_SUPPORT_DIR.mkdir(parents=True, exist_ok=True)
    SETTINGS_PATH.write_text(
        json.dumps(asdict(settings), indent=2) + "\n",
        encoding="utf-8",
    )
