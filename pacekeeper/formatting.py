"""Display and spoken formats for durations."""

from __future__ import annotations

import re

_CJK = re.compile(r"[一-鿿]")


def format_seconds(total: int) -> str:
    """``MM:SS`` for the countdown display (minutes are not wrapped)."""
    minutes, seconds = divmod(max(0, int(total)), 60)
    return f"{minutes:02d}:{seconds:02d}"


def format_duration(seconds: int) -> str:
    """Short spoken duration: ``"2 min 30"``, ``"2 min"`` or ``"45"``."""
    minutes, secs = divmod(max(0, int(seconds)), 60)
    if minutes and secs:
        return f"{minutes} min {secs}"
    if minutes:
        return f"{minutes} min"
    return str(secs)


def detect_lang(text: str | None) -> str:
    """Pick a speech locale: Chinese text → zh-TW, everything else → en-US."""
    return "zh-TW" if _CJK.search(str(text or "")) else "en-US"
