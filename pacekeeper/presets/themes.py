"""Theme catalog loading and preset data normalisation.

A *theme* is a named group of built-in presets.  Theme metadata lives in
``themes.json`` inside the data directory::

    {
      "defaultThemeId": "daily",
      "themes": [
        {"id": "daily", "name": "Daily", "file": "daily.json"},
        {"id": "inline", "name": "Inline", "presets": [...]}
      ]
    }

Preset files are forgiving about shape; see ``normalize_builtin_preset_data``.
Every loader falls back to the built-in data rather than raising, and logs
what went wrong.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from ..timer.models import Step, coerce_seconds
from .builtin import DEFAULT_PRESET_DATA, DEFAULT_THEME_CONFIG

logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).resolve().parent.parent / "data"
THEMES_FILE = "themes.json"

PresetMap = dict[str, list[Step]]


@dataclass(frozen=True)
class Theme:
    id: str
    name: str
    description: str = ""
    usage: str = ""
    file: str = ""
    presets: tuple | None = None
    fallback: bool = False

    @property
    def tooltip(self) -> str:
        return " | ".join(part for part in (self.description, self.usage) if part)


@dataclass(frozen=True)
class ThemeMetadata:
    themes: tuple[Theme, ...]
    default_theme_id: str = ""

    def get(self, theme_id: str) -> Theme | None:
        for theme in self.themes:
            if theme.id == theme_id:
                return theme
        return None

    def resolve_default_id(self, preferred: str = "") -> str:
        """*preferred* if known, else the declared default, else the first."""
        for candidate in (preferred, self.default_theme_id):
            if candidate and self.get(candidate) is not None:
                return candidate
        return self.themes[0].id if self.themes else ""


# ══════════════════════════════════════════════════════════════════════
#  NORMALISATION
# ══════════════════════════════════════════════════════════════════════


def normalize_preset_entries(entries: Any) -> PresetMap:
    """``[{name, steps: [{name, seconds}]}]`` → ``{name: [Step, ...]}``.

    Entries without a name, steps without a name, and presets left with no
    steps are dropped.  Later entries with the same name win.
    """
    result: PresetMap = {}
    if not isinstance(entries, list):
        return result
    for entry in entries:
        if not isinstance(entry, dict):
            continue
        name = str(entry.get("name") or "").strip()
        if not name:
            continue
        raw_steps = entry.get("steps")
        steps: list[Step] = []
        for raw in raw_steps if isinstance(raw_steps, list) else []:
            if not isinstance(raw, dict):
                continue
            step_name = str(raw.get("name") or "").strip()
            if step_name:
                steps.append(Step(step_name, coerce_seconds(raw.get("seconds"))))
        if steps:
            result[name] = steps
    return result


def normalize_builtin_preset_data(raw: Any, fallback: PresetMap | None = None) -> PresetMap:
    """Accept any of the preset file shapes:

    - a list of preset entries;
    - an object whose list values hold preset entries (aggregated, e.g.
      ``{"daily": [...], "tea": [...]}``);
    - an object with a ``presets`` list;
    - a ``{preset name: [steps]}`` mapping.

    Returns a copy of *fallback* when nothing usable is found.
    """
    normalized: PresetMap = {}
    if isinstance(raw, list):
        normalized = normalize_preset_entries(raw)
    elif isinstance(raw, dict):
        aggregated = [
            entry
            for value in raw.values() if isinstance(value, list)
            for entry in value
            if isinstance(entry, dict) and isinstance(entry.get("steps"), list)
        ]
        if aggregated:
            normalized = normalize_preset_entries(aggregated)
        elif isinstance(raw.get("presets"), list):
            normalized = normalize_preset_entries(raw["presets"])
        else:
            normalized = normalize_preset_entries(
                [{"name": name, "steps": steps} for name, steps in raw.items()]
            )
    if not normalized:
        return dict(fallback or {})
    return normalized


def _normalize_theme(item: dict, idx: int) -> Theme:
    default_id = f"theme_{idx + 1}"
    theme_id = str(item.get("id") or default_id).strip() or default_id
    name = str(item.get("name") or theme_id).strip() or theme_id
    file = str(item.get("file") or "").strip()
    presets = item.get("presets")
    return Theme(
        id=theme_id,
        name=name,
        description=str(item.get("description") or ""),
        usage=str(item.get("usage") or ""),
        file=file,
        presets=tuple(presets) if isinstance(presets, list) else None,
        fallback=bool(item.get("fallback")) or not file,
    )


def normalize_theme_metadata(raw: Any, fallback_config: dict = DEFAULT_THEME_CONFIG) -> ThemeMetadata:
    """Validate ``themes.json`` content, substituting *fallback_config* when
    it lists no themes."""
    source: list = []
    default_id = ""
    if isinstance(raw, dict):
        if isinstance(raw.get("themes"), list):
            source = raw["themes"]
        if raw.get("defaultThemeId"):
            default_id = str(raw["defaultThemeId"]).strip()
    if not source:
        source = list(fallback_config.get("themes") or [])
        default_id = fallback_config.get("defaultThemeId") or ""

    themes = [
        _normalize_theme(item, idx)
        for idx, item in enumerate(source) if isinstance(item, dict)
    ]
    if not themes:
        themes = [
            _normalize_theme(item, idx)
            for idx, item in enumerate(fallback_config.get("themes") or [])
            if isinstance(item, dict)
        ]
        default_id = fallback_config.get("defaultThemeId") or ""
    return ThemeMetadata(themes=tuple(themes), default_theme_id=default_id)


FALLBACK_PRESET_MAP: PresetMap = normalize_preset_entries(DEFAULT_PRESET_DATA)


# ══════════════════════════════════════════════════════════════════════
#  LOADING
# ══════════════════════════════════════════════════════════════════════


def _read_json(path: Path) -> Any:
    return json.loads(path.read_text(encoding="utf-8"))


def load_themes_metadata(data_dir: Path | None = None) -> ThemeMetadata:
    """Read ``themes.json``; the built-in theme config on any failure."""
    fallback = normalize_theme_metadata(DEFAULT_THEME_CONFIG)
    path = (data_dir or DATA_DIR) / THEMES_FILE
    try:
        data = _read_json(path)
    except (OSError, ValueError) as exc:
        logger.error("Failed to load %s: %s", path, exc)
        return fallback
    return normalize_theme_metadata(data)


def load_theme_presets(
    theme: Theme | None,
    data_dir: Path | None = None,
    fallback_map: PresetMap = FALLBACK_PRESET_MAP,
) -> PresetMap:
    """Built-in presets for *theme*: inline presets, else its file, else
    *fallback_map*."""
    if theme is None:
        return dict(fallback_map)
    if theme.presets:
        inline = normalize_preset_entries(list(theme.presets))
        if inline:
            return inline
    if theme.file:
        path = (data_dir or DATA_DIR) / theme.file
        try:
            data = _read_json(path)
        except (OSError, ValueError) as exc:
            logger.error("Failed to load theme file %s: %s", path, exc)
        else:
            normalized = normalize_builtin_preset_data(
                data, fallback_map if theme.fallback else {},
            )
            if normalized:
                return normalized
            logger.warning("Theme file %s holds no usable presets", path)
    return dict(fallback_map)
