"""Preset catalog: built-in presets of the current theme plus user presets.

Choices are addressed by key: ``builtin::<name>`` or ``custom::<name>``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from ..timer.models import Step
from .repository import PresetRepository
from .themes import (
    FALLBACK_PRESET_MAP,
    PresetMap,
    Theme,
    ThemeMetadata,
    load_theme_presets,
    load_themes_metadata,
)

logger = logging.getLogger(__name__)

BUILTIN_PREFIX = "builtin::"
CUSTOM_PREFIX = "custom::"


def builtin_key(name: str) -> str:
    return f"{BUILTIN_PREFIX}{name}"


def custom_key(name: str) -> str:
    return f"{CUSTOM_PREFIX}{name}"


def custom_name(key: str) -> str | None:
    """The user preset name behind *key*, or ``None`` for non-custom keys."""
    if key and key.startswith(CUSTOM_PREFIX):
        return key[len(CUSTOM_PREFIX):]
    return None


@dataclass(frozen=True)
class PresetChoice:
    key: str
    name: str
    custom: bool


class PresetCatalog:
    """Resolves preset keys to step lists for the UI."""

    def __init__(
        self,
        repository: PresetRepository,
        metadata: ThemeMetadata | None = None,
        *,
        data_dir: Path | None = None,
    ) -> None:
        self._repository = repository
        self._data_dir = data_dir
        self._metadata = metadata if metadata is not None else load_themes_metadata(data_dir)
        self._theme_id: str = ""
        self._builtin: PresetMap = {}

    # ── themes ────────────────────────────────────────────────────────

    @property
    def themes(self) -> tuple[Theme, ...]:
        return self._metadata.themes

    @property
    def current_theme_id(self) -> str:
        return self._theme_id

    @property
    def repository(self) -> PresetRepository:
        return self._repository

    def default_theme_id(self, preferred: str = "") -> str:
        return self._metadata.resolve_default_id(preferred)

    def switch_theme(self, theme_id: str, *, force: bool = False) -> bool:
        """Load built-in presets for *theme_id*.  Returns ``False`` when the
        theme was already current and nothing was reloaded."""
        target = theme_id or self._theme_id
        if not target:
            self._builtin = dict(FALLBACK_PRESET_MAP)
            return True
        if not force and target == self._theme_id and self._builtin:
            return False

        theme = self._metadata.get(target)
        if theme is None:
            logger.warning("Unknown theme %r, using built-in presets", target)
            presets = dict(FALLBACK_PRESET_MAP)
        else:
            presets = load_theme_presets(theme, self._data_dir)
        self._builtin = presets or dict(FALLBACK_PRESET_MAP)
        self._theme_id = theme.id if theme is not None else "default"
        logger.info("Theme %r: %d built-in presets", self._theme_id, len(self._builtin))
        return True

    # ── presets ───────────────────────────────────────────────────────

    @property
    def builtin_presets(self) -> PresetMap:
        return dict(self._builtin)

    def choices(self) -> list[PresetChoice]:
        """Built-in presets first, then user presets."""
        result = [PresetChoice(builtin_key(name), name, False) for name in self._builtin]
        result.extend(
            PresetChoice(custom_key(name), name, True)
            for name in self._repository.list()
        )
        return result

    def default_key(self) -> str:
        choices = self.choices()
        return choices[0].key if choices else ""

    def resolve(self, key: str) -> tuple[str, list[Step]]:
        """``(display name, steps)`` for *key*; ``("", [])`` if unknown."""
        if not key:
            return "", []
        if key.startswith(BUILTIN_PREFIX):
            name = key[len(BUILTIN_PREFIX):]
            return name, list(self._builtin.get(name, []))
        name = custom_name(key)
        if name is not None:
            return name, list(self._repository.get(name) or [])
        return "", []
