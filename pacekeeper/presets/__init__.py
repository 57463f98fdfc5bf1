"""Preset package."""

from .catalog import PresetCatalog, PresetChoice, builtin_key, custom_key, custom_name
from .repository import PresetError, PresetRepository, SqlPresetRepository
from .themes import (
    Theme,
    ThemeMetadata,
    FALLBACK_PRESET_MAP,
    load_theme_presets,
    load_themes_metadata,
    normalize_builtin_preset_data,
    normalize_preset_entries,
    normalize_theme_metadata,
)

__all__ = [
    "PresetCatalog",
    "PresetChoice",
    "builtin_key",
    "custom_key",
    "custom_name",
    "PresetError",
    "PresetRepository",
    "SqlPresetRepository",
    "Theme",
    "ThemeMetadata",
    "FALLBACK_PRESET_MAP",
    "load_theme_presets",
    "load_themes_metadata",
    "normalize_builtin_preset_data",
    "normalize_preset_entries",
    "normalize_theme_metadata",
]
