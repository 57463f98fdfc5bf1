"""Main application window for PaceKeeper."""

from __future__ import annotations

import logging

from PyQt6.QtCore import Qt
from PyQt6.QtGui import QAction, QKeySequence
from PyQt6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QHBoxLayout, QFrame,
    QLabel, QComboBox, QPushButton, QStatusBar, QLineEdit, QAbstractSpinBox,
)

from .audio.sounds import SoundManager
from .audio.speech import Speaker
from .controller import SessionController
from .presets.catalog import PresetCatalog, custom_key, custom_name
from .presets.repository import SqlPresetRepository
from .settings import Settings, load_settings, save_settings
from .timer.clock import QtClock
from .timer.engine import SequenceTimer
from .ui.editor_dialog import PresetEditorDialog
from .ui.styles import build_stylesheet
from .ui.timer_widget import TimerWidget

logger = logging.getLogger(__name__)


class PaceKeeperApp(QMainWindow):
    """Main application window.

    Collaborators may be injected (tests pass fakes for sound and speech);
    anything omitted is created with its production default.
    """

    def __init__(
        self,
        *,
        settings: Settings | None = None,
        catalog: PresetCatalog | None = None,
        tone=None,
        announcer=None,
        clock=None,
        persist_settings: bool = True,
    ) -> None:
        super().__init__()
        self.setWindowTitle("PaceKeeper")
        self.setMinimumSize(420, 600)

        # ── settings ──────────────────────────────────────────────────
        self._settings: Settings = settings if settings is not None else load_settings()
        self._persist = persist_settings

        # ── engines ───────────────────────────────────────────────────
        self._clock = clock if clock is not None else QtClock(self)
        self._timer = SequenceTimer(parent=self, clock=self._clock)
        if tone is None:
            tone = SoundManager(parent=self)
            tone.set_volume(self._settings.sound_volume)
        self._tone = tone
        self._announcer = announcer if announcer is not None else Speaker(parent=self)
        self._controller = SessionController(
            self._timer, self._tone, self._announcer, self, clock=self._clock,
        )
        self._apply_settings_to_controller()

        self._catalog = catalog if catalog is not None else PresetCatalog(SqlPresetRepository())

        # ── central widget ────────────────────────────────────────────
        self.setStyleSheet(build_stylesheet())
        central = QWidget()
        self.setCentralWidget(central)
        root_layout = QVBoxLayout(central)
        root_layout.setContentsMargins(16, 12, 16, 12)
        root_layout.setSpacing(8)

        root_layout.addWidget(self._build_top_bar(central))

        self._timer_widget = TimerWidget(self._controller, central)
        self._timer_widget.set_preferences(
            beep=self._settings.beep_enabled,
            tick=self._settings.tick_enabled,
            voice=self._settings.voice_enabled,
            loops=self._settings.loop_count,
            auto_repeat=self._settings.auto_repeat,
        )
        root_layout.addWidget(self._timer_widget, 1)

        self._status_bar = QStatusBar(self)
        self.setStatusBar(self._status_bar)

        # ── wire signals ──────────────────────────────────────────────
        self._timer_widget.preferences_changed.connect(self._on_preferences_changed)
        self._timer.completed.connect(self._on_completed)
        self._controller.sequence_loaded.connect(self._on_sequence_loaded)
        self._theme_combo.currentIndexChanged.connect(self._on_theme_selected)
        self._preset_combo.currentIndexChanged.connect(self._on_preset_selected)

        # ── initial content ───────────────────────────────────────────
        self.populate_themes()
        theme_id = self._catalog.default_theme_id(self._settings.theme_id)
        self.switch_theme(theme_id, force=True, preferred_key=self._settings.preset_key)

        self._restore_geometry()
        self._setup_shortcuts()

    # ══════════════════════════════════════════════════════════════════
    #  TOP BAR
    # ══════════════════════════════════════════════════════════════════

    def _build_top_bar(self, parent: QWidget) -> QWidget:
        bar = QFrame(parent)
        bar.setObjectName("card")
        layout = QVBoxLayout(bar)
        layout.setContentsMargins(16, 12, 16, 12)
        layout.setSpacing(8)

        theme_row = QHBoxLayout()
        theme_row.addWidget(QLabel("Theme", bar))
        self._theme_combo = QComboBox(bar)
        theme_row.addWidget(self._theme_combo, 1)
        layout.addLayout(theme_row)

        preset_row = QHBoxLayout()
        preset_row.addWidget(QLabel("Preset", bar))
        self._preset_combo = QComboBox(bar)
        preset_row.addWidget(self._preset_combo, 1)
        self._edit_btn = QPushButton("Edit", bar)
        self._edit_btn.clicked.connect(self.open_editor)
        preset_row.addWidget(self._edit_btn)
        self._new_btn = QPushButton("New", bar)
        self._new_btn.clicked.connect(lambda: self.open_editor(blank=True))
        preset_row.addWidget(self._new_btn)
        layout.addLayout(preset_row)
        return bar

    # ══════════════════════════════════════════════════════════════════
    #  THEMES & PRESETS
    # ══════════════════════════════════════════════════════════════════

    @property
    def controller(self) -> SessionController:
        return self._controller

    @property
    def timer_widget(self) -> TimerWidget:
        return self._timer_widget

    @property
    def current_preset_key(self) -> str:
        return self._preset_combo.currentData() or ""

    def preset_keys(self) -> list[str]:
        return [
            self._preset_combo.itemData(i)
            for i in range(self._preset_combo.count())
            if self._preset_combo.itemData(i)
        ]

    def populate_themes(self) -> None:
        self._theme_combo.blockSignals(True)
        self._theme_combo.clear()
        for theme in self._catalog.themes:
            self._theme_combo.addItem(theme.name, theme.id)
            self._theme_combo.setItemData(
                self._theme_combo.count() - 1, theme.tooltip, Qt.ItemDataRole.ToolTipRole,
            )
        self._theme_combo.blockSignals(False)

    def switch_theme(self, theme_id: str, *, force: bool = False, preferred_key: str = "") -> None:
        if not self._catalog.switch_theme(theme_id, force=force):
            return
        idx = self._theme_combo.findData(self._catalog.current_theme_id)
        if idx >= 0 and idx != self._theme_combo.currentIndex():
            self._theme_combo.blockSignals(True)
            self._theme_combo.setCurrentIndex(idx)
            self._theme_combo.blockSignals(False)
        self._settings.theme_id = self._catalog.current_theme_id
        self.populate_presets(preferred_key)
        self._save()

    def populate_presets(self, preferred_key: str = "") -> None:
        """Rebuild the preset picker (built-in, separator, custom) and load
        *preferred_key* if present, else the first entry."""
        choices = self._catalog.choices()
        self._preset_combo.blockSignals(True)
        self._preset_combo.clear()
        builtin_done = False
        for choice in choices:
            if choice.custom and not builtin_done:
                if self._preset_combo.count():
                    self._preset_combo.insertSeparator(self._preset_combo.count())
                builtin_done = True
            label = f"{choice.name} (custom)" if choice.custom else choice.name
            self._preset_combo.addItem(label, choice.key)
        self._preset_combo.blockSignals(False)

        keys = [choice.key for choice in choices]
        key = preferred_key if preferred_key in keys else self._catalog.default_key()
        if key:
            self._preset_combo.blockSignals(True)
            self._preset_combo.setCurrentIndex(self._preset_combo.findData(key))
            self._preset_combo.blockSignals(False)
        self.apply_preset(key)

    def apply_preset(self, key: str) -> None:
        name, steps = self._catalog.resolve(key)
        self._controller.load_sequence(name, steps)
        self._settings.preset_key = key
        self._save()

    def open_editor(self, blank: bool = False) -> PresetEditorDialog:
        """Open the editor on the current sequence (or an empty one)."""
        name = "" if blank else (custom_name(self.current_preset_key) or "")
        steps = () if blank else self._timer.steps
        dialog = PresetEditorDialog(self._catalog.repository, name, steps, self)
        dialog.saved.connect(lambda saved: self.populate_presets(custom_key(saved)))
        dialog.deleted.connect(lambda _name: self.populate_presets())
        dialog.open()
        return dialog

    # ══════════════════════════════════════════════════════════════════
    #  SLOTS
    # ══════════════════════════════════════════════════════════════════

    def _on_theme_selected(self, index: int) -> None:
        theme_id = self._theme_combo.itemData(index)
        if theme_id:
            self.switch_theme(theme_id)

    def _on_preset_selected(self, index: int) -> None:
        key = self._preset_combo.itemData(index)
        if key:
            self.apply_preset(key)

    def _on_sequence_loaded(self, name: str, steps: tuple) -> None:
        if steps:
            total = self._controller.timer.snapshot().total_seconds
            self._status_bar.showMessage(f"{name}: {len(steps)} steps, {total // 60} min {total % 60} s")
        else:
            self._status_bar.showMessage("No sequence selected")

    def _on_completed(self, _snapshot) -> None:
        self._status_bar.showMessage(f"{self._controller.sequence_name or 'Timer'} complete")

    def _on_preferences_changed(self) -> None:
        s = self._settings
        s.beep_enabled = self._controller.beep_enabled
        s.tick_enabled = self._controller.tick_enabled
        s.voice_enabled = self._controller.voice_enabled
        s.loop_count = self._timer.total_loops
        s.auto_repeat = self._timer.auto_repeat
        self._save()

    def _apply_settings_to_controller(self) -> None:
        s = self._settings
        self._controller.set_beep_enabled(s.beep_enabled)
        self._controller.set_tick_enabled(s.tick_enabled)
        self._controller.set_voice_enabled(s.voice_enabled)
        self._controller.set_pause_for_announcements(s.pause_for_announcements)
        self._controller.set_countdown_seconds(s.countdown_seconds)
        self._controller.set_loop_count(s.loop_count)
        self._controller.set_auto_repeat(s.auto_repeat)

    def _save(self) -> None:
        if self._persist:
            save_settings(self._settings)

    # ══════════════════════════════════════════════════════════════════
    #  KEYBOARD SHORTCUTS
    # ══════════════════════════════════════════════════════════════════

    def _setup_shortcuts(self) -> None:
        """Space toggles start/pause, Esc resets, Ctrl+E opens the editor."""
        edit_action = QAction("Edit Preset", self)
        edit_action.setShortcut(QKeySequence("Ctrl+E"))
        edit_action.triggered.connect(lambda: self.open_editor())
        self.addAction(edit_action)

    def keyPressEvent(self, event) -> None:  # type: ignore[override]
        focus = self.focusWidget()
        typing = isinstance(focus, (QLineEdit, QAbstractSpinBox))
        if event.key() == Qt.Key.Key_Space and not typing:
            self._on_space()
        elif event.key() == Qt.Key.Key_Escape:
            self._on_escape()
        else:
            super().keyPressEvent(event)

    def _on_space(self) -> None:
        """Start or pause the timer."""
        self._controller.toggle()
        self._timer_widget.refresh()

    def _on_escape(self) -> None:
        """Rewind to the first step."""
        self._controller.reset()

    # ══════════════════════════════════════════════════════════════════
    #  WINDOW EVENTS
    # ══════════════════════════════════════════════════════════════════

    def _restore_geometry(self) -> None:
        """Restore window position and size from settings."""
        s = self._settings
        if s.window_x is not None and s.window_y is not None:
            self.move(s.window_x, s.window_y)
        if s.window_width and s.window_height:
            self.resize(s.window_width, s.window_height)

    def _save_geometry(self) -> None:
        """Persist current window geometry to settings."""
        if not self.isVisible():
            return
        pos = self.pos()
        size = self.size()
        self._settings.window_x = pos.x()
        self._settings.window_y = pos.y()
        self._settings.window_width = size.width()
        self._settings.window_height = size.height()
        self._save()

    def closeEvent(self, event) -> None:  # type: ignore[override]
        self._save_geometry()
        self._controller.pause()
        self._announcer.cancel()
        event.accept()
