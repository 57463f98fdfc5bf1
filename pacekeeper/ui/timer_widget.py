"""Main timer card.

Layout (top → bottom):
    - Current step name + MM:SS countdown
    - Progress through the current step
    - Loop indicator
    - Step list (active step highlighted) and length of one pass
    - Reset / Start-Pause buttons
    - Sound toggles, loop count and auto-repeat
"""

from __future__ import annotations

from PyQt6.QtCore import Qt, pyqtSignal
from PyQt6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QLabel, QPushButton,
    QFrame, QListWidget, QCheckBox, QSpinBox, QProgressBar,
)

from ..controller import SessionController
from ..formatting import format_seconds
from ..timer.models import Snapshot, Step

NO_STEP_LABEL = "No sequence selected"
MAX_LOOPS = 99
PROGRESS_STEPS = 1000


class TimerWidget(QWidget):
    """The countdown card.  All actions go through the controller."""

    preferences_changed = pyqtSignal()

    def __init__(self, controller: SessionController, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._controller = controller
        self._timer = controller.timer
        self._build_ui()
        self._connect_signals()
        self.render_steps(self._timer.steps)
        self.render(self._timer.snapshot())

    # ── build ─────────────────────────────────────────────────────────────

    def _build_ui(self) -> None:
        root = QVBoxLayout(self)
        root.setContentsMargins(0, 0, 0, 0)

        card = QFrame(self)
        card.setObjectName("card")
        root.addWidget(card)

        layout = QVBoxLayout(card)
        layout.setContentsMargins(24, 20, 24, 20)
        layout.setSpacing(10)

        # ── current step ─────────────────────────────────────────────
        self._name_label = QLabel(NO_STEP_LABEL, card)
        self._name_label.setObjectName("stepName")
        self._name_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._name_label.setWordWrap(True)
        layout.addWidget(self._name_label)

        self._time_label = QLabel("00:00", card)
        self._time_label.setObjectName("timeLeft")
        self._time_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self._time_label)

        self._progress = QProgressBar(card)
        self._progress.setRange(0, PROGRESS_STEPS)
        self._progress.setTextVisible(False)
        self._progress.setFixedHeight(6)
        layout.addWidget(self._progress)

        self._loop_label = QLabel("", card)
        self._loop_label.setObjectName("loopLabel")
        self._loop_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self._loop_label)

        # ── step list ────────────────────────────────────────────────
        self._steps_list = QListWidget(card)
        self._steps_list.setSelectionMode(QListWidget.SelectionMode.SingleSelection)
        self._steps_list.setFocusPolicy(Qt.FocusPolicy.NoFocus)
        layout.addWidget(self._steps_list, 1)

        self._total_label = QLabel("", card)
        self._total_label.setObjectName("totalLabel")
        self._total_label.setAlignment(Qt.AlignmentFlag.AlignRight)
        layout.addWidget(self._total_label)

        # ── main controls ────────────────────────────────────────────
        btn_row = QHBoxLayout()
        btn_row.setSpacing(12)
        btn_row.setAlignment(Qt.AlignmentFlag.AlignCenter)

        self._reset_btn = QPushButton("Reset", card)
        self._reset_btn.setObjectName("dangerButton")

        self._start_pause_btn = QPushButton("Start", card)
        self._start_pause_btn.setObjectName("primaryButton")

        btn_row.addWidget(self._reset_btn)
        btn_row.addWidget(self._start_pause_btn)
        layout.addLayout(btn_row)

        # ── toggles ──────────────────────────────────────────────────
        toggle_row = QHBoxLayout()
        self._beep_cb = QCheckBox("Beep", card)
        self._tick_cb = QCheckBox("Tick", card)
        self._voice_cb = QCheckBox("Voice", card)
        for cb in (self._beep_cb, self._tick_cb, self._voice_cb):
            toggle_row.addWidget(cb)
        toggle_row.addStretch()
        layout.addLayout(toggle_row)

        loop_row = QHBoxLayout()
        loop_row.addWidget(QLabel("Loops", card))
        self._loops_spin = QSpinBox(card)
        self._loops_spin.setRange(1, MAX_LOOPS)
        loop_row.addWidget(self._loops_spin)
        self._auto_repeat_cb = QCheckBox("Repeat forever", card)
        loop_row.addWidget(self._auto_repeat_cb)
        loop_row.addStretch()
        layout.addLayout(loop_row)

        self._beep_cb.setChecked(self._controller.beep_enabled)
        self._tick_cb.setChecked(self._controller.tick_enabled)
        self._voice_cb.setChecked(self._controller.voice_enabled)
        self._loops_spin.setValue(self._timer.total_loops)
        self._auto_repeat_cb.setChecked(self._timer.auto_repeat)

    # ── signals ───────────────────────────────────────────────────────────

    def _connect_signals(self) -> None:
        self._start_pause_btn.clicked.connect(self._on_start_pause)
        self._reset_btn.clicked.connect(self._on_reset)
        self._beep_cb.toggled.connect(self._on_beep_toggled)
        self._tick_cb.toggled.connect(self._on_tick_toggled)
        self._voice_cb.toggled.connect(self._on_voice_toggled)
        self._loops_spin.valueChanged.connect(self._on_loops_changed)
        self._auto_repeat_cb.toggled.connect(self._on_auto_repeat_toggled)

        self._timer.tick.connect(self.render)
        self._timer.step_changed.connect(self.render)
        self._timer.completed.connect(self._on_completed)
        self._controller.sequence_loaded.connect(self._on_sequence_loaded)
        self._controller.countdown_changed.connect(self._on_countdown)
        self._controller.starting_changed.connect(self._update_buttons)
        self._controller.announcing_changed.connect(self._update_buttons)

    # ── public ────────────────────────────────────────────────────────────

    def render(self, snapshot: Snapshot) -> None:
        step = snapshot.current_step
        self._name_label.setText(step.name if step else NO_STEP_LABEL)
        self._time_label.setText(format_seconds(snapshot.remaining_seconds))
        self._progress.setValue(round(snapshot.percent_complete * PROGRESS_STEPS))
        self._total_label.setText(
            f"Total {format_seconds(snapshot.total_seconds)}" if snapshot.steps else ""
        )
        self._loop_label.setText(self._loop_text(snapshot))
        self.highlight_step(snapshot.current_index if step else -1)
        self._update_buttons()

    def refresh(self) -> None:
        self.render(self._timer.snapshot())

    def render_steps(self, steps: tuple[Step, ...] | list[Step]) -> None:
        self._steps_list.clear()
        for step in steps:
            self._steps_list.addItem(f"{step.name}  ·  {format_seconds(step.seconds)}")

    def highlight_step(self, index: int) -> None:
        if 0 <= index < self._steps_list.count():
            self._steps_list.setCurrentRow(index)
        else:
            self._steps_list.clearSelection()

    @property
    def start_pause_text(self) -> str:
        return self._start_pause_btn.text()

    @property
    def current_name_text(self) -> str:
        return self._name_label.text()

    @property
    def time_text(self) -> str:
        return self._time_label.text()

    @property
    def progress_value(self) -> int:
        return self._progress.value()

    @property
    def total_text(self) -> str:
        return self._total_label.text()

    @property
    def step_rows(self) -> list[str]:
        return [self._steps_list.item(i).text() for i in range(self._steps_list.count())]

    @property
    def highlighted_row(self) -> int:
        return self._steps_list.currentRow()

    def set_preferences(
        self, *, beep: bool, tick: bool, voice: bool, loops: int, auto_repeat: bool,
    ) -> None:
        """Populate the toggles without echoing changes back out."""
        widgets = (self._beep_cb, self._tick_cb, self._voice_cb,
                   self._loops_spin, self._auto_repeat_cb)
        for w in widgets:
            w.blockSignals(True)
        self._beep_cb.setChecked(beep)
        self._tick_cb.setChecked(tick)
        self._voice_cb.setChecked(voice)
        self._loops_spin.setValue(max(1, min(int(loops), MAX_LOOPS)))
        self._auto_repeat_cb.setChecked(auto_repeat)
        for w in widgets:
            w.blockSignals(False)
        self._loops_spin.setEnabled(not auto_repeat)

    # ── slots ─────────────────────────────────────────────────────────────

    def _on_start_pause(self) -> None:
        self._controller.toggle()
        self._update_buttons()

    def _on_reset(self) -> None:
        self._controller.reset()
        self._update_buttons()

    def _on_beep_toggled(self, checked: bool) -> None:
        self._controller.set_beep_enabled(checked)
        self.preferences_changed.emit()

    def _on_tick_toggled(self, checked: bool) -> None:
        self._controller.set_tick_enabled(checked)
        self.preferences_changed.emit()

    def _on_voice_toggled(self, checked: bool) -> None:
        self._controller.set_voice_enabled(checked)
        self.preferences_changed.emit()

    def _on_loops_changed(self, value: int) -> None:
        self._controller.set_loop_count(value)
        self.render(self._timer.snapshot())
        self.preferences_changed.emit()

    def _on_auto_repeat_toggled(self, checked: bool) -> None:
        self._controller.set_auto_repeat(checked)
        self._loops_spin.setEnabled(not checked)
        self.render(self._timer.snapshot())
        self.preferences_changed.emit()

    def _on_sequence_loaded(self, _name: str, steps: tuple) -> None:
        self.render_steps(steps)
        self.render(self._timer.snapshot())

    def _on_countdown(self, value: int) -> None:
        if value > 0:
            self._time_label.setText(str(value))
        else:
            self._time_label.setText(format_seconds(self._timer.remaining))

    def _on_completed(self, snapshot: Snapshot) -> None:
        self.render(snapshot)
        self._name_label.setText("Done")

    def _update_buttons(self, *_args) -> None:
        self._start_pause_btn.setText("Pause" if self._controller.is_active else "Start")
        self._start_pause_btn.setEnabled(bool(self._timer.steps))

    @staticmethod
    def _loop_text(snapshot: Snapshot) -> str:
        if snapshot.auto_repeat:
            return f"Loop {snapshot.current_loop} (repeating)"
        if snapshot.total_loops > 1:
            return f"Loop {snapshot.current_loop} of {snapshot.total_loops}"
        return ""
