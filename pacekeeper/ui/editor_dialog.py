"""Preset editor dialog.

Edits a user preset: a name plus an ordered list of step rows.  Rows can be
moved up/down or deleted; rows with a blank name are skipped on save.  Saving
an existing name replaces it.
"""

from __future__ import annotations

from PyQt6.QtCore import pyqtSignal
from PyQt6.QtWidgets import (
    QDialog, QVBoxLayout, QHBoxLayout, QFormLayout, QWidget,
    QLineEdit, QSpinBox, QPushButton, QMessageBox, QScrollArea, QLabel,
)

from ..presets.repository import PresetError, PresetRepository, validate_preset
from ..timer.models import Step

DEFAULT_ROW_SECONDS = 60
MAX_STEP_SECONDS = 24 * 60 * 60


class StepRow(QWidget):
    """One editable step: name, seconds, and move/delete buttons."""

    move_up = pyqtSignal(object)
    move_down = pyqtSignal(object)
    remove = pyqtSignal(object)

    def __init__(self, name: str = "", seconds: int = DEFAULT_ROW_SECONDS,
                 parent: QWidget | None = None) -> None:
        super().__init__(parent)
        layout = QHBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(6)

        self.name_input = QLineEdit(name, self)
        self.name_input.setPlaceholderText("Step name")
        self.seconds_input = QSpinBox(self)
        self.seconds_input.setRange(0, MAX_STEP_SECONDS)
        self.seconds_input.setSuffix(" s")
        self.seconds_input.setValue(max(0, int(seconds)))

        up_btn = QPushButton("Up", self)
        down_btn = QPushButton("Down", self)
        del_btn = QPushButton("Delete", self)
        del_btn.setObjectName("dangerButton")
        up_btn.clicked.connect(lambda: self.move_up.emit(self))
        down_btn.clicked.connect(lambda: self.move_down.emit(self))
        del_btn.clicked.connect(lambda: self.remove.emit(self))

        layout.addWidget(self.name_input, 1)
        layout.addWidget(self.seconds_input)
        layout.addWidget(up_btn)
        layout.addWidget(down_btn)
        layout.addWidget(del_btn)

    def to_step(self) -> Step | None:
        name = self.name_input.text().strip()
        if not name:
            return None
        return Step(name, self.seconds_input.value())


class PresetEditorDialog(QDialog):
    """Create, edit or delete a user preset.

    Signals
    -------
    saved(name: str)
    deleted(name: str)
    """

    saved = pyqtSignal(str)
    deleted = pyqtSignal(str)

    def __init__(
        self,
        repository: PresetRepository,
        name: str = "",
        steps: list[Step] | tuple[Step, ...] = (),
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self.setWindowTitle("Edit preset")
        self.setMinimumWidth(520)
        self.setModal(True)
        self._repository = repository
        self._rows: list[StepRow] = []

        self._build_ui(name)
        for step in steps:
            self.add_row(step.name, step.seconds)
        if not self._rows:
            self.add_row()

    # ══════════════════════════════════════════════════════════════════
    #  BUILD UI
    # ══════════════════════════════════════════════════════════════════

    def _build_ui(self, name: str) -> None:
        root = QVBoxLayout(self)
        root.setContentsMargins(20, 16, 20, 16)
        root.setSpacing(12)

        form = QFormLayout()
        self._name_input = QLineEdit(name, self)
        self._name_input.setPlaceholderText("Preset name")
        form.addRow("Name:", self._name_input)
        root.addLayout(form)

        root.addWidget(QLabel("Steps", self))
        self._rows_host = QWidget(self)
        self._rows_layout = QVBoxLayout(self._rows_host)
        self._rows_layout.setContentsMargins(0, 0, 0, 0)
        self._rows_layout.addStretch()
        scroll = QScrollArea(self)
        scroll.setWidgetResizable(True)
        scroll.setWidget(self._rows_host)
        root.addWidget(scroll, 1)

        btn_row = QHBoxLayout()
        add_btn = QPushButton("Add step", self)
        add_btn.clicked.connect(lambda: self.add_row())
        self._delete_btn = QPushButton("Delete preset", self)
        self._delete_btn.setObjectName("dangerButton")
        self._delete_btn.clicked.connect(self.delete_preset)
        save_btn = QPushButton("Save", self)
        save_btn.setObjectName("primaryButton")
        save_btn.clicked.connect(self.save_preset)
        close_btn = QPushButton("Close", self)
        close_btn.clicked.connect(self.reject)

        btn_row.addWidget(add_btn)
        btn_row.addWidget(self._delete_btn)
        btn_row.addStretch()
        btn_row.addWidget(close_btn)
        btn_row.addWidget(save_btn)
        root.addLayout(btn_row)

    # ══════════════════════════════════════════════════════════════════
    #  ROWS
    # ══════════════════════════════════════════════════════════════════

    def add_row(self, name: str = "", seconds: int = DEFAULT_ROW_SECONDS) -> StepRow:
        row = StepRow(name, seconds, self._rows_host)
        row.move_up.connect(lambda r: self._move(r, -1))
        row.move_down.connect(lambda r: self._move(r, 1))
        row.remove.connect(self._remove)
        self._rows.append(row)
        self._relayout()
        return row

    @property
    def rows(self) -> list[StepRow]:
        return list(self._rows)

    @property
    def preset_name(self) -> str:
        return self._name_input.text().strip()

    def set_preset_name(self, name: str) -> None:
        self._name_input.setText(name)

    def collect_steps(self) -> list[Step]:
        """Steps in row order, skipping rows with a blank name."""
        return [step for step in (row.to_step() for row in self._rows) if step]

    def _move(self, row: StepRow, offset: int) -> None:
        idx = self._rows.index(row)
        target = idx + offset
        if 0 <= target < len(self._rows):
            self._rows[idx], self._rows[target] = self._rows[target], self._rows[idx]
            self._relayout()

    def _remove(self, row: StepRow) -> None:
        self._rows.remove(row)
        self._rows_layout.removeWidget(row)
        row.setParent(None)
        row.deleteLater()

    def _relayout(self) -> None:
        for row in self._rows:
            self._rows_layout.removeWidget(row)
        for idx, row in enumerate(self._rows):
            self._rows_layout.insertWidget(idx, row)

    # ══════════════════════════════════════════════════════════════════
    #  ACTIONS
    # ══════════════════════════════════════════════════════════════════

    def save_preset(self) -> bool:
        try:
            name, steps = validate_preset(self.preset_name, self.collect_steps())
            self._repository.save(name, steps)
        except PresetError as exc:
            self._show_error(str(exc))
            return False
        self.saved.emit(name)
        self.accept()
        return True

    def delete_preset(self) -> bool:
        name = self.preset_name
        if not name or self._repository.get(name) is None:
            self._show_error("This is not a saved custom preset")
            return False
        if not self._confirm(f"Delete custom preset “{name}”?"):
            return False
        self._repository.delete(name)
        self.deleted.emit(name)
        self.accept()
        return True

    def _show_error(self, message: str) -> None:
        QMessageBox.warning(self, "Preset", message)

    def _confirm(self, question: str) -> bool:
        reply = QMessageBox.question(
            self, "Preset", question,
            QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.No,
        )
        return reply == QMessageBox.StandardButton.Yes
