"""QSS stylesheet and palette for PaceKeeper."""

from __future__ import annotations

PALETTE: dict[str, str] = {
    "bg":           "#1A1A2E",
    "bg_secondary": "#232340",
    "surface":      "#2A2A4A",
    "accent":       "#A6E3A1",
    "accent2":      "#89B4FA",
    "text":         "#E2E2F0",
    "text_muted":   "#7A7A9A",
    "warning":      "#F9E2AF",
    "danger":       "#F38BA8",
    "border":       "#313154",
}

_resolved_font: str | None = None


def resolve_font_family() -> str:
    """Detect the best available system font.  Must be called after
    QApplication is created (font database needs the app context)."""
    global _resolved_font
    if _resolved_font is None:
        from PyQt6.QtGui import QFontDatabase
        families = set(QFontDatabase.families())
        for candidate in ("SF Pro", ".AppleSystemUIFont", "Noto Sans CJK TC"):
            if candidate in families:
                _resolved_font = candidate
                break
        else:
            _resolved_font = "Helvetica Neue"
    return _resolved_font


# ── QSS builder ───────────────────────────────────────────────────────


def build_stylesheet(palette: dict[str, str] | None = None) -> str:
    p = palette or PALETTE
    font = resolve_font_family()
    return f"""
    /* ── global ─────────────────────────────────── */
    QWidget {{
        background-color: {p['bg']};
        color: {p['text']};
        font-family: "{font}", "Helvetica Neue", Arial;
        font-size: 14px;
    }}

    /* ── buttons ─────────────────────────────────── */
    QPushButton {{
        background-color: {p['bg_secondary']};
        color: {p['text']};
        border: 1px solid {p['border']};
        border-radius: 10px;
        padding: 8px 18px;
        font-weight: 600;
    }}

    QPushButton:hover {{
        background-color: {p['surface']};
        border-color: {p['accent']};
    }}

    QPushButton#primaryButton {{
        background-color: {p['accent']};
        color: {p['bg']};
        border: none;
        font-size: 17px;
        padding: 12px 36px;
        border-radius: 12px;
        font-weight: 700;
    }}

    QPushButton#primaryButton:hover {{
        background-color: {p['accent2']};
    }}

    QPushButton#dangerButton {{
        background-color: transparent;
        color: {p['danger']};
        border: 1px solid {p['border']};
    }}

    QPushButton#dangerButton:hover {{
        background-color: {p['danger']};
        color: {p['bg']};
    }}

    /* ── inputs ──────────────────────────────────── */
    QLineEdit, QSpinBox, QComboBox {{
        background-color: {p['bg_secondary']};
        border: 1px solid {p['border']};
        border-radius: 8px;
        padding: 6px 10px;
    }}

    QLineEdit:focus, QSpinBox:focus, QComboBox:focus {{
        border-color: {p['accent']};
    }}

    /* ── step list ───────────────────────────────── */
    QListWidget {{
        background-color: {p['bg_secondary']};
        border: 1px solid {p['border']};
        border-radius: 8px;
    }}

    QListWidget::item {{
        padding: 6px 10px;
        color: {p['text_muted']};
    }}

    QListWidget::item:selected {{
        background-color: {p['surface']};
        color: {p['accent']};
        font-weight: 700;
    }}

    /* ── frame / card ────────────────────────────── */
    QFrame#card {{
        background-color: {p['bg_secondary']};
        border: 1px solid {p['border']};
        border-radius: 12px;
    }}

    /* ── labels ──────────────────────────────────── */
    QLabel#stepName {{
        font-size: 22px;
        font-weight: 700;
    }}

    QLabel#timeLeft {{
        font-size: 64px;
        font-weight: 300;
        color: {p['accent']};
    }}

    QLabel#loopLabel, QLabel#totalLabel {{
        font-size: 12px;
        color: {p['text_muted']};
    }}

    /* ── progress ────────────────────────────────── */
    QProgressBar {{
        background-color: {p['border']};
        border: none;
        border-radius: 3px;
    }}

    QProgressBar::chunk {{
        background-color: {p['accent']};
        border-radius: 3px;
    }}

    /* ── status bar ──────────────────────────────── */
    QStatusBar {{
        color: {p['text_muted']};
        font-size: 12px;
        border-top: 1px solid {p['border']};
    }}
    """
