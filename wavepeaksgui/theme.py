"""Color palette and dark-theme application."""

from __future__ import annotations

from PySide6.QtGui import QColor, QPalette
from PySide6.QtWidgets import QApplication


COLORS = {
    "waveform": "#44aa44",
    "region": "#4499ff",
    "playhead": "#ffffff",
    "progress": "#2a6db5",
    "dim": "#888888",
    "text": "#dddddd",
    "bg": "#1e1e1e",
    "bg_alt": "#252525",
    "panel": "#2d2d2d",
    "accent": "#3a3a3a",
    "border": "#555555",
}

STYLESHEET = """
    QMainWindow {{ background-color: {bg}; }}
    QMenuBar {{ background-color: {bg_alt}; color: {text}; }}
    QMenuBar::item:selected {{ background-color: {accent}; }}
    QMenu {{ background-color: {panel}; color: {text}; border: 1px solid {border}; }}
    QMenu::item:selected {{ background-color: {progress}; }}
    QToolBar {{ background-color: {panel}; border-bottom: 1px solid {border}; spacing: 6px; padding: 2px; }}
    QToolBar QToolButton {{ color: {text}; padding: 4px 8px; }}
    QToolBar QToolButton:hover {{ background-color: {accent}; }}
    QToolBar QToolButton:checked {{ background-color: {progress}; }}
    QComboBox {{ background-color: {accent}; color: {text}; border: 1px solid {border}; padding: 2px 6px; }}
    QScrollBar:horizontal {{ background-color: {bg_alt}; height: 12px; }}
    QScrollBar::handle:horizontal {{ background-color: {accent}; min-width: 24px; border-radius: 3px; }}
    QStatusBar {{ background-color: {panel}; color: {dim}; }}
    QProgressBar {{
        background-color: {panel}; border: 1px solid {border}; border-radius: 4px;
        text-align: center; color: {text}; height: 16px;
    }}
    QProgressBar::chunk {{ background-color: {progress}; border-radius: 3px; }}
""".format(**COLORS)


def apply_dark_theme(window) -> None:
    """Apply the dark palette to the application and the stylesheet to *window*."""
    palette = QPalette()
    roles = {
        QPalette.Window: "bg",
        QPalette.WindowText: "text",
        QPalette.Base: "bg_alt",
        QPalette.AlternateBase: "accent",
        QPalette.Text: "text",
        QPalette.Button: "accent",
        QPalette.ButtonText: "text",
        QPalette.Highlight: "progress",
    }
    for role, key in roles.items():
        palette.setColor(role, QColor(COLORS[key]))
    palette.setColor(QPalette.HighlightedText, QColor("#ffffff"))
    palette.setColor(QPalette.Disabled, QPalette.ButtonText, QColor("#666666"))

    QApplication.instance().setPalette(palette)
    window.setStyleSheet(STYLESHEET)
