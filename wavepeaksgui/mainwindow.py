"""Main application window for the Wavepeaks GUI."""

from __future__ import annotations

import logging
import os
import sys
from typing import Any

from PySide6.QtCore import Qt, Slot, QSize
from PySide6.QtGui import QAction
from PySide6.QtWidgets import (
    QApplication,
    QComboBox,
    QFileDialog,
    QLabel,
    QMainWindow,
    QMessageBox,
    QProgressBar,
    QScrollBar,
    QStatusBar,
    QToolBar,
    QVBoxLayout,
    QWidget,
)

from wavepeakslib._version import __version__
from wavepeakslib.audio import (
    AUDIO_EXTENSIONS,
    AudioLoadError,
    format_duration,
    load_source,
)
from wavepeakslib.config import flatten_structured_config
from wavepeakslib.models import ReductionMode, Region
from wavepeakslib.viewport import position_to_scroll, scroll_to_position

from .log import timed
from .settings import load_config, save_config
from .theme import apply_dark_theme
from .waveform import WaveformWidget

log = logging.getLogger(__name__)

# Scrollbar resolution; the bar works in abstract steps mapped onto the view.
_SCROLL_STEPS = 10_000


class WavepeaksWindow(QMainWindow):
    def __init__(self):
        super().__init__()
        self.setWindowTitle("Wavepeaks")
        self.resize(1200, 420)

        self._config: dict[str, Any] = load_config()
        self._syncing_scroll = False

        flat = flatten_structured_config(self._config)
        self._waveform = WaveformWidget(config=flat)
        gui = self._config.get("gui", {})
        self._waveform.set_color(gui.get("waveform_color", "#44aa44"))
        self._waveform.set_playhead_color(gui.get("playhead_color", "#ffffff"))

        self._scrollbar = QScrollBar(Qt.Horizontal)
        self._scrollbar.setRange(0, 0)
        self._scrollbar.valueChanged.connect(self._on_scrollbar_moved)

        central = QWidget()
        layout = QVBoxLayout(central)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(0)
        layout.addWidget(self._waveform, 1)
        layout.addWidget(self._scrollbar)
        self.setCentralWidget(central)

        self._init_menus()
        self._init_toolbar()
        self._init_status_bar()

        self._waveform.position_changed.connect(self._sync_scrollbar)
        self._waveform.zoom_changed.connect(self._sync_scrollbar)
        self._waveform.warmup_progress.connect(self._on_warmup_progress)
        self._waveform.playhead_clicked.connect(self._on_playhead_clicked)

        apply_dark_theme(self)

    # ── UI setup ───────────────────────────────────────────────────────────

    def _init_menus(self):
        file_menu = self.menuBar().addMenu("&File")

        open_action = QAction("&Open Audio...", self)
        open_action.setShortcut("Ctrl+O")
        open_action.triggered.connect(self._on_open_file)
        file_menu.addAction(open_action)

        file_menu.addSeparator()

        about_action = QAction("&About Wavepeaks", self)
        about_action.setMenuRole(QAction.MenuRole.AboutRole)
        about_action.triggered.connect(self._on_about)
        file_menu.addAction(about_action)

        quit_action = QAction("&Quit", self)
        quit_action.setShortcut("Ctrl+Q")
        quit_action.triggered.connect(self.close)
        file_menu.addAction(quit_action)

        view_menu = self.menuBar().addMenu("&View")

        gui = self._config.get("gui", {})
        self._follow_action = QAction("&Follow Playhead", self)
        self._follow_action.setCheckable(True)
        self._follow_action.setChecked(bool(gui.get("follow_playhead", False)))
        self._waveform.set_follow(self._follow_action.isChecked())
        self._follow_action.toggled.connect(self._on_follow_toggled)
        view_menu.addAction(self._follow_action)

        view_menu.addSeparator()

        mark_action = QAction("&Mark Visible Range", self)
        mark_action.setShortcut("Ctrl+R")
        mark_action.triggered.connect(self.mark_visible_region)
        view_menu.addAction(mark_action)

        clear_action = QAction("&Clear Regions", self)
        clear_action.triggered.connect(self.clear_regions)
        view_menu.addAction(clear_action)

    def _init_toolbar(self):
        toolbar = QToolBar("View")
        toolbar.setIconSize(QSize(16, 16))
        toolbar.setMovable(False)
        toolbar.setFloatable(False)

        open_action = QAction("Open", self)
        open_action.triggered.connect(self._on_open_file)
        toolbar.addAction(open_action)

        toolbar.addSeparator()

        toolbar.addWidget(QLabel("  Mode:"))
        self._mode_combo = QComboBox()
        for mode in ReductionMode:
            self._mode_combo.addItem(mode.name.title(), mode.value)
        view = self._config.get("view", {})
        idx = self._mode_combo.findData(view.get("mode", "peak"))
        self._mode_combo.setCurrentIndex(max(0, idx))
        self._mode_combo.currentIndexChanged.connect(self._on_mode_changed)
        toolbar.addWidget(self._mode_combo)

        self._log_action = QAction("Log Scale", self)
        self._log_action.setCheckable(True)
        self._log_action.setChecked(bool(view.get("log_scale", False)))
        self._log_action.toggled.connect(self._on_log_scale_toggled)
        toolbar.addAction(self._log_action)

        toolbar.addSeparator()

        fit_action = QAction("Zoom Fit", self)
        fit_action.setShortcut("Ctrl+0")
        fit_action.triggered.connect(self._waveform.zoom_fit)
        toolbar.addAction(fit_action)

        self.addToolBar(toolbar)

    def _init_status_bar(self):
        self._status_bar = QStatusBar()
        self._progress = QProgressBar()
        self._progress.setRange(0, 100)
        self._progress.setMaximumWidth(220)
        self._progress.setVisible(False)
        self._status_bar.addPermanentWidget(self._progress)
        self.setStatusBar(self._status_bar)
        self._status_bar.showMessage("Open an audio file to begin.")

    # ── Slots ──────────────────────────────────────────────────────────────

    @Slot()
    def _on_open_file(self):
        start_dir = self._config.get("gui", {}).get("last_directory", "") or ""
        patterns = " ".join(f"*{ext}" for ext in AUDIO_EXTENSIONS)
        path, _ = QFileDialog.getOpenFileName(
            self, "Open Audio", start_dir,
            f"Audio Files ({patterns});;All Files (*)",
        )
        if not path:
            return
        self.open_file(path)

    def open_file(self, path: str) -> bool:
        """Load *path* into the waveform view.  Returns False on failure."""
        try:
            with timed(f"Load {os.path.basename(path)}"):
                source = load_source(path)
        except AudioLoadError as exc:
            log.warning("%s", exc)
            self._show_error("Open Audio Failed",
                             f"Could not load audio file:\n\n{exc}")
            return False

        self._config.setdefault("gui", {})["last_directory"] = os.path.dirname(path)
        save_config(self._config)

        self.setWindowTitle(f"Wavepeaks - {source.filename}")
        self._status_bar.showMessage(
            f"{source.filename}  |  {source.samplerate} Hz  |  "
            f"{source.channels} ch  |  "
            f"{format_duration(source.total_samples, source.samplerate)}")
        self._progress.setValue(0)
        self._waveform.set_source(source)
        self._sync_scrollbar()
        return True

    @Slot(int)
    def _on_mode_changed(self, index: int):
        mode = ReductionMode.parse(self._mode_combo.itemData(index))
        self._waveform.set_mode(mode)
        self._config.setdefault("view", {})["mode"] = mode.value
        save_config(self._config)

    @Slot(bool)
    def _on_log_scale_toggled(self, checked: bool):
        self._waveform.set_log_scale(checked)
        self._config.setdefault("view", {})["log_scale"] = checked
        save_config(self._config)

    @Slot(bool)
    def _on_follow_toggled(self, checked: bool):
        self._waveform.set_follow(checked)
        self._config.setdefault("gui", {})["follow_playhead"] = checked
        save_config(self._config)

    @Slot()
    def mark_visible_region(self):
        """Add the range currently on screen as a region."""
        wf = self._waveform
        if wf.duration <= 0:
            return
        regions = wf.regions
        end = wf.position + wf.duration / wf.zoom
        regions.append(Region(wf.position, end, id=f"region-{len(regions) + 1}"))
        wf.set_regions(regions)
        self._status_bar.showMessage(
            f"Region {len(regions)}: {wf.position / 1000:.3f} - {end / 1000:.3f} s",
            3000)

    @Slot()
    def clear_regions(self):
        self._waveform.set_regions([])

    @Slot(float)
    def _on_warmup_progress(self, progress: float):
        self._progress.setValue(int(round(progress * 100)))
        self._progress.setVisible(0.0 < progress < 1.0)

    @Slot(float)
    def _on_playhead_clicked(self, position: float):
        self._status_bar.showMessage(f"Playhead: {position / 1000:.3f} s", 3000)

    @Slot()
    def _on_about(self):
        QMessageBox.about(
            self, "About Wavepeaks",
            f"Wavepeaks {__version__}\n\n"
            "Multi-resolution waveform viewer.",
        )

    def _show_error(self, title: str, message: str):
        QMessageBox.critical(self, title, message)

    # ── Scrollbar <-> view position ────────────────────────────────────────

    def _sync_scrollbar(self, *_args):
        wf = self._waveform
        if wf.zoom <= 1.0 or wf.duration <= 0:
            self._scrollbar.setRange(0, 0)
            return
        self._syncing_scroll = True
        try:
            self._scrollbar.setRange(0, _SCROLL_STEPS)
            self._scrollbar.setPageStep(max(1, int(_SCROLL_STEPS / wf.zoom)))
            value = position_to_scroll(wf.position, wf.duration, wf.zoom,
                                       _SCROLL_STEPS)
            scrollable = _SCROLL_STEPS * wf.zoom - _SCROLL_STEPS
            self._scrollbar.setValue(int(round(value / scrollable * _SCROLL_STEPS)))
        finally:
            self._syncing_scroll = False

    @Slot(int)
    def _on_scrollbar_moved(self, value: int):
        if self._syncing_scroll:
            return
        wf = self._waveform
        position = scroll_to_position(value, _SCROLL_STEPS, wf.duration, wf.zoom)
        wf.set_view(position, wf.zoom)


def main():
    with timed("QApplication created"):
        app = QApplication(sys.argv)
        app.setStyle("Fusion")

    with timed("WavepeaksWindow created"):
        window = WavepeaksWindow()
    window.show()
    if len(sys.argv) > 1 and os.path.isfile(sys.argv[1]):
        window.open_file(sys.argv[1])

    sys.exit(app.exec())
