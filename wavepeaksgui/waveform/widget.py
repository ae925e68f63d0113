"""Waveform display widget: zoom/pan/scale via the wheel, regions, playhead."""

from __future__ import annotations

from typing import Any

from PySide6.QtCore import QCoreApplication, Qt, QTimer, Signal
from PySide6.QtGui import QColor, QPainter, QPen
from PySide6.QtWidgets import QWidget

from wavepeakslib.cache import PeakCache
from wavepeakslib.models import ReductionMode, Region, ViewportState, WaveformSource
from wavepeakslib.scaler import to_virtual
from wavepeakslib.viewport import (
    follow_position,
    max_position,
    pan_by,
    scale_by,
    zoom_at,
)

from ..log import dbg, timed
from ..theme import COLORS
from .overlay import draw_loading_shade, draw_playhead, draw_regions
from .renderer import WaveformRenderCtx, WaveformRenderer


class WaveformWidget(QWidget):
    """Draws one channel from a :class:`PeakCache` with regions and a playhead.

    The widget owns the view state (position, zoom, vertical scale) and
    recomputes everything from it on each paint.  Replacing the audio
    replaces the cache; a warmup still running on the old cache keeps
    going but its progress is ignored.

    Virtual positions (view position, regions, playhead) are milliseconds.
    """

    position_changed = Signal(float)
    zoom_changed = Signal(float)
    scale_changed = Signal(float)
    playhead_clicked = Signal(float)
    warmup_progress = Signal(float)

    def __init__(self, parent=None, config: dict[str, Any] | None = None):
        super().__init__(parent)
        self._config: dict[str, Any] = dict(config or {})
        self._renderer = WaveformRenderer()
        self._source: WaveformSource | None = None
        self._cache: PeakCache | None = None
        self._position: float = 0.0
        self._zoom: float = 1.0
        self._scale: float = float(self._config.get("scale", 1.0))
        self._mode = ReductionMode.parse(self._config.get("mode", "peak"))
        self._log_scale: bool = bool(self._config.get("log_scale", False))
        self._pan_speed: float = float(self._config.get("pan_speed", 1000.0))
        self._regions: list[Region] = []
        self._playhead: float | None = None
        self._follow: bool = False
        self._progress: float = 0.0
        self._warmed: set[ReductionMode] = set()
        self._color: str = COLORS["waveform"]
        self._playhead_color: str = COLORS["playhead"]
        self.setMinimumHeight(80)
        self.setFocusPolicy(Qt.StrongFocus)

    # ── Data management ────────────────────────────────────────────────────

    def set_source(self, source: WaveformSource | None):
        """Show a new buffer (or none).  Starts a warmup on the next tick."""
        self._source = source
        data = source.data if source is not None else None
        self._cache = PeakCache(data, config=self._config,
                                frame_yield=QCoreApplication.processEvents)
        self._renderer.set_cache(self._cache)
        self._position = 0.0
        self._zoom = 1.0
        self._progress = 0.0
        self._playhead = None
        self._warmed = set()
        self._schedule_warmup()
        self.update()

    def _schedule_warmup(self):
        if self._source is None or not self._source.total_samples:
            return
        if self._mode in self._warmed:
            return
        self._warmed.add(self._mode)
        cache, mode = self._cache, self._mode
        QTimer.singleShot(0, self, lambda: self._run_warmup(cache, mode))

    def _run_warmup(self, cache: PeakCache, mode: ReductionMode):
        dbg(f"Warmup started for {len(cache):,} samples ({mode.value})")
        with timed("Warmup"):
            cache.warmup(lambda p: self._on_warmup_progress(cache, p), mode)

    def _on_warmup_progress(self, cache: PeakCache, progress: float):
        if cache is not self._cache:
            return
        self._progress = progress
        self.warmup_progress.emit(progress)
        self.update()

    @property
    def cache(self) -> PeakCache | None:
        return self._cache

    @property
    def duration(self) -> float:
        """Buffer length in milliseconds."""
        if self._source is None:
            return 0.0
        return self._source.duration_sec * 1000.0

    def set_regions(self, regions: list[Region]):
        self._regions = list(regions)
        self.update()

    def set_playhead(self, position: float | None):
        """Move the playhead; in follow mode the view recentres on it."""
        self._playhead = position
        if self._follow and position is not None:
            self.set_view(follow_position(self.viewport_state(), position),
                          self._zoom)
        self.update()

    def set_follow(self, on: bool):
        self._follow = on
        if on and self._playhead is not None:
            self.set_playhead(self._playhead)

    @property
    def follow(self) -> bool:
        return self._follow

    @property
    def playhead(self) -> float | None:
        return self._playhead

    @property
    def regions(self) -> list[Region]:
        return list(self._regions)

    def set_mode(self, mode: ReductionMode | str):
        self._mode = ReductionMode.parse(mode)
        self._schedule_warmup()
        self.update()

    def set_log_scale(self, on: bool):
        self._log_scale = on
        self.update()

    def set_color(self, color: str):
        self._color = color
        self.update()

    def set_playhead_color(self, color: str):
        self._playhead_color = color
        self.update()

    # ── View state ─────────────────────────────────────────────────────────

    def viewport_state(self) -> ViewportState:
        return ViewportState(
            position=self._position,
            zoom=self._zoom,
            duration=self.duration,
            viewport_offset=0.0,
            viewport_size=float(self.width()),
        )

    def set_view(self, position: float, zoom: float):
        """Apply a new position/zoom, clamped so the window stays in range."""
        zoom = max(1.0, zoom)
        position = max(0.0, min(position, max_position(self.duration, zoom)))
        if zoom != self._zoom:
            self._zoom = zoom
            self.zoom_changed.emit(zoom)
        if position != self._position:
            self._position = position
            self.position_changed.emit(position)
        self.update()

    def zoom_fit(self):
        self.set_view(0.0, 1.0)

    @property
    def position(self) -> float:
        return self._position

    @property
    def zoom(self) -> float:
        return self._zoom

    @property
    def scale(self) -> float:
        return self._scale

    # ── paintEvent ─────────────────────────────────────────────────────────

    def paintEvent(self, event):
        w = self.width()
        h = self.height()
        painter = QPainter(self)
        painter.setRenderHint(QPainter.Antialiasing, True)
        painter.fillRect(0, 0, w, h, QColor(COLORS["bg"]))

        if self._source is None or self._source.total_samples == 0:
            painter.setPen(QPen(QColor(COLORS["dim"])))
            painter.drawText(self.rect(), Qt.AlignCenter, "No waveform")
            painter.end()
            return

        state = self.viewport_state()
        draw_regions(painter, state, self._regions, h)
        self._renderer.paint(painter, WaveformRenderCtx(
            draw_w=w, draw_h=h, state=state, mode=self._mode,
            scale=self._scale, log_scale=self._log_scale, color=self._color,
        ))
        if self._playhead is not None:
            draw_playhead(painter, state, self._playhead, h, self._playhead_color)
        draw_loading_shade(painter, w, h, self._progress)
        painter.end()

    # ── Qt event handlers ──────────────────────────────────────────────────

    def mousePressEvent(self, event):
        self.setFocus()
        if self.duration > 0 and event.button() == Qt.LeftButton:
            position = to_virtual(self.viewport_state(), event.position().x())
            self.set_playhead(position)
            self.playhead_clicked.emit(position)

    def wheelEvent(self, event):
        if self._source is None or self._source.total_samples <= 0:
            event.ignore()
            return
        mods = event.modifiers()
        angle = event.angleDelta()
        delta_x, delta_y = float(angle.x()), float(angle.y())
        if mods & Qt.AltModifier:
            delta_x, delta_y = delta_y, delta_x
        if delta_x == 0 and delta_y == 0:
            event.ignore()
            return

        state = self.viewport_state()
        if mods & Qt.ShiftModifier:
            self._scale = scale_by(self._scale, delta_y, self.height())
            self.scale_changed.emit(self._scale)
            self.update()
        elif abs(delta_x) > abs(delta_y):
            self.set_view(pan_by(state, -delta_x, self._pan_speed), self._zoom)
        else:
            position, zoom = zoom_at(state, event.position().x(), delta_y,
                                     self.height(), self._source.total_samples)
            self.set_view(position, zoom)
        event.accept()
