"""Waveform renderer: smoothed outline plus per-column peak lines."""

from __future__ import annotations

from dataclasses import dataclass

from PySide6.QtCore import QPointF, Qt
from PySide6.QtGui import QColor, QPainter, QPainterPath, QPen

from wavepeakslib.cache import PeakCache
from wavepeakslib.models import QueryWindow, ReductionMode, ViewportState
from wavepeakslib.rendering import PeakGeometry, scale_peaks
from wavepeakslib.viewport import peaks_opacity, query_window

from ..log import dbg


@dataclass
class WaveformRenderCtx:
    """All data WaveformRenderer needs, snapshotted by WaveformWidget."""
    draw_w: int
    draw_h: int
    state: ViewportState
    mode: ReductionMode
    scale: float
    log_scale: bool
    color: str
    line_width: int = 1


class WaveformRenderer:
    """Queries a :class:`PeakCache` for the visible columns and draws them."""

    def __init__(self):
        self._cache: PeakCache | None = None
        self._last_window: QueryWindow | None = None

    def set_cache(self, cache: PeakCache | None):
        self._cache = cache
        self._last_window = None

    @property
    def last_window(self) -> QueryWindow | None:
        return self._last_window

    def geometry(self, ctx: WaveformRenderCtx) -> PeakGeometry | None:
        """Visible pairs mapped to pixels, or None when nothing can be drawn."""
        cache = self._cache
        if cache is None or len(cache) == 0:
            return None
        window = query_window(ctx.state, len(cache))
        if window is None:
            return None
        values = cache.get_values(window.samples_per_px, window.start,
                                  window.end, ctx.mode)
        if window != self._last_window:
            dbg(f"Query {len(values)} columns at "
                f"{window.samples_per_px:.2f} samples/px ({ctx.mode.value})")
        self._last_window = window
        return scale_peaks(values, ctx.draw_w, ctx.draw_h,
                           scale=ctx.scale, log_scale=ctx.log_scale)

    def paint(self, painter: QPainter, ctx: WaveformRenderCtx):
        geo = self.geometry(ctx)
        if geo is None or len(geo) == 0:
            return
        color = QColor(ctx.color)

        painter.setBrush(Qt.NoBrush)
        painter.setPen(QPen(color, ctx.line_width))
        painter.drawPath(_smoothed_path(geo))

        opacity = peaks_opacity(self._last_window.samples_per_px)
        if opacity <= 0:
            return
        painter.save()
        painter.setOpacity(opacity)
        for i in range(len(geo)):
            x = float(geo.x[i])
            painter.drawLine(QPointF(x, float(geo.min_y[i])),
                             QPointF(x, float(geo.max_y[i])))
        painter.restore()


def _smoothed_path(geo: PeakGeometry) -> QPainterPath:
    """Quadratic curve through the dominant side of each column, bending
    at the midpoints between neighbouring columns."""
    path = QPainterPath()
    xs = geo.x
    ys = geo.abs_max_y
    if len(xs) == 0:
        return path
    path.moveTo(float(xs[0]), float(ys[0]))
    for i in range(len(xs) - 1):
        x1, y1 = float(xs[i]), float(ys[i])
        x2, y2 = float(xs[i + 1]), float(ys[i + 1])
        x_mid = (x1 + x2) / 2
        y_mid = (y1 + y2) / 2
        path.quadTo(QPointF((x_mid + x1) / 2, y1), QPointF(x_mid, y_mid))
        path.quadTo(QPointF((x_mid + x2) / 2, y2), QPointF(x2, y2))
    return path
