"""Stateless overlay drawing helpers: regions, playhead, loading shade."""

from __future__ import annotations

from PySide6.QtCore import QPointF, QRectF, Qt
from PySide6.QtGui import QColor, QPainter, QPen

from wavepeakslib.models import Region, ViewportState
from wavepeakslib.scaler import extent_on_screen, to_screen_offset

_REGION_ALPHA = 70
_REGION_BORDER_ALPHA = 160


def draw_regions(painter: QPainter, state: ViewportState,
                 regions: list[Region], draw_h: float):
    """Fill every region that is at least partly inside the viewport."""
    for region in regions:
        extent = extent_on_screen(state, region.start, region.length)
        if not extent.visible:
            continue
        base = QColor(region.color)
        if not base.isValid():
            base = QColor("#4499ff")
        fill = QColor(base)
        fill.setAlpha(_REGION_ALPHA)
        border = QColor(base)
        border.setAlpha(_REGION_BORDER_ALPHA)
        painter.fillRect(QRectF(extent.offset, 0, extent.size, draw_h), fill)
        painter.setPen(QPen(border, 1))
        right = extent.offset + extent.size
        painter.drawLine(QPointF(extent.offset, 0), QPointF(extent.offset, draw_h))
        painter.drawLine(QPointF(right, 0), QPointF(right, draw_h))


def playhead_x(state: ViewportState, position: float) -> float | None:
    """Pixel x of the playhead, or None when it is outside the viewport."""
    x = to_screen_offset(state, position)
    if 0 <= x <= state.viewport_size:
        return x
    return None


def draw_playhead(painter: QPainter, state: ViewportState, position: float,
                  draw_h: float, color: str = "#ffffff"):
    x = playhead_x(state, position)
    if x is None:
        return
    painter.setPen(QPen(QColor(color), 1))
    painter.drawLine(int(x), 0, int(x), int(draw_h))


def draw_loading_shade(painter: QPainter, width: int, height: int,
                       progress: float):
    """Dim the view while a warmup is running (progress strictly in (0, 1))."""
    if progress <= 0 or progress >= 1:
        return
    painter.fillRect(0, 0, width, height, QColor(0, 0, 0, 26))
    painter.setPen(QPen(QColor(200, 200, 200, 200)))
    painter.drawText(QRectF(0, 0, width, height), Qt.AlignCenter,
                     f"Caching waveform… {progress * 100:.0f}%")
