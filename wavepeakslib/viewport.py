"""View navigation math: which columns to query, and how wheel input
moves the zoom, the position and the vertical scale.

All functions are pure; the host applies the returned values to its own
state (clamped, so the invariant ``position + duration / zoom <= duration``
keeps holding) and then queries the cache again.
"""

from __future__ import annotations

import math

from .models import QueryWindow, ViewportState
from .scaler import clamp

MIN_SCALE = 0.1
MAX_SCALE = 5.0


def max_position(duration: float, zoom: float) -> float:
    """Largest position that still shows a full window at *zoom*."""
    if zoom <= 0:
        return 0.0
    return duration - duration / zoom


def visible_length(state: ViewportState, data_length: int) -> float:
    """Number of samples inside the viewport."""
    if state.zoom <= 0:
        return float(data_length)
    return min(data_length / state.zoom, float(data_length))


def query_window(state: ViewportState, data_length: int) -> QueryWindow | None:
    """Translate a viewport into a cache query.

    Returns None when there is nothing to draw (no samples, zero width or
    zero duration).  ``samples_per_px`` drops below 1 when zoomed in past
    native resolution.
    """
    if data_length <= 0 or state.viewport_size <= 0 or state.duration <= 0:
        return None
    length = visible_length(state, data_length)
    samples_per_px = length / state.viewport_size
    if samples_per_px <= 0:
        return None
    start = math.floor((state.position / state.duration)
                       * (data_length / samples_per_px))
    end = start + int(min(length, math.floor(state.viewport_size)))
    return QueryWindow(samples_per_px=samples_per_px, start=start, end=end)


def peaks_opacity(samples_per_px: float) -> float:
    """Alpha of the vertical peak lines: hidden near native resolution,
    fading in once a column summarises a few hundred samples."""
    if samples_per_px <= 0:
        return 0.0
    return clamp(math.log(samples_per_px / 96) - 0.5, 0.0, 1.0)


def zoom_at(state: ViewportState, pointer_x: float, delta: float,
            height: float, data_length: int) -> tuple[float, float]:
    """Zoom by ``1 + delta / height`` keeping the pointer's position fixed.

    *pointer_x* is absolute (same space as ``viewport_offset``).  Zoom is
    clamped to ``[1, data_length / viewport_size]`` (one sample per pixel at
    most).  Returns ``(position, zoom)``.
    """
    if state.viewport_size <= 0 or height <= 0 or state.zoom <= 0:
        return state.position, state.zoom
    zoomed_length = state.duration / state.zoom
    fraction = (pointer_x - state.viewport_offset) / state.viewport_size
    pointer_position = state.position + zoomed_length * fraction

    max_zoom = max(1.0, data_length / state.viewport_size)
    zoom = clamp(state.zoom * (1 + delta / height), 1.0, max_zoom)
    new_length = state.duration / zoom
    position = clamp(pointer_position - fraction * new_length,
                     0.0, max_position(state.duration, zoom))
    return position, zoom


def pan_by(state: ViewportState, delta: float, speed: float = 1000.0) -> float:
    """New position after a horizontal wheel movement of *delta* pixels."""
    if state.viewport_size <= 0 or state.zoom <= 0:
        return state.position
    position = state.position + (delta / state.viewport_size / state.zoom) * speed
    return clamp(position, 0.0, max_position(state.duration, state.zoom))


def follow_position(state: ViewportState, playhead: float) -> float:
    """Position that centres *playhead* in the view, clamped to the buffer."""
    if state.zoom <= 0:
        return state.position
    half = state.duration / state.zoom / 2
    return clamp(playhead - half, 0.0, max_position(state.duration, state.zoom))


def scale_by(scale: float, delta: float, height: float) -> float:
    """New vertical amplitude scale after a wheel movement of *delta*."""
    if height <= 0:
        return scale
    return clamp(scale * (1 + delta / height), MIN_SCALE, MAX_SCALE)


def scroll_to_position(scroll_left: float, scrollable_width: float,
                       duration: float, zoom: float) -> float:
    """Map a scrollbar offset to a view position."""
    amount = scroll_left / scrollable_width if scrollable_width > 0 else 0.0
    return max_position(duration, zoom) * amount


def position_to_scroll(position: float, duration: float, zoom: float,
                       client_width: float) -> float:
    """Scrollbar offset showing *position* in a scroll area of *client_width*."""
    limit = max_position(duration, zoom)
    if limit <= 0:
        return 0.0
    return position / limit * (client_width * zoom - client_width)
