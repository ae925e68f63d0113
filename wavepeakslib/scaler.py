"""Coordinate transforms between virtual time and viewport pixels.

Every function re-derives its result from a :class:`ViewportState`
snapshot; nothing is remembered between calls.  Waveform, regions and the
playhead all go through these so they agree on one projection.

Degenerate states (zero duration, zero width or zero zoom) map to 0 px,
and pixels map back to the current position, instead of producing NaN.
"""

from __future__ import annotations

from typing import Callable

from .models import Extent, ViewportState


def clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


def to_pixels(state: ViewportState, position: float) -> float:
    """Scale a virtual value into total (possibly off-screen) pixel space."""
    if state.duration == 0 or state.viewport_size == 0:
        return 0.0
    return (position / state.duration) * (state.viewport_size * state.zoom)


def to_screen_offset(state: ViewportState, position: float) -> float:
    """Pixel coordinate of *position* relative to the viewport's left edge."""
    return to_pixels(state, position) - to_pixels(state, state.position)


def to_virtual(state: ViewportState, screen_x: float) -> float:
    """Virtual position under pixel *screen_x* (inverse of :func:`to_screen_offset`)."""
    if state.viewport_size == 0 or state.zoom == 0:
        return state.position
    visible = state.duration / state.zoom
    fraction = (screen_x - state.viewport_offset) / state.viewport_size
    return state.position + fraction * visible


def extent_on_screen(state: ViewportState, position: float,
                     length: float) -> Extent:
    """Project ``[position, position + length]`` onto the viewport.

    The rectangle is clamped to ``[0, viewport_size]``; entities entirely
    off screen get ``size == 0``.
    """
    raw_offset = to_screen_offset(state, position)
    offset = clamp(raw_offset, 0.0, state.viewport_size)
    size = clamp(to_pixels(state, length) - (offset - raw_offset),
                 0.0, state.viewport_size - offset)
    return Extent(offset=offset, size=size)


class ViewportScaler:
    """Binds the transforms to a state getter, read afresh on every call."""

    def __init__(self, get_state: Callable[[], ViewportState]):
        self._get_state = get_state

    @property
    def state(self) -> ViewportState:
        return self._get_state()

    def to_pixels(self, position: float) -> float:
        return to_pixels(self._get_state(), position)

    def to_screen_offset(self, position: float) -> float:
        return to_screen_offset(self._get_state(), position)

    def to_virtual(self, screen_x: float) -> float:
        return to_virtual(self._get_state(), screen_x)

    def extent_on_screen(self, position: float, length: float) -> Extent:
        return extent_on_screen(self._get_state(), position, length)
