"""Pixel-space geometry for drawing a list of (min, max) pairs."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

import numpy as np

from .models import PeakPair

# log10(|v| * 20) * 0.7 -- maps 1/20 to 0 and full scale to ~0.91
_LOG_GAIN = 20.0
_LOG_SPREAD = 0.7


@dataclass
class PeakGeometry:
    """Per-column drawing coordinates.

    Attributes:
        x:         Horizontal pixel position of each column.
        abs_max_y: y of whichever side (min or max) has the larger magnitude;
                   used for the smoothed outline.
        min_y:     y of the min side (vertical peak line start).
        max_y:     y of the max side (vertical peak line end).
    """
    x: np.ndarray
    abs_max_y: np.ndarray
    min_y: np.ndarray
    max_y: np.ndarray

    def __len__(self) -> int:
        return len(self.x)


def log_amplitude(values: np.ndarray) -> np.ndarray:
    """Signed log10 amplitude; magnitudes at or below 1/20 collapse to 0."""
    mags = np.abs(values) * _LOG_GAIN
    out = np.zeros_like(mags, dtype=np.float64)
    loud = mags > 1.0
    out[loud] = np.log10(mags[loud]) * _LOG_SPREAD
    return np.sign(values) * out


def scale_peaks(pairs: Sequence[PeakPair] | np.ndarray, width: float,
                height: float, *, scale: float = 1.0,
                log_scale: bool = False) -> PeakGeometry:
    """Map pairs onto a ``width`` x ``height`` canvas centred vertically."""
    arr = np.asarray(pairs, dtype=np.float64).reshape(-1, 2)
    n = len(arr)
    mins = arr[:, 0]
    maxs = arr[:, 1]
    if log_scale:
        min_values = log_amplitude(mins)
        max_values = log_amplitude(maxs)
    else:
        min_values = mins
        max_values = maxs

    centre = height / 2.0
    x = np.arange(n, dtype=np.float64) / n * width if n else np.zeros(0)
    min_y = centre + min_values * centre * scale
    max_y = centre + max_values * centre * scale
    abs_max_y = np.where(np.abs(mins) > np.abs(maxs), min_y, max_y)
    return PeakGeometry(x=x, abs_max_y=abs_max_y, min_y=min_y, max_y=max_y)
