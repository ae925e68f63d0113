"""Per-column reduction of raw samples into a (min, max) pair."""

from __future__ import annotations

import math

import numpy as np

from .models import PeakPair, ReductionMode, ZERO_PAIR


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves going towards +inf."""
    return math.floor(value + 0.5)


def split_by_sign(value: float) -> PeakPair:
    """Put a single scalar on the side of the pair matching its sign."""
    if value > 0:
        return PeakPair(0.0, value)
    if value < 0:
        return PeakPair(value, 0.0)
    return ZERO_PAIR


def aggregate(data: np.ndarray, samples_per_px: float, column: int,
              mode: ReductionMode) -> PeakPair:
    """Compute the pair for pixel *column* at *samples_per_px*.

    Below or at native resolution the sample value at the column's virtual
    position is split by sign (peak interpolates linearly, RMS picks the
    nearest sample).  Above it, the column's raw window is scanned in
    ascending index order; samples past the end of *data* are skipped.
    The result always satisfies ``min <= 0 <= max``.
    """
    n = len(data)
    if n == 0:
        return ZERO_PAIR

    if samples_per_px <= 1:
        pos = column * samples_per_px
        if mode is ReductionMode.PEAK:
            lo = math.floor(pos)
            if lo < 0 or lo >= n:
                return ZERO_PAIR
            hi = math.ceil(pos)
            a = float(data[lo])
            if hi == lo or hi >= n:
                return split_by_sign(a)
            b = float(data[hi])
            return split_by_sign(a + (b - a) * (pos - lo))
        if mode is ReductionMode.RMS:
            idx = round_half_up(pos)
            if idx < 0 or idx >= n:
                return ZERO_PAIR
            return split_by_sign(float(data[idx]))
        raise ValueError(f"Unsupported reduction mode: {mode!r}")

    first = math.floor(column * samples_per_px)
    if first < 0 or first >= n:
        return ZERO_PAIR
    # i runs 0, 1, ... while i < samples_per_px
    count = math.ceil(samples_per_px)
    window = data[first:min(first + count, n)]

    if mode is ReductionMode.PEAK:
        return PeakPair(min(0.0, float(window.min())),
                        max(0.0, float(window.max())))
    if mode is ReductionMode.RMS:
        return _running_rms(window.tolist(), samples_per_px)
    raise ValueError(f"Unsupported reduction mode: {mode!r}")


def _running_rms(values: list[float], samples_per_px: float) -> PeakPair:
    # Order-dependent: a sample only counts towards a side while it extends
    # that side's running extreme.
    hi = 0.0
    lo = 0.0
    max_acc = 0.0
    min_acc = 0.0
    for v in values:
        if v >= hi:
            hi = v
            max_acc += v * v / samples_per_px
        elif v <= lo:
            lo = v
            min_acc += v * v / samples_per_px
    return PeakPair(-math.sqrt(min_acc), math.sqrt(max_acc))
