"""Tests for per-column reduction (wavepeakslib.aggregate)."""

from __future__ import annotations

import math

import numpy as np
import pytest

from wavepeakslib.aggregate import aggregate, round_half_up, split_by_sign
from wavepeakslib.models import PeakPair, ReductionMode

PEAK = ReductionMode.PEAK
RMS = ReductionMode.RMS


def _arr(*values: float) -> np.ndarray:
    return np.array(values, dtype=np.float64)


class TestHelpers:
    def test_round_half_up_goes_towards_positive_infinity(self) -> None:
        assert round_half_up(2.5) == 3
        assert round_half_up(-0.5) == 0
        assert round_half_up(-1.5) == -1
        assert round_half_up(1.49) == 1

    def test_split_by_sign(self) -> None:
        assert split_by_sign(0.3) == PeakPair(0.0, 0.3)
        assert split_by_sign(-0.3) == PeakPair(-0.3, 0.0)
        assert split_by_sign(0.0) == PeakPair(0.0, 0.0)


class TestPeakAboveNative:
    """Peak mode with more than one sample per column."""

    def test_alternating_buffer_four_per_column(self, alternating) -> None:
        """Each column keeps the extremes of its four samples."""
        col0 = aggregate(alternating, 4, 0, PEAK)
        col1 = aggregate(alternating, 4, 1, PEAK)
        assert col0.min == pytest.approx(-0.4)
        assert col0.max == pytest.approx(0.3)
        assert col1.min == pytest.approx(-0.8)
        assert col1.max == pytest.approx(0.7)

    def test_fractional_ratio_reads_ceil_samples(self, alternating) -> None:
        """At 2.5 samples/px column 1 starts at sample 2 and reads three."""
        pair = aggregate(alternating, 2.5, 1, PEAK)
        assert pair.min == pytest.approx(-0.4)
        assert pair.max == pytest.approx(0.5)

    def test_window_truncated_at_buffer_end(self, alternating) -> None:
        pair = aggregate(alternating, 3, 2, PEAK)
        assert pair.min == pytest.approx(-0.8)
        assert pair.max == pytest.approx(0.7)

    def test_column_past_end_is_zero(self, alternating) -> None:
        assert aggregate(alternating, 4, 2, PEAK) == PeakPair(0.0, 0.0)
        assert aggregate(alternating, 4, 100, PEAK) == PeakPair(0.0, 0.0)

    def test_one_sided_signal_still_brackets_zero(self) -> None:
        """An all-positive window reports min 0, not its smallest sample."""
        pair = aggregate(_arr(0.2, 0.4, 0.6, 0.8), 4, 0, PEAK)
        assert pair == PeakPair(0.0, 0.8)

    def test_empty_buffer(self) -> None:
        assert aggregate(_arr(), 4, 0, PEAK) == PeakPair(0.0, 0.0)
        assert aggregate(_arr(), 0.5, 0, RMS) == PeakPair(0.0, 0.0)


class TestRms:
    """Sign-partitioned running accumulation."""

    def test_single_positive_run(self) -> None:
        """0.5 then 0.3: only the first sample extends the running max."""
        pair = aggregate(_arr(0.5, 0.3), 2, 0, RMS)
        assert pair.min == 0.0
        assert pair.max == pytest.approx(math.sqrt(0.5 * 0.5 / 2))

    def test_result_depends_on_sample_order(self) -> None:
        """Rising samples all count; the same samples falling do not."""
        rising = aggregate(_arr(0.3, 0.5), 2, 0, RMS)
        falling = aggregate(_arr(0.5, 0.3), 2, 0, RMS)
        assert rising.max == pytest.approx(math.sqrt((0.09 + 0.25) / 2))
        assert rising.max != pytest.approx(falling.max)

    def test_negative_side_accumulates_separately(self) -> None:
        pair = aggregate(_arr(0.4, -0.2, -0.6, 0.1), 4, 0, RMS)
        assert pair.max == pytest.approx(math.sqrt(0.16 / 4))
        assert pair.min == pytest.approx(-math.sqrt((0.04 + 0.36) / 4))

    def test_silence(self) -> None:
        assert aggregate(_arr(0, 0, 0, 0), 4, 0, RMS) == PeakPair(0.0, 0.0)


class TestAtOrBelowNative:
    """One sample or less per column: a single value split by sign."""

    def test_peak_interpolates_between_neighbours(self) -> None:
        pair = aggregate(_arr(0.0, 1.0), 0.5, 1, PEAK)
        assert pair == PeakPair(0.0, pytest.approx(0.5))

    def test_peak_negative_interpolation(self) -> None:
        pair = aggregate(_arr(-1.0, 0.0), 0.5, 1, PEAK)
        assert pair.min == pytest.approx(-0.5)
        assert pair.max == 0.0

    def test_peak_uses_floor_sample_at_last_index(self) -> None:
        """The ceil neighbour is out of range, so no interpolation."""
        assert aggregate(_arr(0.0, 1.0), 0.5, 3, PEAK) == PeakPair(0.0, 1.0)

    def test_peak_past_end_is_zero(self) -> None:
        assert aggregate(_arr(0.0, 1.0), 0.5, 4, PEAK) == PeakPair(0.0, 0.0)

    def test_rms_picks_nearest_sample(self) -> None:
        """Position 0.5 rounds half up to sample 1."""
        pair = aggregate(_arr(0.2, -0.6), 0.5, 1, RMS)
        assert pair == PeakPair(pytest.approx(-0.6), 0.0)

    def test_exactly_one_sample_per_column_splits_by_sign(self) -> None:
        data = _arr(0.5, -0.5)
        assert aggregate(data, 1, 0, PEAK) == PeakPair(0.0, 0.5)
        assert aggregate(data, 1, 1, PEAK) == PeakPair(-0.5, 0.0)
