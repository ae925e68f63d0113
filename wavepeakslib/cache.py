"""Multi-resolution (min, max) cache over a single-channel sample buffer.

Each :class:`ReductionMode` owns a set of resolution levels keyed by
samples-per-pixel; each level maps a pixel column to its
:class:`~wavepeakslib.models.PeakPair`.  Missing columns are computed on
demand, either straight from the raw samples or by merging entries of a
coarser level (``ceil(spp / 2 / 100) * 100``), so that zooming around
reuses earlier work instead of rescanning the buffer.  Entries are never
evicted; a cache lives exactly as long as the buffer it wraps.

Not thread-safe: callers must not query one cache from several threads.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Callable, Sequence

import numpy as np

from .aggregate import aggregate, round_half_up
from .events import EventBus
from .models import PeakPair, ReductionMode, ZERO_PAIR
from .warmup import warmup

log = logging.getLogger(__name__)

Aggregator = Callable[[np.ndarray, float, int, ReductionMode], PeakPair]


class PeakCache:
    def __init__(
        self,
        data: np.ndarray | Sequence[float] | None,
        *,
        config: dict[str, Any] | None = None,
        aggregator: Aggregator = aggregate,
        frame_yield: Callable[[], None] | None = None,
        event_bus: EventBus | None = None,
    ):
        if data is None:
            data = np.zeros(0, dtype=np.float32)
        self.data = np.asarray(data)
        if self.data.ndim != 1:
            raise ValueError(
                f"PeakCache expects a single channel, got shape {self.data.shape}")
        config = config or {}
        self.progress_chunk: int = config.get("progress_chunk", 10000)
        self.rough_quantum: int = config.get("rough_quantum", 100)
        self.multiplicator: int = config.get("multiplicator", 2)
        self.warmup_span: int = config.get("warmup_span", 20_000_000)
        self.warmup_step: int = config.get("warmup_step", 100)
        self.aggregator = aggregator
        self.frame_yield = frame_yield
        self.event_bus = event_bus
        self._levels: dict[ReductionMode, dict[float, dict[int, PeakPair]]] = {
            mode: {} for mode in ReductionMode
        }

    def __len__(self) -> int:
        return len(self.data)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def default_end(self, samples_per_px: float) -> int:
        """Last column covering the buffer at *samples_per_px*."""
        return math.ceil(len(self.data) / samples_per_px)

    def get_values(
        self,
        samples_per_px: float,
        start: int = 0,
        end: int | None = None,
        mode: ReductionMode | str = ReductionMode.PEAK,
        on_progress: Callable[[float], None] | None = None,
    ) -> list[PeakPair]:
        """Return the pairs for pixel columns ``start .. end`` (inclusive).

        With *on_progress*, every ``progress_chunk``-th column reports
        ``x / end`` and then hands control to the host via ``frame_yield``.
        """
        if samples_per_px <= 0:
            raise ValueError(f"samples_per_px must be positive, got {samples_per_px}")
        mode = ReductionMode.parse(mode)
        if end is None:
            end = self.default_end(samples_per_px)

        values: list[PeakPair] = []
        for x in range(start, end + 1):
            values.append(self.get_cached(samples_per_px, x, mode))
            if on_progress is not None and x % self.progress_chunk == 0:
                on_progress(x / end if end else 1.0)
                if self.frame_yield is not None:
                    self.frame_yield()
        return values

    def get_cached(self, samples_per_px: float, x: int,
                   mode: ReductionMode = ReductionMode.PEAK) -> PeakPair:
        """Return the pair for column *x*, computing and storing it if needed."""
        if samples_per_px == 1:
            # Raw sample on both sides, whatever the mode.
            if 0 <= x < len(self.data):
                value = float(self.data[x])
                return PeakPair(value, value)
            return ZERO_PAIR

        level = self._level(samples_per_px, mode)
        pair = level.get(x)
        if pair is not None:
            return pair

        rough = math.ceil(samples_per_px / self.multiplicator
                          / self.rough_quantum) * self.rough_quantum
        if rough > self.rough_quantum:
            lo = 0.0
            hi = 0.0
            first = round_half_up(x * samples_per_px / rough)
            for i in range(self.multiplicator):
                value = self.get_cached(rough, first + i, mode)
                if value.max > hi:
                    hi = value.max
                if value.min < lo:
                    lo = value.min
            pair = PeakPair(lo, hi)
        else:
            pair = self.aggregator(self.data, samples_per_px, x, mode)

        level[x] = pair
        return pair

    def _level(self, samples_per_px: float,
               mode: ReductionMode) -> dict[int, PeakPair]:
        levels = self._levels[mode]
        level = levels.get(samples_per_px)
        if level is None:
            log.debug("New %s level at %g samples/px", mode.value, samples_per_px)
            level = levels[samples_per_px] = {}
        return level

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    def levels(self, mode: ReductionMode | str = ReductionMode.PEAK) -> list[float]:
        """Resolution levels created so far for *mode*, ascending."""
        return sorted(self._levels[ReductionMode.parse(mode)])

    def level_size(self, samples_per_px: float,
                   mode: ReductionMode | str = ReductionMode.PEAK) -> int:
        """Number of columns cached at one level (0 if the level is unknown)."""
        level = self._levels[ReductionMode.parse(mode)].get(samples_per_px)
        return len(level) if level is not None else 0

    def has_column(self, samples_per_px: float, x: int,
                   mode: ReductionMode | str = ReductionMode.PEAK) -> bool:
        level = self._levels[ReductionMode.parse(mode)].get(samples_per_px)
        return level is not None and x in level

    # ------------------------------------------------------------------
    # Warmup
    # ------------------------------------------------------------------

    def warmup(self, on_progress: Callable[[float], None],
               mode: ReductionMode | str = ReductionMode.PEAK) -> None:
        """Pre-populate the coarse ladder levels; see :func:`wavepeakslib.warmup.warmup`."""
        warmup(self, on_progress, mode)
