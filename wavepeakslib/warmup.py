"""Chunked pre-population of coarse cache levels for long buffers."""

from __future__ import annotations

import logging
import math
import time
from typing import TYPE_CHECKING, Callable

from .events import (
    WARMUP_COMPLETE,
    WARMUP_LEVEL_COMPLETE,
    WARMUP_LEVEL_START,
    WARMUP_START,
)
from .models import ReductionMode

if TYPE_CHECKING:
    from .cache import PeakCache

log = logging.getLogger(__name__)


def warmup_ladder(length: int, *, span: int = 20_000_000,
                  step: int = 100) -> list[int]:
    """Resolution levels warmed for a buffer of *length* samples.

    One level per started *span* of samples; level ``i`` sits at
    ``(i + 2) * step`` samples per pixel.
    """
    return [(i + 2) * step for i in range(math.ceil(length / span))]


def warmup(cache: PeakCache, on_progress: Callable[[float], None],
           mode: ReductionMode | str = ReductionMode.PEAK) -> None:
    """Cache every ladder level of *cache* across the full buffer width.

    Levels run strictly one after another.  Progress starts and ends with a
    1.0 pulse; in between each level reports
    ``(level_index + level_progress) / level_count``.
    """
    mode = ReductionMode.parse(mode)
    on_progress(1)

    ladder = warmup_ladder(len(cache), span=cache.warmup_span,
                           step=cache.warmup_step)
    _emit(cache, WARMUP_START, levels=list(ladder), mode=mode)
    log.info("Warmup: %d level(s) %s for %d samples (%s)",
             len(ladder), ladder, len(cache), mode.value)
    t_start = time.perf_counter()

    for i, samples_per_px in enumerate(ladder):
        t_level = time.perf_counter()
        _emit(cache, WARMUP_LEVEL_START, index=i, samples_per_px=samples_per_px)

        def level_progress(progress: float, i: int = i) -> None:
            on_progress((i + progress) / len(ladder))

        cache.get_values(samples_per_px, mode=mode, on_progress=level_progress)
        elapsed = time.perf_counter() - t_level
        log.debug("Warmup level %d at %d samples/px: %.1f ms",
                  i, samples_per_px, elapsed * 1000)
        _emit(cache, WARMUP_LEVEL_COMPLETE, index=i,
              samples_per_px=samples_per_px, elapsed=elapsed)

    elapsed = time.perf_counter() - t_start
    _emit(cache, WARMUP_COMPLETE, levels=list(ladder), elapsed=elapsed)
    log.info("Warmup finished in %.1f ms", elapsed * 1000)
    on_progress(1)


def _emit(cache: PeakCache, event_type: str, **data) -> None:
    if cache.event_bus:
        cache.event_bus.emit(event_type, **data)
