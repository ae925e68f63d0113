from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import NamedTuple

import numpy as np


class ReductionMode(Enum):
    PEAK = "peak"
    RMS = "rms"

    @classmethod
    def parse(cls, value: ReductionMode | str) -> ReductionMode:
        """Accept an enum member or its string value ("peak" / "rms")."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            opts = ", ".join(repr(m.value) for m in cls)
            raise ValueError(f"Unknown reduction mode {value!r}, expected one of {opts}")


class PeakPair(NamedTuple):
    """(min, max) summary of the samples falling into one pixel column."""
    min: float
    max: float


ZERO_PAIR = PeakPair(0.0, 0.0)


@dataclass(frozen=True)
class ViewportState:
    """Snapshot of the view used for every coordinate conversion.

    Attributes:
        position:        Virtual offset of the left viewport edge (0..duration).
        zoom:            Magnification factor, >= 1.
        duration:        Total virtual length of the buffer.
        viewport_offset: Pixel origin of the viewport (e.g. widget left edge).
        viewport_size:   Pixel width of the viewport.
    """
    position: float
    zoom: float
    duration: float
    viewport_offset: float
    viewport_size: float


@dataclass(frozen=True)
class Extent:
    """Clamped on-screen rectangle of a virtual interval."""
    offset: float
    size: float

    @property
    def visible(self) -> bool:
        return self.size > 0


@dataclass(frozen=True)
class Region:
    start: float
    end: float
    id: str = ""
    color: str = "#4499ff"

    @property
    def length(self) -> float:
        return self.end - self.start


@dataclass(frozen=True)
class QueryWindow:
    """Cache query derived from a viewport: columns [start, end] at one ratio."""
    samples_per_px: float
    start: int
    end: int


@dataclass
class WaveformSource:
    filename: str
    filepath: str
    data: np.ndarray
    samplerate: int
    channels: int
    total_samples: int
    duration_sec: float
