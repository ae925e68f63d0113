"""Waveform display subpackage."""

from .widget import WaveformWidget
from .renderer import WaveformRenderer, WaveformRenderCtx

__all__ = ["WaveformWidget", "WaveformRenderer", "WaveformRenderCtx"]
