"""Shared fixtures for the wavepeaks test suite."""

from __future__ import annotations

import numpy as np
import pytest
import soundfile as sf

from wavepeakslib.models import ViewportState


@pytest.fixture
def alternating() -> np.ndarray:
    """Eight samples alternating in sign with growing magnitude."""
    return np.array([0.1, -0.2, 0.3, -0.4, 0.5, -0.6, 0.7, -0.8],
                    dtype=np.float32)


@pytest.fixture
def sine() -> np.ndarray:
    """One second of a 5 Hz sine at 8 kHz, peak 0.5."""
    t = np.arange(8000, dtype=np.float64) / 8000
    return (0.5 * np.sin(2 * np.pi * 5 * t)).astype(np.float32)


@pytest.fixture
def unit_view() -> ViewportState:
    """Ten virtual units spread over a 100 px viewport at zoom 1."""
    return ViewportState(position=0.0, zoom=1.0, duration=10.0,
                         viewport_offset=0.0, viewport_size=100.0)


@pytest.fixture
def stereo_wav(tmp_path):
    """A short stereo WAV whose left channel is +0.25 and right -0.5."""
    path = tmp_path / "stereo.wav"
    frames = np.zeros((4410, 2), dtype=np.float32)
    frames[:, 0] = 0.25
    frames[:, 1] = -0.5
    sf.write(str(path), frames, 44100, subtype="FLOAT")
    return str(path)


@pytest.fixture
def sine_wav(tmp_path, sine):
    path = tmp_path / "sine.wav"
    sf.write(str(path), sine, 8000, subtype="FLOAT")
    return str(path)
