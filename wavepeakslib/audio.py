from __future__ import annotations

import os

import numpy as np
import soundfile as sf

from .models import WaveformSource

AUDIO_EXTENSIONS = (".wav", ".aif", ".aiff", ".flac", ".ogg")


class AudioLoadError(Exception):
    """Raised when an audio file cannot be opened or decoded."""
    pass


# ---------------------------------------------------------------------------
# Conversion helpers
# ---------------------------------------------------------------------------

def linear_to_db(linear: float) -> float:
    if linear <= 0:
        return float(-np.inf)
    return float(20 * np.log10(linear))


def format_duration(samples: int, samplerate: int) -> str:
    if samplerate <= 0:
        return "00:00.000"
    seconds = samples / samplerate
    m = int(seconds // 60)
    s = int(seconds % 60)
    ms = int((seconds % 1) * 1000)
    return f"{m:02d}:{s:02d}.{ms:03d}"


# ---------------------------------------------------------------------------
# File I/O
# ---------------------------------------------------------------------------

def load_source(filepath: str) -> WaveformSource:
    """Read an audio file and keep only its first channel.

    Samples are returned as contiguous float32 in [-1, 1].
    """
    try:
        info = sf.info(filepath)
        data, samplerate = sf.read(filepath, dtype="float32", always_2d=True)
    except (RuntimeError, OSError) as e:  # LibsndfileError is a RuntimeError
        raise AudioLoadError(f"Cannot read audio file {filepath}: {e}") from e
    channel = np.ascontiguousarray(data[:, 0])
    return WaveformSource(
        filename=os.path.basename(filepath),
        filepath=filepath,
        data=channel,
        samplerate=samplerate,
        channels=info.channels,
        total_samples=len(channel),
        duration_sec=len(channel) / samplerate if samplerate > 0 else 0.0,
    )


def source_from_array(data: np.ndarray, samplerate: int,
                      name: str = "<memory>") -> WaveformSource:
    """Wrap an in-memory buffer; 2-D input keeps column 0."""
    data = np.asarray(data, dtype=np.float32)
    channels = 1 if data.ndim == 1 else data.shape[1]
    if data.ndim > 1:
        data = np.ascontiguousarray(data[:, 0])
    return WaveformSource(
        filename=name,
        filepath="",
        data=data,
        samplerate=samplerate,
        channels=channels,
        total_samples=len(data),
        duration_sec=len(data) / samplerate if samplerate > 0 else 0.0,
    )
