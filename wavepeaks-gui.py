"""
Wavepeaks GUI: PySide6 waveform viewer backed by the peak cache.

Usage:
    python wavepeaks-gui.py
    uv run python wavepeaks-gui.py

Requires: PySide6 (install via `uv pip install PySide6`)
"""

from wavepeaksgui import main

if __name__ == "__main__":
    main()
