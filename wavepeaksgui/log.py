"""Debug tracing for the GUI, switched on with ``WP_DEBUG=1`` (or ``true``).

Usage::

    from wavepeaksgui.log import dbg, timed

    dbg("Query 1000 columns at 441 samples/px")
    with timed("Load audio"):
        source = load_source(path)

Lines go to stderr as ``[HH:MM:SS.mmm Caller] message`` where *Caller* is
the class of the calling method, or the calling module.  Library modules
use :mod:`logging` instead.
"""

from __future__ import annotations

import os
import sys
import time
from contextlib import contextmanager
from typing import Iterator


def enabled() -> bool:
    return os.environ.get("WP_DEBUG", "").strip().lower() in ("1", "true")


def _caller(depth: int) -> str:
    frame = sys._getframe(depth + 1)
    owner = frame.f_locals.get("self")
    if owner is not None:
        return type(owner).__name__
    return frame.f_globals.get("__name__", "?").rpartition(".")[2]


def _write(caller: str, msg: str) -> None:
    now = time.time()
    stamp = time.strftime("%H:%M:%S", time.localtime(now))
    sys.stderr.write(f"[{stamp}.{int(now % 1 * 1000):03d} {caller}] {msg}\n")
    sys.stderr.flush()


def dbg(msg: str) -> None:
    """Trace *msg* if debugging is enabled."""
    if enabled():
        _write(_caller(1), msg)


@contextmanager
def timed(label: str) -> Iterator[None]:
    """Trace the wall time of the ``with`` block as ``label: N ms``."""
    if not enabled():
        yield
        return
    # generator frame -> __enter__ -> caller
    caller = _caller(2)
    t0 = time.perf_counter()
    try:
        yield
    finally:
        _write(caller, f"{label}: {(time.perf_counter() - t0) * 1000:.1f} ms")
