"""Publish/subscribe bus for warmup progress and cache level events.

Event types emitted by :func:`wavepeakslib.warmup.warmup`:

``warmup.start``           levels: list[int], mode: ReductionMode
``warmup.level_start``     index: int, samples_per_px: int
``warmup.level_complete``  index: int, samples_per_px: int, elapsed: float
``warmup.complete``        levels: list[int], elapsed: float
"""

from __future__ import annotations

import threading
from collections import defaultdict
from contextlib import contextmanager
from typing import Any, Callable, Iterator

WARMUP_START = "warmup.start"
WARMUP_LEVEL_START = "warmup.level_start"
WARMUP_LEVEL_COMPLETE = "warmup.level_complete"
WARMUP_COMPLETE = "warmup.complete"


class EventBus:
    """Publish/subscribe bus keyed by event type.

    Subscriptions may change from any thread.  Handlers are called on the
    emitting thread in subscription order, after the lock is released, so
    a handler may itself subscribe or unsubscribe.
    """

    def __init__(self) -> None:
        self._handlers: defaultdict[str, list[Callable[..., Any]]] = defaultdict(list)
        self._lock = threading.Lock()

    def subscribe(self, event_type: str, handler: Callable[..., Any]) -> None:
        with self._lock:
            self._handlers[event_type].append(handler)

    def unsubscribe(self, event_type: str, handler: Callable[..., Any]) -> None:
        """Drop one registration of *handler*; unknown handlers are ignored."""
        with self._lock:
            registered = self._handlers.get(event_type)
            if registered and handler in registered:
                registered.remove(handler)

    def emit(self, event_type: str, **data: Any) -> int:
        """Call every handler of *event_type* with *data*; return how many ran."""
        with self._lock:
            snapshot = tuple(self._handlers.get(event_type, ()))
        for handler in snapshot:
            handler(**data)
        return len(snapshot)

    @contextmanager
    def subscribed(self, handlers: dict[str, Callable[..., Any]]) -> Iterator[EventBus]:
        """Subscribe *handlers* (event type -> callable) for a ``with`` block."""
        for event_type, handler in handlers.items():
            self.subscribe(event_type, handler)
        try:
            yield self
        finally:
            for event_type, handler in handlers.items():
                self.unsubscribe(event_type, handler)
