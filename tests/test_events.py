"""Tests for the event bus (wavepeakslib.events)."""

from __future__ import annotations

from wavepeakslib.events import EventBus


class TestEventBus:
    def test_handlers_run_in_registration_order(self) -> None:
        bus = EventBus()
        calls: list[str] = []
        bus.subscribe("x", lambda **kw: calls.append("a"))
        bus.subscribe("x", lambda **kw: calls.append("b"))
        assert bus.emit("x") == 2
        assert calls == ["a", "b"]

    def test_payload_passed_as_keywords(self) -> None:
        bus = EventBus()
        received: dict = {}
        bus.subscribe("level", lambda **kw: received.update(kw))
        bus.emit("level", index=1, samples_per_px=300)
        assert received == {"index": 1, "samples_per_px": 300}

    def test_unsubscribe(self) -> None:
        bus = EventBus()
        calls: list[int] = []

        def handler(**kw):
            calls.append(1)

        bus.subscribe("x", handler)
        bus.unsubscribe("x", handler)
        bus.unsubscribe("x", handler)
        bus.emit("x")
        assert calls == []

    def test_emit_without_subscribers(self) -> None:
        assert EventBus().emit("nobody.listens", value=1) == 0

    def test_subscribed_block_cleans_up(self) -> None:
        bus = EventBus()
        calls: list[int] = []
        with bus.subscribed({"x": lambda **kw: calls.append(1)}) as inner:
            assert inner is bus
            bus.emit("x")
        bus.emit("x")
        assert calls == [1]
