"""
Tests for the event hub.
"""

import pytest
from unittest.mock import AsyncMock, MagicMock

from wraith.events import EventHub, WraithEvent


class TestEventHub:
    """Tests for registering and emitting events."""

    @pytest.mark.asyncio
    async def test_emit_calls_handlers_in_order(self):
        hub = EventHub()
        calls = []
        hub.on("message", lambda m: calls.append(("first", m)))
        hub.on(WraithEvent.MESSAGE, lambda m: calls.append(("second", m)))

        assert await hub.emit("message", "hi") == 2
        assert calls == [("first", "hi"), ("second", "hi")]

    @pytest.mark.asyncio
    async def test_async_handlers_are_awaited(self):
        hub = EventHub()
        handler = AsyncMock()
        hub.on("ready", handler)
        await hub.emit(WraithEvent.READY, "user")
        handler.assert_awaited_once_with("user")

    @pytest.mark.asyncio
    async def test_once(self):
        hub = EventHub()
        handler = MagicMock()
        hub.once("ready", handler)
        await hub.emit("ready")
        await hub.emit("ready")
        assert handler.call_count == 1

    @pytest.mark.asyncio
    async def test_off(self):
        hub = EventHub()
        handler = MagicMock()
        registration = hub.on("ready", handler)
        assert hub.off(registration)
        assert not hub.off(registration)
        await hub.emit("ready")
        handler.assert_not_called()

    @pytest.mark.asyncio
    async def test_wildcard_gets_event_name(self):
        hub = EventHub()
        handler = MagicMock()
        hub.on("*", handler)
        await hub.emit("custom_event", 1, 2)
        handler.assert_called_once_with("custom_event", 1, 2)

    @pytest.mark.asyncio
    async def test_failing_handler_does_not_stop_others(self):
        hub = EventHub()
        after = MagicMock()
        hub.on("message", MagicMock(side_effect=RuntimeError("boom")))
        hub.on("message", after)

        await hub.emit("message", "hi")

        after.assert_called_once_with("hi")
        assert hub.get_stats()["error_count"] == 1

    def test_callback_must_be_callable(self):
        with pytest.raises(TypeError):
            EventHub().on("message", "nope")

    def test_stats(self):
        hub = EventHub()
        hub.on("b", print)
        hub.on("a", print)
        stats = hub.get_stats()
        assert stats["events"] == ["a", "b"]
        assert stats["handler_count"] == 2
