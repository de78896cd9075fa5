"""
Event hub for wraith.

A registration table from event name to handlers. One generic
EventHandler covers every host event; names are plain strings, with the
ones wraith itself emits or listens to collected in WraithEvent.
"""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from loguru import logger

from wraith.middleware.compose import resolve


class WraithEvent(str, Enum):
    """Events used by the dispatcher and client."""
    READY = "ready"
    MESSAGE = "message"
    MESSAGE_UPDATE = "message_update"
    DISPATCH = "dispatch"
    DISPATCH_FAIL = "dispatch_fail"
    ERROR = "error"


EventCallback = Callable[..., Any | Awaitable[Any]]


@dataclass
class EventHandler:
    """A callback registered for one event name."""
    event: str
    callback: EventCallback
    once: bool = False

    def matches(self, event: str) -> bool:
        return self.event == event or self.event == "*"


def _event_name(event: "str | WraithEvent") -> str:
    return event.value if isinstance(event, WraithEvent) else event


class EventHub:
    """
    Routes named events to registered handlers.

    Handlers run in registration order. A failing handler is logged and
    does not stop the others.
    """

    def __init__(self):
        self._handlers: dict[str, list[EventHandler]] = {}

        # Stats
        self._emit_count = 0
        self._error_count = 0

    def on(self, event: "str | WraithEvent", callback: EventCallback) -> EventHandler:
        """Register a handler for an event ("*" for all events)."""
        if not callable(callback):
            raise TypeError("Expected event callback to be a function.")
        handler = EventHandler(event=_event_name(event), callback=callback)
        self._handlers.setdefault(handler.event, []).append(handler)
        return handler

    def once(self, event: "str | WraithEvent", callback: EventCallback) -> EventHandler:
        """Register a handler that is removed after its first call."""
        handler = self.on(event, callback)
        handler.once = True
        return handler

    def off(self, handler: EventHandler) -> bool:
        """Remove a handler. Returns False if it was not registered."""
        handlers = self._handlers.get(handler.event, [])
        if handler not in handlers:
            return False
        handlers.remove(handler)
        if not handlers:
            del self._handlers[handler.event]
        return True

    def handlers_for(self, event: "str | WraithEvent") -> list[EventHandler]:
        name = _event_name(event)
        return [*self._handlers.get(name, []), *self._handlers.get("*", [])]

    async def emit(self, event: "str | WraithEvent", *args: Any) -> int:
        """
        Emit an event to its handlers.

        Returns:
            Number of handlers that ran.
        """
        name = _event_name(event)
        handlers = self.handlers_for(name)
        self._emit_count += 1

        for handler in handlers:
            if handler.once:
                self.off(handler)
            try:
                if handler.event == "*":
                    await resolve(handler.callback(name, *args))
                else:
                    await resolve(handler.callback(*args))
            except Exception as e:
                self._error_count += 1
                logger.error(f"Event handler for '{name}' failed: {e}")

        return len(handlers)

    def get_stats(self) -> dict[str, Any]:
        """Get hub statistics."""
        return {
            "events": sorted(self._handlers),
            "handler_count": sum(len(h) for h in self._handlers.values()),
            "emit_count": self._emit_count,
            "error_count": self._error_count,
        }
