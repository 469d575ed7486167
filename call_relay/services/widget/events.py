"""Call client events and a minimal in-process emitter."""
import logging
from enum import Enum
from typing import Any, Callable, Dict, List

logger = logging.getLogger(__name__)

EventHandler = Callable[..., Any]


class CallEvent(str, Enum):
    """Events raised by the external call client."""

    CALL_STARTED = "call_started"
    CALL_ENDED = "call_ended"
    ERROR = "error"


class CallEventEmitter:
    """Keeps handlers per event name and calls them in registration order."""

    def __init__(self):
        self._handlers: Dict[str, List[EventHandler]] = {}

    def on(self, event: str, handler: EventHandler) -> None:
        """Register a handler for an event."""
        self._handlers.setdefault(CallEvent(event).value, []).append(handler)

    def off(self, event: str, handler: EventHandler) -> None:
        """Remove a handler; unknown handlers are ignored."""
        handlers = self._handlers.get(CallEvent(event).value, [])
        if handler in handlers:
            handlers.remove(handler)

    def emit(self, event: str, *args: Any) -> None:
        """Call every handler registered for the event."""
        for handler in list(self._handlers.get(CallEvent(event).value, [])):
            handler(*args)

    def handler_count(self, event: str) -> int:
        """Number of handlers registered for an event."""
        return len(self._handlers.get(CallEvent(event).value, []))
