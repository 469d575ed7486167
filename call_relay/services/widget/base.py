"""Call client interfaces used by the widget."""
from abc import ABC, abstractmethod

from call_relay.services.widget.events import CallEventEmitter


class CallClient(CallEventEmitter, ABC):
    """
    External call client as seen by the widget.

    Raises ``call_started``, ``call_ended`` and ``error`` through the
    emitter interface (``on`` / ``off`` / ``emit``).
    """

    @abstractmethod
    async def start_call(self, access_token: str) -> None:
        """Join the call identified by the access token."""
        pass

    @abstractmethod
    async def terminate(self) -> None:
        """End the current call."""
        pass


class LegacyCall(ABC):
    """Call object produced by the legacy conversation SDK."""

    @abstractmethod
    async def start(self) -> None:
        """Start the call."""
        pass


class LegacyCallFactory(ABC):
    """Creates legacy call objects from a conversation id."""

    @abstractmethod
    async def create_call_object(self, conversation_id: str) -> LegacyCall:
        """Build a call object for the conversation."""
        pass
