"""Adapter from a vendor call SDK object to the CallClient interface."""
import inspect
import logging
from typing import Any, Tuple

from call_relay.core.exceptions import TerminationWarning
from call_relay.services.widget.base import CallClient
from call_relay.services.widget.events import CallEvent

logger = logging.getLogger(__name__)

# Tried in order; SDK releases disagree on the name.
TERMINATION_METHODS: Tuple[str, ...] = ("stop_call", "end_call", "hangup")


async def _maybe_await(result: Any) -> Any:
    if inspect.isawaitable(result):
        return await result
    return result


class VendorCallClient(CallClient):
    """
    Wraps a vendor SDK object whose exact shape is not known in advance.

    The vendor object is expected to provide ``start_call(access_token=...)``
    and, optionally, ``on(event, handler)`` for its events. Events raised by
    the vendor are re-emitted through this adapter so the widget only ever
    subscribes here.
    """

    def __init__(self, vendor: Any):
        super().__init__()
        self.vendor = vendor
        self._bridge_vendor_events()

    def _bridge_vendor_events(self) -> None:
        subscribe = getattr(self.vendor, "on", None)
        if not callable(subscribe):
            logger.debug("[CALL CLIENT] Vendor object has no 'on', events not bridged")
            return
        for event in CallEvent:
            subscribe(event.value, self._forwarder(event))

    def _forwarder(self, event: CallEvent):
        def forward(*args: Any) -> None:
            self.emit(event, *args)

        return forward

    async def start_call(self, access_token: str) -> None:
        """Start the vendor call with the access token."""
        await _maybe_await(self.vendor.start_call(access_token=access_token))

    async def terminate(self) -> None:
        """
        Try every known termination method on the vendor object.

        Missing methods are skipped and failing ones are logged; the next
        method is still tried.

        Raises:
            TerminationWarning: if no method succeeded
        """
        succeeded = []
        failures = []
        for name in TERMINATION_METHODS:
            method = getattr(self.vendor, name, None)
            if not callable(method):
                continue
            try:
                await _maybe_await(method())
                succeeded.append(name)
            except Exception as e:
                logger.warning(
                    f"[CALL CLIENT] {name}() failed - Error: {type(e).__name__}: {str(e)}"
                )
                failures.append(f"{name}: {e}")

        if not succeeded:
            detail = "; ".join(failures) if failures else "no termination method available"
            raise TerminationWarning(f"Could not end call ({detail})")

        logger.debug(f"[CALL CLIENT] Call terminated via {', '.join(succeeded)}")
