"""Call widget: drives one call through the proxy and the call client."""
import asyncio
import functools
import logging
import webbrowser
from typing import Any, Callable, Dict, Optional

from call_relay.core.config import Settings
from call_relay.core.exceptions import ConnectTimeoutError, LegacySdkUnavailable
from call_relay.services.widget.base import CallClient, LegacyCallFactory
from call_relay.services.widget.events import CallEvent
from call_relay.services.widget.models import CallStartMode, ControlView
from call_relay.services.widget.proxy_client import CallProxyClient
from call_relay.services.widget.states import CallLifecycleState, CallTrigger, transition

logger = logging.getLogger(__name__)

LEGACY_SDK_UNAVAILABLE_MESSAGE = "Legacy SDK not available."
CONNECT_TIMEOUT_MESSAGE = "Timed out waiting for the call to connect."

_CONTROL_VIEWS: Dict[CallLifecycleState, ControlView] = {
    CallLifecycleState.IDLE: ControlView(
        label="start call", enabled=True, active=False, title="Start a call"
    ),
    CallLifecycleState.CONNECTING: ControlView(
        label="connecting…", enabled=False, active=True, title="Start a call"
    ),
    CallLifecycleState.IN_CALL: ControlView(
        label="end call", enabled=True, active=True, title="End the call"
    ),
}


def _log_notification(message: str) -> None:
    logger.warning(f"[WIDGET] {message}")


class CallWidget:
    """
    Call button state machine.

    All state changes go through ``transition``; user actions
    (``start_call``, ``end_call``) and call client events
    (``handle_event``) only decide which trigger to feed it. Everything
    runs on one event loop, so no locking is needed: the guard in
    ``start_call`` flips the state to CONNECTING before the first await.
    """

    def __init__(
        self,
        proxy: CallProxyClient,
        call_client: CallClient,
        agent_id: str,
        legacy_factory: Optional[LegacyCallFactory] = None,
        open_url: Optional[Callable[[str], Any]] = None,
        notify: Optional[Callable[[str], Any]] = None,
        connect_timeout: Optional[float] = None,
    ):
        self.proxy = proxy
        self.call_client = call_client
        self.agent_id = agent_id
        self.legacy_factory = legacy_factory
        self.open_url = open_url or webbrowser.open_new_tab
        self.notify = notify or _log_notification
        self.connect_timeout = connect_timeout

        self.state = CallLifecycleState.IDLE
        self._watchdog: Optional[asyncio.Task] = None
        self._handlers = {
            event: functools.partial(self.handle_event, event) for event in CallEvent
        }
        self._attached = False
        self.attach()

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        call_client: CallClient,
        **kwargs: Any,
    ) -> "CallWidget":
        """Build a widget pointed at the configured proxy and agent."""
        return cls(
            proxy=CallProxyClient(settings.widget_proxy_url),
            call_client=call_client,
            agent_id=settings.widget_agent_id,
            connect_timeout=settings.widget_connect_timeout_seconds,
            **kwargs,
        )

    def attach(self) -> None:
        """Subscribe to the call client events."""
        if self._attached:
            return
        for event, handler in self._handlers.items():
            self.call_client.on(event, handler)
        self._attached = True

    def close(self) -> None:
        """Unsubscribe from the call client and drop the connect watchdog."""
        if self._attached:
            for event, handler in self._handlers.items():
                self.call_client.off(event, handler)
            self._attached = False
        self._cancel_watchdog()

    @property
    def control(self) -> ControlView:
        """Label and enabled-ness of the call button for the current state."""
        return _CONTROL_VIEWS[self.state]

    async def click(self) -> None:
        """Button handler."""
        if self.state is CallLifecycleState.IN_CALL:
            await self.end_call()
        else:
            await self.start_call()

    def handle_event(self, event: CallEvent, *payload: Any) -> CallLifecycleState:
        """Feed a call client event into the state machine."""
        event = CallEvent(event)
        if event is CallEvent.ERROR:
            logger.error(f"[WIDGET] Call client error: {payload[0] if payload else 'unknown'}")
        return self._apply(CallTrigger(event.value))

    async def start_call(self) -> None:
        """
        Request a call from the proxy and start it.

        Does nothing while a call is connecting or live. Any error is
        logged, handed to ``notify`` and leaves the widget IDLE.
        """
        if self.state is not CallLifecycleState.IDLE:
            logger.debug(f"[WIDGET] start_call ignored - state: {self.state.value}")
            return

        self._apply(CallTrigger.START_REQUESTED)
        try:
            await self._run_initiation()
        except asyncio.CancelledError:
            self._apply(CallTrigger.START_FAILED)
            raise
        except ConnectTimeoutError as e:
            await self._terminate_quietly()
            self._fail_start(e)
        except Exception as e:
            self._fail_start(e)

    async def end_call(self) -> None:
        """End the call; the widget is IDLE afterwards whatever happens."""
        try:
            await self.call_client.terminate()
        except Exception as e:
            logger.warning(f"[WIDGET] End call warning - {type(e).__name__}: {str(e)}")
        finally:
            self._apply(CallTrigger.END_REQUESTED)

    async def _run_initiation(self) -> None:
        """
        Run the start attempt, bounded by ``connect_timeout`` when set.

        Only the expiry of that bound raises ConnectTimeoutError; errors
        from the attempt itself (including its own TimeoutErrors) pass
        through unchanged.
        """
        if self.connect_timeout is None:
            await self._initiate()
            return

        attempt = asyncio.ensure_future(self._initiate())
        try:
            done, _ = await asyncio.wait({attempt}, timeout=self.connect_timeout)
        except asyncio.CancelledError:
            attempt.cancel()
            raise

        if not done:
            attempt.cancel()
            await asyncio.gather(attempt, return_exceptions=True)
            raise ConnectTimeoutError(CONNECT_TIMEOUT_MESSAGE)
        attempt.result()

    async def _initiate(self) -> None:
        response = await self.proxy.create_web_call(self.agent_id)
        mode = response.mode
        logger.info(
            f"[WIDGET] Proxy answered - mode: {mode.value}, "
            f"call_id: {response.call_id or 'unknown'}"
        )

        if mode is CallStartMode.ACCESS_TOKEN:
            await self.call_client.start_call(response.access_token)
            # call_started moves us to IN_CALL
            self._arm_watchdog()
            return

        if mode is CallStartMode.REDIRECT:
            self.open_url(response.redirect_url)
            self._apply(CallTrigger.REDIRECTED)
            return

        if self.legacy_factory is None:
            raise LegacySdkUnavailable(LEGACY_SDK_UNAVAILABLE_MESSAGE)
        call = await self.legacy_factory.create_call_object(response.conversation_id)
        await call.start()
        self._apply(CallTrigger.LEGACY_CALL_STARTED)

    def _apply(self, trigger: CallTrigger) -> CallLifecycleState:
        old_state = self.state
        self.state = transition(old_state, trigger)
        if self.state is not CallLifecycleState.CONNECTING:
            self._cancel_watchdog()
        if old_state != self.state:
            logger.info(f"[WIDGET] State changed: {old_state.value} -> {self.state.value}")
        return self.state

    def _fail_start(self, error: Exception) -> None:
        logger.error(
            f"[WIDGET] Error starting call - Error: {type(error).__name__}: {str(error)}",
            exc_info=error,
        )
        self._apply(CallTrigger.START_FAILED)
        self.notify(str(error) or type(error).__name__)

    async def _terminate_quietly(self) -> None:
        try:
            await self.call_client.terminate()
        except Exception as e:
            logger.warning(f"[WIDGET] Terminate after timeout failed - {type(e).__name__}: {str(e)}")

    def _arm_watchdog(self) -> None:
        if self.connect_timeout is None or self.state is not CallLifecycleState.CONNECTING:
            return
        self._cancel_watchdog()
        self._watchdog = asyncio.get_running_loop().create_task(
            self._expire_connecting(self.connect_timeout)
        )

    def _cancel_watchdog(self) -> None:
        watchdog, self._watchdog = self._watchdog, None
        if watchdog is not None and not watchdog.done():
            watchdog.cancel()

    async def _expire_connecting(self, timeout: float) -> None:
        await asyncio.sleep(timeout)
        if self.state is not CallLifecycleState.CONNECTING:
            return
        self._watchdog = None
        logger.warning(f"[WIDGET] No call_started after {timeout}s, giving up")
        self._apply(CallTrigger.CONNECT_TIMED_OUT)
        self.notify(CONNECT_TIMEOUT_MESSAGE)
        await self._terminate_quietly()
