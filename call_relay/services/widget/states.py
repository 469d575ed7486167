"""Call lifecycle states and the transition table."""
import logging
from enum import Enum
from typing import Dict

logger = logging.getLogger(__name__)


class CallLifecycleState(str, Enum):
    """States of the call widget."""

    IDLE = "idle"  # No call, control offers to start one
    CONNECTING = "connecting"  # Waiting on the proxy or the call client
    IN_CALL = "in_call"  # Call is live, control offers to end it

    def __str__(self) -> str:
        """Return the string value of the state."""
        return self.value


class CallTrigger(str, Enum):
    """Everything that can move the widget from one state to another."""

    # User-driven
    START_REQUESTED = "start_requested"
    END_REQUESTED = "end_requested"

    # Outcomes of a start attempt
    REDIRECTED = "redirected"
    LEGACY_CALL_STARTED = "legacy_call_started"
    START_FAILED = "start_failed"
    CONNECT_TIMED_OUT = "connect_timed_out"

    # Call client events
    CALL_STARTED = "call_started"
    CALL_ENDED = "call_ended"
    ERROR = "error"


IDLE = CallLifecycleState.IDLE
CONNECTING = CallLifecycleState.CONNECTING
IN_CALL = CallLifecycleState.IN_CALL

# Triggers missing for a state leave it unchanged.
_TRANSITIONS: Dict[CallLifecycleState, Dict[CallTrigger, CallLifecycleState]] = {
    IDLE: {
        CallTrigger.START_REQUESTED: CONNECTING,
        CallTrigger.CALL_STARTED: IN_CALL,
    },
    CONNECTING: {
        CallTrigger.REDIRECTED: IDLE,
        CallTrigger.LEGACY_CALL_STARTED: IN_CALL,
        CallTrigger.START_FAILED: IDLE,
        CallTrigger.CONNECT_TIMED_OUT: IDLE,
        CallTrigger.CALL_STARTED: IN_CALL,
        CallTrigger.CALL_ENDED: IDLE,
        CallTrigger.ERROR: IDLE,
        CallTrigger.END_REQUESTED: IDLE,
    },
    IN_CALL: {
        CallTrigger.START_FAILED: IDLE,
        CallTrigger.CALL_ENDED: IDLE,
        CallTrigger.ERROR: IDLE,
        CallTrigger.END_REQUESTED: IDLE,
    },
}


def transition(state: CallLifecycleState, trigger: CallTrigger) -> CallLifecycleState:
    """
    Return the state reached from ``state`` on ``trigger``.

    Pure function: no side effects besides a debug log. START_REQUESTED
    outside of IDLE is ignored, which is what keeps a second call from
    being started while one is connecting or live.
    """
    new_state = _TRANSITIONS[state].get(trigger, state)
    if new_state != state:
        logger.debug(f"[WIDGET STATE] {state.value} -> {new_state.value} on {trigger.value}")
    return new_state
