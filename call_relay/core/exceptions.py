"""Error types shared by the call proxy and the call widget."""
from typing import Any, Optional


class CallRelayError(Exception):
    """Base class for every error raised by this package."""


class ConfigurationError(CallRelayError):
    """A required setting (API key, agent id) is missing for a request."""

    def __init__(self, message: str, status_code: int = 500):
        super().__init__(message)
        self.status_code = status_code


class UpstreamError(CallRelayError):
    """
    The Retell API answered with a non-success status or could not be reached.

    ``status_code`` and ``body`` are None when no response was received
    (timeout, connection failure).
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        body: Any = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class ProxyRequestError(CallRelayError):
    """The widget could not get a successful answer from the call proxy."""


class ResponseShapeError(CallRelayError):
    """The proxy answer carries none of the fields needed to start a call."""


class LegacySdkUnavailable(CallRelayError):
    """Legacy conversation mode was selected but no factory was provided."""


class ConnectTimeoutError(CallRelayError):
    """The call did not reach the in-call state within the connect timeout."""


class TerminationWarning(CallRelayError):
    """Ending the call on the external client failed; logged, never surfaced."""
