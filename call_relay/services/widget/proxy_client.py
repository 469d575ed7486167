"""Client used by the widget to reach the call proxy."""
import logging
from typing import Optional

import httpx

from call_relay.core.exceptions import ProxyRequestError, ResponseShapeError
from call_relay.services.widget.models import MISSING_FIELDS_MESSAGE, CallStartResponse

logger = logging.getLogger(__name__)


class CallProxyClient:
    """Posts the agent id to the proxy and reads back how to start the call."""

    def __init__(
        self,
        url: str,
        timeout: float = 15.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.url = url
        self.timeout = timeout
        self._transport = transport

    async def create_web_call(self, agent_id: str) -> CallStartResponse:
        """
        Request a web call from the proxy.

        Raises:
            ProxyRequestError: on a non-success status or network failure
            ResponseShapeError: if the body is not a JSON object
        """
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self._transport
            ) as client:
                response = await client.post(self.url, json={"agent_id": agent_id})
        except httpx.HTTPError as e:
            raise ProxyRequestError(
                f"Backend unreachable: {str(e) or type(e).__name__}"
            ) from e

        if not response.is_success:
            text = response.text or response.reason_phrase
            raise ProxyRequestError(f"Backend {response.status_code}: {text}")

        try:
            data = response.json()
        except ValueError as e:
            raise ResponseShapeError(MISSING_FIELDS_MESSAGE) from e

        return CallStartResponse.parse(data)
