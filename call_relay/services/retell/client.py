"""Retell API client."""
import logging
from typing import Any, Optional, Tuple

import httpx

from call_relay.core.exceptions import UpstreamError

logger = logging.getLogger(__name__)

CREATE_WEB_CALL_PATH = "/v2/create-web-call"


class RetellClient:
    """Thin async client for the Retell create-web-call endpoint."""

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.retellai.com",
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    def _headers(self) -> dict:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    async def create_web_call(self, agent_id: str) -> Tuple[int, Any]:
        """
        Ask Retell to create a web call for an agent.

        Args:
            agent_id: Retell agent identifier

        Returns:
            Tuple of (upstream status code, decoded JSON body)

        Raises:
            UpstreamError: on a non-2xx answer, timeout or network failure
        """
        url = f"{self.base_url}{CREATE_WEB_CALL_PATH}"
        logger.debug(f"[RETELL] Creating web call - agent_id: {agent_id}, url: {url}")

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self._transport
            ) as client:
                response = await client.post(
                    url, json={"agent_id": agent_id}, headers=self._headers()
                )
        except httpx.TimeoutException as e:
            raise UpstreamError(
                str(e) or f"Timed out after {self.timeout}s creating web call"
            ) from e
        except httpx.HTTPError as e:
            raise UpstreamError(str(e) or "Failed to create web call") from e

        body = _decode_body(response)

        if not response.is_success:
            raise UpstreamError(
                f"Retell returned {response.status_code}",
                status_code=response.status_code,
                body=body,
            )

        logger.info(
            f"[RETELL] Web call created - agent_id: {agent_id}, "
            f"status: {response.status_code}"
        )
        return response.status_code, body


def _decode_body(response: httpx.Response) -> Any:
    """Decode a JSON body, falling back to an error object for plain text."""
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return {"error": response.text}
