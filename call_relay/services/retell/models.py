"""Retell web call models."""
from typing import Any, Dict, Optional

from pydantic import BaseModel


class CreateWebCallRequest(BaseModel):
    """Body accepted by POST /create-web-call."""

    agent_id: Optional[str] = None


class WebCallCredentials(BaseModel):
    """Subset of the Retell create-web-call answer handed to the browser."""

    # Relayed as Retell sends them, whatever their JSON type
    access_token: Optional[Any] = None
    web_call_url: Optional[Any] = None
    call_id: Optional[Any] = None
    conversation_id: Optional[Any] = None

    @classmethod
    def from_upstream(cls, data: Any) -> Optional["WebCallCredentials"]:
        """
        Extract the call credentials from a Retell response body.

        Returns None when neither access_token nor web_call_url is set, in
        which case the caller forwards the raw body instead.
        """
        if not isinstance(data, dict):
            return None
        if not (data.get("access_token") or data.get("web_call_url")):
            return None
        return cls(
            access_token=data.get("access_token"),
            web_call_url=data.get("web_call_url"),
            call_id=data.get("call_id"),
            conversation_id=data.get("conversation_id"),
        )

    def to_response(self) -> Dict[str, Any]:
        """Serialize without the fields Retell did not return."""
        return self.model_dump(exclude_none=True)
