"""Widget-side models: proxy answer and control view."""
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict

from call_relay.core.exceptions import ResponseShapeError

MISSING_FIELDS_MESSAGE = "Backend missing access_token, web_call_url, or conversation_id."


class CallStartMode(str, Enum):
    """How the widget starts a call, picked from the proxy answer."""

    ACCESS_TOKEN = "access_token"
    REDIRECT = "redirect"
    LEGACY = "legacy"


class CallStartResponse(BaseModel):
    """Answer of POST /create-web-call as read by the widget."""

    model_config = ConfigDict(extra="allow")

    access_token: Optional[Any] = None
    web_call_url: Optional[Any] = None
    url: Optional[Any] = None  # Older proxies
    call_id: Optional[Any] = None
    conversation_id: Optional[Any] = None

    @classmethod
    def parse(cls, data: Any) -> "CallStartResponse":
        """Validate a decoded JSON body."""
        if not isinstance(data, dict):
            raise ResponseShapeError(MISSING_FIELDS_MESSAGE)
        return cls.model_validate(data)

    @property
    def redirect_url(self) -> Optional[Any]:
        return self.web_call_url or self.url

    @property
    def mode(self) -> CallStartMode:
        """
        Pick the start mode; access_token wins over a URL, a URL wins over a
        conversation id.

        Raises:
            ResponseShapeError: if none of the three is present
        """
        if self.access_token:
            return CallStartMode.ACCESS_TOKEN
        if self.redirect_url:
            return CallStartMode.REDIRECT
        if self.conversation_id:
            return CallStartMode.LEGACY
        raise ResponseShapeError(MISSING_FIELDS_MESSAGE)


class ControlView(BaseModel):
    """What the single call button shows."""

    label: str
    enabled: bool
    active: bool
    title: str
