"""Web call creation endpoint."""
import logging
from typing import Optional

from fastapi import APIRouter, Body, Depends, Request
from fastapi.responses import JSONResponse

from call_relay.core.config import Settings
from call_relay.core.dependencies import get_retell_client, get_settings
from call_relay.core.exceptions import ConfigurationError, UpstreamError
from call_relay.services.retell.client import RetellClient
from call_relay.services.retell.models import CreateWebCallRequest, WebCallCredentials

router = APIRouter()
logger = logging.getLogger(__name__)


def resolve_agent_id(body: Optional[CreateWebCallRequest], settings: Settings) -> str:
    """Pick the agent id from the body, falling back to the configured default."""
    agent_id = (body.agent_id if body else None) or settings.agent_id
    if not agent_id:
        raise ConfigurationError(
            "agent_id is required (body.agent_id or env AGENT_ID)", status_code=400
        )
    return agent_id


def require_api_key(settings: Settings) -> None:
    """Fail the request when no Retell key is configured."""
    if not settings.retell_api_key:
        raise ConfigurationError("Server missing RETELL_API_KEY / API_KEY", status_code=500)


@router.post("/create-web-call")
async def create_web_call(
    request: Request,
    body: Optional[CreateWebCallRequest] = Body(None),
    settings: Settings = Depends(get_settings),
    retell_client: RetellClient = Depends(get_retell_client),
):
    """
    Create a Retell web call on behalf of the browser.

    The API key never leaves the server; the caller gets back only the
    fields it needs to join the call.
    """
    logger.info(
        f"[CREATE WEB CALL] Request received - "
        f"Client: {request.client.host if request.client else 'unknown'}"
    )

    try:
        agent_id = resolve_agent_id(body, settings)
        require_api_key(settings)
    except ConfigurationError as e:
        logger.warning(f"[CREATE WEB CALL] Rejected - {e}")
        return JSONResponse(status_code=e.status_code, content={"error": str(e)})

    try:
        status_code, data = await retell_client.create_web_call(agent_id)
    except UpstreamError as e:
        status_code = e.status_code or 500
        content = e.body if e.body is not None else {"error": str(e)}
        logger.error(f"[CREATE WEB CALL] Error from Retell - status: {status_code}, body: {content}")
        return JSONResponse(status_code=status_code, content=content)

    credentials = WebCallCredentials.from_upstream(data)
    if credentials is not None:
        logger.info(
            f"[CREATE WEB CALL] Web call ready - agent_id: {agent_id}, "
            f"call_id: {credentials.call_id or 'unknown'}"
        )
        return JSONResponse(status_code=status_code, content=credentials.to_response())

    # Unknown answer shape, hand it over untouched
    logger.warning(
        f"[CREATE WEB CALL] Retell answer has no access_token or web_call_url, "
        f"forwarding raw body - agent_id: {agent_id}"
    )
    return JSONResponse(status_code=status_code, content=data)
