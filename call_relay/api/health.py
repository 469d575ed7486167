"""Health check endpoint."""
import logging
from fastapi import APIRouter, Request
from fastapi.responses import PlainTextResponse

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/health", response_class=PlainTextResponse)
async def health_check(request: Request):
    """Liveness check, always 200."""
    logger.debug(
        f"[HEALTH] Health check requested - Client: {request.client.host if request.client else 'unknown'}"
    )
    return "ok"
