"""FastAPI dependencies."""
from fastapi import Depends

from call_relay.core import config
from call_relay.core.config import Settings
from call_relay.services.retell.client import RetellClient


def get_settings() -> Settings:
    """Get application settings."""
    return config.settings


def get_retell_client(settings: Settings = Depends(get_settings)) -> RetellClient:
    """Get Retell API client instance."""
    return RetellClient(
        api_key=settings.retell_api_key,
        base_url=settings.retell_base_url,
        timeout=settings.retell_timeout_seconds,
    )
