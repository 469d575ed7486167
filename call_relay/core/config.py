"""Application configuration."""
from typing import List, Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Retell
    retell_api_key: str = Field(
        default="",
        validation_alias=AliasChoices("retell_api_key", "api_key"),
    )
    agent_id: str = ""  # Fallback when the request body has no agent_id
    retell_base_url: str = "https://api.retellai.com"
    retell_timeout_seconds: float = 10.0

    # Server
    host: str = "0.0.0.0"
    port: int = 3001
    cors_allow_origins: List[str] = ["*"]
    log_level: str = "INFO"

    # Widget
    widget_proxy_url: str = "http://localhost:3001/create-web-call"
    widget_agent_id: str = "agent_8e3ee5fa5f3ee9e20ea6cbcccf"
    widget_connect_timeout_seconds: Optional[float] = 30.0

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )


settings = Settings()
