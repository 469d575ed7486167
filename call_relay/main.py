"""Main FastAPI application."""
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from call_relay.core.config import settings
from call_relay.core.logging import setup_logging
from call_relay.api import calls, health


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    setup_logging()
    yield


app = FastAPI(
    title="Call Relay",
    description="Credential-injecting relay for Retell web calls",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router, tags=["health"])
app.include_router(calls.router, tags=["calls"])


def run() -> None:
    """Start the relay with uvicorn."""
    uvicorn.run(app, host=settings.host, port=settings.port)
