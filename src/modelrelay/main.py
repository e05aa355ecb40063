"""FastAPI application entry point."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

import httpx
import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from modelrelay.api.routes import router
from modelrelay.config import get_settings
from modelrelay.proxy.forwarder import Forwarder

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan: initialize on startup, clean up on shutdown."""
    settings = get_settings()
    app.state.settings = settings

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    proxy_config = settings.proxy_config()
    logger.info(
        "Starting ModelRelay (port=%s, intent_upstream=%s, timeout=%ss)",
        settings.port,
        proxy_config.upstream_url,
        proxy_config.timeout,
    )

    http_client = httpx.AsyncClient(timeout=proxy_config.timeout)
    app.state.forwarder = Forwarder(proxy_config, http_client)

    logger.info("Intent: POST http://localhost:%s/api/predict/intent", settings.port)
    yield

    logger.info("Shutting down ModelRelay")
    await http_client.aclose()
    logger.info("ModelRelay shutdown complete")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    application = FastAPI(
        title="ModelRelay",
        description="Forwarding proxy and client for hosted classification models",
        version="0.1.0",
        lifespan=lifespan,
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    application.include_router(router)
    return application


app = create_app()


def run() -> None:
    """Serve the app with uvicorn on the configured host and port."""
    settings = get_settings()
    uvicorn.run("modelrelay.main:app", host=settings.host, port=settings.port)
