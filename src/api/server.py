"""API server running uvicorn inside the current asyncio event loop."""

from __future__ import annotations

import uvicorn
from loguru import logger

from config.settings import settings


def build_server_config() -> uvicorn.Config:
    from src.api.app import create_app

    return uvicorn.Config(
        app=create_app(),
        host=settings.api_host,
        port=settings.api_port,
        log_level="warning",
        loop="none",  # reuse the running loop
        proxy_headers=True,
    )


async def run_api_server() -> None:
    """Serve the token security API until cancelled."""
    server = uvicorn.Server(build_server_config())
    logger.info(f"Token security API listening on http://{settings.api_host}:{settings.api_port}")
    await server.serve()
