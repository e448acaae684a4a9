"""FastAPI application factory for the token security API."""

from __future__ import annotations

import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from loguru import logger
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address

from config.settings import settings
from src.api.middleware import SecurityHeadersMiddleware
from src.api.registry import registry
from src.security.exceptions import InvalidTokenAddressError
from src.security.metrics import validation_metrics
from src.security.validator import TokenSecurityValidator


@asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Build the validator with configured cache and providers; close them on shutdown."""
    from src.db.redis import close_redis
    from src.parsers.goplus.client import GoPlusClient
    from src.parsers.token_list import TokenListRegistry
    from src.security.cache import create_validation_cache
    from src.security.scoring import ScoreBands

    goplus = GoPlusClient(max_rps=settings.goplus_max_rps)
    token_list = TokenListRegistry(settings.token_list_url)
    registry.validator = TokenSecurityValidator(
        contract_provider=goplus,
        external_provider=token_list,
        cache=await create_validation_cache(),
        bands=ScoreBands.from_settings(),
        airdrop_share_pct=settings.airdrop_share_threshold_pct,
    )
    registry.metrics = validation_metrics
    registry.cache_backend = settings.cache_backend
    logger.info("Token security validator ready")
    try:
        yield
    finally:
        await goplus.close()
        await token_list.close()
        await close_redis()
        registry.validator = None


async def _invalid_address_handler(request: Request, exc: Exception) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": str(exc)},
    )


def create_app(validator: TokenSecurityValidator | None = None) -> FastAPI:
    """Build and configure the FastAPI application.

    When ``validator`` is given it is used as-is and no providers are built.
    """
    app = FastAPI(
        title="Token Security API",
        version="0.1.0",
        docs_url="/api/docs" if os.getenv("API_DEBUG") else None,
        redoc_url=None,
        openapi_url="/api/openapi.json" if os.getenv("API_DEBUG") else None,
        lifespan=None if validator is not None else _lifespan,
    )

    if validator is not None:
        registry.validator = validator
        registry.metrics = validation_metrics
        registry.cache_backend = "injected"

    # Rate limiting (per app instance)
    app.state.limiter = Limiter(
        key_func=get_remote_address, default_limits=[settings.api_rate_limit]
    )
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.add_middleware(SlowAPIMiddleware)

    app.add_middleware(SecurityHeadersMiddleware)
    app.add_exception_handler(InvalidTokenAddressError, _invalid_address_handler)

    from src.api.routers.health import router as health_router
    from src.api.routers.tokens import router as tokens_router

    app.include_router(health_router)
    app.include_router(tokens_router)

    return app
