"""FastAPI application for the lodge site backend.

Run:
    uv run uvicorn api.content.app:app --reload --port 8000
"""

from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from api.content.proxy import ResponseCache, router as proxy_router
from api.content.routes import router as api_router
from lib.wordpress.api_client import WordPressApiClient
from lib.wordpress.config import WordPressConfig, load_config
from lib.wordpress.logging import configure_logging


def create_app(
    config: Optional[WordPressConfig] = None,
    http_client: Optional[httpx.AsyncClient] = None,
) -> FastAPI:
    """Build the app. Config and HTTP client are resolved at startup unless injected."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        cfg = config or load_config()
        if config is None:
            configure_logging(cfg)

        owns_client = http_client is None
        client = http_client or httpx.AsyncClient(
            timeout=httpx.Timeout(cfg.timeout),
            follow_redirects=True,
            limits=httpx.Limits(max_connections=50, max_keepalive_connections=20),
        )

        try:
            app.state.config = cfg
            app.state.http_client = client
            # Raises ConfigurationError outside production when the URL is unset
            app.state.wp_client = WordPressApiClient(cfg, http_client=client)
            app.state.relay_cache = ResponseCache(cfg.proxy_cache_ttl, cfg.proxy_cache_max)
            logger.info(f"Site backend ready (env={cfg.environment})")
            yield
        finally:
            if owns_client:
                await client.aclose()

    app = FastAPI(title="Lodge Site API", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    # Relay: GET /api/wp
    app.include_router(proxy_router)

    # API routes: /api/rooms, /api/amenities, /api/booking, ...
    app.include_router(api_router)

    return app


app = create_app()
