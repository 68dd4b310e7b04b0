"""FastAPI application factory with CSRF middleware and lifespan."""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from timeseal import log
from timeseal.codec import TokenCodec, codec_from_settings
from timeseal.config import Settings, settings as default_settings
from timeseal.middleware import CSRFMiddleware

logger = logging.getLogger("timeseal")

SAFE_METHODS = ("GET", "HEAD", "OPTIONS")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup and shutdown events."""
    log.setup(app.state.settings.log_level)
    logger.info(f"CSRF protection enabled: {app.state.codec!r}")
    yield


def create_app(settings: Optional[Settings] = None, codec: Optional[TokenCodec] = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = settings or default_settings
    codec = codec or codec_from_settings(settings)

    app = FastAPI(
        title=settings.app_name,
        docs_url="/docs" if settings.debug else None,
        redoc_url=None,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.codec = codec

    app.add_middleware(
        CSRFMiddleware,
        codec=codec,
        token_header=settings.csrf_header,
        token_cookie=settings.csrf_cookie,
        session_header=settings.session_header,
        session_cookie=settings.session_cookie,
        exempt_methods=SAFE_METHODS,
    )

    from timeseal.routers import tokens

    app.include_router(tokens.router)

    @app.get("/healthz")
    async def healthz():
        return {
            "status": "ok",
            "algorithm": codec.algorithm,
            "max_age": codec.max_age,
        }

    return app


app = create_app()
