from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from school_fees.api.v1.router import router as api_v1_router
from school_fees.config.settings import settings
from school_fees.core.logging import setup_logging
from school_fees.core.middleware import register_middlewares
from school_fees.db.init_db import init_db


def create_app() -> FastAPI:
    """
    Application factory for the FastAPI app.

    - Configures title, version, debug mode from Settings.
    - Registers CORS, core middleware, and exception handlers.
    - Includes the versioned API router under /api/v1.
    """
    setup_logging()

    app = FastAPI(
        title=settings.APP_NAME,
        debug=settings.DEBUG,
        version=settings.API_VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=settings.CORS_ORIGINS != ["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Register shared core middlewares (request ID, timing, etc.)
    register_middlewares(app)

    # Mount API v1 under /api/v1
    app.include_router(api_v1_router, prefix=settings.API_V1_STR)

    # Initialize DB schema outside production (use migrations in production)
    @app.on_event("startup")
    async def on_startup() -> None:
        if not settings.is_production():
            init_db()

    return app


app = create_app()
