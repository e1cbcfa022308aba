import logging
from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from studio_dashboard.api.v1.api import api_router
from studio_dashboard.core.config import Settings, settings as default_settings
from studio_dashboard.core.context import DashboardContext
from studio_dashboard.core.exceptions import AuthenticationRequired, ValidationError
from studio_dashboard.core.logging_config import setup_logging
from studio_dashboard.middleware.logging import LoggingMiddleware

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None,
               transport: Optional[httpx.AsyncBaseTransport] = None) -> FastAPI:
    """Build the dashboard gateway; ``transport`` replaces the network in tests"""
    settings = settings or default_settings
    setup_logging(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        context = DashboardContext(settings, transport=transport)
        await context.init()
        app.state.context = context
        try:
            yield
        finally:
            await context.teardown()

    app = FastAPI(
        title="Photo Studio Dashboard",
        description="Admin dashboard gateway for the studio backend",
        version="1.0.0",
        lifespan=lifespan,
    )

    # Add middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"]
    )
    app.add_middleware(LoggingMiddleware)

    @app.exception_handler(AuthenticationRequired)
    async def authentication_required_handler(request: Request, exc: AuthenticationRequired):
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.detail, "redirect_to": exc.redirect_to},
            headers=exc.headers,
        )

    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError):
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.detail, "errors": exc.errors},
        )

    # Include routers
    app.include_router(api_router, prefix="/api/v1")

    @app.get("/")
    async def root():
        return {
            "message": "📸 Photo Studio Dashboard",
            "status": "active",
            "version": "1.0.0",
            "docs": "/docs"
        }

    @app.get("/health")
    async def health_check(request: Request):
        context: DashboardContext = request.app.state.context
        return {
            "status": "healthy",
            "backend": settings.API_URL,
            "authenticated": context.auth.is_authenticated,
        }

    return app


app = create_app()
