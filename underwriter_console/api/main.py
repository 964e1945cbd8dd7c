"""FastAPI application factory"""

from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, RedirectResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from starlette.responses import Response

from underwriter_console.api.dependencies import AccessDenied, PageRedirect
from underwriter_console.api.middleware import MetricsMiddleware, RequestIDMiddleware
from underwriter_console.api.pages import auth, details, lists, sections
from underwriter_console.config import settings
from underwriter_console.core.console import Console
from underwriter_console.domain.exceptions import ValidationError
from underwriter_console.infrastructure.database.session import default_session_factory
from underwriter_console.infrastructure.observability.logging import setup_logging

# Setup structured logging
setup_logging(settings.log_level)


def create_app(console: Optional[Console] = None) -> FastAPI:
    """Create and configure the console application"""
    app = FastAPI(
        title="Underwriter Console",
        description="Back-office console for reviewing credit applications and identity checks",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.console = console or Console(default_session_factory())

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    @app.exception_handler(PageRedirect)
    async def page_redirect(request: Request, exc: PageRedirect):
        return RedirectResponse(url=exc.location, status_code=302)

    @app.exception_handler(AccessDenied)
    async def access_denied(request: Request, exc: AccessDenied):
        return JSONResponse(
            status_code=403,
            content={
                "view": "access_denied",
                "route": exc.route.name,
                "detail": "You don't have permission to access this page.",
            },
        )

    @app.exception_handler(ValidationError)
    async def validation_error(request: Request, exc: ValidationError):
        return JSONResponse(status_code=422, content={"detail": exc.message})

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    app.include_router(auth.router, tags=["session"])
    for router in lists.routers:
        app.include_router(router, tags=["lists"])
    app.include_router(details.router, tags=["details"])
    # Last: its catch-all route must not shadow anything above
    app.include_router(sections.router, tags=["sections"])

    return app
