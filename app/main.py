"""FastAPI application entry point.

Wiring only: settings, adapter, middleware, exception handlers, routers.
No business logic here. See app.core.lifespan and app.core.exception_handlers.

The adapter and shared HTTP client are built inside create_app() and kept on
app.state, so tests can pass their own Settings (e.g. DATABASE_URL=memory://).
"""

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from app.api import filesystem, proxy
from app.api.dependencies import FileServiceDep
from app.api.v1.router import api_router
from app.core.config import Settings, get_settings
from app.core.exception_handlers import register_exception_handlers
from app.core.lifespan import create_lifespan
from app.core.limiter import limiter
from app.infrastructure.adapters import AdapterFactory, SqlAlchemyAdapter
from app.middleware import RequestIDMiddleware, RequestSizeLimitMiddleware
from app.pages import render_file_listing
from app.shared.telemetry import TelemetryConfig, setup_logging


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build and return the FastAPI application.

    Args:
        settings: Explicit settings; defaults to get_settings() (environment and .env).
    """
    settings = settings or get_settings()
    setup_logging(settings)

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        lifespan=create_lifespan,
    )
    app.state.settings = settings
    app.state.adapter = AdapterFactory.create_adapter(settings)
    app.state.http_client = httpx.AsyncClient(timeout=settings.proxy_timeout_seconds)

    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    register_exception_handlers(app)

    # Middleware: last added = outermost (size limit, request ID, CORS).
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[o.strip() for o in settings.allowed_origins.split(",") if o.strip()],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestIDMiddleware, header_name=settings.request_id_header)
    app.add_middleware(RequestSizeLimitMiddleware, max_bytes=settings.max_upload_size)

    app.include_router(api_router, prefix="/api/v1")
    app.include_router(filesystem.router, prefix=f"/{settings.fs_prefix}", tags=["filesystem"])
    app.include_router(proxy.router, prefix="/proxy", tags=["proxy"])

    @app.get("/", response_class=HTMLResponse)
    async def root(file_service: FileServiceDep) -> HTMLResponse:
        """Listing of every stored file with an upload form."""
        files = await file_service.list_files()
        return HTMLResponse(
            content=render_file_listing(settings.app_name, files, settings.fs_prefix)
        )

    if settings.telemetry_enabled:
        telemetry = TelemetryConfig.from_settings(settings)
        telemetry.setup_telemetry(
            exporter_type=settings.telemetry_exporter,
            otlp_endpoint=settings.telemetry_otlp_endpoint,
            sample_rate=settings.telemetry_sample_rate,
        )
        telemetry.instrument_fastapi(app)
        telemetry.instrument_logging()
        if isinstance(app.state.adapter, SqlAlchemyAdapter):
            telemetry.instrument_sqlalchemy(app.state.adapter.engine)
        app.state.telemetry = telemetry

    return app


app = create_app()
