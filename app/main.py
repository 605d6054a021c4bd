import logging
from contextlib import asynccontextmanager

import sentry_sdk
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.logging import LoggingIntegration

from app.api.routes import health, metrics, score_breakdown, signal_meta, signals, watchlist
from app.clients.supabase import shutdown_supabase_client
from app.config import settings
from app.services.signals.aggregator import shutdown_signal_service

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")

    if settings.sentry_dsn:
        sentry_sdk.init(
            dsn=settings.sentry_dsn,
            integrations=[
                FastApiIntegration(),
                LoggingIntegration(level=logging.INFO),
            ],
            traces_sample_rate=0.1,
            environment=settings.environment,
        )
        logger.info("Sentry initialized")

    for name, enabled in settings.integration_status().items():
        if not enabled:
            logger.warning("integration.not_configured", extra={"integration": name})

    logger.info("Application startup complete")

    yield

    # Shutdown
    logger.info("Shutting down application")
    await shutdown_signal_service()
    await shutdown_supabase_client()


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Derived metrics, signal aggregation and score explanations for the MVP90 Terminal",
    lifespan=lifespan,
    debug=settings.debug,
)

if settings.cors_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log all requests."""
    logger.info(f"{request.method} {request.url.path}")
    try:
        response = await call_next(request)
    except Exception as exc:
        # Starlette skips registered Exception handlers when debug is on.
        response = await unhandled_exception_handler(request, exc)
    logger.info(f"Response status: {response.status_code}")
    return response


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        "api.unhandled_error",
        extra={"method": request.method, "path": request.url.path, "error": type(exc).__name__},
    )
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


app.include_router(health.router, prefix="/health", tags=["health"])
app.include_router(metrics.router, prefix="/api", tags=["metrics"])
app.include_router(signal_meta.router, prefix="/api", tags=["signal_meta"])
app.include_router(score_breakdown.router, prefix="/api", tags=["score_breakdown"])
app.include_router(signals.router, prefix="/api", tags=["signals"])
app.include_router(watchlist.router, prefix="/api", tags=["watchlist"])


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": f"Welcome to {settings.app_name}",
        "version": settings.app_version,
        "environment": settings.environment,
        "endpoints": ["/api/metrics/{name}", "/api/signal_meta/{id}", "/api/score_breakdown/{entity_id}"],
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host=settings.host, port=settings.port, log_level=settings.log_level.lower())
