"""
FastAPI application factory with middleware, CORS, and request tracing.
"""

import random
import time
import uuid
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from shiftsense import __version__
from shiftsense.config import get_settings
from shiftsense.routers import analysis, batch, dashboard, predictions, settings as settings_router
from shiftsense.storage import build_prediction_store
from shiftsense.utils.logging import bind_request_context, configure_logging, get_logger

configure_logging()
logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager.
    Seeds the session's prediction store on startup.
    """
    settings = get_settings()

    logger.info(
        "application_startup",
        version=app.version,
        dev_mode=settings.dev_mode,
        testing=settings.testing,
    )

    app.state.prediction_store = build_prediction_store(settings)
    app.state.analysis_rng = random.Random(settings.mock_seed)

    logger.info("prediction_store_seeded", records=app.state.prediction_store.count())

    yield

    logger.info("application_shutdown")


def create_app() -> FastAPI:
    """
    Application factory.
    Creates and configures FastAPI application instance.
    """
    settings = get_settings()

    app = FastAPI(
        title="ShiftSense API",
        description="Workforce risk analysis - shift metrics scoring, history and batch intake",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[REQUEST_ID_HEADER],
    )

    @app.middleware("http")
    async def request_tracing_middleware(request: Request, call_next):
        """Tag every request with an X-Request-ID and log its duration."""
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        bind_request_context(request_id, method=request.method, path=request.url.path)
        started = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                "request_failed",
                error=str(e),
                duration_ms=_elapsed_ms(started),
                exc_info=True,
            )
            return JSONResponse(
                status_code=500,
                content={
                    "success": False,
                    "error": "Internal server error",
                    "request_id": request_id,
                },
                headers={REQUEST_ID_HEADER: request_id},
            )

        response.headers[REQUEST_ID_HEADER] = request_id
        log = logger.warning if response.status_code >= 400 else logger.info
        log(
            "request_completed",
            status_code=response.status_code,
            duration_ms=_elapsed_ms(started),
        )
        return response

    @app.get("/health", tags=["System"])
    async def health_check(request: Request):
        """Health check endpoint for load balancers and monitoring."""
        store = getattr(request.app.state, "prediction_store", None)
        return {
            "status": "healthy",
            "version": app.version,
            "predictions": store.count() if store is not None else 0,
        }

    app.include_router(dashboard.router, prefix="/api/v1/dashboard", tags=["Dashboard"])
    app.include_router(analysis.router, prefix="/api/v1/analysis", tags=["Analysis"])
    app.include_router(predictions.router, prefix="/api/v1/predictions", tags=["Predictions"])
    app.include_router(batch.router, prefix="/api/v1/batch", tags=["Batch"])
    app.include_router(settings_router.router, prefix="/api/v1/settings", tags=["Settings"])

    logger.info("application_configured", routers_count=5)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "shiftsense.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
        log_level=settings.log_level.lower(),
    )
