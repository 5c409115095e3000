"""FastAPI application main entry point"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response, status

from minci.core.config import settings
from minci.core.database import create_tables
from minci.core.errors import StoreFailure, SubmissionRejected
from minci.core.logging import configure_logging
from minci.api.v1.router import router as v1_router
from minci.web.views import router as web_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for application startup and shutdown events.

    Args:
        app: FastAPI application instance
    """
    configure_logging(settings.LOG_LEVEL)
    logger.info("Creating database tables...")
    await create_tables()
    yield
    logger.info("Application shutting down...")


# Create FastAPI application
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Collects signed CI reports and serves build dashboards",
    lifespan=lifespan,
)


@app.exception_handler(SubmissionRejected)
async def submission_rejected_handler(request: Request, exc: SubmissionRejected) -> Response:
    # The reason stays in the log; clients only ever see a bare 403
    logger.warning("%s: %s", request.client.host if request.client else "-", exc)
    return Response(status_code=status.HTTP_403_FORBIDDEN)


@app.exception_handler(StoreFailure)
async def store_failure_handler(request: Request, exc: StoreFailure) -> Response:
    logger.error("store failure on %s %s", request.method, request.url.path, exc_info=exc)
    return Response(status_code=status.HTTP_503_SERVICE_UNAVAILABLE)


# Include routers
app.include_router(v1_router)
app.include_router(web_router)


@app.get("/health", tags=["health"])
async def health_check() -> dict:
    """
    Health check endpoint.

    Returns:
        dict: Status and service information
    """
    return {
        "status": "ok",
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "minci.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
    )
