"""FastAPI application setup"""
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from wellness.api.routes import router
from wellness.api.middleware import setup_cors, setup_rate_limiting
from wellness.config import LOG_LEVEL, validate_config
from wellness.exceptions import (
    AuthenticationError,
    NotFoundError,
    StorageError,
    ValidationError,
    WellnessError,
)
from wellness.services.container import get_container, init_container

# Configure logging
logging.basicConfig(
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    level=getattr(logging, LOG_LEVEL)
)

logger = logging.getLogger(__name__)

ERROR_STATUS = {
    NotFoundError: 404,
    ValidationError: 422,
    AuthenticationError: 401,
    StorageError: 503,
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifecycle manager for FastAPI application"""
    # Startup
    logger.info("Starting API server...")
    try:
        container = get_container()
    except RuntimeError:
        validate_config()
        container = init_container()
    await container.startup()

    yield

    # Shutdown
    logger.info("Shutting down API server...")
    await container.shutdown()


def _status_for(exc: WellnessError) -> int:
    for error_type, status_code in ERROR_STATUS.items():
        if isinstance(exc, error_type):
            return status_code
    return 500


def create_api_application() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Wellness Dashboard API",
        description="Progress, badges, streaks and rewards for the wellness dashboard",
        version="1.0.0",
        lifespan=lifespan
    )

    # Setup middleware
    setup_cors(app)
    setup_rate_limiting(app)

    # Include routes
    app.include_router(router)

    @app.exception_handler(WellnessError)
    async def wellness_exception_handler(request: Request, exc: WellnessError):
        return JSONResponse(status_code=_status_for(exc), content=exc.to_dict())

    # Global exception handler
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error", "detail": str(exc)}
        )

    logger.info("FastAPI application created")

    return app


app = create_api_application()
