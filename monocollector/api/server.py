"""FastAPI application setup"""
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.responses import JSONResponse

from monocollector import __version__
from monocollector.api.routes import router
from monocollector.api.metrics_routes import router as metrics_router
from monocollector.api.middleware import setup_cors, setup_rate_limiting
from monocollector.config import LOG_LEVEL, validate_config
from monocollector.observability.metrics import errors_total
from monocollector.observability.metrics_middleware import setup_metrics_middleware

# Configure logging
logging.basicConfig(
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    level=getattr(logging, LOG_LEVEL.upper(), logging.INFO)
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifecycle manager for FastAPI application"""
    logger.info("Starting API server...")
    validate_config()
    logger.info("Configuration validated")

    yield

    logger.info("Shutting down API server...")


def create_api_application() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="MonoCollector API",
        description="REST API for collection tracking with levels, achievements and badges",
        version=__version__,
        lifespan=lifespan
    )

    # Setup middleware
    setup_cors(app)
    setup_rate_limiting(app)
    setup_metrics_middleware(app)

    # Include routes
    app.include_router(router)
    app.include_router(metrics_router)

    # Global exception handler
    @app.exception_handler(Exception)
    async def global_exception_handler(request, exc):
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        errors_total.labels(error_type=type(exc).__name__, component="api").inc()
        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error", "detail": str(exc)}
        )

    logger.info("FastAPI application created")

    return app
