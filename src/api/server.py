"""FastAPI application setup"""
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.api.routes import router
from src.api.metrics_routes import router as metrics_router
from src.api.middleware import setup_cors, setup_rate_limiting
from src.db.connection import db
from src.config import LOG_LEVEL
from src.exceptions import WasteAppError
from src.observability.metrics import errors_total, init_metrics
from src.observability.metrics_middleware import setup_metrics_middleware
from src.observability.sentry_config import init_sentry, shutdown_sentry
from src.services.container import init_container
from src.validators import first_error_message, format_validation_errors

# Configure logging
logging.basicConfig(
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    level=getattr(logging, LOG_LEVEL)
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifecycle manager for FastAPI application"""
    # Startup
    logger.info("Starting API server...")
    await db.init_pool()
    logger.info("Database pool initialized")

    init_container(db)
    init_metrics()

    yield

    # Shutdown
    logger.info("Shutting down API server...")
    await db.close_pool()
    logger.info("Database pool closed")
    shutdown_sentry()


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def request_validation_handler(request: Request, exc: RequestValidationError):
    fields = format_validation_errors(exc.errors())
    logger.info(f"Request validation failed on {request.url.path}: {fields}")
    return JSONResponse(
        status_code=422,
        content={"error": first_error_message(fields), "fields": fields},
    )


async def app_error_handler(request: Request, exc: WasteAppError):
    errors_total.labels(error_type=exc.__class__.__name__, component="api").inc()
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    errors_total.labels(error_type=exc.__class__.__name__, component="api").inc()
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error"}
    )


def create_api_application() -> FastAPI:
    """Create and configure FastAPI application"""
    init_sentry()

    app = FastAPI(
        title="Smart Waste API",
        description="REST API for waste classification, pickups and recycling rewards",
        version="1.0.0",
        lifespan=lifespan
    )

    # Setup middleware
    setup_cors(app)
    setup_rate_limiting(app)
    setup_metrics_middleware(app)

    # Include routes
    app.include_router(router)
    app.include_router(metrics_router)

    # Exception handlers
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(WasteAppError, app_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    logger.info("FastAPI application created")

    return app
