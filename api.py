"""
Campus Connect FastAPI Application

Main entry point for the messaging and notifications API.
"""

from contextlib import asynccontextmanager
from http import HTTPStatus
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

# Common library imports
from common.database import MongoDB
from common.logger import LoggerConfig, configure_logging, get_logger
from common.utils import success_response, error_response
from common.utils.exceptions import APIException

# App-specific imports
from campus_connect import __version__
from campus_connect.config import settings
from campus_connect.routers import notifications_router, messages_router
from campus_connect.dependencies import init_all_services, shutdown_services, get_message_service


configure_logging(LoggerConfig.from_settings(settings))
logger = get_logger(__name__)

# =============================================================================
# Database Instance
# =============================================================================
main_db = MongoDB()


# =============================================================================
# Application Lifespan
# =============================================================================
@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Handles startup and shutdown tasks like database connections
    and service initialization.
    """
    # Startup
    logger.info(f"Starting Campus Connect API ({settings.ENVIRONMENT})...")
    settings.validate_required()

    await main_db.connect(
        uri=settings.get_mongodb_uri(),
        database_name=settings.MONGODB_DATABASE,
        max_pool_size=settings.MONGODB_MAX_POOL_SIZE,
        server_selection_timeout_ms=settings.MONGODB_SERVER_SELECTION_TIMEOUT_MS,
        socket_timeout_ms=settings.MONGODB_SOCKET_TIMEOUT_MS,
    )

    init_all_services(db=main_db.db)
    await get_message_service().ensure_indexes()
    logger.success("Campus Connect API started successfully")

    yield

    # Shutdown
    logger.info("Shutting down Campus Connect API...")
    shutdown_services()
    await main_db.disconnect()
    logger.info("Campus Connect API shut down complete.")


# =============================================================================
# FastAPI Application
# =============================================================================
app = FastAPI(
    title="Campus Connect API",
    description="Direct messaging and in-app notifications for Campus Connect",
    version=__version__,
    lifespan=lifespan,
    docs_url="/docs" if settings.is_development() else None,
    redoc_url="/redoc" if settings.is_development() else None,
)

# =============================================================================
# CORS Middleware
# =============================================================================
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins(),
    allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Error Handling
# =============================================================================
@app.exception_handler(APIException)
async def api_exception_handler(request: Request, exc: APIException):
    """Render API exceptions in the standard error envelope."""
    if exc.status_code >= 500:
        logger.error(exc.message, meta={"path": request.url.path, "code": exc.code})
    else:
        logger.warn(exc.message, meta={"path": request.url.path, "code": exc.code})

    return JSONResponse(
        status_code=exc.status_code,
        content=error_response(exc.message, code=exc.code, details=exc.details),
        headers=exc.headers,
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Framework errors (unknown route, wrong method) also use the envelope."""
    try:
        code = HTTPStatus(exc.status_code).name
    except ValueError:
        code = f"HTTP_{exc.status_code}"

    logger.warn(str(exc.detail), meta={"path": request.url.path, "code": code})

    return JSONResponse(
        status_code=exc.status_code,
        content=error_response(str(exc.detail), code=code),
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Body/query validation failures use the same envelope as API errors."""
    logger.warn("Request validation failed", meta={"path": request.url.path})

    return JSONResponse(
        status_code=422,
        content=error_response(
            "Validation error",
            code="VALIDATION_ERROR",
            details=jsonable_encoder(exc.errors()),
        ),
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    """Anything unexpected becomes a 500 without leaking internals outside development."""
    logger.error(f"Unhandled error: {exc}", meta={"path": request.url.path})

    message = str(exc) if settings.is_development() else "Internal server error"
    return JSONResponse(
        status_code=500,
        content=error_response(message, code="INTERNAL_ERROR"),
    )


# =============================================================================
# Include Routers (all under /api/v1 prefix)
# =============================================================================
API_PREFIX = "/api/v1"

app.include_router(notifications_router, prefix=API_PREFIX)
app.include_router(messages_router, prefix=API_PREFIX)


# =============================================================================
# Health Check Endpoint
# =============================================================================
@app.get("/health", tags=["Health"])
async def health():
    """
    Health check endpoint.

    Returns the status of the API and database connection.
    """
    return success_response({
        "status": "ok",
        "version": __version__,
        "environment": settings.ENVIRONMENT,
        "database": main_db.is_connected,
    })


# =============================================================================
# Run with Uvicorn
# =============================================================================
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "api:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.is_development(),
    )
