"""FastAPI application initialization."""

from contextlib import asynccontextmanager
from uuid import uuid4

from dotenv import load_dotenv

# Load environment variables before anything else
load_dotenv()

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from userauth import __version__
from userauth.api.auth import router as auth_router
from userauth.api.middleware import CorrelationIdMiddleware
from userauth.api.routes import router
from userauth.config import get_settings
from userauth.database import close_database, init_database, run_migrations
from userauth.errors import StoreUnavailableError
from userauth.services.logging_service import configure_logging, get_logger


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the connection pool on startup and close it on shutdown.

    Invalid configuration or an unreachable database aborts startup.
    """
    settings = get_settings()
    configure_logging(settings.log_level)
    logger = get_logger("main")

    await init_database(settings)
    if settings.apply_migrations:
        await run_migrations()
    logger.info("application_started", log_level=settings.log_level)

    yield

    await close_database()
    logger.info("application_shutdown")


def _correlation_id(request: Request) -> str:
    return getattr(request.state, "correlation_id", None) or str(uuid4())


app = FastAPI(
    title="User Auth API",
    description="User registration and JWT login",
    version=__version__,
    lifespan=lifespan,
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report the first invalid field of a malformed body as 400."""
    correlation_id = _correlation_id(request)
    logger = structlog.get_logger()

    errors = exc.errors()
    if errors:
        first_error = errors[0]
        field = ".".join(str(loc) for loc in first_error.get("loc", ["unknown"]))
        message = first_error.get("msg", "Validation failed")
        detail = f"Field '{field}': {message}"
    else:
        detail = "Request validation failed"

    logger.warning("validation_error", correlation_id=correlation_id, detail=detail)

    return JSONResponse(
        status_code=400,
        content={
            "error": "Validation error",
            "detail": detail,
            "correlation_id": correlation_id,
        },
        headers={"X-Correlation-Id": correlation_id},
    )


@app.exception_handler(StoreUnavailableError)
async def store_unavailable_handler(
    request: Request, exc: StoreUnavailableError
) -> JSONResponse:
    """Fail only the affected request when the database is unreachable."""
    correlation_id = _correlation_id(request)
    structlog.get_logger().error(
        "store_unavailable",
        operation="request",
        correlation_id=correlation_id,
        error=str(exc),
    )
    return JSONResponse(
        status_code=503,
        content={
            "error": "Service unavailable",
            "detail": "The database is temporarily unreachable. Retry later.",
            "correlation_id": correlation_id,
        },
        headers={"X-Correlation-Id": correlation_id},
    )


# Correlation ID middleware for request tracking and observability
app.add_middleware(CorrelationIdMiddleware)

app.include_router(auth_router)
app.include_router(router)
