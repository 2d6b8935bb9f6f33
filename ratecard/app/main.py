"""
Rate Card Integrity Layer - FastAPI Application

This is the main entry point for the integrity HTTP API.

- Checksums, signatures and certificates for rate card documents
- Stateless: no documents or keys are stored
- Malformed input is answered with a structured JSON error, never a stack trace
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ratecard.app.config import configure_logging, get_config
from ratecard.app.errors import EncodingError, IntegrityError
from ratecard.app.routes import certificates, checksum, health, keys, signatures

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifecycle management for the FastAPI app.

    On startup:
    - Load and validate configuration from the environment
    - Configure logging
    """
    config = get_config()
    configure_logging(config.LOG_LEVEL)
    logger.info("Default signing algorithm: %s", config.DEFAULT_ALGORITHM)
    if config.EXPECTED_ALGORITHM:
        logger.info("Verification pinned to %s", config.EXPECTED_ALGORITHM)

    yield


app = FastAPI(
    title="Rate Card Integrity Layer",
    description="Checksums and embedded signatures for rate card documents",
    version="0.1.0",
    lifespan=lifespan,
    debug=False,
)


@app.exception_handler(IntegrityError)
async def integrity_exception_handler(request: Request, exc: IntegrityError):
    """Report malformed documents, keys and signature records to the client."""
    status_code = (
        status.HTTP_422_UNPROCESSABLE_ENTITY
        if isinstance(exc, EncodingError)
        else status.HTTP_400_BAD_REQUEST
    )
    return JSONResponse(
        status_code=status_code,
        content={"error": exc.code, "message": str(exc)},
    )


@app.exception_handler(ValueError)
async def value_exception_handler(request: Request, exc: ValueError):
    """Out-of-range arguments that passed request validation."""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "invalid_argument", "message": str(exc)},
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Handle HTTP exceptions with the same error shape."""
    detail = exc.detail if isinstance(exc.detail, dict) else {"error": "http_error", "message": str(exc.detail)}
    return JSONResponse(status_code=exc.status_code, content=detail)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Handle validation errors without echoing the request body.

    Request bodies carry private keys, so only field names are returned.
    """
    errors = []
    for error in exc.errors():
        field_path = " -> ".join(str(loc) for loc in error["loc"])
        errors.append({
            "field": field_path,
            "type": error["type"],
            "message": error["msg"],
        })

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error": "validation_error",
            "message": "Request validation failed",
            "details": errors,
        },
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Catch-all handler: log server-side, answer with a generic message."""
    logger.exception("Unhandled exception: %s", type(exc).__name__)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "internal_error",
            "message": "An unexpected error occurred",
        },
    )


app.include_router(health.router)
app.include_router(checksum.router)
app.include_router(keys.router)
app.include_router(signatures.router)
app.include_router(certificates.router)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "service": "Rate Card Integrity Layer",
        "version": "0.1.0",
        "status": "operational",
    }
