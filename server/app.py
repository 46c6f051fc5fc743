"""Main FastAPI application for the SMS dispatch service."""

from __future__ import annotations

import json

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from smsdispatch.services import get_dispatcher
from smsdispatch.types import ConfigurationError, UnexpectedError, ValidationError

from .config import get_settings
from .logging_config import configure_logging, logger
from .routes import api_router

MISCONFIGURED_MESSAGE = "Server misconfiguration. Contact support."
INTERNAL_ERROR_MESSAGE = "Internal Server Error"


# Register global exception handlers so every failure body is {"error": "..."}
def register_exception_handlers(app: FastAPI) -> None:
    """Register exception handlers for 400, HTTP, configuration and 500 errors."""

    @app.exception_handler(RequestValidationError)
    async def _request_validation_handler(request: Request, exc: RequestValidationError):
        logger.debug("validation error on %s: %s", request.url.path, exc.errors())
        return JSONResponse(
            {"error": "Numbers (array) and message are required."},
            status_code=status.HTTP_400_BAD_REQUEST,
        )

    @app.exception_handler(ValidationError)
    async def _dispatch_validation_handler(request: Request, exc: ValidationError):
        logger.info("Rejected request on %s: %s", request.url.path, exc)
        return JSONResponse({"error": str(exc)}, status_code=status.HTTP_400_BAD_REQUEST)

    @app.exception_handler(ConfigurationError)
    async def _configuration_handler(request: Request, exc: ConfigurationError):
        logger.error("Provider configuration missing: %s", exc)
        return JSONResponse(
            {"error": MISCONFIGURED_MESSAGE},
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    @app.exception_handler(UnexpectedError)
    async def _unexpected_handler(request: Request, exc: UnexpectedError):
        logger.error("Unexpected error on %s: %s", request.url.path, exc, exc_info=exc)
        return JSONResponse(
            {"error": INTERNAL_ERROR_MESSAGE},
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    @app.exception_handler(HTTPException)
    async def _http_exception_handler(request: Request, exc: HTTPException):
        logger.debug("http error %s on %s: %s", exc.status_code, request.url.path, exc.detail)
        detail = exc.detail
        if not isinstance(detail, str):
            detail = json.dumps(detail)
        return JSONResponse({"error": detail}, status_code=exc.status_code)

    @app.exception_handler(Exception)
    async def _unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s", request.url.path)
        return JSONResponse(
            {"error": INTERNAL_ERROR_MESSAGE},
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )


# Configure logging early
configure_logging()
_settings = get_settings()

# Create FastAPI app
app = FastAPI(
    title=_settings.app_name,
    version=_settings.app_version,
    docs_url=_settings.resolved_docs_url,
    redoc_url=None,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=_settings.cors_allow_origins,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register exception handlers
register_exception_handlers(app)

# Include aggregated router
app.include_router(api_router)


@app.on_event("startup")
async def _startup() -> None:
    """Build the shared Dispatcher and report configuration problems early."""
    logger.info("Starting SMS dispatch server (version %s)", _settings.app_version)

    dispatcher = get_dispatcher()
    missing = dispatcher.missing_configuration()
    if missing:
        logger.error(
            "Missing provider configuration: %s; sends will be refused until it is set",
            ", ".join(missing),
        )

    logger.info(
        "Dispatcher ready (provider=%s, max_concurrency=%d)",
        _settings.sms_provider,
        dispatcher.max_concurrency,
    )


__all__ = ["app"]
