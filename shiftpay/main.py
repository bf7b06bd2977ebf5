# shiftpay/main.py
"""
FastAPI application entry point.
"""

import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from shiftpay import __version__
from shiftpay.core.config import CORS_ORIGINS, IS_PRODUCTION
from shiftpay.core.exceptions import PayCalculationError
from shiftpay.core.logging_config import get_logger, setup_logging
from shiftpay.core.request_logging import RequestLoggingMiddleware
from shiftpay.core.sentry_config import init_sentry
from shiftpay.routes.pay import router as pay_router

# Setup logging FIRST (before any other imports that might log)
setup_logging()
logger = get_logger(__name__)

sentry_enabled = init_sentry()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    logger.info(
        "Application starting up",
        extra={"extra_fields": {"production": IS_PRODUCTION, "sentry_enabled": sentry_enabled, "python_version": sys.version}},
    )
    yield
    logger.info("Application shutting down")


app = FastAPI(
    title="shiftpay",
    description="Shift pay calculation and pay period resolution",
    version=__version__,
    lifespan=lifespan,
)

if IS_PRODUCTION:
    # Production: Strict CORS - only allow specified origins
    if not CORS_ORIGINS:
        logger.warning(
            "Production mode but no CORS_ORIGINS set. CORS will block all cross-origin requests."
        )
    allowed_origins = CORS_ORIGINS
    allowed_methods = ["GET", "POST"]
else:
    # Development: Permissive CORS for easier testing
    allowed_origins = ["*"]
    allowed_methods = ["*"]

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=allowed_methods,
    allow_headers=["*"],
    expose_headers=["X-Request-ID"],
)
app.add_middleware(RequestLoggingMiddleware)

app.include_router(pay_router)


@app.exception_handler(PayCalculationError)
async def pay_calculation_error_handler(request: Request, exc: PayCalculationError) -> JSONResponse:
    """Rejected calculation input is the caller's error."""
    logger.warning("Rejected calculation input on %s: %s", request.url.path, exc)
    return JSONResponse(
        status_code=422,
        content={"error": type(exc).__name__, "detail": str(exc)},
    )


@app.get("/health", tags=["health"])
async def health_check():
    """Health check endpoint for monitoring."""
    return {"status": "healthy", "service": "shiftpay", "version": __version__}
