# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the MindLog API.
# It configures the FastAPI application with middleware, routers, and handlers.
#
# Usage:
#   uvicorn app.main:app --reload
# =============================================================================

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import settings
from app.exceptions import (
    MindLogException,
    mindlog_exception_handler,
    validation_exception_handler,
)
from app.routers import analyze, health, patient
from app.auth import routes as auth_routes
from lib.supabase_client import SupabaseClientError

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Logs the effective configuration on startup.
    """
    logger.info(f"Starting MindLog API in {settings.ENVIRONMENT} mode")
    logger.info(f"CORS origins: {settings.cors_origins_list}")
    logger.info(
        f"Check-in analysis: model={settings.GEMINI_MODEL}, "
        f"max_upload={settings.MAX_UPLOAD_SIZE_MB}MB, "
        f"poll={settings.GEMINI_MAX_POLL_ATTEMPTS}x{settings.GEMINI_POLL_INTERVAL_SECONDS}s "
        f"(deadline {settings.GEMINI_POLL_TIMEOUT_SECONDS}s)"
    )

    yield

    logger.info("Shutting down MindLog API")


# Create FastAPI application
app = FastAPI(
    title="MindLog API",
    description="""
## Daily Mood Check-ins for Doctors and Patients

Patients record a short daily video. The video is analyzed by a multimodal
model and only the derived clinical assessment is stored.

### Privacy Guarantee

Check-in videos are **never retained**. Each upload is written to a
request-scoped temporary file and a temporary provider upload; both are
deleted before the request returns, whether analysis succeeds or fails.

### Quick Start

```bash
# Submit a check-in (patient token required)
curl -X POST http://localhost:8000/api/v1/analyze \\
  -H "Authorization: Bearer $TOKEN" \\
  -F "video=@checkin.mp4;type=video/mp4"
```
""",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    openapi_tags=[
        {
            "name": "Auth",
            "description": "Authentication endpoints for verifying JWT tokens",
        },
        {
            "name": "Check-ins",
            "description": "Submit video check-ins for analysis",
        },
        {
            "name": "Patient",
            "description": "Check-in eligibility and history",
        },
        {
            "name": "Health",
            "description": "API health and readiness checks",
        },
    ],
)


# =============================================================================
# Middleware
# =============================================================================

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list if settings.is_production else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Exception Handlers
# =============================================================================

@app.exception_handler(MindLogException)
async def handle_mindlog_exception(request: Request, exc: MindLogException):
    """Handle custom MindLog exceptions."""
    return await mindlog_exception_handler(request, exc)


@app.exception_handler(RequestValidationError)
async def handle_validation_exception(request: Request, exc: RequestValidationError):
    """Handle malformed requests (e.g. a check-in without a video field)."""
    return await validation_exception_handler(request, exc)


@app.exception_handler(SupabaseClientError)
async def handle_supabase_exception(request: Request, exc: SupabaseClientError):
    """Handle database failures outside the check-in pipeline."""
    logger.error(f"Database error on {request.url.path}: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": "A database error occurred",
            "code": exc.code,
        }
    )


@app.exception_handler(Exception)
async def handle_general_exception(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.exception(f"Unexpected error: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": "An unexpected error occurred",
            "code": "INTERNAL_ERROR",
        }
    )


# =============================================================================
# Routers
# =============================================================================

# Authentication endpoints
app.include_router(
    auth_routes.router,
    prefix="/api/v1/auth",
    tags=["Auth"]
)

# Health check endpoints
app.include_router(
    health.router,
    prefix="/api/v1",
    tags=["Health"]
)

# Video check-in submission
app.include_router(
    analyze.router,
    prefix="/api/v1",
    tags=["Check-ins"]
)

# Patient eligibility and history
app.include_router(
    patient.router,
    prefix="/api/v1/patient",
    tags=["Patient"]
)


# =============================================================================
# Root Endpoint
# =============================================================================

@app.get("/", tags=["Root"])
async def root():
    """
    Root endpoint - returns API info.
    """
    return {
        "name": "MindLog API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/api/v1/health",
    }
