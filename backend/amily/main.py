"""
Amily Companion - Main FastAPI Application
"""

import logging
from pathlib import Path
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from contextlib import asynccontextmanager

from .config import settings
from .api import companion_router, chatbox_router, safety_router, wellness_router
from .api.envelope import error_envelope, now_iso
from .core.exceptions import CompanionError
from .core.logging_config import setup_logging
from .middleware import RequestLoggingMiddleware

# Logger will be initialized after setup_logging() is called
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown events."""
    # Startup
    setup_logging(settings)

    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Storage: {'Supabase' if settings.supabase_url and settings.supabase_key else settings.local_storage_path}")
    logger.info(f"Log level: {settings.log_level.upper()}")
    logger.info(f"Debug mode: {settings.debug}")
    if not settings.has_external_keys:
        logger.warning("[DEMO] No external keys configured; voice, care circle and AI replies run in demo mode")
    yield
    # Shutdown
    logger.info(f"Shutting down {settings.app_name}")


# Create FastAPI application
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="A calm, voice-first companion for older adults",
    lifespan=lifespan
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Add request logging middleware (after CORS)
if settings.log_api_requests:
    app.add_middleware(RequestLoggingMiddleware)


@app.exception_handler(CompanionError)
async def companion_error_handler(request: Request, exc: CompanionError):
    return JSONResponse(status_code=exc.status_code, content=error_envelope(exc.user_message))


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    logger.warning(f"Invalid request to {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=400,
        content=error_envelope("I didn't quite understand that... could you try again?"),
    )


# Include routers
app.include_router(companion_router)
app.include_router(chatbox_router)
app.include_router(safety_router)
app.include_router(wellness_router)


@app.get("/api")
async def api_info():
    """Service info and endpoint overview."""
    return {
        "service": settings.app_name,
        "version": settings.app_version,
        "message": "Hello... I'm Amily. I'm here to help you feel calm, safe, and understood.",
        "endpoints": {
            "health": "GET /api/health",
            "checkin": "POST /api/checkin",
            "chatbox": "POST /api/chatbox",
            "chatboxHistory": "GET /api/chatbox/history/{userId}",
            "memory": "POST /api/memory",
            "buddy": "POST /api/buddy",
            "empathy": "POST /api/empathy",
            "vitals": "POST /api/safety/vitals",
            "emergency": "POST /api/safety/emergency",
            "checkinQuestions": "GET /api/safety/checkin-questions",
            "nudges": "GET|POST /api/wellness/nudges",
            "wellnessLog": "POST /api/wellness/log",
            "preferences": "GET /api/preferences/{userId}",
        },
        "timestamp": now_iso(),
    }


@app.get("/api/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "service": settings.app_name,
        "timestamp": now_iso(),
    }


# Frontend, mounted last so the API routes take precedence
if Path(settings.static_dir).is_dir():
    app.mount("/", StaticFiles(directory=settings.static_dir, html=True), name="static")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "amily.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )
