"""
FastAPI Backend for the Tutoring Simulator Transcript Service

This is the main entry point for the API server. It provides endpoints for:
- Splitting raw session transcripts into speaker-labeled utterances
- Storing finished sessions and listing them per student

Architecture Decision:
- No database - session logs stored as JSON on disk for simplicity and portability
- The LLM engine is created once from settings and shared by all requests
"""

# Load .env BEFORE any application imports that read os.environ
from dotenv import load_dotenv
load_dotenv()

import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import structlog

from backend.api.deps import close_engine
from backend.api.routes import sessions, transcript
from backend.services import storage
from tutorsim import __version__
from tutorsim.config.settings import get_settings
from tutorsim.logging_config import configure_logging

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize logging and directories on startup."""
    settings = get_settings()
    configure_logging(settings.log_level, json_logs=settings.log_json)
    storage.SESSIONS_DIR.mkdir(parents=True, exist_ok=True)

    yield

    close_engine()


app = FastAPI(
    title="Tutoring Simulator Transcript API",
    description="Splits tutoring session transcripts into speaker turns with LLM refinement passes",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000", "http://localhost:5173"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """Report malformed request bodies as 400 with an ``error`` message."""
    details = [
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
        for error in exc.errors()
    ]
    logger.info("request_rejected", path=request.url.path, errors=details)

    return JSONResponse(
        {"error": "Invalid request body", "details": details},
        status_code=400,
    )


# =============================================================================
# API routes - mounted under /api prefix
# =============================================================================

app.include_router(transcript.router, prefix="/api", tags=["Transcript"])
app.include_router(sessions.router, prefix="/api", tags=["Sessions"])


@app.get("/api/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "version": __version__}


# =============================================================================
# Run with: python -m backend.main
# =============================================================================

if __name__ == "__main__":
    import uvicorn

    port = int(os.environ.get("PORT", 8100))
    uvicorn.run(
        "backend.main:app",
        host="0.0.0.0",
        port=port,
        reload=False,
    )
