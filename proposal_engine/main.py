"""
Tractis Proposal Engine - FastAPI Application Entry Point.

AI proposal generation using three chained LLM stages:
- Parser: document text to structured sections
- Enrichment: conversational gap filling
- Designer: presentation variants plus fixed company sections

Run with:
    uvicorn proposal_engine.main:app --reload --port 8000
"""

import logging
import sys
from datetime import datetime, timezone
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from proposal_engine import __version__
from proposal_engine.core.config import get_settings
from proposal_engine.core.exceptions import (
    ExtractionError,
    GenerationError,
    ProviderError,
    SessionNotFound,
    ValidationError,
)
from proposal_engine.api.proposals import router as proposals_router
from proposal_engine.services.proposal_orchestrator import ProposalOrchestrator


# ===========================================
# Logging Configuration
# ===========================================

def setup_logging():
    """Configure application logging."""
    settings = get_settings()

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG if settings.DEBUG else logging.INFO)

    # Console handler, added once even if the module is re-imported
    if not any(getattr(h, "_proposal_engine", False) for h in root_logger.handlers):
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(formatter)
        console_handler.setLevel(logging.DEBUG if settings.DEBUG else logging.INFO)
        console_handler._proposal_engine = True
        root_logger.addHandler(console_handler)

    # Reduce noise from third-party libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("LiteLLM").setLevel(logging.WARNING)
    logging.getLogger("litellm").setLevel(logging.WARNING)

    return logging.getLogger(__name__)


logger = setup_logging()


# ===========================================
# Application Lifespan
# ===========================================

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """Application lifespan handler for startup/shutdown."""
    settings = get_settings()
    orchestrator: ProposalOrchestrator = app.state.orchestrator

    logger.info("=" * 50)
    logger.info("Tractis Proposal Engine Starting Up")
    logger.info("=" * 50)
    logger.info(f"Environment: {'Development' if settings.DEBUG else 'Production'}")
    logger.info(f"Parser model: {settings.PARSER_MODEL}")
    logger.info(f"Enrichment model: {settings.ENRICHMENT_MODEL}")
    logger.info(f"Designer model: {settings.DESIGNER_MODEL}")

    # Verify critical settings
    if not settings.GROQ_API_KEY:
        logger.warning("Groq API key not configured!")

    if not settings.ANTHROPIC_API_KEY:
        logger.warning("Anthropic API key not configured!")

    orchestrator.store.start_sweeper()

    logger.info("Startup complete - ready to accept requests")

    yield

    # Shutdown
    logger.info("Tractis Proposal Engine shutting down...")
    await orchestrator.store.stop_sweeper()
    orchestrator.store.clear()


# ===========================================
# Error Handlers
# ===========================================

def register_exception_handlers(app: FastAPI) -> None:
    """Map engine errors onto HTTP responses."""

    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError):
        logger.info(f"Rejected request to {request.url.path}: {exc.message}")
        content = {"error": exc.message}
        if exc.details:
            content["details"] = exc.details
        return JSONResponse(status_code=400, content=content)

    @app.exception_handler(SessionNotFound)
    async def session_not_found_handler(request: Request, exc: SessionNotFound):
        logger.info(f"Session not found: {exc.session_id}")
        return JSONResponse(
            status_code=404,
            content={"error": "Session not found or expired", "details": str(exc)}
        )

    @app.exception_handler(GenerationError)
    async def generation_error_handler(request: Request, exc: GenerationError):
        logger.error(f"Generation failed in {exc.agent}: {exc.message}")
        return JSONResponse(
            status_code=502 if isinstance(exc, ProviderError) else 500,
            content={
                "error": "Failed to generate proposal",
                "agent": exc.agent,
                "details": exc.message,
                "errorType": type(exc).__name__,
            }
        )

    @app.exception_handler(ExtractionError)
    async def extraction_error_handler(request: Request, exc: ExtractionError):
        logger.error(f"Extraction failed: {exc}")
        return JSONResponse(
            status_code=502,
            content={"error": "Extraction failed", "details": str(exc)}
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Global exception handler for unhandled errors."""
        logger.error(f"Unhandled error: {exc}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "error": "Internal server error",
                "details": str(exc) if get_settings().DEBUG else "An error occurred"
            }
        )


# ===========================================
# FastAPI Application
# ===========================================

def create_app(orchestrator: Optional[ProposalOrchestrator] = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="Tractis Proposal Engine",
        description="""
        AI proposal generation powered by three chained LLM stages.

        ## Generation

        - `POST /api/generate-proposal` - Start from document text
        - `POST /api/generate-proposal/upload` - Start from an uploaded file
        - `POST /api/enrich-proposal` - Continue an enrichment conversation
        - `GET /api/session-stats` - Active sessions and TTL

        ## Extraction

        - `POST /api/extract-text` - Plain text from PDF, DOCX, MD or TXT
        - `POST /api/extract-design` - Brand colours from a website
        """,
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
    )

    app.state.orchestrator = (
        orchestrator if orchestrator is not None
        else ProposalOrchestrator(settings=settings)
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(proposals_router)
    register_exception_handlers(app)

    @app.get("/", tags=["root"])
    async def root():
        """Root endpoint with API information."""
        return JSONResponse({
            "service": "Tractis Proposal Engine",
            "version": __version__,
            "status": "running",
            "endpoints": {
                "generation": {
                    "generate": "POST /api/generate-proposal",
                    "upload": "POST /api/generate-proposal/upload",
                    "enrich": "POST /api/enrich-proposal",
                    "stats": "GET /api/session-stats"
                },
                "extraction": {
                    "text": "POST /api/extract-text",
                    "design": "POST /api/extract-design"
                },
                "health": "GET /health",
                "docs": "GET /docs"
            }
        })

    @app.get("/health", tags=["root"])
    async def health_check():
        """Health check endpoint."""
        return {
            "status": "healthy",
            "service": "tractis-proposal-engine",
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    return app


# Create app instance
app = create_app()


# ===========================================
# Main Entry Point
# ===========================================

if __name__ == "__main__":
    import uvicorn

    settings = get_settings()

    uvicorn.run(
        "proposal_engine.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
        log_level="debug" if settings.DEBUG else "info"
    )
