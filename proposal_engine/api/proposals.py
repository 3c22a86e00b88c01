"""Proposal API Routes - Generation, enrichment and extraction endpoints."""

import logging
from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter, Depends, File, Request, UploadFile

from proposal_engine.core.exceptions import ValidationError
from proposal_engine.services.proposal_orchestrator import ProposalOrchestrator

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["proposals"])


def get_orchestrator(request: Request) -> ProposalOrchestrator:
    """Orchestrator built by the app factory."""
    return request.app.state.orchestrator


async def _read_json(request: Request) -> Dict[str, Any]:
    try:
        body = await request.json()
    except ValueError:
        raise ValidationError("Request body must be valid JSON") from None

    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object")
    return body


async def _read_upload(file: UploadFile) -> bytes:
    data = await file.read()
    if not data:
        raise ValidationError("File is required")
    return data


# ===========================================
# Generation
# ===========================================

@router.post("/generate-proposal", summary="Generate Proposal From Text")
async def generate_proposal(
    request: Request,
    orchestrator: ProposalOrchestrator = Depends(get_orchestrator)
) -> Dict[str, Any]:
    """
    Start proposal generation from document text.

    Body: ``{"documentText": "..."}``

    Returns either ``{"status": "complete", "proposal", "variantReasoning"}``
    or ``{"status": "needs_enrichment", "enrichmentMessage", "sessionId"}``.
    """
    body = await _read_json(request)
    document_text = body.get("documentText")

    logger.info(
        f"Starting proposal generation "
        f"({len(document_text) if isinstance(document_text, str) else 0} chars)"
    )
    result = await orchestrator.start_generation(document_text)
    logger.info(f"Generation result: {result.status.value}")

    return result.to_payload()


@router.post("/generate-proposal/upload", summary="Generate Proposal From File")
async def generate_proposal_from_file(
    file: UploadFile = File(...),
    orchestrator: ProposalOrchestrator = Depends(get_orchestrator)
) -> Dict[str, Any]:
    """Extract text from an uploaded document and start generation with it."""
    data = await _read_upload(file)

    logger.info(f"Starting proposal generation from upload {file.filename}")
    result = await orchestrator.start_generation_from_file(
        data,
        file.filename or "",
        file.content_type
    )
    logger.info(f"Generation result: {result.status.value}")

    return result.to_payload()


# ===========================================
# Enrichment
# ===========================================

@router.post("/enrich-proposal", summary="Continue Enrichment Conversation")
async def enrich_proposal(
    request: Request,
    orchestrator: ProposalOrchestrator = Depends(get_orchestrator)
) -> Dict[str, Any]:
    """
    Continue an enrichment conversation.

    Body: ``{"sessionId": "enrich_...", "message": "..."}``
    """
    body = await _read_json(request)
    session_id = body.get("sessionId")

    logger.info(f"Continuing enrichment session: {session_id}")
    result = await orchestrator.continue_enrichment(session_id, body.get("message"))
    logger.info(f"Enrichment result: {result.status.value}")

    return result.to_payload()


@router.get("/session-stats", summary="Get Session Statistics")
async def session_stats(
    orchestrator: ProposalOrchestrator = Depends(get_orchestrator)
) -> Dict[str, Any]:
    """Active session count and TTL, for monitoring."""
    return orchestrator.get_session_stats().to_payload()


# ===========================================
# Extraction
# ===========================================

@router.post("/extract-text", summary="Extract Text From File")
async def extract_text(
    file: UploadFile = File(...),
    orchestrator: ProposalOrchestrator = Depends(get_orchestrator)
) -> Dict[str, Any]:
    """Extract plain text from a PDF, DOCX, Markdown or text file."""
    data = await _read_upload(file)
    document = await orchestrator.extract_text(data, file.filename or "", file.content_type)

    return {
        "success": True,
        **document.to_payload(),
        "extractedAt": datetime.now(timezone.utc).isoformat(),
    }


@router.post("/extract-design", summary="Extract Brand Colours")
async def extract_design(
    request: Request,
    orchestrator: ProposalOrchestrator = Depends(get_orchestrator)
) -> Dict[str, Any]:
    """
    Extract the colour palette of a client website.

    Body: ``{"url": "https://..."}``
    """
    body = await _read_json(request)
    url = body.get("url")
    if not url or not isinstance(url, str):
        raise ValidationError("URL is required")

    palette = await orchestrator.extract_brand(url)
    design_system: Dict[str, Any] = {"colors": palette.colors}
    if palette.favicon:
        design_system["favicon"] = palette.favicon

    return {
        "success": True,
        "url": palette.url,
        "designSystem": design_system,
        "extractedAt": datetime.now(timezone.utc).isoformat(),
    }
