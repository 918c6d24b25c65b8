"""Geni AI Generation Routes

Endpoints:
- POST /api/genia/generate - Generate a document or deck, returns the file
- GET /api/genia/generate/status - Current pipeline state
"""

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response
from pydantic import BaseModel
from typing import Optional
from urllib.parse import quote
import logging

from genia.errors import GeniaError
from genia.models.generation import ContentDepth, GenerationRequest, OutputKind
from genia.models.session import Session
from genia.routes import http_error
from genia.routes.auth import get_current_session
from genia.services.account_service import account_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/genia/generate", tags=["Geni AI Generation"])


class GenerateRequest(BaseModel):
    subject: str
    kind: OutputKind = OutputKind.DOCUMENT
    # Honoured on the pro plan only
    section_count: Optional[int] = None
    depth: Optional[ContentDepth] = None
    style: Optional[str] = None


@router.post("")
async def generate(data: GenerateRequest, session: Session = Depends(get_current_session)):
    """Run the generation pipeline and return the exported file.

    Consumes one credit when the file is produced.
    """
    try:
        request = GenerationRequest.for_plan(
            session.plan,
            subject=data.subject,
            kind=data.kind,
            section_count=data.section_count,
            depth=data.depth,
            style=data.style,
        )
        result = await account_service.generate(request)
    except GeniaError as e:
        raise http_error(e)
    except Exception as e:
        logger.error(f"Generation request failed: {e}")
        raise HTTPException(status_code=500, detail="Generation failed")

    if not result.success:
        raise http_error(result.error)

    exported = result.file
    return Response(
        content=exported.content,
        media_type=exported.media_type,
        headers={
            "Content-Disposition": f"attachment; filename*=UTF-8''{quote(exported.filename)}",
            "X-Genia-Quota": str(result.quota_after),
            "X-Genia-Images-Missing": str(result.images_missing),
        },
    )


@router.get("/status")
async def status():
    pipeline = account_service.pipeline
    return {"state": pipeline.state.value, "busy": pipeline.busy}
