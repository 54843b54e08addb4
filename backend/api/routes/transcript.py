"""
Transcript Route

Splits a raw session transcript into speaker-labeled utterances.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
import structlog

from backend.api.deps import get_engine
from backend.api.schemas import ProcessTranscriptRequest, ProcessTranscriptResponse
from backend.services import transcript_runner
from tutorsim.llm.engine import TransformEngine
from tutorsim.pipeline import TranscriptValidationError, validate_full_text

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.post("/chat/process-transcript", response_model=ProcessTranscriptResponse)
async def process_transcript(
    request: ProcessTranscriptRequest,
    engine: TransformEngine = Depends(get_engine),
):
    """
    Split a raw transcript through the three refinement passes.

    Engine failures never fail the request; the worst case is the
    original text returned as a single tutor utterance.

    Args:
        request: Contains fullText and an optional studentName

    Returns:
        ProcessTranscriptResponse with the final utterance list
    """
    try:
        full_text = validate_full_text(request.full_text)
    except TranscriptValidationError as e:
        logger.info("transcript_request_rejected", field=e.field)
        return JSONResponse({"error": str(e)}, status_code=400)

    result = await transcript_runner.run_transcript_pipeline(
        full_text,
        request.student_name,
        engine,
    )

    return ProcessTranscriptResponse(
        success=True,
        transcript=result.transcript,
        original_length=result.original_length,
        formatted_length=result.formatted_length,
    )
