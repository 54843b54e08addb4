"""Transcript pipeline orchestrator - runs the three refinement passes.

Raw text -> initial_parsing -> refinement -> final_polish -> transcript.

Each pass consumes the previous pass's output, serialized back to JSON,
so the passes run strictly in order with exactly one engine call each.
Only input validation errors leave this module; engine trouble is absorbed
by the per-pass fallback.
"""

from typing import Any, Optional

import structlog

from tutorsim.config.settings import get_settings
from tutorsim.llm.engine import TransformEngine
from tutorsim.models.enums import StageKind
from tutorsim.models.results import PipelineResult
from tutorsim.pipeline.epoch import run_epoch
from tutorsim.pipeline.parsing import serialize_sequence

logger = structlog.get_logger(__name__)


class TranscriptPipelineError(Exception):
    """Base error for the transcript pipeline."""
    pass


class TranscriptValidationError(TranscriptPipelineError):
    """Caller supplied no usable transcript text."""

    def __init__(self, message: str, field: str = "fullText") -> None:
        super().__init__(message)
        self.field = field


def validate_full_text(full_text: Any) -> str:
    """Reject missing, non-string or blank transcript text."""
    if not isinstance(full_text, str) or not full_text.strip():
        raise TranscriptValidationError("fullText is required and must be a non-empty string")
    return full_text


def process_transcript(
    full_text: Any,
    student_name: Optional[str] = None,
    *,
    engine: TransformEngine,
    preservation_threshold: Optional[float] = None,
) -> PipelineResult:
    """Split a raw conversation into speaker-labeled utterances.

    Args:
        full_text: Raw transcript text of the whole session.
        student_name: Virtual student's name, used only in instructions.
        engine: Text transformation engine.
        preservation_threshold: Override for the first-pass warning threshold.

    Returns:
        PipelineResult with the final transcript and per-pass results.

    Raises:
        TranscriptValidationError: If ``full_text`` is missing or blank.
    """
    full_text = validate_full_text(full_text)
    if preservation_threshold is None:
        preservation_threshold = get_settings().preservation_threshold

    logger.info(
        "transcript_pipeline_start",
        input_length=len(full_text),
        student_name=student_name,
    )

    stage_results = []
    stage_input = full_text
    for stage in StageKind:
        result = run_epoch(
            stage_input,
            student_name,
            stage,
            engine,
            preservation_threshold=preservation_threshold,
        )
        stage_results.append(result)
        stage_input = serialize_sequence(result.utterances)

    pipeline_result = PipelineResult(
        transcript=stage_results[-1].utterances,
        original_length=len(full_text),
        stage_results=stage_results,
    )

    logger.info(
        "transcript_pipeline_complete",
        original_length=pipeline_result.original_length,
        formatted_length=pipeline_result.formatted_length,
        fallback_stages=[s.value for s in pipeline_result.fallback_stages],
    )
    return pipeline_result
