"""Three-pass transcript segmentation pipeline.

Usage:
    from tutorsim.llm import LLMTransformEngine
    from tutorsim.pipeline import process_transcript

    result = process_transcript(raw_text, "Sam", engine=LLMTransformEngine())
    print(f"Split into {result.formatted_length} messages")
"""

from tutorsim.pipeline.epoch import run_epoch
from tutorsim.pipeline.orchestrator import (
    TranscriptPipelineError,
    TranscriptValidationError,
    process_transcript,
    validate_full_text,
)
from tutorsim.pipeline.parsing import (
    parse_engine_output,
    parse_serialized_sequence,
    serialize_sequence,
)
from tutorsim.pipeline.preservation import (
    DEFAULT_PRESERVATION_THRESHOLD,
    is_low_preservation,
    preservation_rate,
)

__all__ = [
    # Entry points
    "process_transcript",
    "run_epoch",
    "validate_full_text",
    "TranscriptPipelineError",
    "TranscriptValidationError",
    # Parsing
    "parse_engine_output",
    "parse_serialized_sequence",
    "serialize_sequence",
    # Preservation
    "DEFAULT_PRESERVATION_THRESHOLD",
    "preservation_rate",
    "is_low_preservation",
]
