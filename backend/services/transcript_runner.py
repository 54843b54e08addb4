"""
Transcript Runner Service

Bridges the synchronous transcript pipeline with the async web API.
The pipeline blocks on three engine calls, so it runs in the default
executor instead of on the event loop.
"""

import asyncio
from typing import Optional

import structlog

from tutorsim.llm.engine import TransformEngine
from tutorsim.models.results import PipelineResult
from tutorsim.pipeline import process_transcript

logger = structlog.get_logger(__name__)


async def run_transcript_pipeline(
    full_text: str,
    student_name: Optional[str],
    engine: TransformEngine,
) -> PipelineResult:
    """Run the three-pass splitter without blocking the event loop."""
    loop = asyncio.get_running_loop()
    result = await loop.run_in_executor(
        None,
        lambda: process_transcript(full_text, student_name, engine=engine),
    )

    logger.info(
        "transcript_processed",
        original_length=result.original_length,
        formatted_length=result.formatted_length,
        stages=[r.to_trace() for r in result.stage_results],
    )
    return result
