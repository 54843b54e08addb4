"""One refinement pass ("epoch") over a transcript.

Every pass follows the same steps: render the stage template, call the
engine once, parse the reply into utterances. A pass always returns a
non-empty utterance list; when the engine fails or its reply cannot be
parsed, the stage fallback takes over:

- first pass: the whole raw input as a single tutor utterance
- later passes: the previous pass's sequence (parsed from this pass's
  input), or failing that, the input as a single tutor utterance
"""

import time
from typing import Optional

import structlog

from tutorsim.config.prompts import build_instruction, build_system_prompt
from tutorsim.llm.engine import EngineError, TransformEngine
from tutorsim.models.enums import StageKind
from tutorsim.models.results import Parsed, ParseFailed, StageResult
from tutorsim.models.transcript import Utterance, fallback_utterance
from tutorsim.pipeline.parsing import parse_engine_output, parse_serialized_sequence
from tutorsim.pipeline.preservation import (
    DEFAULT_PRESERVATION_THRESHOLD,
    is_low_preservation,
    preservation_rate,
    tokenize,
)

logger = structlog.get_logger(__name__)


def run_epoch(
    stage_input: str,
    speaker_hint: Optional[str],
    stage: StageKind,
    engine: TransformEngine,
    preservation_threshold: float = DEFAULT_PRESERVATION_THRESHOLD,
) -> StageResult:
    """Run a single pass of the pipeline.

    Args:
        stage_input: Raw text for the first pass, serialized utterances after.
        speaker_hint: Student name used in the instruction text.
        stage: Which pass to run.
        engine: Text transformation engine.
        preservation_threshold: Rate below which the first pass logs a warning.

    Returns:
        StageResult with a non-empty utterance list.
    """
    stage_start = time.monotonic()
    log = logger.bind(epoch=stage.number, stage=stage.value)
    log.info("epoch_start", input_length=len(stage_input))

    instruction = build_instruction(stage, stage_input, speaker_hint)

    try:
        raw = engine.transform(instruction, system_prompt=build_system_prompt(stage))
        parsed = parse_engine_output(raw)
    except EngineError as e:
        parsed = ParseFailed(f"engine error: {e}")
    except Exception as e:
        log.error("engine_unexpected_error", error=str(e), error_type=type(e).__name__)
        parsed = ParseFailed(f"engine error: {e}")

    if isinstance(parsed, ParseFailed):
        log.warning("epoch_fallback", reason=parsed.reason)
        result = StageResult(
            stage=stage,
            utterances=_fallback_sequence(stage, stage_input),
            used_fallback=True,
            failure_reason=parsed.reason,
        )
    else:
        result = StageResult(stage=stage, utterances=parsed.utterances)
        if stage.receives_raw_text:
            result.preservation_rate = _check_preservation(
                stage_input, parsed.utterances, preservation_threshold, log
            )

    result.duration_seconds = time.monotonic() - stage_start
    log.info(
        "epoch_complete",
        messages=len(result.utterances),
        used_fallback=result.used_fallback,
    )
    return result


def _check_preservation(
    original: str,
    utterances: list[Utterance],
    threshold: float,
    log,
) -> float:
    rate = preservation_rate(original, utterances)

    if is_low_preservation(rate, threshold):
        log.warning(
            "low_text_preservation",
            rate=round(rate, 3),
            threshold=threshold,
            original_words=tokenize(original)[:10],
            result_words=tokenize(" ".join(u.text for u in utterances))[:10],
        )
    else:
        log.info("text_preservation_ok", rate=round(rate, 3))

    return rate


def _fallback_sequence(stage: StageKind, stage_input: str) -> list[Utterance]:
    if not stage.receives_raw_text:
        previous = parse_serialized_sequence(stage_input)
        if isinstance(previous, Parsed):
            return previous.utterances
        logger.warning("epoch_input_unparseable", stage=stage.value, reason=previous.reason)

    return [fallback_utterance(stage_input)]
