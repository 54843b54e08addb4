"""Results passed between pipeline stages.

These are transient values: nothing here is persisted, and each stage
produces a fresh utterance list rather than mutating the previous one.
"""

from dataclasses import dataclass, field
from typing import Optional, Union

from .enums import StageKind
from .transcript import Utterance


@dataclass(frozen=True)
class Parsed:
    """Engine output validated into a non-empty utterance list."""
    utterances: list[Utterance]


@dataclass(frozen=True)
class ParseFailed:
    """Engine output that could not be turned into utterances."""
    reason: str


ParseResult = Union[Parsed, ParseFailed]


@dataclass
class StageResult:
    """Output of one epoch, successful or degraded."""
    stage: StageKind
    utterances: list[Utterance]
    used_fallback: bool = False
    failure_reason: Optional[str] = None
    preservation_rate: Optional[float] = None
    duration_seconds: float = 0.0

    def to_trace(self) -> dict:
        """Serializable summary for logs and diagnostics."""
        return {
            "stage": self.stage.value,
            "stage_number": self.stage.number,
            "utterance_count": len(self.utterances),
            "used_fallback": self.used_fallback,
            "failure_reason": self.failure_reason,
            "preservation_rate": self.preservation_rate,
            "duration_seconds": round(self.duration_seconds, 3),
        }


@dataclass
class PipelineResult:
    """Final transcript plus per-stage diagnostics."""
    transcript: list[Utterance]
    original_length: int
    stage_results: list[StageResult] = field(default_factory=list)

    @property
    def formatted_length(self) -> int:
        return len(self.transcript)

    @property
    def fallback_stages(self) -> list[StageKind]:
        return [r.stage for r in self.stage_results if r.used_fallback]
