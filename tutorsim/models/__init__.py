"""Data models for the transcript pipeline."""

from .enums import SpeakerRole, StageKind
from .results import Parsed, ParseFailed, ParseResult, PipelineResult, StageResult
from .session import SessionLog, StudentInfo, StudentSessionEntry, StudentSessionSummary
from .transcript import Utterance, fallback_utterance, new_utterance_id, utc_now

__all__ = [
    # Enums
    "SpeakerRole",
    "StageKind",
    # Transcript
    "Utterance",
    "fallback_utterance",
    "new_utterance_id",
    "utc_now",
    # Stage results
    "Parsed",
    "ParseFailed",
    "ParseResult",
    "StageResult",
    "PipelineResult",
    # Session logs
    "SessionLog",
    "StudentInfo",
    "StudentSessionEntry",
    "StudentSessionSummary",
]
