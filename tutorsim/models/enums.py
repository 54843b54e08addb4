"""Enumeration types for the transcript models."""

from enum import Enum


class SpeakerRole(str, Enum):
    """The two conversation roles. The tutor is always speaker A."""

    TUTOR = "tutor"
    STUDENT = "student"

    @classmethod
    def from_is_user(cls, is_user: bool) -> "SpeakerRole":
        return cls.TUTOR if is_user else cls.STUDENT


class StageKind(str, Enum):
    """The three refinement passes, in execution order."""

    INITIAL_PARSING = "initial_parsing"
    REFINEMENT = "refinement"
    FINAL_POLISH = "final_polish"

    @property
    def number(self) -> int:
        """1-based position of the stage in the pipeline."""
        return list(StageKind).index(self) + 1

    @property
    def receives_raw_text(self) -> bool:
        """Only the first pass sees free text; later passes see serialized records."""
        return self is StageKind.INITIAL_PARSING
