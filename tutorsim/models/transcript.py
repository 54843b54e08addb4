"""Models for speaker-labeled transcripts."""

import uuid
from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field

from .enums import SpeakerRole


def new_utterance_id() -> str:
    """Generate a unique utterance identifier."""
    return f"utt_{uuid.uuid4().hex[:12]}"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Utterance(BaseModel):
    """A single speaker turn in a tutoring conversation.

    Serialized with the wire names used by the frontend
    (``id``, ``text``, ``isUser``, ``timestamp``).
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = Field(default_factory=new_utterance_id, min_length=1, description="Opaque identifier")
    text: str = Field(..., min_length=1, description="Verbatim spoken content")
    is_user: bool = Field(..., alias="isUser", description="True for the tutor, False for the student")
    timestamp: datetime = Field(default_factory=utc_now, description="Display/ordering timestamp")

    @property
    def role(self) -> SpeakerRole:
        return SpeakerRole.from_is_user(self.is_user)

    def to_wire(self) -> dict:
        """Dump with wire field names and an ISO-8601 timestamp."""
        return self.model_dump(by_alias=True, mode="json")


def fallback_utterance(text: str) -> Utterance:
    """Wrap unsplit text as a single tutor utterance stamped now."""
    return Utterance(text=text, is_user=True)
