"""
Response schemas for the API.

These define the output structure for API endpoints.
Field names are camelCase on the wire to match the frontend.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from tutorsim.models.session import StudentInfo, StudentSessionSummary
from tutorsim.models.transcript import Utterance


# =============================================================================
# Transcript Processing Response
# =============================================================================

class ProcessTranscriptResponse(BaseModel):
    """Split transcript returned after the three refinement passes."""
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    transcript: list[Utterance] = Field(..., description="Utterances in conversational order")
    original_length: int = Field(..., alias="originalLength", description="Characters in the raw input")
    formatted_length: int = Field(..., alias="formattedLength", description="Number of utterances")


# =============================================================================
# Session Log Responses
# =============================================================================

class SessionLogResponse(BaseModel):
    """Response after storing a session log."""
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    log_id: str = Field(..., alias="id")
    conversation_count: int = Field(..., alias="conversationCount")


class StudentSessionsResponse(BaseModel):
    """A tutor's sessions grouped per student."""
    model_config = ConfigDict(populate_by_name=True)

    students: list[StudentSessionSummary]
    total_sessions: int = Field(..., alias="totalSessions")


class StudentHistoryResponse(BaseModel):
    """Every session with one student merged into a single conversation."""
    model_config = ConfigDict(populate_by_name=True)

    student_info: Optional[StudentInfo] = Field(None, alias="studentInfo")
    conversation_history: list[dict[str, Any]] = Field(
        default_factory=list,
        alias="conversationHistory",
        description="Session separators, each followed by that session's messages",
    )
    total_sessions: int = Field(..., alias="totalSessions")
