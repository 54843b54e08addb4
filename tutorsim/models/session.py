"""Models for stored tutoring session logs."""

import uuid
from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from .transcript import utc_now


def new_session_id() -> str:
    """Generate a unique ID for a stored session log."""
    return str(uuid.uuid4())[:12]


class SessionLog(BaseModel):
    """One finished tutor/student conversation, as stored on disk."""

    model_config = ConfigDict(populate_by_name=True)

    log_id: str = Field(default_factory=new_session_id, alias="id")
    user_id: str = Field(..., alias="userId", min_length=1, description="Tutor account ID")
    student_id: str = Field(..., alias="studentId", min_length=1, description="Virtual student ID")
    student_name: str = Field(default="Unknown Student", alias="studentName")
    student_subject: str = Field(default="Unknown Subject", alias="studentSubject")
    transcript: list[dict[str, Any]] = Field(
        default_factory=list, description="Chat messages exactly as the client recorded them"
    )
    conversation_count: int = Field(
        default=1, ge=1, alias="conversationCount",
        description="Number of sessions this tutor has had with this student, including this one",
    )
    conversation_length: float = Field(
        default=0.0, ge=0.0, alias="conversationLength", description="Duration in seconds"
    )
    summary: Optional[str] = Field(None, description="Generated summary of the session")
    created_at: datetime = Field(default_factory=utc_now, alias="createdAt")
    ended_at: datetime = Field(default_factory=utc_now, alias="endedAt")


class StudentSessionEntry(BaseModel):
    """A single session in a student's history."""

    model_config = ConfigDict(populate_by_name=True)

    session_id: str = Field(..., alias="sessionId")
    timestamp: Optional[datetime] = None
    duration: float = 0.0
    message_count: int = Field(default=0, alias="messageCount")


class StudentSessionSummary(BaseModel):
    """All sessions a tutor has had with one student."""

    model_config = ConfigDict(populate_by_name=True)

    student_id: str = Field(..., alias="studentId")
    student_name: str = Field(..., alias="studentName")
    student_subject: str = Field(..., alias="studentSubject")
    total_sessions: int = Field(default=0, alias="totalSessions")
    total_duration: float = Field(default=0.0, alias="totalDuration")
    last_session_date: Optional[datetime] = Field(None, alias="lastSessionDate")
    last_session_summary: Optional[str] = Field(None, alias="lastSessionSummary")
    sessions: list[StudentSessionEntry] = Field(default_factory=list)


class StudentInfo(BaseModel):
    """Identity of a virtual student as recorded on their sessions."""

    model_config = ConfigDict(populate_by_name=True)

    student_id: str = Field(..., alias="studentId")
    student_name: str = Field(..., alias="studentName")
    student_subject: str = Field(..., alias="studentSubject")
