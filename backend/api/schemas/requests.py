"""
Request schemas for the API.

These define the expected input structure for API endpoints.
Using Pydantic v2 for validation and serialization.
"""

from typing import Any, Optional
from pydantic import BaseModel, Field


class ProcessTranscriptRequest(BaseModel):
    """Raw session text to split into speaker turns.

    ``fullText`` is deliberately untyped here: the pipeline owns the
    "missing, not a string, or blank" check and its error message.
    """
    full_text: Any = Field(default=None, alias="fullText", description="Raw transcript text")
    student_name: Optional[str] = Field(
        default=None, alias="studentName", description="Virtual student's name, used as a label only"
    )

    model_config = {
        "populate_by_name": True,
        "json_schema_extra": {
            "examples": [
                {"fullText": "Hi there how are you I am fine thanks", "studentName": "Sam"}
            ]
        },
    }


class SessionLogRequest(BaseModel):
    """A finished session to store."""
    user_id: Optional[str] = Field(default=None, alias="userId", description="Tutor account ID")
    student_id: Optional[str] = Field(default=None, alias="studentId", description="Virtual student ID")
    student_name: Optional[str] = Field(default=None, alias="studentName")
    student_subject: Optional[str] = Field(default=None, alias="studentSubject")
    transcript: Optional[list[dict[str, Any]]] = Field(
        default=None, description="Chat messages as recorded; stored without further checks"
    )
    conversation_length: float = Field(default=0.0, ge=0.0, alias="conversationLength", description="Seconds")
    summary: Optional[str] = Field(default=None, description="Generated session summary")

    model_config = {"populate_by_name": True}

    def missing_fields(self) -> list[str]:
        """Wire names of required fields that were not supplied."""
        missing = []
        if not self.user_id:
            missing.append("userId")
        if not self.student_id:
            missing.append("studentId")
        if self.transcript is None:
            missing.append("transcript")
        return missing
