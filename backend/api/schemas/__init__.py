"""API schemas package."""

from .requests import ProcessTranscriptRequest, SessionLogRequest
from .responses import (
    ProcessTranscriptResponse,
    SessionLogResponse,
    StudentHistoryResponse,
    StudentSessionsResponse,
)

__all__ = [
    # Requests
    "ProcessTranscriptRequest",
    "SessionLogRequest",
    # Responses
    "ProcessTranscriptResponse",
    "SessionLogResponse",
    "StudentHistoryResponse",
    "StudentSessionsResponse",
]
