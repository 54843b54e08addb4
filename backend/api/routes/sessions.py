"""
Session Log Routes

Store finished tutoring sessions, list them per student and replay
a student's full conversation history.
"""

from typing import Optional

from fastapi import APIRouter, HTTPException, Query
from fastapi.responses import JSONResponse

from backend.api.schemas import (
    SessionLogRequest,
    SessionLogResponse,
    StudentHistoryResponse,
    StudentSessionsResponse,
)
from backend.services import storage
from backend.services.session_history import (
    build_conversation_history,
    group_sessions_by_student,
    student_info_for,
)
from tutorsim.models.session import SessionLog

router = APIRouter()


@router.post("/chat/log", response_model=SessionLogResponse)
async def log_session(request: SessionLogRequest):
    """
    Store a finished session.

    The transcript is stored as sent. The conversation count includes
    every earlier session between the same tutor and student, plus this one.
    """
    missing = request.missing_fields()
    if missing:
        return JSONResponse(
            {"error": f"Missing required fields: {', '.join(missing)}"},
            status_code=400,
        )

    previous = await storage.count_session_logs(request.user_id, request.student_id)

    log = SessionLog(
        user_id=request.user_id,
        student_id=request.student_id,
        student_name=request.student_name or "Unknown Student",
        student_subject=request.student_subject or "Unknown Subject",
        transcript=request.transcript,
        conversation_count=previous + 1,
        conversation_length=request.conversation_length,
        summary=request.summary,
    )
    log_id = await storage.save_session_log(log)

    return SessionLogResponse(log_id=log_id, conversation_count=log.conversation_count)


@router.get("/chat/log/{log_id}", response_model=SessionLog)
async def get_session_log(log_id: str) -> SessionLog:
    """Get a stored session log."""
    log = await storage.load_session_log(log_id)
    if log is None:
        raise HTTPException(status_code=404, detail=f"Session log not found: {log_id}")
    return log


@router.get("/students/sessions", response_model=StudentSessionsResponse)
async def list_student_sessions(
    user_id: str = Query(..., alias="userId", min_length=1),
) -> StudentSessionsResponse:
    """
    List a tutor's sessions grouped by student.

    Students are ordered by their most recent session (newest first).
    """
    logs = await storage.list_session_logs(user_id=user_id)
    students = group_sessions_by_student(logs)

    return StudentSessionsResponse(students=students, total_sessions=len(logs))


@router.get("/students/history", response_model=StudentHistoryResponse)
async def get_student_history(
    user_id: str = Query(..., alias="userId", min_length=1),
    student_id: Optional[str] = Query(None, alias="studentId"),
):
    """
    Get every session a tutor has had with one student, oldest first.

    Each session starts with a ``session_separator`` entry; its messages
    follow, tagged with ``sessionId`` and ``sessionTimestamp``.
    """
    if not student_id:
        return JSONResponse({"error": "Student ID is required"}, status_code=400)

    logs = await storage.list_session_logs(user_id=user_id, student_id=student_id)

    return StudentHistoryResponse(
        student_info=student_info_for(logs),
        conversation_history=build_conversation_history(logs),
        total_sessions=len(logs),
    )
