"""
Session History

Groups a tutor's stored sessions per virtual student for the dashboard,
and merges one student's sessions into a single conversation history.
"""

from typing import Any, Optional

from tutorsim.models.session import SessionLog, StudentInfo, StudentSessionEntry, StudentSessionSummary


def group_sessions_by_student(logs: list[SessionLog]) -> list[StudentSessionSummary]:
    """Build one summary per student, most recently seen student first.

    Args:
        logs: Session logs of a single tutor, in any order.

    Returns:
        Summaries with per-session entries in the order the logs were given.
    """
    students: dict[str, StudentSessionSummary] = {}

    for log in logs:
        summary = students.get(log.student_id)
        if summary is None:
            summary = StudentSessionSummary(
                student_id=log.student_id,
                student_name=log.student_name,
                student_subject=log.student_subject,
            )
            students[log.student_id] = summary

        session_date = log.created_at or log.ended_at
        summary.total_sessions += 1
        summary.total_duration += log.conversation_length
        summary.sessions.append(StudentSessionEntry(
            session_id=log.log_id,
            timestamp=session_date,
            duration=log.conversation_length,
            message_count=len(log.transcript),
        ))

        if summary.last_session_date is None or session_date > summary.last_session_date:
            summary.last_session_date = session_date
            summary.last_session_summary = log.summary

    return sorted(
        students.values(),
        key=lambda s: s.last_session_date.timestamp() if s.last_session_date else 0.0,
        reverse=True,
    )


def build_conversation_history(logs: list[SessionLog]) -> list[dict[str, Any]]:
    """Merge one student's sessions into a single chronological history.

    Each session contributes a ``session_separator`` entry followed by its
    messages, tagged with the session ID and start time.
    """
    history: list[dict[str, Any]] = []

    for log in sorted(logs, key=lambda log: log.created_at):
        session_date = log.created_at or log.ended_at
        history.append({
            "type": "session_separator",
            "timestamp": session_date,
            "sessionId": log.log_id,
            "duration": log.conversation_length,
        })
        for message in log.transcript:
            history.append({
                **message,
                "sessionId": log.log_id,
                "sessionTimestamp": session_date,
            })

    return history


def student_info_for(logs: list[SessionLog]) -> Optional[StudentInfo]:
    """Student identity as recorded on the earliest session, or None."""
    if not logs:
        return None

    first = min(logs, key=lambda log: log.created_at)
    return StudentInfo(
        student_id=first.student_id,
        student_name=first.student_name,
        student_subject=first.student_subject,
    )
