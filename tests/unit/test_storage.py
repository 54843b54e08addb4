"""Unit tests for session log storage and history grouping."""

import asyncio
from datetime import datetime, timedelta, timezone

import pytest

from backend.services import storage
from backend.services.session_history import (
    build_conversation_history,
    group_sessions_by_student,
    student_info_for,
)
from tutorsim.models import SessionLog


@pytest.fixture
def sessions_dir(tmp_path, monkeypatch):
    path = tmp_path / "sessions"
    monkeypatch.setattr(storage, "SESSIONS_DIR", path)
    return path


def _log(user_id="tutor-1", student_id="student-1", minutes_ago=0, **kwargs) -> SessionLog:
    created = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc) - timedelta(minutes=minutes_ago)
    return SessionLog(
        user_id=user_id,
        student_id=student_id,
        created_at=created,
        ended_at=created,
        transcript=[{"id": "m1", "text": "hello", "isUser": True, "timestamp": created.isoformat()}],
        **kwargs,
    )


class TestSessionStorage:
    """Tests for JSON-on-disk session logs."""

    def test_save_and_load(self, sessions_dir):
        log = _log(student_name="Sam", conversation_length=42)

        log_id = asyncio.run(storage.save_session_log(log))
        loaded = asyncio.run(storage.load_session_log(log_id))

        assert (sessions_dir / f"{log_id}.json").exists()
        assert loaded == log

    def test_load_missing(self, sessions_dir):
        assert asyncio.run(storage.load_session_log("missing")) is None

    @pytest.mark.parametrize("log_id", ["../secrets", "a/b", "", "x" * 100])
    def test_unsafe_ids_rejected(self, sessions_dir, log_id):
        assert storage.get_session_path(log_id) is None
        assert asyncio.run(storage.load_session_log(log_id)) is None

    def test_list_filters_and_orders_newest_first(self, sessions_dir):
        older = _log(minutes_ago=30)
        newer = _log(minutes_ago=5)
        other_student = _log(student_id="student-2")
        other_tutor = _log(user_id="tutor-2")
        for log in (older, newer, other_student, other_tutor):
            asyncio.run(storage.save_session_log(log))

        logs = asyncio.run(storage.list_session_logs(user_id="tutor-1", student_id="student-1"))

        assert [log.log_id for log in logs] == [newer.log_id, older.log_id]
        assert asyncio.run(storage.count_session_logs("tutor-1", "student-1")) == 2
        assert len(asyncio.run(storage.list_session_logs(user_id="tutor-1"))) == 3

    def test_list_without_directory(self, sessions_dir):
        assert asyncio.run(storage.list_session_logs()) == []


class TestGroupSessionsByStudent:
    """Tests for the per-student session summary."""

    def test_groups_and_totals(self):
        logs = [
            _log(minutes_ago=5, conversation_length=60, summary="Worked on fractions"),
            _log(minutes_ago=50, conversation_length=30, summary="Warm-up"),
            _log(student_id="student-2", student_name="Alex", minutes_ago=10),
        ]

        students = group_sessions_by_student(logs)

        assert [s.student_id for s in students] == ["student-1", "student-2"]
        first = students[0]
        assert first.total_sessions == 2
        assert first.total_duration == 90
        assert first.last_session_summary == "Worked on fractions"
        assert [entry.message_count for entry in first.sessions] == [1, 1]

    def test_most_recent_student_first(self):
        logs = [
            _log(student_id="student-1", minutes_ago=60),
            _log(student_id="student-2", minutes_ago=1),
        ]
        assert [s.student_id for s in group_sessions_by_student(logs)] == ["student-2", "student-1"]

    def test_empty(self):
        assert group_sessions_by_student([]) == []


class TestConversationHistory:
    """Tests for merging a student's sessions into one history."""

    def test_sessions_oldest_first_with_separators(self):
        newer = _log(minutes_ago=5, conversation_length=60)
        older = _log(minutes_ago=50, conversation_length=30)
        older.transcript.append({"id": "m2", "text": "hi", "isUser": False})

        history = build_conversation_history([newer, older])

        assert [entry.get("type") for entry in history] == [
            "session_separator", None, None, "session_separator", None,
        ]
        assert history[0]["sessionId"] == older.log_id
        assert history[0]["duration"] == 30
        assert history[3]["sessionId"] == newer.log_id
        assert history[1]["text"] == "hello"
        assert history[1]["sessionId"] == older.log_id
        assert history[1]["sessionTimestamp"] == older.created_at

    def test_messages_kept_as_recorded(self):
        log = _log()
        log.transcript.append({"text": "", "isUser": False, "timestamp": "later", "reaction": "thumbs_up"})

        history = build_conversation_history([log])

        assert history[-1]["text"] == ""
        assert history[-1]["timestamp"] == "later"
        assert history[-1]["reaction"] == "thumbs_up"

    def test_student_info_from_earliest_session(self):
        logs = [
            _log(minutes_ago=5, student_name="Sam B."),
            _log(minutes_ago=50, student_name="Sam", student_subject="Math"),
        ]

        info = student_info_for(logs)

        assert info.student_id == "student-1"
        assert info.student_name == "Sam"
        assert info.student_subject == "Math"

    def test_empty(self):
        assert build_conversation_history([]) == []
        assert student_info_for([]) is None
