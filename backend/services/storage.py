"""
Storage Service for Session Logs

Handles all file I/O for finished tutoring sessions.
Uses JSON files on disk - one document per session, keyed by its ID.

Design Decisions:
- Each session log is stored as data/sessions/{log_id}.json
- Documents use the same camelCase field names as the API
- File operations are async-friendly using aiofiles
"""

import json
import re
from pathlib import Path
from typing import Any, Optional

import aiofiles
import aiofiles.os
import structlog

from tutorsim.config.settings import get_settings
from tutorsim.models.session import SessionLog

logger = structlog.get_logger(__name__)

# Base directories
DATA_DIR = get_settings().data_dir
SESSIONS_DIR = DATA_DIR / "sessions"

LOG_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]{1,64}$")


def get_session_path(log_id: str) -> Optional[Path]:
    """Get the path for a session log, or None for an unsafe ID."""
    if not LOG_ID_PATTERN.match(log_id):
        return None
    return SESSIONS_DIR / f"{log_id}.json"


# =============================================================================
# Document Operations
# =============================================================================

async def save_document(path: Path, data: Any) -> None:
    """Save a JSON document."""
    path.parent.mkdir(parents=True, exist_ok=True)

    async with aiofiles.open(path, "w", encoding="utf-8") as f:
        await f.write(json.dumps(data, indent=2, default=str))


async def load_document(path: Path) -> Optional[dict]:
    """Load a JSON document, or None if it does not exist."""
    if not await aiofiles.os.path.exists(path):
        return None

    async with aiofiles.open(path, "r", encoding="utf-8") as f:
        content = await f.read()
        return json.loads(content)


# =============================================================================
# Session Log Operations
# =============================================================================

async def save_session_log(log: SessionLog) -> str:
    """Persist a session log and return its ID."""
    path = get_session_path(log.log_id)
    if path is None:
        raise ValueError(f"Invalid session log ID: {log.log_id}")

    await save_document(path, log.model_dump(by_alias=True, mode="json"))
    logger.info("session_log_saved", log_id=log.log_id, messages=len(log.transcript))
    return log.log_id


async def load_session_log(log_id: str) -> Optional[SessionLog]:
    """Load a session log by ID."""
    path = get_session_path(log_id)
    if path is None:
        return None

    data = await load_document(path)
    if data is None:
        return None
    return SessionLog.model_validate(data)


async def list_session_logs(
    user_id: Optional[str] = None,
    student_id: Optional[str] = None,
) -> list[SessionLog]:
    """List session logs, newest first, optionally filtered by tutor and student."""
    logs: list[SessionLog] = []

    if not SESSIONS_DIR.exists():
        return logs

    for path in SESSIONS_DIR.glob("*.json"):
        data = await load_document(path)
        if data is None:
            continue
        log = SessionLog.model_validate(data)
        if user_id is not None and log.user_id != user_id:
            continue
        if student_id is not None and log.student_id != student_id:
            continue
        logs.append(log)

    logs.sort(key=lambda log: log.created_at, reverse=True)
    return logs


async def count_session_logs(user_id: str, student_id: str) -> int:
    """Count previous sessions between a tutor and a student."""
    return len(await list_session_logs(user_id=user_id, student_id=student_id))
