"""API routes package."""

from . import sessions
from . import transcript

__all__ = ["sessions", "transcript"]
