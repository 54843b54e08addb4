"""Pytest configuration and fixtures."""

import json
from typing import Callable, Optional, Union

import pytest


Response = Union[str, Exception, Callable[[str], str]]


class ScriptedEngine:
    """Engine double that replays scripted replies and records every call.

    Each reply is a string, an exception instance (raised), or a callable
    receiving the prompt. The last reply repeats once the script runs out.
    """

    def __init__(self, responses: list[Response]):
        self.responses = list(responses)
        self.calls: list[dict] = []
        self.closed = False

    @property
    def prompts(self) -> list[str]:
        return [call["prompt"] for call in self.calls]

    def transform(self, prompt: str, system_prompt: Optional[str] = None) -> str:
        self.calls.append({"prompt": prompt, "system_prompt": system_prompt})
        index = min(len(self.calls) - 1, len(self.responses) - 1)
        response = self.responses[index]
        if isinstance(response, Exception):
            raise response
        if callable(response):
            return response(prompt)
        return response

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def scripted_engine() -> Callable[..., ScriptedEngine]:
    """Factory for scripted engines: ``scripted_engine(reply1, reply2, ...)``."""
    def _make(*responses: Response) -> ScriptedEngine:
        return ScriptedEngine(list(responses))
    return _make


@pytest.fixture
def greeting_text() -> str:
    """Short raw transcript with one tutor turn and one student turn."""
    return "Hi there how are you I am fine thanks"


@pytest.fixture
def greeting_split_json() -> str:
    """Correct two-utterance split of ``greeting_text``."""
    return json.dumps([
        {
            "id": "msg_1",
            "text": "Hi there how are you",
            "isUser": True,
            "timestamp": "2024-05-01T10:00:00Z",
        },
        {
            "id": "msg_2",
            "text": "I am fine thanks",
            "isUser": False,
            "timestamp": "2024-05-01T10:00:05Z",
        },
    ])


@pytest.fixture
def sample_session_text() -> str:
    """Longer raw tutoring session as captured from the video call."""
    return (
        "Okay Sam today we are going to look at fractions can you tell me what "
        "one half plus one quarter is um I think it is two sixths "
        "good try but let's draw it out first what does one half look like "
        "it's like half a pizza right exactly and a quarter is half of that half "
        "oh so together it's three quarters yes well done"
    )
