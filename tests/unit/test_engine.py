"""Unit tests for the LLM-backed transform engine."""

import time
from typing import Any, Optional

import pytest
from langchain_core.language_models.llms import LLM
from langchain_ollama import OllamaLLM

from tutorsim.llm.client import LLMSettings, create_llm_client
from tutorsim.llm.engine import EngineError, EngineTimeoutError, LLMTransformEngine


class ScriptedLLM(LLM):
    """LangChain LLM replaying scripted replies; exceptions are raised."""

    replies: list[Any] = []
    delay: float = 0.0
    received: list[str] = []

    @property
    def _llm_type(self) -> str:
        return "scripted"

    def _call(self, prompt: str, stop: Optional[list[str]] = None, run_manager=None, **kwargs: Any) -> str:
        self.received.append(prompt)
        if self.delay:
            time.sleep(self.delay)
        reply = self.replies[min(len(self.received) - 1, len(self.replies) - 1)]
        if isinstance(reply, Exception):
            raise reply
        return reply


def _engine(*replies, delay: float = 0.0, **settings) -> tuple[LLMTransformEngine, ScriptedLLM]:
    llm = ScriptedLLM(replies=list(replies), delay=delay)
    engine = LLMTransformEngine(LLMSettings(retry_delay_seconds=0, **settings), llm=llm)
    return engine, llm


class TestLLMTransformEngine:
    """Tests for the engine wrapper around a LangChain LLM."""

    def test_returns_llm_text(self):
        engine, _ = _engine('[{"text": "Hi", "isUser": true}]')
        assert engine.transform("split this") == '[{"text": "Hi", "isUser": true}]'

    def test_sends_system_and_instruction(self):
        engine, llm = _engine("[]")
        engine.transform("split this", system_prompt="You are an expert at refinement")

        assert "You are an expert at refinement" in llm.received[0]
        assert "split this" in llm.received[0]

    def test_braces_in_prompt_are_not_template_variables(self):
        engine, llm = _engine("[]")
        engine.transform('Current transcript:\n[{"text": "{x}", "isUser": true}]')

        assert '{"text": "{x}", "isUser": true}' in llm.received[0]

    def test_empty_reply_is_an_error(self):
        engine, _ = _engine("   ")
        with pytest.raises(EngineError):
            engine.transform("split this")

    def test_llm_failure_is_wrapped(self):
        engine, _ = _engine(ConnectionError("connection refused"))
        with pytest.raises(EngineError, match="connection refused"):
            engine.transform("split this")

    def test_slow_call_times_out(self):
        engine, _ = _engine("[]", delay=0.5, engine_timeout_seconds=0.05)
        with pytest.raises(EngineTimeoutError):
            engine.transform("split this")
        engine.close()

    def test_single_attempt_by_default(self):
        engine, llm = _engine(ConnectionError("down"), "[]")
        with pytest.raises(EngineError):
            engine.transform("split this")
        assert len(llm.received) == 1

    def test_retries_transport_errors_when_configured(self):
        engine, llm = _engine(ConnectionError("down"), "[]", max_attempts=2)
        assert engine.transform("split this") == "[]"
        assert len(llm.received) == 2


class TestCreateLLMClient:
    """Tests for Ollama client construction."""

    def test_uses_settings(self):
        settings = LLMSettings(
            model_name="test-model",
            ollama_base_url="http://ollama.test:11434",
            temperature=0.2,
            num_predict=2000,
        )
        client = create_llm_client(settings)

        assert isinstance(client, OllamaLLM)
        assert client.model == "test-model"
        assert client.temperature == 0.2
        assert client.num_predict == 2000

    def test_default_settings_favor_consistency(self):
        settings = LLMSettings()
        assert settings.temperature <= 0.2
        assert settings.num_predict == 2000
        assert settings.max_attempts == 1
