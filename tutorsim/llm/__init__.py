"""LLM client and engine configurations."""

from .client import LLMSettings, create_llm_client, get_llm_settings
from .engine import EngineError, EngineTimeoutError, LLMTransformEngine, TransformEngine

__all__ = [
    "LLMSettings",
    "create_llm_client",
    "get_llm_settings",
    "EngineError",
    "EngineTimeoutError",
    "LLMTransformEngine",
    "TransformEngine",
]
