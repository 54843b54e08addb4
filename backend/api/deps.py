"""
FastAPI dependencies for the transcript engine.
"""

from functools import lru_cache

from tutorsim.llm.client import get_llm_settings
from tutorsim.llm.engine import LLMTransformEngine, TransformEngine


@lru_cache
def _shared_engine() -> LLMTransformEngine:
    return LLMTransformEngine(get_llm_settings())


def get_engine() -> TransformEngine:
    """Engine shared by all requests; override in tests."""
    return _shared_engine()


def close_engine() -> None:
    """Shut down the shared engine if it was ever created."""
    if _shared_engine.cache_info().currsize:
        _shared_engine().close()
        _shared_engine.cache_clear()
