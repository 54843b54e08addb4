"""Ollama LLM client configuration."""

from functools import lru_cache

from langchain_ollama import OllamaLLM
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class LLMSettings(BaseSettings):
    """LLM configuration settings."""

    model_config = SettingsConfigDict(
        env_prefix="LLM_",
        env_file=".env",
        extra="ignore",
    )

    ollama_base_url: str = "http://localhost:11434"
    model_name: str = "llama3.1:8b"
    temperature: float = 0.2  # Low randomness: consistent splits over creative rewrites
    request_timeout: int = 120
    num_ctx: int = 8192
    num_predict: int = 2000  # Max tokens to generate

    # Bound on one transform call, enforced around the client
    engine_timeout_seconds: float = Field(default=60.0, gt=0)
    # Attempts per call on transport errors; 1 keeps the three-call cost fixed
    max_attempts: int = Field(default=1, ge=1, le=5)
    retry_delay_seconds: float = Field(default=2.0, ge=0)


@lru_cache
def get_llm_settings() -> LLMSettings:
    """Get cached LLM settings."""
    return LLMSettings()


def create_llm_client(settings: LLMSettings | None = None) -> OllamaLLM:
    """Create configured Ollama LLM client.

    Args:
        settings: Optional custom settings. Uses defaults if not provided.

    Returns:
        Configured OllamaLLM instance.
    """
    settings = settings or get_llm_settings()

    return OllamaLLM(
        model=settings.model_name,
        base_url=settings.ollama_base_url,
        temperature=settings.temperature,
        num_ctx=settings.num_ctx,
        num_predict=settings.num_predict,
        client_kwargs={"timeout": settings.request_timeout},
    )
