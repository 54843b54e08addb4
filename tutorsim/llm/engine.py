"""Text-transformation engine used by the refinement passes.

The pipeline only relies on ``transform(prompt, system_prompt=...) -> str``.
Output is free text that *should* be a JSON array; nothing about its shape,
determinism or latency is trusted here.
"""

from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from typing import Optional, Protocol

import structlog
from langchain_core.language_models import BaseLanguageModel
from langchain_core.output_parsers import StrOutputParser
from langchain_core.prompts import ChatPromptTemplate
from tenacity import Retrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from tutorsim.llm.client import LLMSettings, create_llm_client, get_llm_settings

logger = structlog.get_logger(__name__)

DEFAULT_SYSTEM_PROMPT = "Always return valid JSON."


class EngineError(Exception):
    """Engine call failed (transport error, empty reply, ...)."""

    pass


class EngineTimeoutError(EngineError):
    """Engine call exceeded its time budget."""

    pass


class TransformEngine(Protocol):
    """Black-box text transformation."""

    def transform(self, prompt: str, system_prompt: Optional[str] = None) -> str:
        ...


class LLMTransformEngine:
    """LangChain-backed engine with a bounded call duration.

    Args:
        settings: LLM configuration. Uses environment defaults if omitted.
        llm: Optional pre-built language model (any LangChain runnable LLM).
            Built from ``settings`` when omitted.
    """

    def __init__(
        self,
        settings: Optional[LLMSettings] = None,
        llm: Optional[BaseLanguageModel] = None,
        max_workers: int = 4,
    ) -> None:
        self.settings = settings or get_llm_settings()
        self.llm = llm if llm is not None else create_llm_client(self.settings)
        self._prompt = ChatPromptTemplate.from_messages([
            ("system", "{system_prompt}"),
            ("human", "{prompt}"),
        ])
        self._chain = self._prompt | self.llm | StrOutputParser()
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="llm-engine")

    @property
    def model_name(self) -> str:
        return self.settings.model_name

    def transform(self, prompt: str, system_prompt: Optional[str] = None) -> str:
        """Run one prompt through the LLM.

        Raises:
            EngineTimeoutError: If the call exceeds ``engine_timeout_seconds``.
            EngineError: If the call fails for any other reason.
        """
        variables = {
            "system_prompt": system_prompt or DEFAULT_SYSTEM_PROMPT,
            "prompt": prompt,
        }

        retrying = Retrying(
            stop=stop_after_attempt(self.settings.max_attempts),
            wait=wait_exponential(multiplier=self.settings.retry_delay_seconds, max=30),
            retry=retry_if_exception_type(EngineError),
            reraise=True,
        )
        for attempt in retrying:
            with attempt:
                return self._invoke_once(variables, attempt.retry_state.attempt_number)

        raise EngineError("No engine attempt was made")

    def _invoke_once(self, variables: dict, attempt_number: int) -> str:
        timeout = self.settings.engine_timeout_seconds
        logger.debug(
            "engine_call_start",
            model=self.model_name,
            attempt=attempt_number,
            prompt_length=len(variables["prompt"]),
        )

        future = self._executor.submit(self._chain.invoke, variables)
        try:
            response = future.result(timeout=timeout)
        except FutureTimeoutError as e:
            future.cancel()
            logger.warning("engine_call_timeout", model=self.model_name, timeout_seconds=timeout)
            raise EngineTimeoutError(f"Engine call exceeded {timeout}s") from e
        except Exception as e:
            logger.warning("engine_call_failed", model=self.model_name, error=str(e))
            raise EngineError(f"Engine call failed: {e}") from e

        if not response or not response.strip():
            logger.warning("engine_empty_response", model=self.model_name)
            raise EngineError("Empty response from LLM")

        logger.debug("engine_call_complete", model=self.model_name, response_length=len(response))
        return response

    def close(self) -> None:
        self._executor.shutdown(wait=False, cancel_futures=True)
