"""
LLM client used by the decision enhancer.

Provides:
- Model selection for different task complexities
- Automatic retry with exponential backoff
- Rate limit handling
- Mapping of OpenAI errors to engine exceptions
"""

from enum import Enum
from typing import Any, Callable, Dict, Optional, TypeVar
import json
import logging
import os
import threading
import time

from openai import OpenAI, APIError, APIConnectionError, APITimeoutError, RateLimitError

from ..config import get_settings
from ..exceptions import (
    LLMError,
    LLMRateLimitError,
    LLMResponseInvalidError,
    LLMServiceUnavailableError,
    LLMTimeoutError,
)


logger = logging.getLogger(__name__)

T = TypeVar("T")


class ModelType(Enum):
    """Model types for different task complexities."""

    FAST = "fast"
    SMART = "smart"


class RetryConfig:
    """Configuration for retry behavior."""

    def __init__(
        self,
        max_retries: int = 2,
        base_delay: float = 1.0,
        max_delay: float = 10.0,
        exponential_base: float = 2.0,
        retryable_status_codes: Optional[set[int]] = None,
    ) -> None:
        self.max_retries = max_retries
        self.base_delay = base_delay
        self.max_delay = max_delay
        self.exponential_base = exponential_base
        self.retryable_status_codes = retryable_status_codes or {429, 500, 502, 503, 504}

    def get_delay(self, attempt: int) -> float:
        """Calculate delay for a given attempt number."""
        delay = self.base_delay * (self.exponential_base ** attempt)
        return min(delay, self.max_delay)


class LLMClient:
    """
    Synchronous LLM client with model routing and retry logic.

    The decision engine runs once per day in a single thread, so blocking
    calls with a short timeout are sufficient.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        retry_config: Optional[RetryConfig] = None,
        client: Optional[OpenAI] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """
        Initialize the LLM client.

        Args:
            api_key: OpenAI API key (defaults to settings or OPENAI_API_KEY)
            retry_config: Configuration for retry behavior
            client: Preconfigured OpenAI client (used in tests)
            sleep: Sleep function between retries
        """
        settings = get_settings()
        self.timeout = settings.llm_timeout_seconds

        if client is None:
            api_key = api_key or settings.openai_api_key or os.environ.get("OPENAI_API_KEY")
            if not api_key:
                raise LLMServiceUnavailableError(
                    message="OPENAI_API_KEY not configured",
                    details={"configuration_missing": "openai_api_key"},
                )
            client = OpenAI(api_key=api_key)

        self.client = client
        self.model_map = {
            ModelType.FAST: settings.llm_model_fast,
            ModelType.SMART: settings.llm_model_smart,
        }
        self.retry_config = retry_config or RetryConfig()
        self._sleep = sleep

    def _get_model(self, model_type: ModelType) -> str:
        """Get the model ID for a model type."""
        return self.model_map.get(model_type, self.model_map[ModelType.SMART])

    def _execute_with_retry(
        self,
        operation: Callable[[], T],
        operation_name: str = "LLM request",
    ) -> T:
        """
        Execute an operation with retry logic.

        Raises:
            LLMError: On unrecoverable failure
        """
        last_exception: Optional[Exception] = None

        for attempt in range(self.retry_config.max_retries + 1):
            try:
                return operation()

            except LLMError:
                raise

            except RateLimitError as e:
                last_exception = e
                if attempt < self.retry_config.max_retries:
                    delay = self.retry_config.get_delay(attempt)
                    logger.warning(
                        f"{operation_name} rate limited. "
                        f"Retry {attempt + 1}/{self.retry_config.max_retries} in {delay:.1f}s"
                    )
                    self._sleep(delay)
                else:
                    raise LLMRateLimitError()

            except APITimeoutError:
                raise LLMTimeoutError(timeout_seconds=self.timeout)

            except APIConnectionError as e:
                last_exception = e
                if attempt < self.retry_config.max_retries:
                    delay = self.retry_config.get_delay(attempt)
                    logger.warning(
                        f"{operation_name} connection error. "
                        f"Retry {attempt + 1}/{self.retry_config.max_retries} in {delay:.1f}s: {e}"
                    )
                    self._sleep(delay)
                else:
                    raise LLMServiceUnavailableError(
                        message=f"Connection to LLM service failed: {e}",
                    )

            except APIError as e:
                last_exception = e
                status = getattr(e, "status_code", 500)
                if status in self.retry_config.retryable_status_codes and attempt < self.retry_config.max_retries:
                    delay = self.retry_config.get_delay(attempt)
                    logger.warning(
                        f"{operation_name} API error (status {status}). "
                        f"Retry {attempt + 1}/{self.retry_config.max_retries} in {delay:.1f}s"
                    )
                    self._sleep(delay)
                else:
                    raise LLMError(
                        message=f"LLM API error: {e}",
                        details={"status_code": status},
                    )

        raise LLMError(message=f"Operation failed after all retries: {last_exception}")

    def completion_json(
        self,
        system: str,
        user: str,
        model: ModelType = ModelType.FAST,
        max_tokens: int = 600,
        temperature: float = 0.2,
    ) -> Dict[str, Any]:
        """
        Get a JSON completion from the LLM using JSON mode.

        Returns:
            The parsed JSON response as a dictionary

        Raises:
            LLMError: On failure
            LLMResponseInvalidError: If response is not a JSON object
        """
        def _make_request() -> Dict[str, Any]:
            response = self.client.chat.completions.create(
                model=self._get_model(model),
                messages=[
                    {"role": "system", "content": system},
                    {"role": "user", "content": user},
                ],
                max_tokens=max_tokens,
                temperature=temperature,
                response_format={"type": "json_object"},
                timeout=self.timeout,
            )
            content = response.choices[0].message.content
            if content is None:
                raise LLMResponseInvalidError(message="Empty response from LLM")
            try:
                parsed = json.loads(content)
            except json.JSONDecodeError as e:
                raise LLMResponseInvalidError(
                    message=f"Invalid JSON response from LLM: {e}",
                    raw_response=content,
                )
            if not isinstance(parsed, dict):
                raise LLMResponseInvalidError(
                    message="LLM response is not a JSON object",
                    raw_response=content,
                )
            return parsed

        return self._execute_with_retry(_make_request, "completion_json")


# Singleton instance with thread-safe locking
_llm_client: Optional[LLMClient] = None
_llm_client_lock = threading.Lock()


def get_llm_client() -> LLMClient:
    """Get the LLM client singleton (thread-safe)."""
    global _llm_client
    if _llm_client is None:
        with _llm_client_lock:
            if _llm_client is None:
                _llm_client = LLMClient()
    return _llm_client


def reset_llm_client() -> None:
    """Reset the LLM client singleton (for testing)."""
    global _llm_client
    with _llm_client_lock:
        _llm_client = None
