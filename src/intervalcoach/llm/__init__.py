"""Optional LLM enhancement of rule-based decisions."""

from .enhancer import Enhancer, LLMEnhancer, run_with_fallback
from .providers import LLMClient, ModelType, RetryConfig, get_llm_client, reset_llm_client

__all__ = [
    "Enhancer",
    "LLMEnhancer",
    "run_with_fallback",
    "LLMClient",
    "ModelType",
    "RetryConfig",
    "get_llm_client",
    "reset_llm_client",
]
