"""
Optional enhancement of rule-based decisions.

Every decision (recovery status, training gap, phase) has a deterministic
rule that is always available. An Enhancer may propose a replacement with
the same fields; a well-formed proposal replaces the rule output, anything
else (exception, None, schema mismatch) is logged and the rule is used.
"""

import json
import logging
from typing import Any, Callable, Dict, Optional, Protocol, Tuple, Type, TypeVar

from pydantic import BaseModel, ValidationError

from ..exceptions import EnhancementError
from .prompts import ENHANCEMENT_SYSTEM, DECISION_PROMPTS
from .providers import LLMClient, ModelType, get_llm_client


logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)
R = TypeVar("R")


class Enhancer(Protocol):
    """Source of optional structured assessments."""

    def assess(self, decision: str, context: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Return a structured assessment for the decision, or None to decline."""
        ...


def run_with_fallback(
    decision: str,
    enhancer: Optional[Enhancer],
    context: Dict[str, Any],
    schema: Type[M],
    fallback: Callable[[], R],
    apply: Callable[[M], R],
) -> Tuple[R, bool]:
    """
    Try the enhancer, fall back to the deterministic rule on any failure.

    Args:
        decision: Decision name ('recovery', 'training_gap', 'phase')
        enhancer: Enhancer or None when disabled
        context: Inputs passed to the enhancer
        schema: Pydantic model the enhancement must satisfy
        fallback: Builds the rule-based result
        apply: Converts a validated enhancement into the result type

    Returns:
        Tuple of (result, enhanced flag)
    """
    if enhancer is None:
        return fallback(), False

    try:
        raw = enhancer.assess(decision, context)
        if raw is None:
            logger.info(f"Enhancement declined for {decision}; using rule")
            return fallback(), False
        if not isinstance(raw, dict):
            raise EnhancementError(
                f"Expected an object, got {type(raw).__name__}", decision=decision
            )
        return apply(schema.model_validate(raw)), True
    except ValidationError as e:
        logger.warning(f"Malformed {decision} enhancement ({e.error_count()} errors); using rule")
    except Exception as e:
        logger.warning(f"Enhancement for {decision} failed: {e}; using rule")

    return fallback(), False


class LLMEnhancer:
    """Enhancer backed by an LLM in JSON mode."""

    def __init__(
        self,
        client: Optional[LLMClient] = None,
        model: ModelType = ModelType.FAST,
        max_tokens: int = 600,
    ) -> None:
        self._client = client
        self.model = model
        self.max_tokens = max_tokens

    @property
    def client(self) -> LLMClient:
        if self._client is None:
            self._client = get_llm_client()
        return self._client

    def assess(self, decision: str, context: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """
        Ask the LLM for a structured assessment.

        Raises:
            EnhancementError: For decisions without a prompt
            LLMError: On client failure (caught by run_with_fallback)
        """
        template = DECISION_PROMPTS.get(decision)
        if template is None:
            raise EnhancementError(f"No prompt for decision '{decision}'", decision=decision)

        user_prompt = template.format(context=json.dumps(context, indent=2, default=str))
        return self.client.completion_json(
            system=ENHANCEMENT_SYSTEM,
            user=user_prompt,
            model=self.model,
            max_tokens=self.max_tokens,
            temperature=0.2,
        )
