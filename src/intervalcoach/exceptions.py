"""
Custom exceptions for the IntervalCoach decision engine.

Engine entry points never raise for missing or insufficient data; they
return "unavailable" sentinels instead. These exceptions cover the layers
around the engine: the optional LLM enhancement client, persistence, and
callers that prefer to raise on insufficient data themselves.
"""

from typing import Any, Dict, Optional
from enum import Enum


class ErrorCode(str, Enum):
    """Error codes for consistent error reporting."""

    # General errors
    INTERNAL_ERROR = "INTERNAL_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"

    # Data errors
    INSUFFICIENT_DATA = "INSUFFICIENT_DATA"
    DATABASE_ERROR = "DATABASE_ERROR"

    # Enhancement / LLM errors
    ENHANCEMENT_FAILED = "ENHANCEMENT_FAILED"
    LLM_SERVICE_UNAVAILABLE = "LLM_SERVICE_UNAVAILABLE"
    LLM_RATE_LIMITED = "LLM_RATE_LIMITED"
    LLM_RESPONSE_INVALID = "LLM_RESPONSE_INVALID"
    LLM_TIMEOUT = "LLM_TIMEOUT"
    LLM_API_ERROR = "LLM_API_ERROR"


class IntervalCoachError(Exception):
    """
    Base exception for all IntervalCoach errors.

    Attributes:
        message: Human-readable error message
        code: Error code from ErrorCode enum
        details: Optional dictionary with additional error details
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logs and reports."""
        result: Dict[str, Any] = {
            "error": {
                "code": self.code.value,
                "message": self.message,
            }
        }
        if self.details:
            result["error"]["details"] = self.details
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code.value}, message={self.message!r})"


# ============================================================================
# Data Errors
# ============================================================================

class InsufficientDataError(IntervalCoachError):
    """Raised when fewer samples exist than a calculation requires."""

    def __init__(
        self,
        metric: str,
        required: int,
        available: int,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        error_details = details or {}
        error_details.update({
            "metric": metric,
            "required": required,
            "available": available,
        })
        super().__init__(
            message=f"Insufficient data for {metric}: need {required}, have {available}",
            code=ErrorCode.INSUFFICIENT_DATA,
            details=error_details,
        )


class BaselineStorageError(IntervalCoachError):
    """Raised when the baseline snapshot cannot be read or written."""

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCode.DATABASE_ERROR,
            details=details,
        )


class InputDataError(IntervalCoachError):
    """Raised when a data source payload cannot be parsed."""

    def __init__(
        self,
        message: str,
        source: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        error_details = details or {}
        if source:
            error_details["source"] = source
        super().__init__(
            message=message,
            code=ErrorCode.VALIDATION_ERROR,
            details=error_details,
        )


# ============================================================================
# Enhancement Errors
# ============================================================================

class EnhancementError(IntervalCoachError):
    """Raised when an enhancement result cannot be used."""

    def __init__(
        self,
        message: str,
        decision: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        error_details = details or {}
        if decision:
            error_details["decision"] = decision
        super().__init__(
            message=message,
            code=ErrorCode.ENHANCEMENT_FAILED,
            details=error_details,
        )


class LLMError(IntervalCoachError):
    """Base class for LLM-related errors."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.LLM_API_ERROR,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message=message, code=code, details=details)


class LLMServiceUnavailableError(LLMError):
    """Raised when the LLM service is unavailable or not configured."""

    def __init__(
        self,
        message: str = "LLM service is currently unavailable",
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCode.LLM_SERVICE_UNAVAILABLE,
            details=details,
        )


class LLMRateLimitError(LLMError):
    """Raised when LLM rate limits are hit."""

    def __init__(
        self,
        retry_after: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        error_details = details or {}
        if retry_after:
            error_details["retry_after_seconds"] = retry_after
        super().__init__(
            message="LLM service rate limit exceeded",
            code=ErrorCode.LLM_RATE_LIMITED,
            details=error_details,
        )


class LLMTimeoutError(LLMError):
    """Raised when an LLM request times out."""

    def __init__(
        self,
        timeout_seconds: Optional[float] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        error_details = details or {}
        if timeout_seconds:
            error_details["timeout_seconds"] = timeout_seconds
        super().__init__(
            message="LLM request timed out",
            code=ErrorCode.LLM_TIMEOUT,
            details=error_details,
        )


class LLMResponseInvalidError(LLMError):
    """Raised when an LLM response cannot be parsed."""

    def __init__(
        self,
        message: str = "Failed to parse LLM response",
        raw_response: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        error_details = details or {}
        if raw_response:
            error_details["raw_response_preview"] = raw_response[:500]
        super().__init__(
            message=message,
            code=ErrorCode.LLM_RESPONSE_INVALID,
            details=error_details,
        )
