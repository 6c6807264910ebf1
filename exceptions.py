"""
Exceptions raised by the studio cycle planner.

Every error carries a human-readable message, an ErrorCode and an optional
details dict, so the Streamlit app and the CLI can report failures the same
way.
"""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorCode(str, Enum):
    """Error codes shared by the app surfaces."""

    INTERNAL_ERROR = "INTERNAL_ERROR"

    API_KEY_MISSING = "API_KEY_MISSING"
    GENERATION_FAILED = "GENERATION_FAILED"
    RESPONSE_INVALID = "RESPONSE_INVALID"

    STUDIO_NOT_FOUND = "STUDIO_NOT_FOUND"
    NO_STUDIOS = "NO_STUDIOS"
    WEEK_NOT_FOUND = "WEEK_NOT_FOUND"
    NO_ACTIVE_CYCLE = "NO_ACTIVE_CYCLE"
    CYCLE_INVALID = "CYCLE_INVALID"

    IMAGE_LOAD_FAILED = "IMAGE_LOAD_FAILED"


class PlannerError(Exception):
    """
    Base exception for all planner errors.

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
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": self.code.value,
            "message": self.message,
            "details": self.details,
        }


class MissingApiKeyError(PlannerError):
    def __init__(self, message: str = "API Key is missing") -> None:
        super().__init__(message, code=ErrorCode.API_KEY_MISSING)


class GenerationError(PlannerError):
    """The content service failed or returned nothing usable."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.GENERATION_FAILED,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, code=code, details=details)


class InvalidResponseError(GenerationError):
    """The content service answered, but not with schema-conforming JSON."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message, code=ErrorCode.RESPONSE_INVALID, details=details)


class StudioNotFoundError(PlannerError):
    def __init__(self, studio_id: str) -> None:
        super().__init__(
            f"Studio '{studio_id}' not found",
            code=ErrorCode.STUDIO_NOT_FOUND,
            details={"studio_id": studio_id},
        )


class NoStudiosError(PlannerError):
    def __init__(self, message: str = "Add at least one studio first") -> None:
        super().__init__(message, code=ErrorCode.NO_STUDIOS)


class WeekNotFoundError(PlannerError):
    def __init__(self, week_number: int) -> None:
        super().__init__(
            f"Week {week_number} is not part of this cycle",
            code=ErrorCode.WEEK_NOT_FOUND,
            details={"week_number": week_number},
        )


class NoActiveCycleError(PlannerError):
    def __init__(self, message: str = "No active cycle") -> None:
        super().__init__(message, code=ErrorCode.NO_ACTIVE_CYCLE)


class InvalidCycleError(PlannerError):
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message, code=ErrorCode.CYCLE_INVALID, details=details)


class ImageLoadError(PlannerError):
    def __init__(self, source: str, reason: str) -> None:
        super().__init__(
            f"Could not load image from {source}: {reason}",
            code=ErrorCode.IMAGE_LOAD_FAILED,
            details={"source": source},
        )
