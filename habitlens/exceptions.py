"""
Exception classes for HabitLens.

Analyzers never raise on missing or malformed input; these are raised only
by strict validation helpers and used internally to report a habit whose
insight bundle failed.
"""

from typing import Optional


class InsightError(Exception):
    """Base exception for HabitLens errors."""

    def __init__(
        self,
        message: str,
        error_code: str = "INSIGHT_ERROR",
        details: Optional[dict] = None,
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict:
        """Convert exception to a serializable error payload."""
        return {
            "success": False,
            "error": self.message,
            "error_code": self.error_code,
            **({"details": self.details} if self.details else {}),
        }


class MalformedInputError(InsightError):
    """Raised by strict validation when an entry or habit record is unusable."""

    def __init__(self, message: str, field: Optional[str] = None, details: Optional[dict] = None):
        full_details = details or {}
        if field:
            full_details["field"] = field
        self.field = field
        super().__init__(
            message=message,
            error_code="MALFORMED_INPUT",
            details=full_details,
        )


class HabitAnalysisError(InsightError):
    """Wraps an unexpected failure inside one habit's insight bundle."""

    def __init__(self, habit_id: str, cause: Exception):
        self.habit_id = habit_id
        self.cause = cause
        super().__init__(
            message=f"Insight analysis failed for habit {habit_id}: {cause}",
            error_code="HABIT_ANALYSIS_FAILED",
            details={"habit_id": habit_id, "cause": type(cause).__name__},
        )
