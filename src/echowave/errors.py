"""
Error kinds raised by the survey lifecycle.

Every error is scoped to a single operation. A failed call leaves the
survey exactly as it was before the call.
"""

from typing import List, Optional


class SurveyError(Exception):
    """Base class for all lifecycle errors."""
    pass


class ValidationError(SurveyError):
    """
    Raised when input is malformed.

    Carries every problem found, so callers can report them together.
    """

    def __init__(self, message: str, errors: Optional[List[str]] = None):
        super().__init__(message)
        self.errors = list(errors) if errors else [message]


class NotFoundError(SurveyError):
    """Raised when a survey id or share token is unknown."""
    pass


class ClosedSurveyError(SurveyError):
    """Raised when a response is submitted to a closed survey."""
    pass


class ConflictError(SurveyError):
    """Raised on a second write to a write-once field."""
    pass


class PreconditionError(SurveyError):
    """Raised when an action is attempted before its gating condition holds."""
    pass


class AuthError(SurveyError):
    """Raised by credential verifiers when sign-in or sign-up is refused."""
    pass


__all__ = [
    "SurveyError",
    "ValidationError",
    "NotFoundError",
    "ClosedSurveyError",
    "ConflictError",
    "PreconditionError",
    "AuthError",
]
