"""
ERRORS.PY - Typed validation errors for the scoring engine

Every scoring entry point validates its inputs before computing anything.
Invalid inputs raise one of the errors below; nothing is silently defaulted.

Usage:
    from core.errors import InvalidFactorInput, ScoringInputError

    try:
        grade = grade_composite(factors)
    except ScoringInputError as e:
        return JSONResponse(status_code=400, content=make_error(e.code, str(e), field=e.field))
"""

from typing import Any, Optional


class ScoringInputError(ValueError):
    """Base class for rejected scoring inputs."""

    code = "VALIDATION_ERROR"

    def __init__(self, message: str, field: Optional[str] = None, value: Any = None):
        super().__init__(message)
        self.field = field
        self.value = value


class InvalidFactorInput(ScoringInputError):
    """A factor score is missing, non-numeric, non-finite or out of range."""

    code = "INVALID_FACTOR_INPUT"


class InvalidOddsInput(ScoringInputError):
    """American odds of zero, non-numeric or non-finite."""

    code = "INVALID_ODDS_INPUT"


class InvalidProbabilityInput(ScoringInputError):
    """Probability (model or confidence) outside [0, 1] or non-finite."""

    code = "INVALID_PROBABILITY_INPUT"
