"""
ERROR_RESPONSES.PY - Standardized Error Response Utilities

Consistent error payloads for every grading endpoint.

Usage:
    from core.error_responses import make_error, error_from_exception, ErrorCode

    return JSONResponse(
        status_code=400,
        content=make_error(
            code=ErrorCode.INVALID_ODDS_INPUT,
            message="Odds of 0 are not valid American odds",
            field="odds"
        )
    )

Response Format:
    {
        "status": "error",
        "error": "Odds of 0 are not valid American odds",   # Legacy single error
        "errors": [
            {
                "code": "INVALID_ODDS_INPUT",
                "message": "Odds of 0 are not valid American odds",
                "field": "odds"
            }
        ],
        "request_id": "req-3f2a9c1d7b4e",
        "timestamp": "2026-10-19T13:00:00-04:00"
    }
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional
from zoneinfo import ZoneInfo

from core.errors import ScoringInputError

ET = ZoneInfo("America/New_York")


@dataclass
class ErrorDetail:
    """Single error detail."""
    code: str
    message: str
    field: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        result = {"code": self.code, "message": self.message}
        if self.field is not None:
            result["field"] = self.field
        return result


@dataclass
class ErrorResponse:
    """Standardized error response."""
    status: str = "error"
    error: Optional[str] = None
    errors: List[ErrorDetail] = field(default_factory=list)
    request_id: Optional[str] = None
    timestamp: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"status": self.status}

        if self.error is not None:
            result["error"] = self.error
        if self.errors:
            result["errors"] = [e.to_dict() for e in self.errors]
        if self.request_id is not None:
            result["request_id"] = self.request_id
        if self.timestamp is not None:
            result["timestamp"] = self.timestamp

        return result


class ErrorCode:
    """Standard error codes for consistent API responses."""

    # Scoring input validation
    INVALID_FACTOR_INPUT = "INVALID_FACTOR_INPUT"
    INVALID_ODDS_INPUT = "INVALID_ODDS_INPUT"
    INVALID_PROBABILITY_INPUT = "INVALID_PROBABILITY_INPUT"
    VALIDATION_ERROR = "VALIDATION_ERROR"

    # Rate limiting
    QUOTA_EXCEEDED = "QUOTA_EXCEEDED"

    # Internal
    INTERNAL_ERROR = "INTERNAL_ERROR"


def now_et_iso() -> str:
    return datetime.now(ET).isoformat(timespec="seconds")


def make_error(
    code: str,
    message: str,
    field: Optional[str] = None,
    request_id: Optional[str] = None,
    include_timestamp: bool = True,
) -> Dict[str, Any]:
    """
    Create standardized error response dict.

    Args:
        code: Error code from ErrorCode class
        message: Human-readable error message
        field: Optional field name that caused the error
        request_id: Optional request correlation ID
        include_timestamp: Whether to include timestamp (default True)
    """
    response = ErrorResponse(
        error=message,
        errors=[ErrorDetail(code=code, message=message, field=field)],
        request_id=request_id,
        timestamp=now_et_iso() if include_timestamp else None,
    )
    return response.to_dict()


def make_errors(
    errors: List[Dict[str, Any]],
    request_id: Optional[str] = None,
    include_timestamp: bool = True,
) -> Dict[str, Any]:
    """
    Create error response with multiple errors.

    Args:
        errors: List of error dicts with 'code', 'message', and optional 'field'
    """
    details = [ErrorDetail(code=e["code"], message=e["message"], field=e.get("field")) for e in errors]

    response = ErrorResponse(
        error=errors[0]["message"] if errors else None,
        errors=details,
        request_id=request_id,
        timestamp=now_et_iso() if include_timestamp else None,
    )
    return response.to_dict()


def error_from_exception(exc: ScoringInputError, request_id: Optional[str] = None) -> Dict[str, Any]:
    """Error payload for a rejected scoring input."""
    return make_error(code=exc.code, message=str(exc), field=exc.field, request_id=request_id)
