"""
Error payload tests.
"""

from core.error_responses import ErrorCode, error_from_exception, make_error, make_errors
from core.errors import InvalidOddsInput, ScoringInputError


class TestMakeError:

    def test_single_error_format(self):
        payload = make_error(ErrorCode.INVALID_ODDS_INPUT, "bad odds", field="odds", request_id="req-1")
        assert payload["status"] == "error"
        assert payload["error"] == "bad odds"
        assert payload["errors"] == [{"code": "INVALID_ODDS_INPUT", "message": "bad odds", "field": "odds"}]
        assert payload["request_id"] == "req-1"
        assert "timestamp" in payload

    def test_optional_parts_omitted(self):
        payload = make_error(ErrorCode.VALIDATION_ERROR, "nope", include_timestamp=False)
        assert payload == {
            "status": "error",
            "error": "nope",
            "errors": [{"code": "VALIDATION_ERROR", "message": "nope"}],
        }

    def test_timestamp_is_eastern(self):
        timestamp = make_error(ErrorCode.INTERNAL_ERROR, "x")["timestamp"]
        assert timestamp.endswith(("-04:00", "-05:00"))


class TestMakeErrors:

    def test_multiple(self):
        payload = make_errors(
            [
                {"code": ErrorCode.VALIDATION_ERROR, "message": "odds required", "field": "odds"},
                {"code": ErrorCode.VALIDATION_ERROR, "message": "game required"},
            ],
            include_timestamp=False,
        )
        assert payload["error"] == "odds required"
        assert len(payload["errors"]) == 2
        assert "field" not in payload["errors"][1]

    def test_empty(self):
        assert make_errors([], include_timestamp=False) == {"status": "error"}


class TestFromException:

    def test_uses_exception_code_and_field(self):
        exc = InvalidOddsInput("Odds of 0 are not valid American odds", field="odds", value=0)
        payload = error_from_exception(exc, request_id="req-2")
        assert payload["errors"][0] == {
            "code": "INVALID_ODDS_INPUT",
            "message": "Odds of 0 are not valid American odds",
            "field": "odds",
        }
        assert payload["request_id"] == "req-2"

    def test_base_error_code(self):
        payload = error_from_exception(ScoringInputError("no inputs"))
        assert payload["errors"][0]["code"] == ErrorCode.VALIDATION_ERROR
