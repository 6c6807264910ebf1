"""Tests for the planner error hierarchy."""

from exceptions import ErrorCode, InvalidResponseError, PlannerError, WeekNotFoundError


def test_to_dict_carries_code_and_details():
    exc = WeekNotFoundError(9)

    assert exc.to_dict() == {
        "error": "WEEK_NOT_FOUND",
        "message": "Week 9 is not part of this cycle",
        "details": {"week_number": 9},
    }


def test_defaults_to_internal_error():
    exc = PlannerError("boom")

    assert exc.code == ErrorCode.INTERNAL_ERROR
    assert exc.details == {}
    assert str(exc) == "boom"


def test_invalid_response_uses_response_code():
    exc = InvalidResponseError("bad json", details={"raw_content": "x"})

    assert exc.to_dict()["error"] == "RESPONSE_INVALID"
    assert exc.details == {"raw_content": "x"}
