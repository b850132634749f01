import pytest

from phrasal import ValidationFailure, expect
from phrasal.constants import MISSING
from phrasal.errors import (
    AssertionFailedError,
    FailAssertionError,
    InvalidAssertionError,
    LogicFailure,
    MisuseError,
    PhrasalError,
    UnexpectedAsyncError,
)


def test_message_and_diff_compose_str():
    error = LogicFailure("values differ", actual=1, expected=2, diff="- Expected\n+ Received")
    assert str(error) == "values differ\n\n- Expected\n+ Received"
    assert error.has_diff_values


def test_absent_values_are_missing():
    error = LogicFailure("bad")
    assert error.actual is MISSING
    assert error.expected is MISSING
    assert not error.has_diff_values
    assert "actual" not in error.to_dict()


def test_to_dict_includes_issues():
    with pytest.raises(ValidationFailure) as exc_info:
        expect(42, "to be a string")

    data = exc_info.value.to_dict()
    assert data["kind"] == "validation"
    assert data["name"] == "ValidationFailure"
    assert data["actual"] == 42
    assert data["issues"][0]["kind"] == "invalid_type"


def test_fail_has_default_reason():
    assert FailAssertionError().message == "Failed"


def test_taxonomy():
    assert issubclass(AssertionFailedError, AssertionError)
    assert issubclass(UnexpectedAsyncError, MisuseError)
    assert issubclass(InvalidAssertionError, PhrasalError)
    assert not issubclass(PhrasalError, AssertionError)
    assert UnexpectedAsyncError.code == "ERR_PHRASAL_UNEXPECTED_ASYNC"
