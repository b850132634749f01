"""Interpretation of implementation return values."""

from __future__ import annotations

import reprlib
from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, ValidationError

from phrasal.constants import MISSING
from phrasal.diff import extract_diff_values, generate_diff
from phrasal.errors import (
    AssertionFailedError,
    InvalidAssertionError,
    InvalidReturnError,
    LogicFailure,
    UnexpectedAsyncError,
    ValidationFailure,
)
from phrasal.validators.base import Issue, ValidationResult, Validator
from phrasal.validators.schema import issues_from_error


if TYPE_CHECKING:
    from phrasal.assertions.assertion import Assertion


_repr = reprlib.Repr()
_repr.maxstring = 60
_repr.maxother = 60


class AssertionFailure(BaseModel):
    """Failure detail returned by a function-backed implementation.

    Only the fields actually given are considered present, so
    ``AssertionFailure(actual=None, expected=1)`` still renders a diff while
    ``AssertionFailure(message="bad")`` does not.
    """

    model_config = ConfigDict(extra="forbid", frozen=True, arbitrary_types_allowed=True)

    actual: Any = None
    expected: Any = None
    message: str | None = None
    diff: str | None = None

    @classmethod
    def coerce(cls, value: Any) -> AssertionFailure | None:
        """Return ``value`` as a failure detail, or ``None`` if it is not one."""
        if isinstance(value, AssertionFailure):
            return value
        if isinstance(value, Mapping) and set(value) <= set(cls.model_fields):
            try:
                return cls.model_validate(dict(value))
            except ValidationError:
                return None
        return None

    def get(self, name: str) -> Any:
        return getattr(self, name) if name in self.model_fields_set else MISSING


class ParseRequest:
    """Ask the engine to validate ``subject`` (instead of the call's subject).

    Exactly one of ``validator`` and ``async_validator`` must be given.
    """

    __slots__ = ("subject", "validator", "is_async")

    def __init__(
        self,
        subject: Any,
        validator: Validator | None = None,
        *,
        async_validator: Validator | None = None,
    ) -> None:
        if (validator is None) == (async_validator is None):
            raise InvalidAssertionError("ParseRequest needs exactly one of validator or async_validator")
        self.subject = subject
        self.validator: Validator = validator if validator is not None else async_validator  # type: ignore[assignment]
        self.is_async = async_validator is not None

    def __repr__(self) -> str:
        return f"ParseRequest({_repr.repr(self.subject)}, {self.validator.describe()})"


def format_args(args: Sequence[Any]) -> str:
    return ", ".join(_repr.repr(arg) for arg in args)


def validation_failure(
    result: ValidationResult | Sequence[Issue],
    subject: Any,
    assertion: Assertion,
) -> ValidationFailure:
    """Build a ``ValidationFailure`` carrying the issues and a synthesized diff."""
    issues = tuple(result.issues) if isinstance(result, ValidationResult) else tuple(result)
    values = extract_diff_values(issues, subject)
    diff = generate_diff(values.expected, values.actual) if values.available else None
    lines = [f"Assertion {assertion} failed for {_repr.repr(subject)}"]
    lines.extend(f"  - {issue}" for issue in issues)
    return ValidationFailure(
        "\n".join(lines),
        actual=values.actual,
        expected=values.expected,
        diff=diff,
        assertion_id=assertion.id,
        issues=issues,
    )


def logic_failure(detail: AssertionFailure, assertion: Assertion, args: Sequence[Any]) -> LogicFailure:
    actual = detail.get("actual")
    expected = detail.get("expected")
    diff = detail.diff
    if diff is None and actual is not MISSING and expected is not MISSING:
        diff = generate_diff(expected, actual)
    return LogicFailure(
        detail.message or f"Assertion {assertion} failed for ({format_args(args)})",
        actual=actual,
        expected=expected,
        diff=diff,
        assertion_id=assertion.id,
    )


def _generic_failure(assertion: Assertion, args: Sequence[Any]) -> LogicFailure:
    return LogicFailure(
        f"Assertion {assertion} failed for arguments ({format_args(args)})",
        assertion_id=assertion.id,
    )


def _classify(result: Any, subject: Any, assertion: Assertion, args: Sequence[Any]) -> Any:
    """Return a failure, ``None`` for a pass, or a (validator, subject) to run."""
    if result is None or result is True:
        return None
    if result is False:
        return _generic_failure(assertion, args)
    if isinstance(result, Validator):
        return (result, subject, result.is_async)
    if isinstance(result, ParseRequest):
        return (result.validator, result.subject, result.is_async)
    if isinstance(result, ValidationError):
        return validation_failure(issues_from_error(result, subject), subject, assertion)
    detail = AssertionFailure.coerce(result)
    if detail is not None:
        return logic_failure(detail, assertion, args)
    raise InvalidReturnError(
        f"Assertion {assertion} returned an unsupported value {_repr.repr(result)}; "
        "return None, a bool, a Validator, a ParseRequest or a failure mapping",
        result=result,
    )


def interpret_result(
    result: Any, subject: Any, assertion: Assertion, args: Sequence[Any]
) -> AssertionFailedError | None:
    """Classify a synchronous implementation result."""
    classified = _classify(result, subject, assertion, args)
    if not isinstance(classified, tuple):
        return classified
    validator, target, is_async = classified
    if is_async:
        raise UnexpectedAsyncError(
            f"Assertion {assertion} requested async validation; use expect_async()"
        )
    outcome = validator.validate(target)
    return None if outcome.success else validation_failure(outcome, target, assertion)


async def interpret_result_async(
    result: Any, subject: Any, assertion: Assertion, args: Sequence[Any]
) -> AssertionFailedError | None:
    """Classify an (already awaited) implementation result."""
    classified = _classify(result, subject, assertion, args)
    if not isinstance(classified, tuple):
        return classified
    validator, target, _ = classified
    outcome = await validator.validate_async(target)
    return None if outcome.success else validation_failure(outcome, target, assertion)

