"""Failure and misuse errors raised by the assertion engine.

Two families live here:

- :class:`AssertionFailedError` and its refinements are *failures*: the
  assertion ran (or could not be resolved) and the subject did not meet it.
  They subclass :class:`AssertionError` so any test runner reports them as
  ordinary assertion failures.
- :class:`MisuseError` and its refinements mean *the assertion itself is
  broken*: a malformed registration, an awaitable surfacing in the sync
  engine, or an implementation returning something the engine does not
  understand. They are never negated and never confused with failures.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Any, ClassVar

from phrasal.constants import FAIL_ID, MISSING


if TYPE_CHECKING:
    from phrasal.validators.base import Issue


class AssertionFailedError(AssertionError):
    """Base type for every failure the engine reports.

    Attributes
    ----------
    message : str
        Human-readable description of the failure, without the diff.
    actual : Any
        The value that was checked, or ``MISSING`` when not applicable.
    expected : Any
        The value the assertion wanted, or ``MISSING`` when not applicable.
    diff : str or None
        Rendered expected/actual comparison, if one could be produced.
    assertion_id : str or None
        Id of the assertion that failed.
    issues : tuple[Issue, ...]
        Structured validator issues (validation failures only).
    """

    kind: ClassVar[str] = "failure"

    def __init__(
        self,
        message: str | None = None,
        *,
        actual: Any = MISSING,
        expected: Any = MISSING,
        diff: str | None = None,
        assertion_id: str | None = None,
        issues: Sequence[Issue] = (),
    ) -> None:
        self.message = message or "Assertion failed"
        self.actual = actual
        self.expected = expected
        self.diff = diff
        self.assertion_id = assertion_id
        self.issues = tuple(issues)
        super().__init__(self._compose())

    def _compose(self) -> str:
        if self.diff:
            return f"{self.message}\n\n{self.diff}"
        return self.message

    @property
    def has_diff_values(self) -> bool:
        """Whether both ``actual`` and ``expected`` were provided."""
        return self.actual is not MISSING and self.expected is not MISSING

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "kind": self.kind,
            "name": type(self).__name__,
            "message": self.message,
            "assertion_id": self.assertion_id,
            "diff": self.diff,
            "issues": [issue.model_dump() for issue in self.issues],
        }
        if self.actual is not MISSING:
            data["actual"] = self.actual
        if self.expected is not MISSING:
            data["expected"] = self.expected
        return data


class MatchFailure(AssertionFailedError):
    """No registered assertion matched the phrase and arguments.

    Attributes
    ----------
    args_received : tuple
        The raw arguments passed to ``expect()``.
    reasons : tuple[tuple[str, str], ...]
        ``(assertion, reason)`` pairs for the closest candidates.
    """

    kind: ClassVar[str] = "match"

    def __init__(
        self,
        message: str,
        *,
        args_received: Sequence[Any] = (),
        reasons: Sequence[tuple[str, str]] = (),
    ) -> None:
        self.args_received = tuple(args_received)
        self.reasons = tuple(reasons)
        super().__init__(message)


class ValidationFailure(AssertionFailedError):
    """A matched validator rejected the subject."""

    kind: ClassVar[str] = "validation"


class LogicFailure(AssertionFailedError):
    """A function-backed implementation reported failure."""

    kind: ClassVar[str] = "logic"


class NegatedAssertionError(AssertionFailedError):
    """A negated assertion failed because the underlying check passed."""

    kind: ClassVar[str] = "negated"


class FailAssertionError(AssertionFailedError):
    """Raised by ``fail()``; bypasses phrase matching entirely."""

    kind: ClassVar[str] = "fail"

    def __init__(self, reason: str | None = None) -> None:
        super().__init__(reason or "Failed", assertion_id=FAIL_ID)


class PhrasalError(Exception):
    """Base class for errors that are not assertion failures."""

    code: ClassVar[str] = "ERR_PHRASAL"


class MisuseError(PhrasalError):
    """An assertion definition or invocation is broken."""

    code: ClassVar[str] = "ERR_PHRASAL_MISUSE"


class InvalidAssertionError(MisuseError):
    """A malformed assertion was rejected at registration time."""

    code: ClassVar[str] = "ERR_PHRASAL_INVALID_ASSERTION"


class UnexpectedAsyncError(MisuseError):
    """The sync engine received an awaitable where a value was required."""

    code: ClassVar[str] = "ERR_PHRASAL_UNEXPECTED_ASYNC"


class InvalidReturnError(MisuseError):
    """An implementation returned a value the engine cannot interpret."""

    code: ClassVar[str] = "ERR_PHRASAL_INVALID_RETURN"

    def __init__(self, message: str, *, result: Any = None) -> None:
        self.result = result
        super().__init__(message)
