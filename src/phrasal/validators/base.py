"""Validator contract consumed by the engine."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from phrasal.errors import UnexpectedAsyncError


IssueKind = Literal[
    "invalid_type",
    "too_big",
    "too_small",
    "invalid_value",
    "unrecognized_keys",
    "invalid_union",
    "missing_key",
    "invalid_format",
    "custom",
]


class Issue(BaseModel):
    """A single reason a value was rejected by a validator.

    Attributes
    ----------
    path
        Location of the offending member; ``()`` is the value itself.
    kind
        Issue category used to synthesize a corrected value for diffs.
    message
        Human-readable description.
    expected
        Expected type name (``invalid_type``) or pattern (``invalid_format``).
    origin
        ``"string"``, ``"array"`` or ``"number"`` for size issues.
    minimum, maximum
        Bounds for ``too_small`` / ``too_big``.
    values
        Acceptable literals for ``invalid_value``.
    keys
        Offending keys for ``unrecognized_keys``.
    alternatives
        Member descriptions for ``invalid_union``.
    """

    model_config = ConfigDict(frozen=True)

    path: tuple[str | int, ...] = ()
    kind: IssueKind = "custom"
    message: str = ""
    expected: str | None = None
    origin: str | None = None
    minimum: Any = None
    maximum: Any = None
    values: tuple[Any, ...] = ()
    keys: tuple[str, ...] = ()
    alternatives: tuple[str, ...] = Field(default=())

    def prefixed(self, *prefix: str | int) -> Issue:
        """Return a copy located under ``prefix``."""
        return self.model_copy(update={"path": (*prefix, *self.path)})

    def __str__(self) -> str:
        location = ".".join(str(p) for p in self.path) or "<root>"
        return f"{location}: {self.message}"


class ValidationResult(BaseModel):
    """Outcome of running a validator against one value."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    success: bool
    value: Any = None
    issues: tuple[Issue, ...] = ()

    @classmethod
    def ok(cls, value: Any) -> ValidationResult:
        return cls(success=True, value=value)

    @classmethod
    def fail(cls, issues: Sequence[Issue], value: Any = None) -> ValidationResult:
        return cls(success=False, value=value, issues=tuple(issues))


class Validator(ABC):
    """Abstract validator.

    Subclasses implement :meth:`validate`. Validators that can only run
    asynchronously set ``is_async`` and implement :meth:`validate_async`.
    """

    is_async: bool = False
    accepts_anything: bool = False

    @abstractmethod
    def validate(self, value: Any) -> ValidationResult:
        """Validate ``value`` synchronously."""

    async def validate_async(self, value: Any) -> ValidationResult:
        return self.validate(value)

    def describe(self) -> str:
        return type(self).__name__

    def __str__(self) -> str:
        return self.describe()

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.describe()}>"


class AsyncValidator(Validator):
    """Validator that requires an event loop."""

    is_async = True

    def validate(self, value: Any) -> ValidationResult:
        raise UnexpectedAsyncError(
            f"Validator {self.describe()!r} is async-only; use expect_async()"
        )

    @abstractmethod
    async def validate_async(self, value: Any) -> ValidationResult:
        """Validate ``value`` asynchronously."""
