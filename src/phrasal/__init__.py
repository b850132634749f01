"""Phrasal - natural-language assertions."""

from .api import DEFAULT_ENGINE, expect, expect_async, fail, it, use
from .assertions import AssertionFailure, ParseRequest, create_assertion, create_async_assertion
from .context import AssertionContext, AssertionOutcome, collect_outcomes
from .engine import Engine
from .errors import (
    AssertionFailedError,
    FailAssertionError,
    InvalidAssertionError,
    InvalidReturnError,
    LogicFailure,
    MatchFailure,
    MisuseError,
    NegatedAssertionError,
    PhrasalError,
    UnexpectedAsyncError,
    ValidationFailure,
)
from .satisfy import ExpectIt, exhaustively_satisfies, satisfies
from .version import __version__


__all__ = [
    # Engine
    "DEFAULT_ENGINE",
    "Engine",
    "expect",
    "expect_async",
    "fail",
    "it",
    "use",
    # Extension
    "AssertionContext",
    "AssertionFailure",
    "ParseRequest",
    "create_assertion",
    "create_async_assertion",
    # Matching
    "ExpectIt",
    "exhaustively_satisfies",
    "satisfies",
    # Outcomes
    "AssertionOutcome",
    "collect_outcomes",
    # Errors
    "AssertionFailedError",
    "FailAssertionError",
    "InvalidAssertionError",
    "InvalidReturnError",
    "LogicFailure",
    "MatchFailure",
    "MisuseError",
    "NegatedAssertionError",
    "PhrasalError",
    "UnexpectedAsyncError",
    "ValidationFailure",
    "__version__",
]
