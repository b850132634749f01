"""Running a matched assertion."""

from __future__ import annotations

import inspect
import logging
from collections.abc import Sequence
from typing import Any

from phrasal.assertions.assertion import Assertion
from phrasal.assertions.results import interpret_result, interpret_result_async, validation_failure
from phrasal.context import AssertionContext
from phrasal.errors import AssertionFailedError, MatchFailure, UnexpectedAsyncError


logger = logging.getLogger(__name__)


def _discard(awaitable: Any, assertion: Assertion) -> None:
    if inspect.iscoroutine(awaitable):
        awaitable.close()
        logger.debug("Closed unawaited coroutine returned by %s", assertion.id)


def execute(
    assertion: Assertion, parsed_values: Sequence[Any], ctx: AssertionContext
) -> AssertionFailedError | None:
    """Run ``assertion`` synchronously and return its failure, if any.

    Raises
    ------
    UnexpectedAsyncError
        If the assertion is async or its implementation returned an awaitable.
    """
    __tracebackhide__ = True
    subject = parsed_values[0]
    validator = assertion.validator
    if validator is not None:
        if validator.is_async or assertion.is_async:
            raise UnexpectedAsyncError(f"Assertion {assertion} is async; use expect_async()")
        result = validator.validate(subject)
        return None if result.success else validation_failure(result, subject, assertion)

    if assertion.is_async:
        raise UnexpectedAsyncError(f"Assertion {assertion} is async; use expect_async()")
    try:
        returned = assertion.impl(ctx, *parsed_values)  # type: ignore[operator]
    except MatchFailure:
        # a nested expect() that matched nothing; never negated
        raise
    except AssertionFailedError as failure:
        return failure
    if inspect.isawaitable(returned):
        _discard(returned, assertion)
        raise UnexpectedAsyncError(
            f"Assertion {assertion} returned an awaitable; use expect_async()"
        )
    return interpret_result(returned, subject, assertion, ctx.args)


async def execute_async(
    assertion: Assertion, parsed_values: Sequence[Any], ctx: AssertionContext
) -> AssertionFailedError | None:
    """Run ``assertion``, awaiting its implementation and validators."""
    __tracebackhide__ = True
    subject = parsed_values[0]
    validator = assertion.validator
    if validator is not None:
        result = await validator.validate_async(subject)
        return None if result.success else validation_failure(result, subject, assertion)

    try:
        returned = assertion.impl(ctx, *parsed_values)  # type: ignore[operator]
        if inspect.isawaitable(returned):
            returned = await returned
    except MatchFailure:
        raise
    except AssertionFailedError as failure:
        return failure
    return await interpret_result_async(returned, subject, assertion, ctx.args)
