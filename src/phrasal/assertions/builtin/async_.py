"""Assertions about awaitables; these only run under ``expect_async``."""

import inspect
import re
from typing import Any

from phrasal.assertions.create import create_async_assertion
from phrasal.assertions.results import AssertionFailure
from phrasal.context import AssertionContext
from phrasal.validators import ANY, check


_META = {"category": "async"}

AWAITABLE = check(
    lambda value: inspect.isawaitable(value) or callable(value),
    "Expected an awaitable or a function returning one",
    name="awaitable",
)


async def _settle(subject: Any) -> tuple[bool, Any]:
    """Await ``subject`` (calling it first if needed); return ``(resolved, value_or_exception)``."""
    try:
        value = subject() if callable(subject) and not inspect.isawaitable(subject) else subject
        if inspect.isawaitable(value):
            value = await value
    except Exception as exc:
        return False, exc
    return True, value


def _rejection_matches(exc: BaseException, expected: Any) -> bool:
    if isinstance(expected, type) and issubclass(expected, BaseException):
        return isinstance(exc, expected)
    if isinstance(expected, BaseException):
        return type(exc) is type(expected) and exc.args == expected.args
    if isinstance(expected, re.Pattern):
        return expected.search(str(exc)) is not None
    if isinstance(expected, str):
        return expected in str(exc)
    return False


async def _resolve(ctx: AssertionContext, subject: Any) -> AssertionFailure | None:
    resolved, value = await _settle(subject)
    if resolved:
        return None
    return AssertionFailure(message=f"Expected {subject!r} to resolve, but it rejected with {value!r}")


async def _reject(ctx: AssertionContext, subject: Any) -> AssertionFailure | None:
    resolved, value = await _settle(subject)
    if not resolved:
        return None
    return AssertionFailure(message=f"Expected {subject!r} to reject, but it resolved with {value!r}")


async def _resolve_with(ctx: AssertionContext, subject: Any, expected: Any) -> AssertionFailure | None:
    resolved, value = await _settle(subject)
    if not resolved:
        return AssertionFailure(message=f"Expected {subject!r} to resolve with {expected!r}, but it rejected with {value!r}")
    if value == expected:
        return None
    return AssertionFailure(
        actual=value, expected=expected, message=f"Expected {subject!r} to resolve with {expected!r}, got {value!r}"
    )


async def _reject_with(ctx: AssertionContext, subject: Any, expected: Any) -> AssertionFailure | None:
    resolved, value = await _settle(subject)
    if resolved:
        return AssertionFailure(message=f"Expected {subject!r} to reject, but it resolved with {value!r}")
    if _rejection_matches(value, expected):
        return None
    return AssertionFailure(message=f"Expected {subject!r} to reject with {expected!r}, but it rejected with {value!r}")


ASYNC_ASSERTIONS = (
    create_async_assertion([AWAITABLE, ["to resolve", "to be fulfilled"]], _resolve, _META),
    create_async_assertion([AWAITABLE, ["to reject", "to be rejected"]], _reject, _META),
    create_async_assertion([AWAITABLE, "to resolve with", ANY], _resolve_with, _META),
    create_async_assertion([AWAITABLE, "to reject with", ANY], _reject_with, _META),
)
