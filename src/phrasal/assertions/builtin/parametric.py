"""Assertions that take parameters after the phrase."""

import inspect
import re
from collections.abc import Callable, Sized
from typing import Annotated, Any, Literal

from pydantic import Field

from phrasal.assertions.create import create_assertion
from phrasal.assertions.results import AssertionFailure, ParseRequest
from phrasal.constants import MISSING
from phrasal.context import AssertionContext
from phrasal.errors import UnexpectedAsyncError
from phrasal.paths import child
from phrasal.satisfy import exhaustively_satisfies, satisfies
from phrasal.validators import ANY, Schema, Validator, any_of, instance_of


_META = {"category": "parametric"}

NUMBER = Schema(int | float, name="number")


def _equal(ctx: AssertionContext, subject: Any, expected: Any) -> AssertionFailure | None:
    try:
        equal = subject == expected
    except (TypeError, ValueError):
        equal = False
    if equal:
        return None
    return AssertionFailure(actual=subject, expected=expected, message=f"Expected {subject!r} to equal {expected!r}")


def _identical(ctx: AssertionContext, subject: Any, expected: Any) -> AssertionFailure | None:
    if subject is expected:
        return None
    return AssertionFailure(
        actual=subject, expected=expected, message=f"Expected {subject!r} to be the same object as {expected!r}"
    )


def _instance(ctx: AssertionContext, subject: Any, cls: type) -> Validator:
    return instance_of(cls)


def _greater(ctx: AssertionContext, subject: Any, bound: float) -> Validator:
    return Schema(Annotated[float, Field(gt=bound)], name=f"number > {bound}")


def _less(ctx: AssertionContext, subject: Any, bound: float) -> Validator:
    return Schema(Annotated[float, Field(lt=bound)], name=f"number < {bound}")


def _between(ctx: AssertionContext, subject: Any, low: float, high: float) -> Validator:
    return Schema(Annotated[float, Field(ge=low, le=high)], name=f"{low} <= number <= {high}")


def _length(ctx: AssertionContext, subject: Sized, length: int) -> ParseRequest:
    return ParseRequest(len(subject), Schema(Literal[length], name=f"length {length}"))


def _contain(ctx: AssertionContext, subject: Any, item: Any) -> AssertionFailure | None:
    try:
        found = item in subject
    except TypeError:
        return AssertionFailure(message=f"Expected {subject!r} to contain {item!r}, but it is not a container")
    if found:
        return None
    return AssertionFailure(message=f"Expected {subject!r} to contain {item!r}")


def _match(ctx: AssertionContext, subject: str, pattern: str | re.Pattern[str]) -> AssertionFailure | None:
    if re.search(pattern, subject) is not None:
        return None
    source = pattern.pattern if isinstance(pattern, re.Pattern) else pattern
    return AssertionFailure(message=f"Expected {subject!r} to match /{source}/")


def _satisfy(ctx: AssertionContext, subject: Any, expected: Any) -> AssertionFailure | None:
    if satisfies(subject, expected):
        return None
    return AssertionFailure(actual=subject, expected=expected, message=f"Expected {subject!r} to satisfy {expected!r}")


def _exhaustively_satisfy(ctx: AssertionContext, subject: Any, expected: Any) -> AssertionFailure | None:
    if exhaustively_satisfies(subject, expected):
        return None
    return AssertionFailure(
        actual=subject, expected=expected, message=f"Expected {subject!r} to exhaustively satisfy {expected!r}"
    )


def _has_key(ctx: AssertionContext, subject: Any, key: Any) -> AssertionFailure | None:
    if child(subject, key) is not MISSING:
        return None
    return AssertionFailure(message=f"Expected {subject!r} to have key {key!r}")


def _invoke(subject: Callable[[], Any]) -> BaseException | None:
    try:
        result = subject()
    except Exception as exc:
        return exc
    if inspect.isawaitable(result):
        if inspect.iscoroutine(result):
            result.close()
        raise UnexpectedAsyncError("Function under test returned an awaitable; use 'to reject' with expect_async()")
    return None


def _throw(ctx: AssertionContext, subject: Callable[[], Any]) -> AssertionFailure | None:
    if _invoke(subject) is not None:
        return None
    return AssertionFailure(message=f"Expected {subject!r} to throw")


def _throw_a(ctx: AssertionContext, subject: Callable[[], Any], cls: type) -> AssertionFailure | None:
    raised = _invoke(subject)
    if raised is None:
        return AssertionFailure(message=f"Expected {subject!r} to throw {cls.__name__}, but it returned")
    if isinstance(raised, cls):
        return None
    return AssertionFailure(
        actual=type(raised).__name__,
        expected=cls.__name__,
        message=f"Expected {subject!r} to throw {cls.__name__}, but it threw {raised!r}",
    )


PARAMETRIC_ASSERTIONS = (
    create_assertion([["to equal", "to be equal to"], ANY], _equal, _META),
    create_assertion(["to be", ANY], _identical, _META),
    create_assertion([["to be an instance of", "to be a", "to be an"], instance_of(type)], _instance, _META),
    create_assertion([["to be greater than", "to be above"], NUMBER], _greater, _META),
    create_assertion([["to be less than", "to be below"], NUMBER], _less, _META),
    create_assertion(["to be between", NUMBER, "and", NUMBER], _between, _META),
    create_assertion([instance_of(Sized), "to have length", Schema(int, name="int")], _length, _META),
    create_assertion([["to contain", "to include"], ANY], _contain, _META),
    create_assertion([Schema(str, name="str"), "to match", any_of(str, instance_of(re.Pattern))], _match, _META),
    create_assertion([["to satisfy", "to be like"], ANY], _satisfy, _META),
    create_assertion(["to exhaustively satisfy", ANY], _exhaustively_satisfy, _META),
    create_assertion([["to have key", "to have property"], ANY], _has_key, _META),
    create_assertion([Schema(Callable, name="callable"), "to throw"], _throw, _META),
    create_assertion([Schema(Callable, name="callable"), ["to throw a", "to throw an"], instance_of(type)], _throw_a, _META),
)
