"""Type and truthiness checks on the subject alone."""

from collections.abc import Callable
from typing import Any

from phrasal.assertions.create import create_assertion
from phrasal.assertions.results import AssertionFailure
from phrasal.context import AssertionContext
from phrasal.validators import Schema, check


_META = {"category": "basic"}


def _is_empty(ctx: AssertionContext, subject: Any) -> AssertionFailure | None:
    try:
        size = len(subject)
    except TypeError:
        return AssertionFailure(message=f"Expected {subject!r} to be empty, but it has no length")
    if size:
        return AssertionFailure(
            message=f"Expected {subject!r} to be empty, but it has {size} item(s)",
            actual=size,
            expected=0,
        )
    return None


BASIC_ASSERTIONS = (
    create_assertion([["to be a string", "to be a str"]], Schema(str, name="string"), _META),
    create_assertion([["to be a number"]], Schema(int | float, name="number"), _META),
    create_assertion([["to be an integer", "to be an int"]], Schema(int, name="integer"), _META),
    create_assertion([["to be a boolean", "to be a bool"]], Schema(bool, name="boolean"), _META),
    create_assertion(["to be None"], Schema(None, name="None"), _META),
    create_assertion(["to be a list"], Schema(list, name="list"), _META),
    create_assertion(["to be a tuple"], Schema(tuple, name="tuple"), _META),
    create_assertion([["to be a dict", "to be a mapping"]], Schema(dict, name="dict"), _META),
    create_assertion([["to be callable", "to be a function"]], Schema(Callable, name="callable"), _META),
    create_assertion(["to be truthy"], check(bool, "Expected a truthy value", name="truthy"), _META),
    create_assertion(["to be falsy"], check(lambda value: not value, "Expected a falsy value", name="falsy"), _META),
    create_assertion(["to be empty"], _is_empty, _META),
)
